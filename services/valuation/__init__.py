"""
Valuation Service.

Intrinsic value (discounted payout cash flows plus exit-multiple terminal
value) and low/base/high future price projections.
"""
from services.valuation.intrinsic_value import (
    IntrinsicValueResult,
    ValuationInputs,
    compute_intrinsic_value,
)
from services.valuation.projection import (
    FutureProjection,
    project_future_prices,
    scenario_growth_rates,
)

__all__ = [
    'IntrinsicValueResult',
    'ValuationInputs',
    'compute_intrinsic_value',
    'FutureProjection',
    'project_future_prices',
    'scenario_growth_rates',
]
