"""
Future price projection under low, base and high EPS growth scenarios.
"""
from dataclasses import dataclass, asdict
from typing import List, Optional, Dict, Any, Tuple

from shared.configs.models import Assumptions
from shared.market.models import Quote, EarningsTrend
from services.stock_scorer.stock_scorer import pick_growth
from services.valuation.intrinsic_value import has_valuation_inputs

PROJECTION_HORIZONS: Tuple[int, ...] = (5, 10)


@dataclass(frozen=True)
class FutureProjection:
    """Projected price band for one horizon."""
    horizon_years: int
    low: Optional[float]
    base: Optional[float]
    high: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_wire(self) -> Dict[str, Any]:
        return {
            'horizonYears': self.horizon_years,
            'low': self.low,
            'base': self.base,
            'high': self.high,
        }


def scenario_growth_rates(earnings: Optional[EarningsTrend],
                          assumptions: Assumptions) -> Tuple[float, float, float]:
    """
    Growth rates for the low, base and high scenarios.

    The low rate never exceeds the base rate and is floored at zero; the high
    rate is never below the base rate.
    """
    base = pick_growth(earnings, assumptions.base_growth)
    low = max(0.0, min(base, assumptions.low_growth))
    high = max(base, assumptions.high_growth)
    return low, base, high


def project_future_prices(quote: Quote,
                          earnings: Optional[EarningsTrend],
                          assumptions: Assumptions,
                          horizons: Tuple[int, ...] = PROJECTION_HORIZONS) -> List[FutureProjection]:
    """
    Project future prices as compounded EPS times the exit multiple.

    Args:
        quote: Market snapshot with trailing EPS and price
        earnings: Analyst growth estimates
        assumptions: Growth scenarios and exit multiple
        horizons: Projection horizons in years

    Returns:
        One FutureProjection per horizon; bands are None when EPS or price is unusable
    """
    if not has_valuation_inputs(quote):
        return [FutureProjection(horizon_years=h, low=None, base=None, high=None) for h in horizons]

    eps = quote.eps_trailing_twelve_months
    exit_pe = assumptions.exit_pe
    low_g, base_g, high_g = scenario_growth_rates(earnings, assumptions)

    return [
        FutureProjection(
            horizon_years=h,
            low=eps * (1 + low_g) ** h * exit_pe,
            base=eps * (1 + base_g) ** h * exit_pe,
            high=eps * (1 + high_g) ** h * exit_pe,
        )
        for h in horizons
    ]
