"""
Intrinsic value model.

A simplified dividend discount model: a fixed fraction of each projected
year's EPS is treated as distributable cash flow, and the terminal value is
the final year's EPS at an exit P/E multiple. Both are discounted back to
today at the assumed discount rate.
"""
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any
import logging

from shared.configs.models import Assumptions
from shared.market.models import Quote, EarningsTrend
from shared.utilities.validators import is_finite_number, optional_float
from services.stock_scorer.stock_scorer import pick_growth

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValuationInputs:
    """Inputs actually used for a valuation, echoed for transparency."""
    eps_ttm: Optional[float]
    growth: float
    years: int
    discount_rate: float
    exit_pe: float
    dividend_payout_ratio: float

    def to_wire(self) -> Dict[str, Any]:
        return {
            'epsTtm': self.eps_ttm,
            'growth': self.growth,
            'years': self.years,
            'discountRate': self.discount_rate,
            'exitPE': self.exit_pe,
            'dividendPayoutRatio': self.dividend_payout_ratio,
        }


@dataclass(frozen=True)
class IntrinsicValueResult:
    """Intrinsic value per share and upside versus the current price."""
    intrinsic_value: Optional[float]
    upside_percent: Optional[float]
    inputs_used: ValuationInputs

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_wire(self) -> Dict[str, Any]:
        return {
            'intrinsicValue': self.intrinsic_value,
            'upsidePercent': self.upside_percent,
            'inputsUsed': self.inputs_used.to_wire(),
        }


def has_valuation_inputs(quote: Quote) -> bool:
    """
    Check the preconditions for a numeric valuation.

    EPS must be finite and positive; price must be finite and non-zero.
    """
    eps = quote.eps_trailing_twelve_months
    price = quote.regular_market_price
    if not is_finite_number(eps) or eps <= 0:
        return False
    if not is_finite_number(price) or price == 0:
        return False
    return True


def compute_intrinsic_value(quote: Quote,
                            earnings: Optional[EarningsTrend],
                            assumptions: Assumptions) -> IntrinsicValueResult:
    """
    Estimate intrinsic value per share.

    Args:
        quote: Market snapshot with trailing EPS and price
        earnings: Analyst growth estimates; falls back to the base growth
        assumptions: Discount rate, horizon, exit multiple and payout ratio

    Returns:
        IntrinsicValueResult; value and upside are None when EPS or price is unusable
    """
    growth = pick_growth(earnings, assumptions.base_growth)
    inputs = ValuationInputs(
        eps_ttm=optional_float(quote.eps_trailing_twelve_months),
        growth=growth,
        years=assumptions.years,
        discount_rate=assumptions.discount_rate,
        exit_pe=assumptions.exit_pe,
        dividend_payout_ratio=assumptions.dividend_payout_ratio,
    )

    if not has_valuation_inputs(quote):
        logger.debug(f"Skipping intrinsic value for {quote.symbol}: missing EPS or price")
        return IntrinsicValueResult(intrinsic_value=None, upside_percent=None, inputs_used=inputs)

    eps = quote.eps_trailing_twelve_months
    price = quote.regular_market_price
    r = assumptions.discount_rate
    years = assumptions.years

    present_value = 0.0
    eps_t = eps
    for t in range(1, years + 1):
        eps_t = eps_t * (1 + growth)
        cash_flow = eps_t * assumptions.dividend_payout_ratio
        present_value += cash_flow / (1 + r) ** t

    terminal_price = eps * (1 + growth) ** years * assumptions.exit_pe
    discounted_terminal = terminal_price / (1 + r) ** years
    intrinsic = present_value + discounted_terminal

    upside = (intrinsic - price) / price * 100

    return IntrinsicValueResult(
        intrinsic_value=intrinsic,
        upside_percent=upside,
        inputs_used=inputs,
    )
