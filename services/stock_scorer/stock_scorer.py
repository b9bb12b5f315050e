"""
Stock Composite Scorer.

Calculates a composite investment score from five component scores:
- Profitability (ROE, profit margin)
- Growth (analyst EPS growth estimates)
- Financial health (debt-to-equity, profit margin)
- Valuation (P/E, PEG)
- Momentum (one-year price change)

Every raw metric is mapped onto a calibration range with ``normalize``. Missing
metrics count as average (0.5) rather than being penalized. Component scores
and the composite total are integers in 0-100.
"""
import math
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any
import logging

from shared.market.models import Quote, Financials, EarningsTrend
from shared.utilities.validators import is_finite_number

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.5

# Analyst growth estimates are averaged then clamped to this range
MIN_GROWTH = 0.0
MAX_GROWTH = 0.30
DEFAULT_SCORING_GROWTH = 0.12

# Composite weights
WEIGHT_PROFITABILITY = 0.28
WEIGHT_GROWTH = 0.28
WEIGHT_FINANCIAL_HEALTH = 0.18
WEIGHT_VALUATION = 0.18
WEIGHT_MOMENTUM = 0.08


def normalize(value: Optional[float], low: float, high: float) -> float:
    """
    Map a raw metric onto its calibration range.

    ``low < high`` means higher values are better, ``low > high`` means lower
    values are better. The result is 0 at ``low`` and 1 at ``high`` and is not
    clamped, so values outside the range fall outside [0, 1].

    Args:
        value: Raw metric, None when unknown
        low: Metric value scoring 0
        high: Metric value scoring 1

    Returns:
        Normalized score, 0.5 for unknown values or a degenerate range
    """
    if not is_finite_number(value):
        return NEUTRAL_SCORE
    if low == high:
        return NEUTRAL_SCORE
    if low < high:
        return (value - low) / (high - low)
    return (low - value) / (low - high)


def pick_growth(earnings: Optional[EarningsTrend], fallback: float) -> float:
    """
    Reduce analyst growth estimates to a single growth rate.

    Args:
        earnings: Earnings trend with up to three estimates, or None
        fallback: Rate used when no estimate is available (returned as is)

    Returns:
        Mean of the available estimates clamped to [0, 0.30], else ``fallback``
    """
    if earnings is None:
        return fallback

    values = [
        v for v in (earnings.growth_long_term, earnings.growth_next_year, earnings.growth_this_year)
        if is_finite_number(v)
    ]
    if not values:
        return fallback

    avg = sum(values) / len(values)
    return max(MIN_GROWTH, min(MAX_GROWTH, avg))


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def round_half_up(value: float) -> int:
    """Round .5 upward (Python's round() rounds half to even)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ScanScore:
    """Component scores and composite total, each 0-100."""
    profitability: int
    growth: int
    financial_health: int
    valuation: int
    momentum: int
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_wire(self) -> Dict[str, Any]:
        """Dictionary with camelCase keys for JSON responses."""
        return {
            'profitability': self.profitability,
            'growth': self.growth,
            'financialHealth': self.financial_health,
            'valuation': self.valuation,
            'momentum': self.momentum,
            'total': self.total,
        }


class StockScorer:
    """
    Calculates composite scores for stocks.

    Stateless: one instance can score any number of symbols concurrently.
    """

    def score(self,
              quote: Quote,
              financials: Optional[Financials] = None,
              earnings: Optional[EarningsTrend] = None,
              price_change_1y: Optional[float] = None) -> ScanScore:
        """
        Calculate the composite score for one symbol.

        Args:
            quote: Market snapshot (P/E, PEG)
            financials: Fundamental ratios; None scores every ratio as neutral
            earnings: Analyst growth estimates
            price_change_1y: One-year price change as a fraction

        Returns:
            ScanScore with integer component scores and total
        """
        financials = financials or Financials()

        profitability = clamp01(self._calculate_profitability_score(financials))
        growth = clamp01(self._calculate_growth_score(earnings))
        financial_health = clamp01(self._calculate_financial_health_score(financials))
        valuation = clamp01(self._calculate_valuation_score(quote))
        momentum = clamp01(self._calculate_momentum_score(price_change_1y))

        # Total is weighted from the unrounded component scores
        total = round_half_up(
            (profitability * WEIGHT_PROFITABILITY +
             growth * WEIGHT_GROWTH +
             financial_health * WEIGHT_FINANCIAL_HEALTH +
             valuation * WEIGHT_VALUATION +
             momentum * WEIGHT_MOMENTUM) * 100
        )

        result = ScanScore(
            profitability=round_half_up(profitability * 100),
            growth=round_half_up(growth * 100),
            financial_health=round_half_up(financial_health * 100),
            valuation=round_half_up(valuation * 100),
            momentum=round_half_up(momentum * 100),
            total=total,
        )
        logger.debug(f"Scored {quote.symbol}: {result}")
        return result

    def _calculate_profitability_score(self, financials: Financials) -> float:
        roe = normalize(financials.return_on_equity, 0.05, 0.30)
        margin = normalize(financials.profit_margins, 0.05, 0.30)
        return roe * 0.6 + margin * 0.4

    def _calculate_growth_score(self, earnings: Optional[EarningsTrend]) -> float:
        return normalize(pick_growth(earnings, DEFAULT_SCORING_GROWTH), 0.05, 0.25)

    def _calculate_financial_health_score(self, financials: Financials) -> float:
        # Debt-to-equity is a percentage; lower debt is healthier
        debt = 1 - normalize(financials.debt_to_equity, 30, 150)
        margin = normalize(financials.profit_margins, 0.05, 0.25)
        return debt * 0.7 + margin * 0.3

    def _calculate_valuation_score(self, quote: Quote) -> float:
        pe = 1 - normalize(quote.pe, 10, 35)
        peg = 1 - normalize(quote.peg_ratio, 0.8, 2.0)
        return pe * 0.6 + peg * 0.4

    def _calculate_momentum_score(self, price_change_1y: Optional[float]) -> float:
        # -20% scores 0, +60% scores 1
        return normalize(price_change_1y, -0.20, 0.60)
