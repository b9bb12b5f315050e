"""
Market data records supplied by the quote provider.

All numeric fields are optional: a missing value is a normal state, not an
error, and downstream scoring treats it as neutral.
"""
from typing import List, Optional

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MarketRecord(BaseModel):
    """Base for immutable provider records with camelCase wire names."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class Quote(MarketRecord):
    """Point-in-time market snapshot for one symbol."""
    symbol: str
    short_name: Optional[str] = None
    long_name: Optional[str] = None
    regular_market_price: Optional[float] = None
    market_cap: Optional[float] = None
    trailing_pe: Optional[float] = Field(default=None, alias="trailingPE")
    forward_pe: Optional[float] = Field(default=None, alias="forwardPE")
    eps_trailing_twelve_months: Optional[float] = None
    price_to_book: Optional[float] = None
    peg_ratio: Optional[float] = None
    currency: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.long_name or self.short_name or self.symbol

    @property
    def pe(self) -> Optional[float]:
        """Trailing P/E, falling back to forward P/E."""
        return self.trailing_pe if self.trailing_pe is not None else self.forward_pe


class Financials(MarketRecord):
    """Fundamental ratios for one symbol."""
    return_on_equity: Optional[float] = None  # fraction, 0.22 = 22%
    debt_to_equity: Optional[float] = None  # percentage, 45 = 45%
    operating_margins: Optional[float] = None
    profit_margins: Optional[float] = None
    free_cashflow: Optional[float] = None
    revenue_growth: Optional[float] = None
    earnings_growth: Optional[float] = None
    target_mean_price: Optional[float] = None


class EarningsTrend(MarketRecord):
    """Analyst EPS growth estimates (fractions)."""
    growth_long_term: Optional[float] = None  # +5y
    growth_next_year: Optional[float] = None  # +1y
    growth_this_year: Optional[float] = None  # 0y


class Summary(MarketRecord):
    """Quote summary for one symbol."""
    quote: Quote
    financials: Financials = Field(default_factory=Financials)
    earnings_trend: EarningsTrend = Field(default_factory=EarningsTrend)


class PriceHistory(MarketRecord):
    """Daily close series; closes may contain gaps (None)."""
    symbol: str
    timestamps: List[int] = Field(default_factory=list)
    closes: List[Optional[float]] = Field(default_factory=list)

    def change_fraction(self) -> Optional[float]:
        """
        Price change between the earliest and latest finite closes.

        Returns:
            (last - first) / first, or None without data or when either end is zero
        """
        series = pd.Series(self.closes, dtype="float64")
        series = series[np.isfinite(series)]
        if series.empty:
            return None

        first = float(series.iloc[0])
        last = float(series.iloc[-1])
        if first == 0 or last == 0:
            return None
        return (last - first) / first
