"""
Market data records.
"""
from shared.market.models import (
    Quote,
    Financials,
    EarningsTrend,
    Summary,
    PriceHistory,
)

__all__ = [
    'Quote',
    'Financials',
    'EarningsTrend',
    'Summary',
    'PriceHistory',
]
