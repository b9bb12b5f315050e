"""
Stock Scorer Service.

Calculates composite investment scores for stocks based on:
- Profitability (ROE, profit margin)
- Growth (analyst EPS growth estimates)
- Financial health (debt-to-equity, profit margin)
- Valuation (P/E, PEG)
- Momentum (one-year price change)

Produces an overall composite score (0-100) where higher values indicate better investment opportunities.
"""
from services.stock_scorer.stock_scorer import (
    StockScorer,
    ScanScore,
    normalize,
    pick_growth,
)

__all__ = [
    'StockScorer',
    'ScanScore',
    'normalize',
    'pick_growth',
]
