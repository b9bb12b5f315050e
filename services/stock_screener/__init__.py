"""
Stock Screener Service.
Scans watchlists, ranking stocks by composite score and valuation upside.
"""
from services.stock_screener.scan_service import (
    ScanService,
    ScanResult,
    AnalysisResult,
    sort_results,
)

__all__ = [
    'ScanService',
    'ScanResult',
    'AnalysisResult',
    'sort_results',
]
