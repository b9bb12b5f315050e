"""
Exception types shared across services.
"""
from typing import Optional


class ScannerError(Exception):
    """Base class for scanner errors."""
    pass


class QuoteProviderError(ScannerError):
    """The upstream quote provider failed or returned an unusable response."""

    def __init__(self, message: str, symbol: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.symbol = symbol
        self.status_code = status_code


class MalformedRequestError(ScannerError):
    """Request is missing the tickers or symbol it needs."""
    pass
