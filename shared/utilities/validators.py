"""
Data validation utilities.
"""
import math
import re
from typing import Any, Iterable, List, Optional

# Yahoo style symbols: letters/digits with optional class or exchange suffix (BRK-B, 005930.KS, ^GSPC)
TICKER_PATTERN = re.compile(r'^\^?[A-Z0-9][A-Z0-9.\-=]{0,19}$')
TICKER_SEPARATORS = re.compile(r'[\s,]+')


def validate_ticker(ticker: str) -> bool:
    """
    Validate ticker symbol format.

    Args:
        ticker: Upper-cased ticker symbol

    Returns:
        True if valid, False otherwise
    """
    return bool(TICKER_PATTERN.match(ticker))


def is_finite_number(value: Any) -> bool:
    """True for int/float values that are neither NaN nor infinite (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def optional_float(value: Any) -> Optional[float]:
    """
    Coerce a provider value to an optional finite float.

    Args:
        value: Raw value from a JSON payload

    Returns:
        Float value, or None when missing or not a finite number
    """
    if is_finite_number(value):
        return float(value)
    return None


def parse_tickers_text(text: str) -> List[str]:
    """
    Split free text into upper-cased tickers.

    Args:
        text: Tickers separated by whitespace, commas or newlines

    Returns:
        List of non-empty tickers in input order
    """
    return [t.strip().upper() for t in TICKER_SEPARATORS.split(text or '') if t.strip()]


def normalize_tickers(tickers: Iterable[Any], limit: int) -> List[str]:
    """
    Upper-case, de-duplicate and cap a ticker list.

    First occurrence wins, so the order of the request is kept.

    Args:
        tickers: Raw tickers; non-string or malformed entries are skipped
        limit: Maximum number of tickers to keep

    Returns:
        Unique tickers, at most ``limit`` of them
    """
    seen = set()
    result = []
    for raw in tickers:
        if not isinstance(raw, str):
            continue
        ticker = raw.strip().upper()
        if not validate_ticker(ticker) or ticker in seen:
            continue
        seen.add(ticker)
        result.append(ticker)
        if len(result) >= limit:
            break
    return result
