"""
Tests for ticker and number validation utilities.
"""
import pytest

from shared.utilities.validators import (
    is_finite_number,
    normalize_tickers,
    optional_float,
    parse_tickers_text,
    validate_ticker,
)


class TestValidateTicker:

    @pytest.mark.parametrize("ticker", ["AAPL", "BRK-B", "BRK.B", "005930.KS", "^GSPC", "EURUSD=X", "V"])
    def test_valid(self, ticker):
        assert validate_ticker(ticker) is True

    @pytest.mark.parametrize("ticker", ["", "aapl", "AA PL", "$AAPL", "-AAPL", "A" * 21, "^"])
    def test_invalid(self, ticker):
        assert validate_ticker(ticker) is False


class TestNumbers:

    @pytest.mark.parametrize("value", [0, 1, -2.5, 1e12])
    def test_finite(self, value):
        assert is_finite_number(value) is True

    @pytest.mark.parametrize("value", [None, True, float("nan"), float("inf"), "1.5", [1]])
    def test_not_finite(self, value):
        assert is_finite_number(value) is False

    def test_optional_float(self):
        assert optional_float(3) == 3.0
        assert isinstance(optional_float(3), float)
        assert optional_float(None) is None
        assert optional_float("12") is None
        assert optional_float(float("nan")) is None


class TestParseTickersText:

    def test_mixed_separators(self):
        assert parse_tickers_text("aapl, msft\nGOOG  tsla,,") == ["AAPL", "MSFT", "GOOG", "TSLA"]

    def test_empty(self):
        assert parse_tickers_text("") == []
        assert parse_tickers_text("  ,\n ") == []
        assert parse_tickers_text(None) == []


class TestNormalizeTickers:

    def test_uppercases_and_deduplicates(self):
        assert normalize_tickers(["aapl", "MSFT", "Aapl", " msft "], 50) == ["AAPL", "MSFT"]

    def test_skips_invalid_entries(self):
        assert normalize_tickers(["AAPL", 42, None, "", "bad ticker", "NVDA"], 50) == ["AAPL", "NVDA"]

    def test_caps_after_deduplication(self):
        tickers = ["A", "A", "B", "C", "D"]
        assert normalize_tickers(tickers, 3) == ["A", "B", "C"]
