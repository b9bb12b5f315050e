"""
Pytest configuration and fixtures.
"""
import pytest

from shared.configs.config import Settings
from shared.configs.models import Assumptions
from shared.errors import QuoteProviderError
from shared.market.models import Quote, Financials, EarningsTrend, Summary, PriceHistory


@pytest.fixture
def test_settings():
    """Settings pointing at a fake provider, without .env lookups."""
    return Settings(
        _env_file=None,
        quote_provider_base_url="https://quotes.example.test",
        request_timeout_seconds=2.0,
        fetch_retry_attempts=3,
        max_scan_symbols=50,
    )


@pytest.fixture
def default_assumptions():
    """Built-in default assumptions."""
    return Assumptions()


@pytest.fixture
def sample_quote():
    """Quote for a profitable, reasonably valued company."""
    return Quote(
        symbol="AAPL",
        short_name="Apple",
        long_name="Apple Inc.",
        regular_market_price=150.0,
        market_cap=2.4e12,
        trailing_pe=25.0,
        forward_pe=22.0,
        eps_trailing_twelve_months=6.0,
        price_to_book=40.0,
        peg_ratio=1.4,
        currency="USD",
    )


@pytest.fixture
def sample_financials():
    """Fundamental ratios matching sample_quote."""
    return Financials(
        return_on_equity=0.30,
        debt_to_equity=150.0,
        operating_margins=0.30,
        profit_margins=0.25,
        free_cashflow=9.0e10,
        revenue_growth=0.08,
        earnings_growth=0.10,
        target_mean_price=180.0,
    )


@pytest.fixture
def sample_earnings():
    """Analyst growth estimates."""
    return EarningsTrend(
        growth_long_term=0.10,
        growth_next_year=0.12,
        growth_this_year=0.08,
    )


@pytest.fixture
def sample_summary_payload():
    """Raw quoteSummary response body."""
    return {
        "quoteSummary": {
            "result": [{
                "financialData": {
                    "returnOnEquity": {"raw": 0.28, "fmt": "28.00%"},
                    "debtToEquity": {"raw": 120.5, "fmt": "120.50"},
                    "operatingMargins": {"raw": 0.30, "fmt": "30.00%"},
                    "profitMargins": {"raw": 0.25, "fmt": "25.00%"},
                    "freeCashflow": {"raw": 90000000000, "fmt": "90B"},
                    "revenueGrowth": {"raw": 0.08, "fmt": "8.00%"},
                    "earningsGrowth": {"raw": 0.11, "fmt": "11.00%"},
                    "targetMeanPrice": {"raw": 180.0, "fmt": "180.00"},
                },
                "defaultKeyStatistics": {
                    "returnOnEquity": {"raw": 0.31, "fmt": "31.00%"},
                    "pegRatio": {"raw": 1.5, "fmt": "1.50"},
                    "trailingEps": {"raw": 6.0, "fmt": "6.00"},
                },
                "price": {
                    "symbol": "AAPL",
                    "shortName": "Apple",
                    "longName": "Apple Inc.",
                    "regularMarketPrice": {"raw": 150.0, "fmt": "150.00"},
                    "marketCap": {"raw": 2400000000000, "fmt": "2.4T"},
                    "currency": "USD",
                },
                "earningsTrend": {
                    "trend": [
                        {"period": "0q", "growth": {"raw": 0.05}},
                        {"period": "0y", "growth": {"raw": 0.08}},
                        {"period": "+1y", "growth": {"raw": 0.12}},
                        {"period": "+5y", "growth": {"raw": 0.10}},
                    ]
                },
            }],
            "error": None,
        }
    }


@pytest.fixture
def sample_quote_payload():
    """Raw v7 quote response body for two symbols."""
    return {
        "quoteResponse": {
            "result": [
                {
                    "symbol": "AAPL",
                    "shortName": "Apple",
                    "longName": "Apple Inc.",
                    "regularMarketPrice": 150.0,
                    "marketCap": 2400000000000,
                    "trailingPE": 25.0,
                    "forwardPE": 22.0,
                    "epsTrailingTwelveMonths": 6.0,
                    "priceToBook": 40.0,
                    "currency": "USD",
                },
                {
                    "symbol": "XYZ",
                    "shortName": "Xyz Corp",
                    "regularMarketPrice": 12.5,
                    "epsTrailingTwelveMonths": None,
                },
            ],
            "error": None,
        }
    }


@pytest.fixture
def sample_chart_payload():
    """Raw v8 chart response body with gaps in the close series."""
    return {
        "chart": {
            "result": [{
                "timestamp": [1700000000, 1700086400, 1700172800, 1700259200],
                "indicators": {
                    "quote": [{"close": [None, 100.0, 110.0, 120.0]}]
                },
            }],
            "error": None,
        }
    }


class FakeQuoteClient:
    """
    In-memory stand-in for YahooQuoteClient.

    ``summaries`` and ``histories`` map symbols to records or to exceptions
    to raise.
    """

    def __init__(self, quotes=None, summaries=None, histories=None, batch_error=None):
        self.quotes = quotes or []
        self.summaries = summaries or {}
        self.histories = histories or {}
        self.batch_error = batch_error
        self.requested_batches = []
        self.summary_calls = []

    def fetch_quote_batch(self, symbols):
        self.requested_batches.append(list(symbols))
        if self.batch_error:
            raise self.batch_error
        return [q for q in self.quotes if q.symbol in symbols]

    def fetch_summary(self, symbol):
        self.summary_calls.append(symbol)
        value = self.summaries.get(symbol)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise QuoteProviderError(f"No summary data for {symbol}", symbol=symbol)
        return value

    def fetch_price_history(self, symbol, range_="1y", interval="1d"):
        value = self.histories.get(symbol, PriceHistory(symbol=symbol))
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def fake_client_factory():
    """Factory for FakeQuoteClient instances."""
    return FakeQuoteClient


@pytest.fixture
def summary_for():
    """Build a Summary for a quote with optional financials and earnings."""
    def _build(quote, financials=None, earnings=None):
        return Summary(
            quote=quote,
            financials=financials or Financials(),
            earnings_trend=earnings or EarningsTrend(),
        )
    return _build
