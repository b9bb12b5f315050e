"""
Pytest configuration and fixtures for web_viewer tests.
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from shared.configs.config import Settings
from shared.configs.models import Assumptions
from shared.errors import QuoteProviderError
from shared.market.models import Quote, Financials, EarningsTrend, Summary, PriceHistory
from services.stock_screener.scan_service import ScanService
from services.web_viewer.main import app, get_default_assumptions, get_scan_service


class StubQuoteClient:
    """Quote client serving canned records; exceptions in the maps are raised."""

    def __init__(self, quotes, summaries, histories=None):
        self.quotes = quotes
        self.summaries = summaries
        self.histories = histories or {}
        self.batch_error = None

    def fetch_quote_batch(self, symbols):
        if self.batch_error:
            raise self.batch_error
        return [q for q in self.quotes if q.symbol in symbols]

    def fetch_summary(self, symbol):
        value = self.summaries.get(symbol)
        if value is None:
            raise QuoteProviderError(f"No summary data for {symbol}", symbol=symbol, status_code=404)
        if isinstance(value, Exception):
            raise value
        return value

    def fetch_price_history(self, symbol, range_="1y", interval="1d"):
        value = self.histories.get(symbol, PriceHistory(symbol=symbol))
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture(scope="function")
def stub_client():
    """Two profitable companies and one without earnings."""
    msft = Quote(symbol="MSFT", long_name="Microsoft Corporation", regular_market_price=400.0,
                 trailing_pe=35.0, eps_trailing_twelve_months=11.5, peg_ratio=2.1, currency="USD")
    ko = Quote(symbol="KO", long_name="The Coca-Cola Company", regular_market_price=60.0,
               trailing_pe=24.0, eps_trailing_twelve_months=2.5, peg_ratio=3.5, currency="USD")
    rivn = Quote(symbol="RIVN", short_name="Rivian", regular_market_price=15.0,
                 eps_trailing_twelve_months=-5.0, currency="USD")

    summaries = {
        "MSFT": Summary(
            quote=msft,
            financials=Financials(return_on_equity=0.38, debt_to_equity=35.0, profit_margins=0.36),
            earnings_trend=EarningsTrend(growth_long_term=0.15, growth_next_year=0.14),
        ),
        "KO": Summary(
            quote=ko,
            financials=Financials(return_on_equity=0.40, debt_to_equity=160.0, profit_margins=0.23),
            earnings_trend=EarningsTrend(growth_long_term=0.05),
        ),
        "RIVN": Summary(
            quote=rivn,
            financials=Financials(return_on_equity=-0.45, debt_to_equity=90.0, profit_margins=-0.8),
        ),
    }
    histories = {
        "MSFT": PriceHistory(symbol="MSFT", closes=[330.0, 360.0, 400.0]),
        "KO": PriceHistory(symbol="KO", closes=[58.0, 59.0, 60.0]),
    }
    return StubQuoteClient([msft, ko, rivn], summaries, histories)


@pytest.fixture(scope="function")
def client(stub_client):
    """Create a test client with dependency overrides."""
    settings = Settings(_env_file=None)
    service = ScanService(client=stub_client, settings=settings)

    app.dependency_overrides[get_scan_service] = lambda: service
    app.dependency_overrides[get_default_assumptions] = lambda: Assumptions()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
