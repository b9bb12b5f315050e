"""
Tests for market data records.
"""
import pytest
from pydantic import ValidationError

from shared.market.models import Quote, Financials, Summary, PriceHistory


class TestQuote:

    def test_display_name_fallbacks(self):
        assert Quote(symbol="A", long_name="Long", short_name="Short").display_name == "Long"
        assert Quote(symbol="A", short_name="Short").display_name == "Short"
        assert Quote(symbol="A").display_name == "A"

    def test_pe_prefers_trailing(self):
        assert Quote(symbol="A", trailing_pe=20.0, forward_pe=15.0).pe == 20.0
        assert Quote(symbol="A", forward_pe=15.0).pe == 15.0
        assert Quote(symbol="A").pe is None

    def test_wire_names(self):
        wire = Quote(symbol="A", trailing_pe=20.0, eps_trailing_twelve_months=2.0).to_wire()

        assert wire["trailingPE"] == 20.0
        assert wire["forwardPE"] is None
        assert wire["epsTrailingTwelveMonths"] == 2.0
        assert wire["regularMarketPrice"] is None

    def test_accepts_wire_names(self):
        quote = Quote.model_validate({"symbol": "A", "regularMarketPrice": 10.0, "trailingPE": 12.0})
        assert quote.regular_market_price == 10.0
        assert quote.trailing_pe == 12.0

    def test_frozen(self):
        quote = Quote(symbol="A")
        with pytest.raises(ValidationError):
            quote.symbol = "B"


class TestSummary:

    def test_defaults_to_empty_records(self):
        summary = Summary(quote=Quote(symbol="A"))
        assert summary.financials == Financials()
        assert summary.earnings_trend.growth_next_year is None


class TestPriceHistory:
    """Test suite for PriceHistory.change_fraction."""

    def test_uses_first_and_last_finite_closes(self):
        history = PriceHistory(symbol="A", closes=[None, 100.0, 90.0, None, 120.0, None])
        assert history.change_fraction() == pytest.approx(0.20)

    def test_decline(self):
        history = PriceHistory(symbol="A", closes=[200.0, 150.0])
        assert history.change_fraction() == pytest.approx(-0.25)

    def test_single_close_is_zero_change(self):
        assert PriceHistory(symbol="A", closes=[None, 50.0]).change_fraction() == 0.0

    @pytest.mark.parametrize("closes", [[], [None, None], [0.0, 10.0], [10.0, 0.0]])
    def test_no_change(self, closes):
        assert PriceHistory(symbol="A", closes=closes).change_fraction() is None

    def test_ignores_non_finite_closes(self):
        history = PriceHistory(symbol="A", closes=[float("nan"), 50.0, float("inf"), 75.0])
        assert history.change_fraction() == pytest.approx(0.5)
