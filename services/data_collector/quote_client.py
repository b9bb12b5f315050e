"""
Quote provider client for Yahoo Finance public JSON endpoints.

Fetches batched quotes, per-symbol quote summaries (financial data, key
statistics, price, earnings trend) and daily price history.
"""
from typing import Any, Dict, List, Optional
from urllib.parse import quote as url_quote
import logging

import requests

from shared.configs.config import Settings, get_settings
from shared.errors import QuoteProviderError
from shared.market.models import Quote, Financials, EarningsTrend, Summary, PriceHistory
from shared.utilities.validators import optional_float
from services.data_collector.utils import retry_on_error, log_execution_time

logger = logging.getLogger(__name__)

SUMMARY_MODULES = "financialData,defaultKeyStatistics,price,earningsTrend"

# earningsTrend period codes
PERIOD_LONG_TERM = "+5y"
PERIOD_NEXT_YEAR = "+1y"
PERIOD_THIS_YEAR = "0y"

RETRYABLE_ERRORS = (requests.ConnectionError, requests.Timeout)


def _raw(container: Any, key: str) -> Optional[float]:
    """Read a ``{"raw": value, "fmt": ...}`` wrapped number from a summary module."""
    if not isinstance(container, dict):
        return None
    wrapped = container.get(key)
    if isinstance(wrapped, dict):
        return optional_float(wrapped.get("raw"))
    return optional_float(wrapped)


def _first_present(*values: Optional[float]) -> Optional[float]:
    for value in values:
        if value is not None:
            return value
    return None


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


class YahooQuoteClient:
    """
    Synchronous client for the quote provider.

    Connection errors and timeouts are retried with exponential backoff;
    every other failure (non-2xx status, undecodable body, provider error
    payload) raises QuoteProviderError immediately.
    """

    def __init__(self,
                 settings: Optional[Settings] = None,
                 session: Optional[requests.Session] = None,
                 retry_min_wait: float = 1,
                 retry_max_wait: float = 8):
        """
        Initialize the client.

        Args:
            settings: Application settings (base URL, timeout, retry attempts)
            session: HTTP session; a new one is created when omitted
            retry_min_wait: Minimum backoff between attempts in seconds
            retry_max_wait: Maximum backoff between attempts in seconds
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.quote_provider_base_url.rstrip("/")
        self.timeout = self.settings.request_timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": self.settings.user_agent,
            "Accept": "application/json",
        })

        self._get_with_retry = retry_on_error(
            max_attempts=self.settings.fetch_retry_attempts,
            min_wait=retry_min_wait,
            max_wait=retry_max_wait,
            exceptions=RETRYABLE_ERRORS,
        )(self._get)

    def _get(self, url: str, params: Optional[Dict[str, Any]]) -> requests.Response:
        return self.session.get(url, params=params, timeout=self.timeout)

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None,
                  symbol: Optional[str] = None) -> Dict[str, Any]:
        """
        GET a provider endpoint and decode the JSON body.

        Raises:
            QuoteProviderError: On network failure after retries, non-2xx status or bad JSON
        """
        url = f"{self.base_url}{path}"
        try:
            response = self._get_with_retry(url, params)
        except requests.RequestException as e:
            raise QuoteProviderError(f"Quote provider request failed: {e}", symbol=symbol) from e

        if not response.ok:
            raise QuoteProviderError(
                f"Quote provider request failed: {response.status_code}",
                symbol=symbol,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise QuoteProviderError("Quote provider returned invalid JSON", symbol=symbol) from e

        if not isinstance(data, dict):
            raise QuoteProviderError("Quote provider returned an unexpected payload", symbol=symbol)
        return data

    @log_execution_time
    def fetch_quote_batch(self, symbols: List[str]) -> List[Quote]:
        """
        Fetch quotes for several symbols in one request.

        Symbols unknown to the provider are simply absent from the result.

        Args:
            symbols: Upper-cased ticker symbols

        Returns:
            Quotes in provider order
        """
        if not symbols:
            return []

        data = self._get_json("/v7/finance/quote", params={"symbols": ",".join(symbols)})
        results = (data.get("quoteResponse") or {}).get("result") or []

        quotes = []
        for r in results:
            if not isinstance(r, dict) or not _text(r.get("symbol")):
                continue
            quotes.append(Quote(
                symbol=r["symbol"],
                short_name=_text(r.get("shortName")),
                long_name=_text(r.get("longName")),
                regular_market_price=optional_float(r.get("regularMarketPrice")),
                market_cap=optional_float(r.get("marketCap")),
                trailing_pe=optional_float(r.get("trailingPE")),
                forward_pe=optional_float(r.get("forwardPE")),
                eps_trailing_twelve_months=optional_float(r.get("epsTrailingTwelveMonths")),
                price_to_book=optional_float(r.get("priceToBook")),
                peg_ratio=optional_float(r.get("pegRatio")),
                currency=_text(r.get("currency")),
            ))

        logger.info(f"Fetched {len(quotes)} quotes for {len(symbols)} symbols")
        return quotes

    @log_execution_time
    def fetch_summary(self, symbol: str) -> Summary:
        """
        Fetch quote, financial ratios and analyst growth estimates for one symbol.

        Args:
            symbol: Ticker symbol

        Returns:
            Summary for the symbol

        Raises:
            QuoteProviderError: If the request fails or the provider reports an error
        """
        data = self._get_json(
            f"/v10/finance/quoteSummary/{url_quote(symbol, safe='')}",
            params={"modules": SUMMARY_MODULES},
            symbol=symbol,
        )
        summary = data.get("quoteSummary") or {}
        results = summary.get("result") or []
        if not results:
            error = summary.get("error") or {}
            description = error.get("description") if isinstance(error, dict) else None
            raise QuoteProviderError(description or f"No summary data for {symbol}", symbol=symbol)

        q = results[0] if isinstance(results[0], dict) else {}
        financial_data = q.get("financialData") or {}
        key_stats = q.get("defaultKeyStatistics") or {}
        price = q.get("price") or {}
        trend = (q.get("earningsTrend") or {}).get("trend") or []

        financials = Financials(
            return_on_equity=_first_present(_raw(key_stats, "returnOnEquity"),
                                            _raw(financial_data, "returnOnEquity")),
            debt_to_equity=_first_present(_raw(key_stats, "debtToEquity"),
                                          _raw(financial_data, "debtToEquity")),
            operating_margins=_raw(financial_data, "operatingMargins"),
            profit_margins=_raw(financial_data, "profitMargins"),
            free_cashflow=_raw(financial_data, "freeCashflow"),
            revenue_growth=_raw(financial_data, "revenueGrowth"),
            earnings_growth=_raw(financial_data, "earningsGrowth"),
            target_mean_price=_raw(financial_data, "targetMeanPrice"),
        )

        earnings_trend = EarningsTrend(
            growth_long_term=self._trend_growth(trend, PERIOD_LONG_TERM),
            growth_next_year=self._trend_growth(trend, PERIOD_NEXT_YEAR),
            growth_this_year=self._trend_growth(trend, PERIOD_THIS_YEAR),
        )

        quote = Quote(
            symbol=_text(price.get("symbol")) or symbol,
            short_name=_text(price.get("shortName")),
            long_name=_text(price.get("longName")),
            regular_market_price=_raw(price, "regularMarketPrice"),
            market_cap=_raw(price, "marketCap"),
            trailing_pe=_raw(price, "trailingPE"),
            # The price module rarely carries per-share ratios; key statistics do
            forward_pe=_first_present(_raw(price, "forwardPE"), _raw(key_stats, "forwardPE")),
            eps_trailing_twelve_months=_first_present(_raw(price, "epsTrailingTwelveMonths"),
                                                      _raw(key_stats, "trailingEps")),
            price_to_book=_first_present(_raw(price, "priceToBook"), _raw(key_stats, "priceToBook")),
            peg_ratio=_first_present(_raw(price, "pegRatio"), _raw(key_stats, "pegRatio")),
            currency=_text(price.get("currency")),
        )

        logger.debug(f"Fetched summary for {symbol}")
        return Summary(quote=quote, financials=financials, earnings_trend=earnings_trend)

    @staticmethod
    def _trend_growth(trend: List[Any], period: str) -> Optional[float]:
        for entry in trend:
            if isinstance(entry, dict) and entry.get("period") == period:
                return _raw(entry, "growth")
        return None

    @log_execution_time
    def fetch_price_history(self, symbol: str, range_: str = "1y", interval: str = "1d") -> PriceHistory:
        """
        Fetch a daily close series.

        Args:
            symbol: Ticker symbol
            range_: Provider range code (e.g. '1y')
            interval: Provider interval code (e.g. '1d')

        Returns:
            PriceHistory; empty when the provider has no chart data
        """
        data = self._get_json(
            f"/v8/finance/chart/{url_quote(symbol, safe='')}",
            params={"range": range_, "interval": interval},
            symbol=symbol,
        )
        results = (data.get("chart") or {}).get("result") or []
        result = results[0] if results and isinstance(results[0], dict) else {}

        timestamps = [t for t in (result.get("timestamp") or []) if isinstance(t, int)]
        quote_blocks = (result.get("indicators") or {}).get("quote") or [{}]
        first_block = quote_blocks[0] if isinstance(quote_blocks[0], dict) else {}
        closes = [optional_float(c) for c in (first_block.get("close") or [])]

        return PriceHistory(symbol=symbol, timestamps=timestamps, closes=closes)
