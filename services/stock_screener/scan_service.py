"""
Scan Service.

Orchestrates a watchlist scan: fetches quotes for the batch, then the quote
summary and one-year price history of every symbol concurrently, scores and
values each symbol, and ranks the results.

A failing symbol never fails the scan; it degrades to a partial result built
from its batch quote alone.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shared.configs.config import Settings, get_settings
from shared.configs.models import Assumptions
from shared.errors import MalformedRequestError
from shared.market.models import Quote, Summary
from shared.monitoring.structured_logger import log_performance
from shared.utilities.validators import normalize_tickers, validate_ticker
from services.data_collector.quote_client import YahooQuoteClient
from services.stock_scorer.stock_scorer import StockScorer, ScanScore
from services.valuation.intrinsic_value import IntrinsicValueResult, compute_intrinsic_value
from services.valuation.projection import FutureProjection, project_future_prices

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """One ranked row of a scan."""
    symbol: str
    name: str
    currency: str
    price: Optional[float]
    pe: Optional[float]
    peg: Optional[float]
    roe: Optional[float]
    de: Optional[float]
    eps: Optional[float]
    score: ScanScore
    price_change_1y: Optional[float] = None
    intrinsic_value: Optional[float] = None
    upside_percent: Optional[float] = None
    error: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'name': self.name,
            'currency': self.currency,
            'price': self.price,
            'pe': self.pe,
            'peg': self.peg,
            'roe': self.roe,
            'de': self.de,
            'eps': self.eps,
            'score': self.score.to_wire(),
            'priceChange1y': self.price_change_1y,
            'intrinsicValue': self.intrinsic_value,
            'upsidePercent': self.upside_percent,
            'error': self.error,
        }


@dataclass
class AnalysisResult:
    """Single-symbol detail: summary data, valuation and projections."""
    symbol: str
    summary: Summary
    assumptions: Assumptions
    intrinsic: IntrinsicValueResult
    projections: List[FutureProjection] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.summary.quote.display_name

    def to_wire(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'name': self.name,
            'quote': self.summary.quote.to_wire(),
            'financials': self.summary.financials.to_wire(),
            'earningsTrend': self.summary.earnings_trend.to_wire(),
            'assumptions': self.assumptions.to_wire(),
            'intrinsic': self.intrinsic.to_wire(),
            'projections': [p.to_wire() for p in self.projections],
        }


def sort_results(results: List[ScanResult]) -> List[ScanResult]:
    """
    Rank scan results.

    Total score descending, then upside descending with missing upside last.
    The sort is stable, so full ties keep their input order.
    """
    return sorted(
        results,
        key=lambda r: (
            -r.score.total,
            r.upside_percent is None,
            -(r.upside_percent if r.upside_percent is not None else 0.0),
        ),
    )


class ScanService:
    """
    Service for scanning watchlists and analyzing single symbols.

    Usage:
        service = ScanService()
        results = await service.scan(["AAPL", "MSFT"], Assumptions())
    """

    def __init__(self,
                 client: Optional[YahooQuoteClient] = None,
                 scorer: Optional[StockScorer] = None,
                 settings: Optional[Settings] = None):
        """
        Initialize the scan service.

        Args:
            client: Quote provider client
            scorer: Composite scorer
            settings: Application settings (batch cap)
        """
        self.settings = settings or get_settings()
        self.client = client or YahooQuoteClient(settings=self.settings)
        self.scorer = scorer or StockScorer()

    async def scan(self, tickers: List[str], assumptions: Assumptions) -> List[ScanResult]:
        """
        Score and value a batch of tickers.

        Args:
            tickers: Requested tickers; normalized, de-duplicated and capped
            assumptions: Valuation assumptions for every symbol

        Returns:
            Ranked results, one per symbol the provider returned a quote for

        Raises:
            MalformedRequestError: If no usable ticker was supplied
            QuoteProviderError: If the batch quote request fails
        """
        symbols = normalize_tickers(tickers, self.settings.max_scan_symbols)
        if not symbols:
            raise MalformedRequestError("No tickers provided")

        start = time.perf_counter()
        quotes = await asyncio.to_thread(self.client.fetch_quote_batch, symbols)

        results = await asyncio.gather(*(self._scan_symbol(q, assumptions) for q in quotes))
        ranked = sort_results(list(results))

        failed = sum(1 for r in ranked if r.error)
        log_performance(
            logger,
            "scan",
            round((time.perf_counter() - start) * 1000, 2),
            requested=len(symbols),
            returned=len(ranked),
            failed=failed,
        )
        return ranked

    async def _scan_symbol(self, quote: Quote, assumptions: Assumptions) -> ScanResult:
        """Fetch, score and value one symbol inside its own failure boundary."""
        try:
            summary, history = await asyncio.gather(
                asyncio.to_thread(self.client.fetch_summary, quote.symbol),
                asyncio.to_thread(self.client.fetch_price_history, quote.symbol, "1y", "1d"),
            )
        except Exception as e:
            logger.warning(f"Falling back to quote-only result for {quote.symbol}: {e}", exc_info=True)
            return self._partial_result(quote, str(e))

        change = history.change_fraction()
        score = self.scorer.score(quote, summary.financials, summary.earnings_trend, change)
        intrinsic = compute_intrinsic_value(quote, summary.earnings_trend, assumptions)

        return ScanResult(
            symbol=quote.symbol,
            name=quote.display_name,
            currency=quote.currency or "USD",
            price=quote.regular_market_price,
            pe=quote.pe,
            peg=quote.peg_ratio,
            roe=summary.financials.return_on_equity,
            de=summary.financials.debt_to_equity,
            eps=quote.eps_trailing_twelve_months,
            score=score,
            price_change_1y=change,
            intrinsic_value=intrinsic.intrinsic_value,
            upside_percent=intrinsic.upside_percent,
        )

    def _partial_result(self, quote: Quote, error: str) -> ScanResult:
        """Result for a symbol whose summary or history could not be fetched."""
        return ScanResult(
            symbol=quote.symbol,
            name=quote.display_name,
            currency=quote.currency or "USD",
            price=quote.regular_market_price,
            pe=quote.pe,
            peg=quote.peg_ratio,
            roe=None,
            de=None,
            eps=quote.eps_trailing_twelve_months,
            score=self.scorer.score(quote),
            error=error,
        )

    async def analyze(self, symbol: str, assumptions: Assumptions) -> AnalysisResult:
        """
        Value one symbol and project its future price bands.

        Args:
            symbol: Ticker symbol
            assumptions: Valuation assumptions

        Returns:
            AnalysisResult

        Raises:
            MalformedRequestError: If the symbol is empty or malformed
            QuoteProviderError: If the summary request fails
        """
        symbol = (symbol or "").strip().upper()
        if not symbol:
            raise MalformedRequestError("symbol is required")
        if not validate_ticker(symbol):
            raise MalformedRequestError(f"Invalid symbol: {symbol}")

        summary = await asyncio.to_thread(self.client.fetch_summary, symbol)
        intrinsic = compute_intrinsic_value(summary.quote, summary.earnings_trend, assumptions)
        projections = project_future_prices(summary.quote, summary.earnings_trend, assumptions)

        logger.info(f"Analyzed {symbol}", extra={"symbol": symbol, "intrinsic_value": intrinsic.intrinsic_value})
        return AnalysisResult(
            symbol=symbol,
            summary=summary,
            assumptions=assumptions,
            intrinsic=intrinsic,
            projections=projections,
        )
