"""
Web Viewer Service - Main entry point.
Serves the watchlist page and the scan/analyze JSON API.
"""
import uuid
from functools import lru_cache
from pathlib import Path
import logging
from fastapi import FastAPI, Depends, Query, Request, Response
from fastapi.staticfiles import StaticFiles
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Any, Dict, List, Optional
from datetime import datetime

from shared.configs.config import get_settings
from shared.configs.loader import load_assumptions_config
from shared.configs.models import Assumptions
from shared.errors import MalformedRequestError, QuoteProviderError
from shared.monitoring.structured_logger import StructuredLogger, log_error, setup_service_logger
from shared.utilities.validators import parse_tickers_text
from services.stock_screener.scan_service import ScanService

SERVICE_NAME = "web_viewer"

settings = get_settings()
setup_service_logger(SERVICE_NAME, level=settings.log_level, log_dir=settings.log_dir,
                     json_format=settings.log_format == "json", environment=settings.environment)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Composite scores, intrinsic values and price projections for a watchlist",
    version="1.0.0",
    debug=settings.debug
)

static_path = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_path)), name="static")


class ScanRequest(BaseModel):
    """
    Body of a scan request.

    Fields are loosely typed: entries of the wrong type are dropped rather
    than rejected, so a body without usable tickers ends in a 400.
    """
    model_config = ConfigDict(populate_by_name=True)

    tickers: Optional[Any] = None
    tickers_text: Optional[Any] = Field(default=None, alias="tickersText")
    assumptions: Optional[Any] = None

    @classmethod
    def from_body(cls, body: Any) -> "ScanRequest":
        """Build from a decoded JSON body; anything but an object counts as empty."""
        if not isinstance(body, dict):
            return cls()
        return cls.model_validate(body)

    def ticker_list(self) -> List[Any]:
        if isinstance(self.tickers, list) and self.tickers:
            return self.tickers
        if isinstance(self.tickers_text, str):
            return parse_tickers_text(self.tickers_text)
        return []

    def assumption_overrides(self) -> Optional[Dict[str, Any]]:
        return self.assumptions if isinstance(self.assumptions, dict) else None


@lru_cache()
def get_default_assumptions() -> Assumptions:
    """Default assumptions, optionally loaded from the configured YAML file."""
    return load_assumptions_config(get_settings().assumptions_file)


@lru_cache()
def get_scan_service() -> ScanService:
    return ScanService(settings=get_settings())


def _error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _cache_headers(response: Response) -> None:
    response.headers["Cache-Control"] = f"public, max-age={get_settings().cache_max_age_seconds}"


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log record of a request with its request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    StructuredLogger.set_context(request_id=request_id)
    try:
        response = await call_next(request)
    finally:
        StructuredLogger.clear_context()
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/", response_class=HTMLResponse)
async def root():
    """Serve the main HTML page."""
    index_path = static_path / "index.html"
    if not index_path.exists():
        return _error_response(404, "Index page not found")

    with open(index_path, "r", encoding="utf-8") as f:
        return HTMLResponse(content=f.read())


@app.get("/stock/{symbol}", response_class=HTMLResponse)
async def stock_page(symbol: str):
    """Serve the detail page; it loads /api/analyze for the symbol in its URL."""
    page_path = static_path / "stock.html"
    if not page_path.exists():
        return _error_response(404, "Stock page not found")

    return HTMLResponse(content=page_path.read_text(encoding="utf-8"))


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "timestamp": datetime.utcnow().isoformat()
    }


@app.post("/api/scan")
async def scan(
    request: Request,
    response: Response,
    service: ScanService = Depends(get_scan_service),
    defaults: Assumptions = Depends(get_default_assumptions),
):
    """
    Score and value a watchlist.

    Args:
        request: JSON body with tickers (list or free text) and optional
                 assumption overrides

    Returns:
        Ranked results and the assumptions used
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    payload = ScanRequest.from_body(body)
    tickers = payload.ticker_list()

    try:
        assumptions = defaults.with_overrides(payload.assumption_overrides())
        results = await service.scan(tickers, assumptions)
    except MalformedRequestError as e:
        return _error_response(400, str(e))
    except ValidationError as e:
        return _error_response(422, "Invalid assumptions", details=e.errors(include_url=False, include_context=False))
    except QuoteProviderError as e:
        logger.error(f"Quote provider failed during scan: {e}")
        return _error_response(502, str(e))
    except Exception as e:
        log_error(logger, e, {"ticker_count": len(tickers)})
        return _error_response(500, str(e) or "Unexpected error")

    logger.info(f"Scanned {len(results)} stocks")
    _cache_headers(response)
    return {
        "results": [r.to_wire() for r in results],
        "assumptions": assumptions.to_wire(),
    }


@app.get("/api/analyze")
async def analyze(
    response: Response,
    symbol: Optional[str] = Query(default=None),
    discount_rate: Optional[float] = Query(default=None, alias="discountRate"),
    growth: Optional[float] = Query(default=None),
    years: Optional[int] = Query(default=None),
    exit_pe: Optional[float] = Query(default=None, alias="exitPE"),
    service: ScanService = Depends(get_scan_service),
    defaults: Assumptions = Depends(get_default_assumptions),
):
    """
    Intrinsic value and price projections for one stock.

    Args:
        symbol: Ticker symbol
        discount_rate: Discount rate override
        growth: Base growth override
        years: Projection years override
        exit_pe: Exit P/E override

    Returns:
        Summary data, assumptions, intrinsic value and projections
    """
    if not symbol or not symbol.strip():
        return _error_response(400, "symbol is required")

    try:
        assumptions = defaults.with_overrides({
            "discount_rate": discount_rate,
            "base_growth": growth,
            "years": years,
            "exit_pe": exit_pe,
        })
        analysis = await service.analyze(symbol, assumptions)
    except MalformedRequestError as e:
        return _error_response(400, str(e))
    except ValidationError as e:
        return _error_response(422, "Invalid assumptions", details=e.errors(include_url=False, include_context=False))
    except QuoteProviderError as e:
        logger.error(f"Quote provider failed for {symbol}: {e}")
        return _error_response(502, str(e))
    except Exception as e:
        log_error(logger, e, {"symbol": symbol})
        return _error_response(500, str(e) or "Unexpected error")

    _cache_headers(response)
    return analysis.to_wire()


if __name__ == "__main__":
    import uvicorn

    logger.info("=" * 60)
    logger.info("Stock Valuation Scanner - Web Viewer")
    logger.info("=" * 60)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
