"""
Stock Screener Service - Main Entry Point.

Provides functionality to:
- Scan a watchlist and print the ranked scores
- Show the valuation and price projections of a single stock
"""
import argparse
import asyncio
import logging
import sys

from shared.configs.config import get_settings
from shared.configs.loader import load_assumptions_config
from shared.configs.models import Assumptions
from shared.monitoring.structured_logger import setup_service_logger
from services.stock_screener.scan_service import ScanService

logger = logging.getLogger(__name__)


def _fmt(value, pattern: str = "{:.2f}") -> str:
    return pattern.format(value) if value is not None else "-"


def build_assumptions(args: argparse.Namespace) -> Assumptions:
    """Merge command line overrides over the configured default assumptions."""
    settings = get_settings()
    defaults = load_assumptions_config(settings.assumptions_file)
    return defaults.with_overrides({
        'discount_rate': args.discount_rate,
        'base_growth': args.growth,
        'years': args.years,
        'exit_pe': args.exit_pe,
    })


def scan_watchlist(tickers: list, assumptions: Assumptions):
    """Scan tickers and log a ranked table."""
    service = ScanService()
    results = asyncio.run(service.scan(tickers, assumptions))

    logger.info(f"=== Scan Results ({len(results)} stocks) ===")
    logger.info(f"{'Rank':<5} {'Symbol':<10} {'Total':>5} {'Prof':>5} {'Grow':>5} {'Hlth':>5} {'Val':>5} {'Mom':>5} {'Price':>10} {'Intrinsic':>10} {'Upside':>8}")
    logger.info("=" * 90)

    for idx, r in enumerate(results, 1):
        logger.info(
            f"{idx:<5} "
            f"{r.symbol:<10} "
            f"{r.score.total:>5} "
            f"{r.score.profitability:>5} "
            f"{r.score.growth:>5} "
            f"{r.score.financial_health:>5} "
            f"{r.score.valuation:>5} "
            f"{r.score.momentum:>5} "
            f"{_fmt(r.price):>10} "
            f"{_fmt(r.intrinsic_value):>10} "
            f"{_fmt(r.upside_percent, '{:.1f}%'):>8}"
        )
        if r.error:
            logger.warning(f"      {r.symbol}: partial result ({r.error})")

    return results


def show_analysis(ticker: str, assumptions: Assumptions):
    """Log the valuation and projections of one stock."""
    service = ScanService()
    analysis = asyncio.run(service.analyze(ticker, assumptions))
    quote = analysis.summary.quote

    logger.info(f"=== Valuation for {analysis.symbol} ({analysis.name}) ===")
    logger.info(f"Price: {_fmt(quote.regular_market_price)} {quote.currency or ''}")
    logger.info(f"EPS (TTM): {_fmt(quote.eps_trailing_twelve_months)}")
    logger.info(f"Intrinsic value: {_fmt(analysis.intrinsic.intrinsic_value)}")
    logger.info(f"Upside: {_fmt(analysis.intrinsic.upside_percent, '{:.1f}%')}")
    logger.info(f"Growth used: {analysis.intrinsic.inputs_used.growth:.2%}")

    logger.info("--- Projections ---")
    for p in analysis.projections:
        logger.info(f"{p.horizon_years:>2}y  low {_fmt(p.low):>10}  base {_fmt(p.base):>10}  high {_fmt(p.high):>10}")

    return analysis


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Stock Screener Service')
    parser.add_argument('command', choices=['scan', 'analyze'],
                        help='Command to execute')
    parser.add_argument('tickers', nargs='*',
                        help='Ticker symbols (analyze uses the first one)')
    parser.add_argument('--discount-rate', type=float,
                        help='Discount rate override (e.g. 0.10)')
    parser.add_argument('--growth', type=float,
                        help='Base growth override (e.g. 0.12)')
    parser.add_argument('--years', type=int,
                        help='Projection years override')
    parser.add_argument('--exit-pe', type=float,
                        help='Exit P/E multiple override')

    args = parser.parse_args()

    settings = get_settings()
    setup_service_logger("stock_screener", level=settings.log_level, log_dir=settings.log_dir,
                         json_format=False, environment=settings.environment)

    try:
        if not args.tickers:
            logger.error("At least one ticker is required")
            sys.exit(1)

        assumptions = build_assumptions(args)

        if args.command == 'scan':
            scan_watchlist(args.tickers, assumptions)

        elif args.command == 'analyze':
            show_analysis(args.tickers[0], assumptions)

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
