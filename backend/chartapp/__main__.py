"""CLI entry point for the chart data services.

Usage:
    python -m chartapp symbols
    python -m chartapp bars AAPL 1D --limit 5
    python -m chartapp indicators BTC-USD 1h
    python -m chartapp ticks --seconds 10 --symbols AAPL,TSLA
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal
from typing import Any

import orjson

from chartapp.clients import QuoteClient
from chartapp.config import get_settings
from chartapp.logging_setup import configure_logging
from chartapp.services import BarSource, TickHub
from chartcore.indicators import IndicatorCalculator
from chartcore.models import SYMBOL_PROFILES, TIMEFRAME_SPECS, bars_to_rows

logger = logging.getLogger(__name__)


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return float(obj)
    raise TypeError


def _print_json(payload: Any) -> None:
    sys.stdout.write(
        orjson.dumps(payload, default=_json_default, option=orjson.OPT_INDENT_2).decode("utf-8")
    )
    sys.stdout.write("\n")


def positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Synthetic market data, indicators and live ticks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m chartapp symbols
  python -m chartapp bars AAPL 1D --limit 5
  python -m chartapp indicators BTC-USD 1h
  python -m chartapp ticks --seconds 10 --symbols AAPL,TSLA
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("symbols", help="List simulated symbols and timeframes")

    bars = sub.add_parser("bars", help="Print bars as JSON")
    bars.add_argument("symbol")
    bars.add_argument("timeframe")
    bars.add_argument(
        "--limit",
        type=positive_int,
        default=None,
        help="Only print the last N bars",
    )

    indicators = sub.add_parser("indicators", help="Print latest indicator values")
    indicators.add_argument("symbol")
    indicators.add_argument("timeframe")

    ticks = sub.add_parser("ticks", help="Run the tick simulation")
    ticks.add_argument(
        "--seconds",
        type=float,
        default=5.0,
        help="How long to run (default: 5)",
    )
    ticks.add_argument(
        "--symbols",
        type=str,
        default=None,
        help="Comma-separated symbols to log (default: all)",
    )
    return parser.parse_args(argv)


def cmd_symbols() -> None:
    _print_json({
        "symbols": {
            symbol: profile.model_dump() for symbol, profile in SYMBOL_PROFILES.items()
        },
        "timeframes": {
            label: spec.model_dump() for label, spec in TIMEFRAME_SPECS.items()
        },
    })


async def _load(symbol: str, timeframe: str):
    settings = get_settings()
    client = QuoteClient() if settings.use_real_data else None
    try:
        return await BarSource(client=client).load(symbol, timeframe)
    finally:
        if client:
            await client.close()


async def cmd_bars(symbol: str, timeframe: str, limit: int | None) -> int:
    loaded = await _load(symbol, timeframe)
    if not loaded.bars:
        logger.error(f"No data available for {symbol} {timeframe}")
        return 1

    bars = loaded.bars[-limit:] if limit is not None else loaded.bars
    _print_json({
        "symbol": symbol,
        "timeframe": timeframe,
        "real": loaded.is_real,
        "bars": bars_to_rows(bars),
    })
    return 0


async def cmd_indicators(symbol: str, timeframe: str) -> int:
    loaded = await _load(symbol, timeframe)
    calc = IndicatorCalculator()
    latest = calc.calculate_latest(loaded.bars)
    if latest is None:
        logger.error(
            f"Not enough history for {symbol} {timeframe}: "
            f"{len(loaded.bars)} bars, need {calc.min_bars}"
        )
        return 1

    _print_json({"symbol": symbol, "timeframe": timeframe, "latest": latest})
    return 0


async def cmd_ticks(seconds: float, symbols: list[str]) -> int:
    hub = TickHub()
    for symbol in symbols:
        hub.subscribe(
            symbol,
            lambda price, symbol=symbol: logger.info(f"{symbol} {price}"),
        )

    await hub.start()
    try:
        await asyncio.sleep(seconds)
    finally:
        await hub.stop()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else get_settings().log_level)

    if args.command == "symbols":
        cmd_symbols()
        return 0
    if args.command == "bars":
        return asyncio.run(cmd_bars(args.symbol, args.timeframe, args.limit))
    if args.command == "indicators":
        return asyncio.run(cmd_indicators(args.symbol, args.timeframe))
    if args.command == "ticks":
        symbols = (
            [s.strip() for s in args.symbols.split(",") if s.strip()]
            if args.symbols
            else list(SYMBOL_PROFILES)
        )
        return asyncio.run(cmd_ticks(args.seconds, symbols))
    return 1


if __name__ == "__main__":
    sys.exit(main())
