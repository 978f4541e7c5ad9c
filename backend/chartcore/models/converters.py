"""Conversion of externally supplied rows into Bar sequences.

Upstream quote providers return loosely typed rows: missing prices,
unrounded floats, unsorted or duplicated timestamps. Everything handed
to the indicator library goes through normalize_bars() first so that
external and synthetic sequences are interchangeable.
"""

import logging
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from chartcore.models.bar import Bar
from chartcore.precision import round_price, round_volume

logger = logging.getLogger(__name__)

PRICE_FIELDS = ("open", "high", "low", "close")


# =============================================================================
# Bar conversions
# =============================================================================

def bar_from_mapping(row: Mapping[str, Any]) -> Bar | None:
    """Build a Bar from a raw mapping.

    Prices are rounded to 4 places and volume to 2. A missing volume
    counts as zero.

    Args:
        row: Mapping with time, open, high, low, close and optional volume

    Returns:
        Bar, or None if a price field is missing
    """
    if any(row.get(name) is None for name in PRICE_FIELDS) or row.get("time") is None:
        return None

    return Bar(
        time=int(row["time"]),
        open=round_price(row["open"]),
        high=round_price(row["high"]),
        low=round_price(row["low"]),
        close=round_price(row["close"]),
        volume=round_volume(row.get("volume") or 0),
    )


def normalize_bars(rows: Iterable[Mapping[str, Any]]) -> list[Bar]:
    """Convert raw rows into a clean, time-ordered Bar list.

    Rows with missing prices or values that fail validation are skipped.
    The result is sorted by time and duplicate timestamps are dropped,
    keeping the first occurrence.

    Args:
        rows: Raw OHLCV mappings from an external source

    Returns:
        List of Bars with strictly increasing time
    """
    bars: list[Bar] = []
    skipped = 0

    for row in rows:
        try:
            bar = bar_from_mapping(row)
        except (ValidationError, TypeError, ValueError, ArithmeticError) as e:
            logger.warning(f"Skipping malformed bar row {row!r}: {e}")
            bar = None
        if bar is None:
            skipped += 1
            continue
        bars.append(bar)

    if skipped:
        logger.debug(f"Skipped {skipped} incomplete bar rows")

    # Stable sort keeps the first occurrence of a duplicated timestamp first
    bars.sort(key=lambda b: b.time)

    unique: list[Bar] = []
    seen: set[int] = set()
    for bar in bars:
        if bar.time in seen:
            continue
        seen.add(bar.time)
        unique.append(bar)

    return unique


def bars_to_rows(bars: Iterable[Bar]) -> list[dict[str, Any]]:
    """Convert Bars to plain dicts with float values (JSON friendly)."""
    return [
        {
            "time": bar.time,
            "open": float(bar.open),
            "high": float(bar.high),
            "low": float(bar.low),
            "close": float(bar.close),
            "volume": float(bar.volume),
        }
        for bar in bars
    ]
