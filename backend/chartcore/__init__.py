"""Core market-data logic for the chart viewer.

This package contains pure computation with no I/O dependencies
(no network, no timers, no persistence): the seeded PRNG, bar
synthesis, indicator transforms and the static symbol/timeframe
tables. Side effects (live ticks, quote fetching, settings) live
in chartapp/.
"""

from chartcore.indicators import bollinger_bands, ema, macd, rsi, sma
from chartcore.models import (
    SYMBOL_PROFILES,
    TIMEFRAME_SPECS,
    Bar,
    IndicatorPoint,
    normalize_bars,
)
from chartcore.synthesizer import BarSynthesizer, generate_bars

__all__ = [
    "Bar",
    "IndicatorPoint",
    "SYMBOL_PROFILES",
    "TIMEFRAME_SPECS",
    "normalize_bars",
    "BarSynthesizer",
    "generate_bars",
    "sma",
    "ema",
    "bollinger_bands",
    "rsi",
    "macd",
]
