"""Data models."""

from chartcore.models.bar import Bar
from chartcore.models.config import (
    SYMBOL_PROFILES,
    TIMEFRAME_SPECS,
    SymbolProfile,
    TimeframeSpec,
)
from chartcore.models.converters import (
    bar_from_mapping,
    bars_to_rows,
    normalize_bars,
)
from chartcore.models.indicator import (
    COLOR_DOWN,
    COLOR_UP,
    BollingerBands,
    IndicatorPoint,
    MACDResult,
)

__all__ = [
    "Bar",
    "SymbolProfile",
    "TimeframeSpec",
    "SYMBOL_PROFILES",
    "TIMEFRAME_SPECS",
    "IndicatorPoint",
    "BollingerBands",
    "MACDResult",
    "COLOR_UP",
    "COLOR_DOWN",
    # Converters
    "bar_from_mapping",
    "bars_to_rows",
    "normalize_bars",
]
