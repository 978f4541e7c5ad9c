"""Technical indicators (pure math, no I/O)."""

from chartcore.indicators.indicators import (
    IndicatorCalculator,
    bollinger_bands,
    ema,
    macd,
    rsi,
    sma,
)

__all__ = [
    "sma",
    "ema",
    "bollinger_bands",
    "rsi",
    "macd",
    "IndicatorCalculator",
]
