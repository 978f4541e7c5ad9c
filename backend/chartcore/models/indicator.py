"""Indicator output models."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

# Histogram direction tags (rendered as bar colors)
COLOR_UP = "#26a69a"
COLOR_DOWN = "#ef5350"


class IndicatorPoint(BaseModel):
    """A single indicator value keyed by bar time."""

    model_config = ConfigDict(frozen=True)

    time: int
    value: Decimal
    color: str | None = None


class BollingerBands(BaseModel):
    """Upper, middle and lower bands as parallel point lists."""

    model_config = ConfigDict(frozen=True)

    upper: list[IndicatorPoint] = []
    middle: list[IndicatorPoint] = []
    lower: list[IndicatorPoint] = []


class MACDResult(BaseModel):
    """MACD line, signal line and histogram."""

    model_config = ConfigDict(frozen=True)

    macd_line: list[IndicatorPoint] = []
    signal_line: list[IndicatorPoint] = []
    histogram: list[IndicatorPoint] = []
