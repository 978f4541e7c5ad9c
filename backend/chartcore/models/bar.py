"""OHLCV bar data model."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class Bar(BaseModel):
    """One OHLCV sample for a fixed time period.

    Bars are immutable once produced. Synthetic and externally fetched
    sequences share this shape, so indicator functions accept either.
    """

    model_config = ConfigDict(frozen=True)

    time: int  # Unix timestamp in seconds, period start
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal
