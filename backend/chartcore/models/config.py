"""Static symbol and timeframe configuration."""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field


class SymbolProfile(BaseModel):
    """Statistical parameters for one simulated symbol."""

    model_config = ConfigDict(frozen=True)

    base: Decimal = Field(gt=0)
    volatility: float = Field(ge=0)  # fractional per-bar dispersion, 0.02 = 2%
    name: str


class TimeframeSpec(BaseModel):
    """Period length and history depth for a timeframe label."""

    model_config = ConfigDict(frozen=True)

    period_seconds: int = Field(gt=0)
    bar_count: int = Field(ge=0)


SYMBOL_PROFILES: MappingProxyType[str, SymbolProfile] = MappingProxyType({
    "BTC-USD": SymbolProfile(base=Decimal("29000"), volatility=0.022, name="Bitcoin"),
    "ETH-USD": SymbolProfile(base=Decimal("1850"), volatility=0.025, name="Ethereum"),
    "AAPL": SymbolProfile(base=Decimal("188"), volatility=0.012, name="Apple Inc."),
    "TSLA": SymbolProfile(base=Decimal("225"), volatility=0.030, name="Tesla"),
    "SPY": SymbolProfile(base=Decimal("445"), volatility=0.008, name="S&P 500 ETF"),
    "NVDA": SymbolProfile(base=Decimal("490"), volatility=0.028, name="NVIDIA"),
    "META": SymbolProfile(base=Decimal("320"), volatility=0.018, name="Meta"),
    "MSFT": SymbolProfile(base=Decimal("375"), volatility=0.010, name="Microsoft"),
})

TIMEFRAME_SPECS: MappingProxyType[str, TimeframeSpec] = MappingProxyType({
    "1m": TimeframeSpec(period_seconds=60, bar_count=300),
    "5m": TimeframeSpec(period_seconds=300, bar_count=300),
    "15m": TimeframeSpec(period_seconds=900, bar_count=300),
    "1h": TimeframeSpec(period_seconds=3600, bar_count=500),
    "4h": TimeframeSpec(period_seconds=14400, bar_count=500),
    "1D": TimeframeSpec(period_seconds=86400, bar_count=500),
    "1W": TimeframeSpec(period_seconds=604800, bar_count=300),
})
