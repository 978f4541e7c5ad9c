"""Deterministic synthetic OHLCV generation.

Bars are drawn from a seeded PRNG keyed by (symbol, timeframe), so the
same pair always yields the same sequence within a given wall-clock
second. The only external input is "now", which anchors the most recent
bar.

Per bar:
- change = (draw1 - 0.49 + trend) * volatility
- close = open * (1 + change)
- high/low extend the body by up to half the volatility
- volume is a PRNG-scaled magnitude, larger for low-priced symbols
"""

import logging
import math
import time
from typing import Callable, Mapping

from chartcore.models import (
    SYMBOL_PROFILES,
    TIMEFRAME_SPECS,
    Bar,
    SymbolProfile,
    TimeframeSpec,
)
from chartcore.precision import round_price, round_volume
from chartcore.prng import seeded_random

logger = logging.getLogger(__name__)

# Small positive drift added to every bar's change
TREND = 0.0001
# Draws below this center produce down bars
CHANGE_CENTER = 0.49
# Wick extension as a fraction of volatility
WICK_FACTOR = 0.5

VOLUME_MIN = 1000
VOLUME_RANGE = 5000
# Display-plausibility heuristic: expensive symbols trade fewer units
HIGH_PRICE_THRESHOLD = 1000
HIGH_PRICE_VOLUME_SCALE = 0.5
LOW_PRICE_VOLUME_SCALE = 10


def derive_seed(symbol: str, timeframe: str) -> int:
    """Derive the PRNG seed for a (symbol, timeframe) pair."""
    return ord(symbol[0]) * 997 + ord(timeframe[0]) * 31


class BarSynthesizer:
    """Generates synthetic bar sequences from static profiles.

    Usage:
        synth = BarSynthesizer()
        bars = synth.generate("AAPL", "1D")
    """

    def __init__(
        self,
        profiles: Mapping[str, SymbolProfile] = SYMBOL_PROFILES,
        timeframes: Mapping[str, TimeframeSpec] = TIMEFRAME_SPECS,
        clock: Callable[[], float] = time.time,
    ):
        self.profiles = profiles
        self.timeframes = timeframes
        self._clock = clock

    def generate(
        self, symbol: str, timeframe: str, now: int | None = None
    ) -> list[Bar]:
        """Generate the bar sequence for a symbol and timeframe.

        Args:
            symbol: Symbol identifier (e.g., "AAPL")
            timeframe: Timeframe label (e.g., "1D")
            now: Unix seconds anchoring the latest bar (defaults to clock)

        Returns:
            List of Bars, or an empty list for an unknown symbol/timeframe
        """
        profile = self.profiles.get(symbol)
        spec = self.timeframes.get(timeframe)
        if profile is None or spec is None:
            logger.debug(f"No synthetic profile for {symbol} {timeframe}")
            return []

        if now is None:
            now = int(self._clock())

        rand = seeded_random(derive_seed(symbol, timeframe))
        period = spec.period_seconds
        vol = profile.volatility
        base = float(profile.base)
        volume_scale = (
            HIGH_PRICE_VOLUME_SCALE if base > HIGH_PRICE_THRESHOLD else LOW_PRICE_VOLUME_SCALE
        )

        price = base
        bar_time = ((now - period * spec.bar_count) // period) * period

        bars: list[Bar] = []
        for _ in range(spec.bar_count):
            change = (rand() - CHANGE_CENTER + TREND) * vol
            open_price = price
            close = open_price * (1 + change)
            high = max(open_price, close) * (1 + rand() * vol * WICK_FACTOR)
            low = min(open_price, close) * (1 - rand() * vol * WICK_FACTOR)
            volume = math.floor(rand() * VOLUME_RANGE + VOLUME_MIN) * volume_scale

            bars.append(
                Bar(
                    time=bar_time,
                    open=round_price(open_price),
                    high=round_price(high),
                    low=round_price(low),
                    close=round_price(close),
                    volume=round_volume(volume),
                )
            )

            price = close
            bar_time += period

        return bars


_default_synthesizer = BarSynthesizer()


def generate_bars(symbol: str, timeframe: str, now: int | None = None) -> list[Bar]:
    """Generate synthetic bars using the static profile tables.

    Args:
        symbol: Symbol identifier
        timeframe: Timeframe label
        now: Optional Unix seconds anchor (defaults to current time)

    Returns:
        List of Bars (empty for unknown symbol or timeframe)
    """
    return _default_synthesizer.generate(symbol, timeframe, now)
