"""Technical indicators for chart overlays and sub-panels.

All functions are pure: they take a bar sequence, never mutate it, and
return freshly built IndicatorPoint lists in input order. Values are
rounded after every arithmetic stage (4 places, 2 for RSI) so repeated
calls on identical input are identical.

Multi-line indicators join their components by bar time, not by
position, so irregular or gapped series still line up.

Any lookback longer than the available history yields an empty list.
"""

from decimal import Decimal
from typing import Sequence

import numpy as np

from chartcore.models import (
    COLOR_DOWN,
    COLOR_UP,
    Bar,
    BollingerBands,
    IndicatorPoint,
    MACDResult,
)
from chartcore.precision import PRICE_PLACES, RSI_PLACES, quantize


# =============================================================================
# Window helpers (float arrays in, float arrays out)
#
# Window sums accumulate left to right, one value at a time.
# =============================================================================

def _closes(bars: Sequence[Bar]) -> np.ndarray:
    """Extract close prices as a float64 array."""
    return np.array([float(b.close) for b in bars], dtype=np.float64)


def _times(bars: Sequence[Bar]) -> list[int]:
    return [b.time for b in bars]


def _window_mean(window: Sequence[float]) -> float:
    """Mean of a window, summed left to right."""
    total = 0.0
    for value in window:
        total += value
    return total / len(window)


def _rolling_mean(values: np.ndarray, period: int) -> np.ndarray:
    """Trailing mean for indices >= period - 1."""
    floats = values.tolist()
    return np.array(
        [_window_mean(floats[i - period + 1 : i + 1]) for i in range(period - 1, len(floats))],
        dtype=np.float64,
    )


def _rolling_std(values: np.ndarray, means: np.ndarray, period: int) -> np.ndarray:
    """Trailing population standard deviation around precomputed means."""
    floats = values.tolist()
    result = np.empty(len(means), dtype=np.float64)

    for j, mean in enumerate(means.tolist()):
        squares = 0.0
        for value in floats[j : j + period]:
            squares += (value - mean) ** 2
        result[j] = squares / period

    return np.sqrt(result)


def _ema_values(values: np.ndarray, period: int) -> np.ndarray:
    """EMA for indices >= period - 1, seeded with the SMA of the first window."""
    floats = values.tolist()
    k = 2.0 / (period + 1)
    result = np.empty(len(floats) - period + 1, dtype=np.float64)
    current = _window_mean(floats[:period])
    result[0] = current

    for i in range(period, len(floats)):
        current = floats[i] * k + current * (1 - k)
        result[i - period + 1] = current

    return result


def _points(
    times: Sequence[int], values: np.ndarray, places: int = PRICE_PLACES
) -> list[IndicatorPoint]:
    return [
        IndicatorPoint(time=t, value=quantize(float(v), places))
        for t, v in zip(times, values)
    ]


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    """RSI from smoothed averages; saturates to 100 when there are no losses."""
    if avg_loss == 0:
        return 100.0
    return 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)


# =============================================================================
# Public API
# =============================================================================

def sma(bars: Sequence[Bar], period: int) -> list[IndicatorPoint]:
    """
    Calculate Simple Moving Average of close.

    Args:
        bars: Bar sequence
        period: Lookback period (> 0)

    Returns:
        One point per bar from index period - 1 onward
    """
    if period <= 0 or len(bars) < period:
        return []

    values = _rolling_mean(_closes(bars), period)
    return _points(_times(bars)[period - 1 :], values)


def ema(bars: Sequence[Bar], period: int) -> list[IndicatorPoint]:
    """
    Calculate Exponential Moving Average of close.

    The first value is the SMA of the first `period` closes; thereafter
    ema = close * k + ema * (1 - k) with k = 2 / (period + 1).

    Args:
        bars: Bar sequence
        period: EMA period (> 0)

    Returns:
        One point per bar from index period - 1 onward
    """
    if period <= 0 or len(bars) < period:
        return []

    values = _ema_values(_closes(bars), period)
    return _points(_times(bars)[period - 1 :], values)


def bollinger_bands(
    bars: Sequence[Bar], period: int = 20, std_dev: float = 2
) -> BollingerBands:
    """
    Calculate Bollinger Bands.

    middle = SMA(period), upper/lower = middle +/- std_dev * population
    standard deviation of the trailing closes.

    Args:
        bars: Bar sequence
        period: Lookback period
        std_dev: Band width multiplier

    Returns:
        BollingerBands with parallel upper/middle/lower lists
    """
    if period <= 0 or len(bars) < period:
        return BollingerBands()

    closes = _closes(bars)
    mean = _rolling_mean(closes, period)
    half_width = std_dev * _rolling_std(closes, mean, period)
    times = _times(bars)[period - 1 :]

    return BollingerBands(
        upper=_points(times, mean + half_width),
        middle=_points(times, mean),
        lower=_points(times, mean - half_width),
    )


def rsi(bars: Sequence[Bar], period: int = 14) -> list[IndicatorPoint]:
    """
    Calculate Wilder's Relative Strength Index.

    Initial average gain/loss is the simple mean of the first `period`
    deltas (losses as positive magnitudes); afterwards
    avg = (avg * (period - 1) + current) / period.

    Args:
        bars: Bar sequence (needs at least period + 1 bars)
        period: RSI period

    Returns:
        One point per bar from index `period` onward, rounded to 2 places
    """
    if period <= 0 or len(bars) < period + 1:
        return []

    closes = _closes(bars)
    deltas = np.diff(closes)

    gains = 0.0
    losses = 0.0
    for diff in deltas[:period]:
        if diff > 0:
            gains += diff
        else:
            losses -= diff
    avg_gain = gains / period
    avg_loss = losses / period

    values = [_rsi_value(avg_gain, avg_loss)]
    for diff in deltas[period:]:
        gain = diff if diff > 0 else 0.0
        loss = -diff if diff < 0 else 0.0
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        values.append(_rsi_value(avg_gain, avg_loss))

    return _points(_times(bars)[period:], np.array(values), RSI_PLACES)


def macd(
    bars: Sequence[Bar], fast: int = 12, slow: int = 26, signal: int = 9
) -> MACDResult:
    """
    Calculate MACD (Moving Average Convergence/Divergence).

    - macd_line = EMA(fast) - EMA(slow), joined by time
    - signal_line = EMA of the macd values, seeded with the simple mean of
      the first `signal` macd values
    - histogram = macd_line - signal_line, joined by time, colored by sign

    Each stage degrades to empty output when its input is too short.

    Args:
        bars: Bar sequence
        fast: Fast EMA period
        slow: Slow EMA period
        signal: Signal EMA period

    Returns:
        MACDResult with macd_line, signal_line and histogram
    """
    slow_by_time = {p.time: p.value for p in ema(bars, slow)}
    macd_line = [
        IndicatorPoint(
            time=p.time,
            value=quantize(float(p.value) - float(slow_by_time[p.time]), PRICE_PLACES),
        )
        for p in ema(bars, fast)
        if p.time in slow_by_time
    ]

    if signal <= 0 or len(macd_line) < signal:
        return MACDResult(macd_line=macd_line)

    macd_values = np.array([float(p.value) for p in macd_line], dtype=np.float64)
    signal_values = _ema_values(macd_values, signal)
    signal_line = _points([p.time for p in macd_line[signal - 1 :]], signal_values)

    signal_by_time = {p.time: p.value for p in signal_line}
    histogram = []
    for p in macd_line:
        sig = signal_by_time.get(p.time)
        if sig is None:
            continue
        diff = float(p.value) - float(sig)
        histogram.append(
            IndicatorPoint(
                time=p.time,
                value=quantize(diff, PRICE_PLACES),
                color=COLOR_UP if diff >= 0 else COLOR_DOWN,
            )
        )

    return MACDResult(macd_line=macd_line, signal_line=signal_line, histogram=histogram)


# =============================================================================
# IndicatorCalculator class
# =============================================================================

class IndicatorCalculator:
    """Calculator for the chart's standard indicator set.

    Bundles configured periods so a chart can compute every overlay and
    sub-panel series for a bar list in one call. The defaults match the
    viewer's overlays: SMA 9, SMA 20 and EMA 50.
    """

    def __init__(
        self,
        sma_periods: tuple[int, ...] = (9, 20),
        ema_period: int = 50,
        bb_period: int = 20,
        bb_std_dev: float = 2,
        rsi_period: int = 14,
        macd_fast: int = 12,
        macd_slow: int = 26,
        macd_signal: int = 9,
    ):
        self.sma_periods = tuple(sma_periods)
        self.ema_period = ema_period
        self.bb_period = bb_period
        self.bb_std_dev = bb_std_dev
        self.rsi_period = rsi_period
        self.macd_fast = macd_fast
        self.macd_slow = macd_slow
        self.macd_signal = macd_signal

    @property
    def min_bars(self) -> int:
        """Minimum history for every indicator to produce a value."""
        return max(
            *self.sma_periods,
            self.ema_period,
            self.bb_period,
            self.rsi_period + 1,
            max(self.macd_fast, self.macd_slow) + self.macd_signal - 1,
        )

    def calculate_all(self, bars: Sequence[Bar]) -> dict:
        """
        Calculate all indicators for the given bars.

        Args:
            bars: Bar sequence

        Returns:
            Dict of indicator name to point list (or band/MACD result).
            Moving averages are keyed by period, e.g. "sma9", "ema50".
        """
        result: dict = {f"sma{period}": sma(bars, period) for period in self.sma_periods}
        result[f"ema{self.ema_period}"] = ema(bars, self.ema_period)
        result["bollinger"] = bollinger_bands(bars, self.bb_period, self.bb_std_dev)
        result["rsi"] = rsi(bars, self.rsi_period)
        result["macd"] = macd(bars, self.macd_fast, self.macd_slow, self.macd_signal)
        return result

    def calculate_latest(self, bars: Sequence[Bar]) -> dict[str, Decimal] | None:
        """
        Calculate indicator values for the latest bar only.

        Args:
            bars: Bar sequence (needs at least min_bars bars)

        Returns:
            Dict of latest values, or None if not enough data
        """
        if len(bars) < self.min_bars:
            return None

        all_indicators = self.calculate_all(bars)
        bands: BollingerBands = all_indicators["bollinger"]
        macd_result: MACDResult = all_indicators["macd"]

        latest = {
            f"sma{period}": all_indicators[f"sma{period}"][-1].value
            for period in self.sma_periods
        }
        latest[f"ema{self.ema_period}"] = all_indicators[f"ema{self.ema_period}"][-1].value
        latest.update({
            "bb_upper": bands.upper[-1].value,
            "bb_middle": bands.middle[-1].value,
            "bb_lower": bands.lower[-1].value,
            "rsi": all_indicators["rsi"][-1].value,
            "macd": macd_result.macd_line[-1].value,
            "macd_signal": macd_result.signal_line[-1].value,
            "macd_hist": macd_result.histogram[-1].value,
        })
        return latest
