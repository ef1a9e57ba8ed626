"""Technical indicators for signal classification.

All functions take a float series and return a list of the same length,
with ``None`` at positions where the indicator is not yet defined
(insufficient warm-up history).
"""

from typing import Sequence

import numpy as np

from scalp_core.models import Bar

IndicatorSeries = list[float | None]


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")


def _to_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def sma(values: Sequence[float], period: int) -> IndicatorSeries:
    """
    Calculate Simple Moving Average.

    Uses a running sum over a sliding window.

    Args:
        values: Sequence of values (prices or volumes)
        period: SMA period

    Returns:
        List of SMA values, None before index ``period - 1``
    """
    _check_period(period)
    n = len(values)
    out: IndicatorSeries = [None] * n
    if n < period:
        return out

    csum = np.cumsum(_to_array(values))
    out[period - 1] = float(csum[period - 1] / period)
    for i in range(period, n):
        out[i] = float((csum[i] - csum[i - period]) / period)

    return out


def ema(values: Sequence[float], period: int) -> IndicatorSeries:
    """
    Calculate Exponential Moving Average.

    The value at ``period - 1`` is seeded with the simple average of the
    first ``period`` values; afterwards
    ``ema[i] = value[i] * k + ema[i-1] * (1 - k)`` with ``k = 2 / (period + 1)``.

    Args:
        values: Sequence of price values
        period: EMA period

    Returns:
        List of EMA values (same length as input, None before warm-up)
    """
    _check_period(period)
    n = len(values)
    out: IndicatorSeries = [None] * n
    if n < period:
        return out

    arr = _to_array(values)
    k = 2.0 / (period + 1)

    prev = float(np.mean(arr[:period]))
    out[period - 1] = prev
    for i in range(period, n):
        prev = float(arr[i]) * k + prev * (1 - k)
        out[i] = prev

    return out


def rs_to_rsi(avg_gain: float, avg_loss: float) -> float:
    """Convert average gain/loss to RSI.

    A zero average loss maps to ``rs = 100`` instead of dividing by zero,
    so the result is always finite and within [0, 100].
    """
    rs = 100.0 if avg_loss == 0 else avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def rsi(values: Sequence[float], period: int = 14) -> IndicatorSeries:
    """
    Calculate Relative Strength Index with Wilder smoothing.

    Average gain/loss are seeded with the mean gain/loss over the first
    ``period`` differences; the first RSI value is at index ``period``.

    Args:
        values: Sequence of price values
        period: RSI period

    Returns:
        List of RSI values in [0, 100]; all None if fewer than
        ``period + 1`` values are given
    """
    _check_period(period)
    n = len(values)
    out: IndicatorSeries = [None] * n
    if n < period + 1:
        return out

    deltas = np.diff(_to_array(values))
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(gains[:period].sum() / period)
    avg_loss = float(losses[:period].sum() / period)
    out[period] = rs_to_rsi(avg_gain, avg_loss)

    for i in range(period + 1, n):
        avg_gain = (avg_gain * (period - 1) + float(gains[i - 1])) / period
        avg_loss = (avg_loss * (period - 1) + float(losses[i - 1])) / period
        out[i] = rs_to_rsi(avg_gain, avg_loss)

    return out


# =============================================================================
# IndicatorCalculator class
# =============================================================================

class IndicatorCalculator:
    """Calculator for all indicators needed by the signal classifier."""

    def __init__(
        self,
        fast_period: int = 7,
        mid_period: int = 25,
        slow_period: int = 99,
        rsi_period: int = 14,
        volume_period: int = 20,
    ):
        self.fast_period = fast_period
        self.mid_period = mid_period
        self.slow_period = slow_period
        self.rsi_period = rsi_period
        self.volume_period = volume_period

    def calculate_all(self, bars: Sequence[Bar]) -> dict[str, IndicatorSeries]:
        """
        Calculate all indicators for the given bars.

        Args:
            bars: Bars in ascending time order

        Returns:
            Dict of indicator series, each aligned with ``bars``
        """
        closes = [b.close for b in bars]
        volumes = [b.volume for b in bars]

        return {
            "ema_fast": ema(closes, self.fast_period),
            "ema_mid": ema(closes, self.mid_period),
            "ema_slow": ema(closes, self.slow_period),
            "rsi": rsi(closes, self.rsi_period),
            "volume_sma": sma(volumes, self.volume_period),
        }
