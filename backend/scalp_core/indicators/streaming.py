"""Incremental indicator state machines.

Each accumulator consumes one value per bar and emits the same value the
batch function in ``indicators.py`` produces at that index, or ``None``
during warm-up. Useful when bars arrive one at a time (e.g. a chart
session fed from a ``BarBuffer``) and recomputing the whole series on
every tick is wasteful.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from scalp_core.indicators.indicators import rs_to_rsi


@dataclass(slots=True)
class EmaAccumulator:
    """Streaming EMA seeded with the simple average of the first values."""

    period: int
    value: float | None = None
    _seed: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.period < 1:
            raise ValueError(f"period must be >= 1, got {self.period}")

    @property
    def k(self) -> float:
        return 2.0 / (self.period + 1)

    @property
    def is_ready(self) -> bool:
        return self.value is not None

    def update(self, x: float) -> float | None:
        """Feed the next value, returning the EMA at this position."""
        if self.value is None:
            self._seed.append(x)
            if len(self._seed) == self.period:
                self.value = sum(self._seed) / self.period
                self._seed.clear()
            return self.value

        self.value = x * self.k + self.value * (1 - self.k)
        return self.value


@dataclass(slots=True)
class RsiAccumulator:
    """Streaming RSI holding Wilder-smoothed average gain and loss."""

    period: int = 14
    avg_gain: float = 0.0
    avg_loss: float = 0.0
    _prev: float | None = None
    _count: int = 0  # differences seen so far
    _gain_sum: float = 0.0
    _loss_sum: float = 0.0

    def __post_init__(self) -> None:
        if self.period < 1:
            raise ValueError(f"period must be >= 1, got {self.period}")

    @property
    def is_ready(self) -> bool:
        return self._count >= self.period

    def update(self, x: float) -> float | None:
        """Feed the next value, returning the RSI at this position."""
        prev, self._prev = self._prev, x
        if prev is None:
            return None

        change = x - prev
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0
        self._count += 1

        if self._count < self.period:
            self._gain_sum += gain
            self._loss_sum += loss
            return None

        if self._count == self.period:
            self.avg_gain = (self._gain_sum + gain) / self.period
            self.avg_loss = (self._loss_sum + loss) / self.period
        else:
            self.avg_gain = (self.avg_gain * (self.period - 1) + gain) / self.period
            self.avg_loss = (self.avg_loss * (self.period - 1) + loss) / self.period

        return rs_to_rsi(self.avg_gain, self.avg_loss)
