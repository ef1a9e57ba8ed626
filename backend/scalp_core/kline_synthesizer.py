"""Synthetic 30s bars derived from 1-minute klines.

Used when there are not enough live trades to build real 30s bars. Each
1m candle is split into two halves: the first closes at the midpoint of
the candle's open and close, the second runs from there to the close.
Both halves keep the full candle high/low since no finer data exists to
split the range.
"""

from dataclasses import dataclass
from typing import Iterable

from scalp_core.models import Bar

HALF_MINUTE_MS = 30_000
MAX_BARS = 100
# 1m candles to request so that at least MAX_BARS remain after splitting
SOURCE_CANDLES = 150


@dataclass(frozen=True)
class KlineFallbackSynthesizer:
    """Deterministically splits 1m candles into 30s bars."""

    max_bars: int = MAX_BARS

    @staticmethod
    def split(candle: Bar) -> tuple[Bar, Bar]:
        """Split one 1m candle into two 30s bars."""
        mid = (candle.open + candle.close) / 2
        half_volume = candle.volume / 2

        first = Bar(
            time=candle.time,
            open=candle.open,
            high=candle.high,
            low=candle.low,
            close=mid,
            volume=half_volume,
        )
        second = Bar(
            time=candle.time + HALF_MINUTE_MS,
            open=mid,
            high=candle.high,
            low=candle.low,
            close=candle.close,
            volume=half_volume,
        )
        return first, second

    def synthesize(self, candles: Iterable[Bar]) -> list[Bar]:
        """Split every candle and keep the trailing ``max_bars`` bars."""
        bars: list[Bar] = []
        for candle in candles:
            bars.extend(self.split(candle))
        return bars[-self.max_bars :] if self.max_bars > 0 else []
