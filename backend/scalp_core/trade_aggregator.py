"""Trade-to-bar aggregator for sub-minute timeframes.

Groups aggregated trades into fixed-width OHLCV buckets. The exchange has
no native 30s klines, so these are built locally from aggTrades.

Aggregation rules:
- bucket = floor(timestamp / width) * width
- first trade in a bucket sets open/high/low/close, later trades extend
  high/low, overwrite close and add to volume
- trades are processed in timestamp order (stable for equal timestamps)
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from scalp_core.models import Bar, Trade

logger = logging.getLogger(__name__)

BUCKET_WIDTH_MS = 30_000
MIN_BARS = 10
MAX_BARS = 100


@dataclass(slots=True)
class _BucketState:
    """Mutable OHLCV accumulator for one open bucket."""

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    def add(self, trade: Trade) -> None:
        self.high = max(self.high, trade.price)
        self.low = min(self.low, trade.price)
        self.close = trade.price
        self.volume += trade.quantity

    def to_bar(self) -> Bar:
        return Bar(
            time=self.time,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume,
        )


@dataclass
class TradeBucketAggregator:
    """Aggregates trades into fixed-width bars.

    Usage:
        aggregator = TradeBucketAggregator()
        bars = aggregator.build(trades)
        if bars is None:
            # not enough real data, use the kline fallback
            ...
    """

    width_ms: int = BUCKET_WIDTH_MS
    min_bars: int = MIN_BARS
    max_bars: int = MAX_BARS

    def __post_init__(self) -> None:
        if self.width_ms <= 0:
            raise ValueError(f"width_ms must be positive, got {self.width_ms}")

    def bucket_start(self, timestamp: int) -> int:
        """Get the bucket start (ms) for a trade timestamp."""
        return (timestamp // self.width_ms) * self.width_ms

    def aggregate(self, trades: Iterable[Trade]) -> list[Bar]:
        """Aggregate trades into bars, ascending by time.

        Args:
            trades: Trades in any order

        Returns:
            All bars (uncapped), sorted by bucket start
        """
        buckets: dict[int, _BucketState] = {}

        for trade in sorted(trades, key=lambda t: t.timestamp):
            bucket = self.bucket_start(trade.timestamp)
            state = buckets.get(bucket)
            if state is None:
                buckets[bucket] = _BucketState(
                    time=bucket,
                    open=trade.price,
                    high=trade.price,
                    low=trade.price,
                    close=trade.price,
                    volume=trade.quantity,
                )
            else:
                state.add(trade)

        return [buckets[t].to_bar() for t in sorted(buckets)]

    def build(self, trades: Iterable[Trade]) -> list[Bar] | None:
        """Build the most recent bars, or report insufficient data.

        Args:
            trades: Trades in any order

        Returns:
            Up to ``max_bars`` most recent bars, or None if fewer than
            ``min_bars`` buckets could be formed
        """
        bars = self.aggregate(trades)
        if len(bars) > self.max_bars:
            bars = bars[-self.max_bars :]

        if len(bars) < self.min_bars:
            logger.debug(
                f"Insufficient real bars: got {len(bars)}, need {self.min_bars}"
            )
            return None

        return bars
