"""Tests for the trade-to-bar aggregator."""

import pytest

from scalp_core.models import Trade
from scalp_core.trade_aggregator import BUCKET_WIDTH_MS, TradeBucketAggregator

BASE_TIME = 1_700_000_005_000  # 25s into a bucket


def make_trade(timestamp: int, price: float = 100.0, quantity: float = 1.0) -> Trade:
    """Helper to create a trade."""
    return Trade(timestamp=timestamp, price=price, quantity=quantity)


def trades_for_buckets(count: int, per_bucket: int = 3) -> list[Trade]:
    """One small cluster of trades in each of ``count`` consecutive buckets."""
    trades = []
    for b in range(count):
        for j in range(per_bucket):
            trades.append(
                make_trade(BASE_TIME + b * BUCKET_WIDTH_MS + j * 1000, 100.0 + b + j * 0.1)
            )
    return trades


class TestAggregate:
    """Tests for TradeBucketAggregator.aggregate."""

    def test_single_bucket_ohlcv(self):
        aggregator = TradeBucketAggregator()
        start = 1_700_000_010_000 - (1_700_000_010_000 % BUCKET_WIDTH_MS)
        trades = [
            make_trade(start + 1000, 100.0, 1.0),
            make_trade(start + 5000, 105.0, 2.0),
            make_trade(start + 20000, 98.0, 1.0),
            make_trade(start + 29999, 101.0, 0.5),
        ]

        bars = aggregator.aggregate(trades)

        assert len(bars) == 1
        bar = bars[0]
        assert bar.time == start
        assert bar.open == 100.0  # First trade's price
        assert bar.high == 105.0
        assert bar.low == 98.0
        assert bar.close == 101.0  # Last trade's price
        assert bar.volume == pytest.approx(4.5)

    def test_bucket_boundary(self):
        """A trade exactly on the boundary opens the next bucket."""
        aggregator = TradeBucketAggregator()
        trades = [make_trade(29_999, 1.0), make_trade(30_000, 2.0)]

        bars = aggregator.aggregate(trades)

        assert [b.time for b in bars] == [0, 30_000]

    def test_times_strictly_increasing_and_aligned(self):
        trades = trades_for_buckets(25)
        shuffled = trades[::2] + trades[1::2][::-1]

        bars = TradeBucketAggregator().aggregate(shuffled)

        times = [b.time for b in bars]
        assert len(bars) == 25
        assert all(t % BUCKET_WIDTH_MS == 0 for t in times)
        assert all(a < b for a, b in zip(times, times[1:]))

    def test_unordered_trades_use_latest_as_close(self):
        aggregator = TradeBucketAggregator()
        trades = [
            make_trade(20_000, 103.0),
            make_trade(1_000, 100.0),
            make_trade(10_000, 99.0),
        ]

        bar = aggregator.aggregate(trades)[0]

        assert bar.open == 100.0
        assert bar.close == 103.0
        assert bar.low == 99.0

    def test_equal_timestamps_keep_arrival_order(self):
        trades = [make_trade(5_000, 100.0), make_trade(5_000, 101.0)]
        bar = TradeBucketAggregator().aggregate(trades)[0]

        assert bar.open == 100.0
        assert bar.close == 101.0

    def test_empty(self):
        assert TradeBucketAggregator().aggregate([]) == []

    def test_invalid_width(self):
        with pytest.raises(ValueError):
            TradeBucketAggregator(width_ms=0)


class TestBuild:
    """Tests for TradeBucketAggregator.build (insufficient / capping policy)."""

    def test_insufficient_returns_none(self):
        assert TradeBucketAggregator().build(trades_for_buckets(9)) is None

    def test_no_trades_is_insufficient(self):
        assert TradeBucketAggregator().build([]) is None

    def test_minimum_bars(self):
        bars = TradeBucketAggregator().build(trades_for_buckets(10))
        assert bars is not None
        assert len(bars) == 10

    def test_caps_to_most_recent(self):
        trades = trades_for_buckets(150, per_bucket=1)

        bars = TradeBucketAggregator().build(trades)

        assert len(bars) == 100
        all_bars = TradeBucketAggregator().aggregate(trades)
        assert bars[0] == all_bars[50]
        assert bars[-1] == all_bars[-1]

    def test_custom_thresholds(self):
        aggregator = TradeBucketAggregator(min_bars=2, max_bars=3)
        bars = aggregator.build(trades_for_buckets(5))
        assert len(bars) == 3
