"""Tests for synthetic 30s bars derived from 1m klines."""

import pytest

from scalp_core.kline_synthesizer import HALF_MINUTE_MS, KlineFallbackSynthesizer
from scalp_core.models import Bar


def make_candle(
    time: int = 1_700_000_040_000,
    open_price: float = 100.0,
    high: float = 103.0,
    low: float = 99.0,
    close: float = 102.0,
    volume: float = 8.0,
) -> Bar:
    """Helper to create a 1m candle."""
    return Bar(time=time, open=open_price, high=high, low=low, close=close, volume=volume)


class TestSplit:
    def test_two_halves(self):
        candle = make_candle()
        first, second = KlineFallbackSynthesizer.split(candle)

        assert first.time == candle.time
        assert second.time == candle.time + HALF_MINUTE_MS

        assert first.open == candle.open
        assert first.close == pytest.approx(101.0)  # (100 + 102) / 2
        assert second.open == first.close
        assert second.close == candle.close

    def test_volume_conserved(self):
        candle = make_candle(volume=7.3)
        first, second = KlineFallbackSynthesizer.split(candle)
        assert first.volume + second.volume == pytest.approx(candle.volume)

    def test_full_range_kept(self):
        """Both halves inherit the whole candle's high/low."""
        candle = make_candle()
        for half in KlineFallbackSynthesizer.split(candle):
            assert half.high == candle.high
            assert half.low == candle.low

    def test_deterministic(self):
        candle = make_candle()
        assert KlineFallbackSynthesizer.split(candle) == KlineFallbackSynthesizer.split(candle)


class TestSynthesize:
    def _candles(self, n: int) -> list[Bar]:
        return [
            make_candle(time=i * 60_000, open_price=100.0 + i, close=100.5 + i, high=102.0 + i, low=99.0 + i)
            for i in range(n)
        ]

    def test_two_bars_per_candle(self):
        bars = KlineFallbackSynthesizer().synthesize(self._candles(20))

        assert len(bars) == 40
        times = [b.time for b in bars]
        assert all(a < b for a, b in zip(times, times[1:]))
        assert all(t % HALF_MINUTE_MS == 0 for t in times)

    def test_caps_to_last_100(self):
        candles = self._candles(150)
        bars = KlineFallbackSynthesizer().synthesize(candles)

        assert len(bars) == 100
        assert bars[0].time == candles[100].time
        assert bars[-1].time == candles[-1].time + HALF_MINUTE_MS
        assert bars[-1].close == candles[-1].close

    def test_empty(self):
        assert KlineFallbackSynthesizer().synthesize([]) == []
