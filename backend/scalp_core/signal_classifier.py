"""Scalp signal classifier.

Evaluates the most recent bar only; no state is kept between calls.

Trend (EMA stack at the last bar):
- only-long:  EMA7 > EMA25 > EMA99
- only-short: EMA7 < EMA25 < EMA99
- mixed:      anything else, including undefined EMAs

Entry rules (volume must exceed its 20-bar SMA):
- LONG:  RSI in [40, 65] and close crosses above EMA7; not in only-short
- SHORT: RSI in [35, 60] and close crosses below EMA7; not in only-long,
         and only checked when no long fired

TP/SL are fixed percentages of the entry (long +0.5% / -0.3%), rounded
relative to the entry so cheap symbols keep distinct levels.

This module is pure business logic with no I/O dependencies.
"""

import logging
import math
from typing import Sequence

from pydantic import BaseModel

from scalp_core.indicators import IndicatorCalculator, IndicatorSeries
from scalp_core.models import (
    Bar,
    RISK_REWARD_LABEL,
    Side,
    Signal,
    SignalResult,
    Suggestion,
    Trend,
)

logger = logging.getLogger(__name__)

# Decimals kept for prices of 1 and above; cheaper prices keep more so
# that targets stay distinct from the entry
PRICE_DECIMALS = 6


def round_price(value: float, reference: float) -> float:
    """Round a price derived from ``reference`` without collapsing it.

    Prices >= 1 are rounded to PRICE_DECIMALS places. Below 1, one more
    decimal is kept per order of magnitude of ``reference``, so a 1e-5 entry
    still has six significant digits.
    """
    decimals = PRICE_DECIMALS
    if 0 < reference < 1:
        decimals -= math.floor(math.log10(reference))
    return round(value, decimals)


class ClassifierConfig(BaseModel):
    """Periods, RSI bands and TP/SL factors for the classifier."""

    fast_period: int = 7
    mid_period: int = 25
    slow_period: int = 99
    rsi_period: int = 14
    volume_period: int = 20

    long_rsi_min: float = 40.0
    long_rsi_max: float = 65.0
    short_rsi_min: float = 35.0
    short_rsi_max: float = 60.0

    long_tp_factor: float = 1.005
    long_sl_factor: float = 0.997
    short_tp_factor: float = 0.995
    short_sl_factor: float = 1.003


def _at(series: IndicatorSeries, index: int) -> float | None:
    if index < 0 or index >= len(series):
        return None
    return series[index]


class SignalClassifier:
    """Turns bars and their indicators into a trend, signal and suggestion."""

    def __init__(self, config: ClassifierConfig | None = None):
        self.config = config or ClassifierConfig()
        self.calculator = IndicatorCalculator(
            fast_period=self.config.fast_period,
            mid_period=self.config.mid_period,
            slow_period=self.config.slow_period,
            rsi_period=self.config.rsi_period,
            volume_period=self.config.volume_period,
        )

    @staticmethod
    def classify_trend(fast: float | None, mid: float | None, slow: float | None) -> Trend:
        """Classify the EMA stack at one index."""
        if fast is None or mid is None or slow is None:
            return Trend.MIXED
        if fast > mid > slow:
            return Trend.ONLY_LONG
        if fast < mid < slow:
            return Trend.ONLY_SHORT
        return Trend.MIXED

    @staticmethod
    def _crossed_above(closes: Sequence[float], line: IndicatorSeries, i: int) -> bool:
        now, prev = _at(line, i), _at(line, i - 1)
        if now is None or prev is None:
            return False
        return closes[i] > now and closes[i - 1] <= prev

    @staticmethod
    def _crossed_below(closes: Sequence[float], line: IndicatorSeries, i: int) -> bool:
        now, prev = _at(line, i), _at(line, i - 1)
        if now is None or prev is None:
            return False
        return closes[i] < now and closes[i - 1] >= prev

    def _suggest(self, side: Side, entry: float) -> Suggestion:
        cfg = self.config
        if side is Side.LONG:
            tp, sl = entry * cfg.long_tp_factor, entry * cfg.long_sl_factor
        else:
            tp, sl = entry * cfg.short_tp_factor, entry * cfg.short_sl_factor

        return Suggestion(
            side=side,
            entry=entry,
            take_profit=round_price(tp, entry),
            stop_loss=round_price(sl, entry),
            risk_reward=RISK_REWARD_LABEL,
        )

    def classify(self, bars: Sequence[Bar]) -> SignalResult:
        """
        Classify the last bar of a series.

        Args:
            bars: Bars in ascending time order

        Returns:
            SignalResult with trend, signal and optional suggestion
        """
        if not bars:
            return SignalResult(trend=Trend.MIXED, signal=Signal.NEUTRAL)

        cfg = self.config
        ind = self.calculator.calculate_all(bars)
        closes = [b.close for b in bars]
        i = len(bars) - 1

        trend = self.classify_trend(
            ind["ema_fast"][i], ind["ema_mid"][i], ind["ema_slow"][i]
        )

        vol_sma = ind["volume_sma"][i]
        volume_ok = vol_sma is not None and bars[i].volume > vol_sma
        last_rsi = ind["rsi"][i]

        if (
            trend is not Trend.ONLY_SHORT
            and last_rsi is not None
            and cfg.long_rsi_min <= last_rsi <= cfg.long_rsi_max
            and volume_ok
            and self._crossed_above(closes, ind["ema_fast"], i)
        ):
            logger.debug(f"Long signal at {bars[i].time}: rsi={last_rsi:.2f}")
            return SignalResult(
                trend=trend,
                signal=Signal.LONG,
                suggestion=self._suggest(Side.LONG, closes[i]),
            )

        if (
            trend is not Trend.ONLY_LONG
            and last_rsi is not None
            and cfg.short_rsi_min <= last_rsi <= cfg.short_rsi_max
            and volume_ok
            and self._crossed_below(closes, ind["ema_fast"], i)
        ):
            logger.debug(f"Short signal at {bars[i].time}: rsi={last_rsi:.2f}")
            return SignalResult(
                trend=trend,
                signal=Signal.SHORT,
                suggestion=self._suggest(Side.SHORT, closes[i]),
            )

        return SignalResult(trend=trend, signal=Signal.NEUTRAL)
