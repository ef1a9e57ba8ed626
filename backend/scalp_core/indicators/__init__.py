"""Technical indicators (pure math, no I/O)."""

from scalp_core.indicators.indicators import (
    IndicatorCalculator,
    IndicatorSeries,
    ema,
    rs_to_rsi,
    rsi,
    sma,
)
from scalp_core.indicators.streaming import EmaAccumulator, RsiAccumulator

__all__ = [
    "ema",
    "sma",
    "rsi",
    "rs_to_rsi",
    "IndicatorSeries",
    "IndicatorCalculator",
    "EmaAccumulator",
    "RsiAccumulator",
]
