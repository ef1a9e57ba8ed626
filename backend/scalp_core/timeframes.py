"""Supported chart timeframes and their upstream kline intervals."""

from enum import Enum


class Timeframe(str, Enum):
    """Timeframe codes accepted from clients."""

    S30 = "30s"
    M1 = "1m"
    M3 = "3m"
    M5 = "5m"
    H1 = "1h"
    H2 = "2h"
    H3 = "3h"
    H5 = "5h"
    H10 = "10h"
    D1 = "1d"
    D2 = "2d"
    D3 = "3d"


# Timeframes without a native Binance interval map to the nearest one
TIMEFRAME_INTERVALS: dict[Timeframe, str] = {
    Timeframe.M1: "1m",
    Timeframe.M3: "3m",
    Timeframe.M5: "5m",
    Timeframe.H1: "1h",
    Timeframe.H2: "2h",
    Timeframe.H3: "3h",
    Timeframe.H5: "4h",
    Timeframe.H10: "8h",
    Timeframe.D1: "1d",
    Timeframe.D2: "3d",
    Timeframe.D3: "3d",
}

# Candles requested / kept for kline-backed timeframes
KLINE_FETCH_LIMIT = 200
KLINE_KEEP_BARS = 120


def interval_for(timeframe: Timeframe) -> str:
    """Get the upstream interval for a kline-backed timeframe."""
    if timeframe is Timeframe.S30:
        raise ValueError("30s bars are built from trades, not fetched as klines")
    return TIMEFRAME_INTERVALS[timeframe]
