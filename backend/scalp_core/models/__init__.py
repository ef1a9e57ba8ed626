"""Data models."""

from scalp_core.models.bar import (
    Bar,
    BarBuffer,
    BarMode,
    BarSeries,
    MODE_LABELS,
    Trade,
)
from scalp_core.models.signal import (
    RISK_REWARD_LABEL,
    Side,
    Signal,
    SignalResult,
    Suggestion,
    SymbolStat,
    Trend,
)
from scalp_core.models.converters import (
    aggtrade_to_trade,
    aggtrades_to_trades,
    kline_row_to_bar,
    kline_rows_to_bars,
)

__all__ = [
    # Market data
    "Bar",
    "BarBuffer",
    "BarMode",
    "BarSeries",
    "MODE_LABELS",
    "Trade",
    # Signals
    "RISK_REWARD_LABEL",
    "Side",
    "Signal",
    "SignalResult",
    "Suggestion",
    "SymbolStat",
    "Trend",
    # Converters
    "aggtrade_to_trade",
    "aggtrades_to_trades",
    "kline_row_to_bar",
    "kline_rows_to_bars",
]
