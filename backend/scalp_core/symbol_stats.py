"""Per-symbol summary statistics for cross-market context."""

from typing import Sequence

from scalp_core.models import SymbolStat

RECENT_CLOSES = 60


def recent_closes(closes: Sequence[float], count: int = RECENT_CLOSES) -> list[float]:
    """Return the trailing ``count`` closes."""
    if count <= 0:
        return []
    return list(closes[-count:])


def symbol_stat(closes: Sequence[float]) -> SymbolStat:
    """Summarize a close series as last close and percent change.

    An empty series has no statistics; a zero first close yields a
    change of 0 instead of dividing by zero.
    """
    if not closes:
        return SymbolStat(last_close=None, change_pct=None)

    first = closes[0]
    last = closes[-1]
    change_pct = (last - first) / first * 100 if first else 0.0
    return SymbolStat(last_close=last, change_pct=change_pct)
