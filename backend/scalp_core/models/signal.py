"""Signal classification result models."""

from dataclasses import dataclass
from enum import Enum


class Trend(str, Enum):
    """EMA stack alignment at the last bar."""

    ONLY_LONG = "only-long"
    ONLY_SHORT = "only-short"
    MIXED = "mixed"


class Signal(str, Enum):
    """Signal label shown to the trader."""

    NEUTRAL = "Nötr"
    LONG = "Long düşün"
    SHORT = "Short düşün"


class Side(str, Enum):
    """Trade direction of a suggestion."""

    LONG = "long"
    SHORT = "short"


# Fixed label, independent of the configured TP/SL percentages
RISK_REWARD_LABEL = "1:1.5"


@dataclass(slots=True, frozen=True)
class Suggestion:
    """Entry, target and stop for a suggested scalp."""

    side: Side
    entry: float
    take_profit: float
    stop_loss: float
    risk_reward: str = RISK_REWARD_LABEL

    def to_dict(self) -> dict:
        return {
            "side": self.side.value,
            "entry": self.entry,
            "take_profit": self.take_profit,
            "stop_loss": self.stop_loss,
            "risk_reward": self.risk_reward,
        }


@dataclass(slots=True, frozen=True)
class SignalResult:
    """Outcome of classifying the current bar."""

    trend: Trend
    signal: Signal
    suggestion: Suggestion | None = None


@dataclass(slots=True, frozen=True)
class SymbolStat:
    """Last close and percent change over the recent window of one symbol."""

    last_close: float | None
    change_pct: float | None

    def to_dict(self) -> dict:
        return {"last_close": self.last_close, "change_pct": self.change_pct}
