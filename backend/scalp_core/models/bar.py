"""Hot path market data models.

These models use:
- @dataclass(slots=True) for minimal memory footprint
- float for all prices and quantities
- integer millisecond timestamps, as delivered by the exchange
"""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(slots=True, frozen=True)
class Trade:
    """A single aggregated trade."""

    timestamp: int  # Unix time in milliseconds
    price: float
    quantity: float


@dataclass(slots=True, frozen=True)
class Bar:
    """OHLCV record for one fixed-width time bucket."""

    time: int  # Bucket start, Unix time in milliseconds
    open: float
    high: float
    low: float
    close: float
    volume: float

    def merge(self, other: "Bar") -> "Bar":
        """Fold a newer observation of the same bucket into this bar.

        Open is kept from this bar; close and volume are taken from the
        newer observation, which already covers the whole bucket so far.
        """
        return Bar(
            time=self.time,
            open=self.open,
            high=max(self.high, other.high),
            low=min(self.low, other.low),
            close=other.close,
            volume=other.volume,
        )

    def to_dict(self) -> dict:
        return {
            "time": self.time,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


class BarMode(str, Enum):
    """How a bar series was produced."""

    REAL = "real"  # Aggregated from live trades
    SYNTHETIC = "synthetic"  # Derived from 1m klines
    KLINES = "klines"  # Upstream candles at the requested interval


# Display labels returned to clients
MODE_LABELS = {
    BarMode.REAL: "gerçək 30s (aggTrades)",
    BarMode.SYNTHETIC: "sintetik 30s (1m-dən törədilmiş)",
    BarMode.KLINES: "klines",
}


@dataclass(slots=True)
class BarSeries:
    """Result of bar building: the bars plus where they came from."""

    bars: list[Bar]
    mode: BarMode
    source: str
    interval: str | None = None

    @property
    def label(self) -> str:
        if self.mode is BarMode.KLINES and self.interval:
            return f"{self.interval} klines"
        return MODE_LABELS[self.mode]

    def closes(self) -> list[float]:
        return [b.close for b in self.bars]


@dataclass(slots=True)
class BarBuffer:
    """Caller-owned series of recent bars (e.g. one per chart session).

    New bars append; an observation of the still-open last bucket is merged
    into the last bar; observations older than the last bar are dropped.
    """

    max_size: int = 200
    bars: list[Bar] = field(default_factory=list)

    def add(self, bar: Bar) -> None:
        """Add a bar, applying the merge-or-replace-last rule."""
        if self.bars and bar.time <= self.bars[-1].time:
            if bar.time == self.bars[-1].time:
                self.bars[-1] = self.bars[-1].merge(bar)
            return

        self.bars.append(bar)
        if len(self.bars) > self.max_size:
            self.bars = self.bars[-self.max_size :]

    def replace(self, bars: list[Bar]) -> None:
        """Replace the whole series (e.g. after a full recomputation)."""
        self.bars = list(bars[-self.max_size :])

    def get_closes(self) -> list[float]:
        """Get list of close prices."""
        return [b.close for b in self.bars]

    def get_volumes(self) -> list[float]:
        """Get list of volumes."""
        return [b.volume for b in self.bars]

    @property
    def last(self) -> Bar | None:
        return self.bars[-1] if self.bars else None

    def __len__(self) -> int:
        return len(self.bars)
