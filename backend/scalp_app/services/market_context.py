"""Cross-market context for narrative analysis.

Builds bars for the primary symbol plus a fixed set of reference symbols
and reduces each to its recent closes and percent change. Symbols are
fetched one at a time; a failure on one symbol is logged and recorded as
empty statistics without affecting the others.
"""

import logging
from dataclasses import dataclass, field

from scalp_app.errors import UpstreamError
from scalp_app.services.bar_service import BarService
from scalp_core.models import SymbolStat
from scalp_core.symbol_stats import RECENT_CLOSES, recent_closes, symbol_stat
from scalp_core.timeframes import Timeframe

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_SYMBOLS = ("BTCUSDT", "ETHUSDT", "BNBUSDT")


@dataclass(slots=True)
class MarketContext:
    """Recent closes and statistics per symbol, in request order."""

    symbols: list[str]
    closes_by_symbol: dict[str, list[float]] = field(default_factory=dict)
    stats: dict[str, SymbolStat] = field(default_factory=dict)


def dedupe_symbols(primary: str, reference: list[str] | tuple[str, ...]) -> list[str]:
    """Primary first, then reference symbols, without duplicates."""
    return list(dict.fromkeys([primary, *reference]))


class MultiSymbolContextBuilder:
    """Collects comparative statistics across a symbol set."""

    def __init__(
        self,
        bar_service: BarService,
        reference_symbols: list[str] | tuple[str, ...] = DEFAULT_REFERENCE_SYMBOLS,
        recent_count: int = RECENT_CLOSES,
    ):
        self.bar_service = bar_service
        self.reference_symbols = tuple(reference_symbols)
        self.recent_count = recent_count

    async def _closes_for(self, symbol: str, timeframe: Timeframe) -> list[float]:
        try:
            series = await self.bar_service.build_bars(symbol, timeframe)
        except UpstreamError as e:
            logger.warning(f"Context: skipping {symbol} {timeframe.value}: {e}")
            return []

        return recent_closes(series.closes(), self.recent_count)

    async def build(self, symbol: str, timeframe: Timeframe) -> MarketContext:
        """
        Build context for a primary symbol.

        Args:
            symbol: Primary trading pair
            timeframe: Timeframe used for every symbol

        Returns:
            MarketContext with an entry for every symbol in the set
        """
        symbols = dedupe_symbols(symbol, self.reference_symbols)
        context = MarketContext(symbols=symbols)

        for sym in symbols:
            closes = await self._closes_for(sym, timeframe)
            context.closes_by_symbol[sym] = closes
            context.stats[sym] = symbol_stat(closes)

        logger.debug(f"Built market context for {len(symbols)} symbols")
        return context
