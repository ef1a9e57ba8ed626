"""Narrative market analysis built on the multi-symbol context.

The service computes the statistics and prompt; the text itself comes
from an external chat completion API.
"""

import logging
from dataclasses import dataclass

from scalp_app.clients import ChatCompletionClient
from scalp_app.services.market_context import MarketContext, MultiSymbolContextBuilder
from scalp_core.models import SymbolStat
from scalp_core.timeframes import Timeframe

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "Sən Azərbaycan dilində cavab verən, qısa skalp treydi üzrə analitiksən."


def build_prompt(symbol: str, timeframe: Timeframe, context: MarketContext) -> str:
    """Render the user prompt listing each symbol's recent closes."""
    lines = "\n".join(
        f"{sym}: {', '.join(str(c) for c in closes)}"
        for sym, closes in context.closes_by_symbol.items()
    )
    return (
        f"Sən qısa müddətli kripto treyd analitiksən. Zaman çərçivəsi: {timeframe.value}. "
        f"Seçilmiş simvol: {symbol}.\n"
        "Aşağıda bir neçə əsas simvol üçün son 60 bağlanış qiyməti verilir (koma ilə ayrılıb):\n"
        f"{lines}\n"
        "Bu simvolları birlikdə nəzərə alaraq ümumi trendi dəyərləndir, seçilmiş simvol üçün "
        "qısa skalp strategiyası çıxart: giriş qiyməti, qazanc hədəfi (~+0.5%), "
        "zərər dayandır (~-0.3%), və tərəf (long/short). "
        "Cavabı Azərbaycan dilində, qısa və actionable bəndlərlə ver."
    )


@dataclass(slots=True)
class AnalysisResult:
    analysis: str
    symbols: list[str]
    stats: dict[str, SymbolStat]


class AnalysisService:
    """Builds market context and asks the text API for a scalp plan."""

    def __init__(
        self,
        context_builder: MultiSymbolContextBuilder,
        chat_client: ChatCompletionClient,
    ):
        self.context_builder = context_builder
        self.chat_client = chat_client

    async def analyze(self, symbol: str, timeframe: Timeframe) -> AnalysisResult:
        """
        Produce the narrative analysis for a symbol.

        Raises:
            AnalysisUnavailableError: if the text API call fails
        """
        context = await self.context_builder.build(symbol, timeframe)
        prompt = build_prompt(symbol, timeframe, context)

        logger.info(f"Requesting analysis for {symbol} {timeframe.value}")
        analysis = await self.chat_client.complete(SYSTEM_PROMPT, prompt)

        return AnalysisResult(
            analysis=analysis,
            symbols=context.symbols,
            stats=context.stats,
        )
