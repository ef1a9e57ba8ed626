"""Upstream API clients."""

from scalp_app.clients.binance_rest import BinanceRestClient
from scalp_app.clients.chat_completion import ChatCompletionClient, NO_ANALYSIS_TEXT

__all__ = [
    "BinanceRestClient",
    "ChatCompletionClient",
    "NO_ANALYSIS_TEXT",
]
