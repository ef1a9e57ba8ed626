"""Service wiring for the API.

Clients and services are created lazily once per process and shared by
all requests; the TTL cache is the only mutable state among them.
"""

import logging
from functools import lru_cache

from scalp_app.clients import BinanceRestClient, ChatCompletionClient
from scalp_app.config import get_settings
from scalp_app.storage import TTLCache, get_cache
from scalp_app.services import (
    AnalysisService,
    BarService,
    MultiSymbolContextBuilder,
    ScalpService,
)

logger = logging.getLogger(__name__)


@lru_cache
def get_binance_client() -> BinanceRestClient:
    settings = get_settings()
    return BinanceRestClient(
        base_url=settings.binance_base_url,
        timeout=settings.market_data_timeout,
    )


@lru_cache
def get_chat_client() -> ChatCompletionClient:
    settings = get_settings()
    if not settings.analysis_api_key:
        logger.warning("ANALYSIS_API_KEY is not set; analysis requests will fail")
    return ChatCompletionClient(
        url=settings.analysis_api_url,
        api_key=settings.analysis_api_key,
        model=settings.analysis_model,
        timeout=settings.analysis_timeout,
        temperature=settings.analysis_temperature,
        max_tokens=settings.analysis_max_tokens,
    )


def get_ttl_cache() -> TTLCache:
    return get_cache()


@lru_cache
def get_bar_service() -> BarService:
    settings = get_settings()
    return BarService(
        client=get_binance_client(),
        cache=get_ttl_cache(),
        bars_ttl_ms=settings.bars_cache_ttl_ms,
        klines_ttl_ms=settings.klines_cache_ttl_ms,
        symbols_ttl_ms=settings.symbols_cache_ttl_ms,
    )


@lru_cache
def get_scalp_service() -> ScalpService:
    return ScalpService(get_bar_service())


@lru_cache
def get_analysis_service() -> AnalysisService:
    settings = get_settings()
    builder = MultiSymbolContextBuilder(
        get_bar_service(),
        reference_symbols=settings.reference_symbols,
    )
    return AnalysisService(builder, get_chat_client())


async def close_clients() -> None:
    """Close upstream HTTP clients that were created."""
    if get_binance_client.cache_info().currsize:
        await get_binance_client().close()
    if get_chat_client.cache_info().currsize:
        await get_chat_client().close()
