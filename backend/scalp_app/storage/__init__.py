"""Data storage layer."""

from scalp_app.storage.ttl_cache import (
    CacheEntry,
    TTLCache,
    bars_key,
    get_cache,
    klines_key,
    symbols_key,
)

__all__ = [
    "CacheEntry",
    "TTLCache",
    "bars_key",
    "get_cache",
    "klines_key",
    "symbols_key",
]
