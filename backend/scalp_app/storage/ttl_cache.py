"""In-process TTL cache fronting upstream fetches.

Entries expire a fixed time after insertion. There is no background
sweeper: an expired entry is evicted by the first ``get`` that sees it.
Keys are symbol/interval driven, so the key space stays small.

Key prefixes:
- klines:{symbol}:{interval}:{limit} -> raw kline tuples
- bars:{symbol}:{timeframe}          -> BarSeries
- symbols:{quote}                    -> list of tradable symbols
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

KEY_PREFIX_KLINES = "klines:"
KEY_PREFIX_BARS = "bars:"
KEY_PREFIX_SYMBOLS = "symbols:"

_MISSING = object()


def klines_key(symbol: str, interval: str, limit: int) -> str:
    return f"{KEY_PREFIX_KLINES}{symbol}:{interval}:{limit}"


def bars_key(symbol: str, timeframe: str) -> str:
    return f"{KEY_PREFIX_BARS}{symbol}:{timeframe}"


def symbols_key(quote_asset: str) -> str:
    return f"{KEY_PREFIX_SYMBOLS}{quote_asset}"


@dataclass(slots=True)
class CacheEntry:
    value: Any
    expires_at: float  # clock time in milliseconds


class TTLCache:
    """Thread-safe expiring key/value store.

    Args:
        clock: Returns the current time in seconds (monotonic by default)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def _lookup(self, key: str) -> Any:
        """Return the live value for key or _MISSING, evicting if expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return _MISSING
            if self._now_ms() >= entry.expires_at:
                del self._store[key]
                self._misses += 1
                return _MISSING
            self._hits += 1
            return entry.value

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value, or ``default`` if absent or expired.

        A stored None is returned as None; pass a sentinel ``default``
        to tell it apart from a miss.
        """
        value = self._lookup(key)
        return default if value is _MISSING else value

    def set(self, key: str, value: Any, ttl_ms: int) -> None:
        """Store a value for ``ttl_ms`` milliseconds, replacing any prior entry."""
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=self._now_ms() + ttl_ms)

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it was present."""
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> int:
        """Remove all entries. Returns the number removed."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
        logger.info(f"Cache cleared ({count} entries)")
        return count

    def stats(self) -> dict[str, int]:
        """Entry count (including not yet evicted expired ones) and hit/miss counters."""
        with self._lock:
            return {
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    async def get_or_fetch(
        self,
        key: str,
        ttl_ms: int,
        fetch: Callable[[], Awaitable[T]],
    ) -> T:
        """Return the cached value or await ``fetch`` and cache its result.

        Exceptions from ``fetch`` propagate and nothing is stored.
        Concurrent misses on the same key may each fetch; the last
        result wins.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            return value

        value = await fetch()
        self.set(key, value, ttl_ms)
        return value


_cache: TTLCache | None = None


def get_cache() -> TTLCache:
    """Get the process-wide cache instance."""
    global _cache
    if _cache is None:
        _cache = TTLCache()
    return _cache
