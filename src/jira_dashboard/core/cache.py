"""
Cache protocol and the in-process TTL store.

The dashboard only needs get/set with a time-to-live. Any key-value store
that implements CacheClient can be plugged in; MemoryCache is the default.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class CacheClient(Protocol):
    """
    Protocol for cache implementations.

    Implementations are responsible for their own concurrency safety.
    """

    async def get(self, key: str) -> Any | None:
        """
        Get a cached value.

        Returns:
            The stored value, or None if missing or expired
        """
        ...

    async def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """
        Store a value.

        Args:
            key: Cache key
            value: Value to store (must not be None)
            ttl_ms: Time-to-live in milliseconds; the client default if None
        """
        ...


class MemoryCache:
    """
    Dictionary-backed cache with per-entry expiry.

    Expired entries are dropped lazily when read.

    Example:
        >>> cache = MemoryCache(default_ttl_ms=60_000)
        >>> await cache.set("project:ABC", {"key": "ABC"})
        >>> await cache.get("project:ABC")
        {'key': 'ABC'}
    """

    def __init__(
        self,
        default_ttl_ms: int = 60_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        self._entries[key] = (self._clock() + ttl / 1000.0, value)

    def clear(self) -> None:
        self._entries.clear()


async def read_through(
    cache: CacheClient,
    key: str,
    fetch: Callable[[], Awaitable[T]],
    ttl_ms: int | None = None,
) -> T:
    """
    Return the cached value for key, fetching and storing it on a miss.

    Exceptions from fetch propagate and nothing is stored. Concurrent
    misses for the same key may each call fetch.
    """
    cached = await cache.get(key)
    if cached is not None:
        logger.debug("Cache hit for %s", key)
        return cached  # type: ignore[no-any-return]

    logger.debug("Cache miss for %s", key)
    value = await fetch()
    await cache.set(key, value, ttl_ms)
    return value
