"""In-memory cache backend implementation."""

import time
from collections.abc import Callable
from datetime import timedelta

from cachetools import TLRUCache  # type: ignore[import-untyped]

_Item = tuple[bytes, float]


def _time_to_use(_key: str, item: _Item, now: float) -> float:
    """Expiry time of an item stored with its TTL in seconds."""
    return now + item[1]


class InMemoryCacheBackend:
    """In-memory cache backend using LRU with TTL support.

    Suitable for single-process deployments. Uses cachetools
    for efficient LRU eviction and TTL expiration: when the map
    is full the least recently used entry makes room for the new one.
    """

    def __init__(
        self,
        max_size: int = 50,
        ttl: timedelta = timedelta(milliseconds=60000),
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache backend.

        Args:
            max_size: Maximum number of items in the cache.
            ttl: Default TTL of written items.
            timer: Clock used for expiration, in seconds.
        """
        if max_size < 1:
            raise ValueError("max_size must be a positive integer")
        if ttl <= timedelta(0):
            raise ValueError("ttl must be a positive duration")
        self._max_size = max_size
        self._ttl = ttl
        self._cache: TLRUCache[str, _Item] = TLRUCache(
            maxsize=max_size,
            ttu=_time_to_use,
            timer=timer,
        )

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        An expired entry reads as a miss and is dropped.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value as bytes, or None if not found or expired.
        """
        item = self._cache.get(key)
        if item is None:
            self._cache.expire()
            return None
        return item[0]

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Store value, renewing its expiry from now.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            ttl: Lifetime of this item. If None, uses the backend TTL.
        """
        self._cache[key] = (value, (ttl or self._ttl).total_seconds())

    async def clear(self) -> None:
        """Clear all cached values. The backend stays usable."""
        self._cache.clear()

    def __len__(self) -> int:
        """Return the number of items in the cache."""
        self._cache.expire()
        return len(self._cache)

    @property
    def max_size(self) -> int:
        """Return the maximum size of the cache."""
        return self._max_size

    @property
    def ttl(self) -> timedelta:
        """Return the default TTL of written items."""
        return self._ttl
