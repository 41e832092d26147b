"""In-process key-value store with per-item TTL."""

import math
import time
from collections.abc import AsyncIterator, Callable
from datetime import timedelta

from cachetools import TLRUCache  # type: ignore[import-untyped]

_Item = tuple[bytes, float | None]


def _time_to_use(_key: str, item: _Item, now: float) -> float:
    """Expiry time of an item stored with its own TTL in seconds."""
    ttl = item[1]
    return math.inf if ttl is None else now + ttl


class MemoryStore:
    """Key-value store kept in process memory.

    Default store of the key-value backend. Each item carries its own
    TTL; the least recently used item is dropped when ``maxsize`` is
    reached.
    """

    def __init__(
        self,
        maxsize: int = 10_000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the store.

        Args:
            maxsize: Maximum number of items held.
            timer: Clock used for expiration, in seconds.
        """
        self._cache: TLRUCache[str, _Item] = TLRUCache(
            maxsize=maxsize,
            ttu=_time_to_use,
            timer=timer,
        )
        self._closed = False

    async def get(self, key: str) -> bytes | None:
        """Retrieve a value, or None if missing or expired."""
        item = self._cache.get(key)
        return None if item is None else item[0]

    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        """Store a value, optionally expiring after ``ttl``."""
        seconds = None if ttl is None else ttl.total_seconds()
        self._cache[key] = (value, seconds)

    async def delete(self, key: str) -> bool:
        """Delete a value, returning True if it existed."""
        return self._cache.pop(key, None) is not None

    async def clear(self) -> None:
        """Delete every value."""
        self._cache.clear()

    async def iterate(self) -> AsyncIterator[tuple[str, bytes]]:
        """Iterate over the live ``(key, value)`` pairs."""
        for key in list(self._cache.keys()):
            item = self._cache.get(key)
            if item is not None:
                yield key, item[0]

    async def disconnect(self) -> None:
        """Drop every value; the store holds no other resources."""
        self._cache.clear()
        self._closed = True

    @property
    def closed(self) -> bool:
        """Check whether :meth:`disconnect` was called."""
        return self._closed

    def __len__(self) -> int:
        """Return the number of live items."""
        self._cache.expire()
        return len(self._cache)
