"""Cache backend interface."""

from datetime import timedelta
from typing import Protocol


class ICacheBackend(Protocol):
    """Storage capability used by CacheService.

    A backend maps a cache key to the encoded result of one query.
    Implementations own expiration and eviction; the service only
    reads once and writes once per call. Storage failures should be
    handled inside the backend. Lifecycle errors (see
    :mod:`cachesql.core.lifecycle`) are raised to the caller.
    """

    async def get(self, key: str) -> bytes | None:
        """Return the encoded result stored under ``key``.

        Returns None on a miss, including for an expired entry.
        """
        ...

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Insert or overwrite the entry for ``key``.

        Args:
            key: Key derived from the query.
            value: Encoded query result.
            ttl: Lifetime of this entry. None applies the backend's
                configured TTL.
        """
        ...

    async def clear(self) -> None:
        """Drop every entry; the backend stays usable."""
        ...
