"""Redis key-value store implementation."""

from collections.abc import AsyncIterator
from datetime import timedelta

import redis.asyncio as redis


class RedisStore:
    """Redis key-value store for the key-value backend.

    Keys are namespaced with a prefix so that :meth:`clear` only drops
    this store's keys, never the whole Redis database.
    """

    def __init__(
        self,
        client: "redis.Redis",
        key_prefix: str = "cachesql",
    ) -> None:
        """Initialize the Redis store.

        Args:
            client: An asyncio Redis client.
            key_prefix: Prefix for all stored keys.
        """
        self._redis = client
        self._key_prefix = key_prefix

    @classmethod
    def from_url(
        cls,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "cachesql",
    ) -> "RedisStore":
        """Create a store connected to ``redis_url``."""
        return cls(redis.from_url(redis_url), key_prefix=key_prefix)  # type: ignore

    async def get(self, key: str) -> bytes | None:
        """Retrieve a value, or None if missing or expired."""
        return await self._redis.get(self._prefixed_key(key))

    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        """Store a value, optionally expiring after ``ttl``.

        TTLs are sent in milliseconds and never below one millisecond.
        """
        prefixed_key = self._prefixed_key(key)

        if ttl is not None:
            milliseconds = max(1, int(ttl.total_seconds() * 1000))
            await self._redis.set(prefixed_key, value, px=milliseconds)
        else:
            await self._redis.set(prefixed_key, value)

    async def delete(self, key: str) -> bool:
        """Delete a value, returning True if it existed."""
        result = await self._redis.delete(self._prefixed_key(key))
        return result > 0

    async def clear(self) -> None:
        """Delete every key carrying our prefix.

        Uses SCAN instead of KEYS for production safety.
        """
        cursor = 0
        pattern = f"{self._key_prefix}:*"

        while True:
            cursor, keys = await self._redis.scan(cursor, match=pattern, count=100)

            if keys:
                await self._redis.delete(*keys)

            if cursor == 0:
                break

    async def iterate(self) -> AsyncIterator[tuple[str, bytes]]:
        """Iterate over the live ``(key, value)`` pairs of our prefix."""
        prefix = f"{self._key_prefix}:"
        async for raw_key in self._redis.scan_iter(match=f"{prefix}*", count=100):
            value = await self._redis.get(raw_key)
            if value is None:
                continue
            key = raw_key.decode() if isinstance(raw_key, bytes) else raw_key
            yield key[len(prefix):], value

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    def _prefixed_key(self, key: str) -> str:
        """Add prefix to key.

        Args:
            key: The cache key.

        Returns:
            The key with prefix.
        """
        return f"{self._key_prefix}:{key}"
