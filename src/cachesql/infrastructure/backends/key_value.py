"""Key-value cache backend implementation."""

import logging
from datetime import timedelta

from cachesql.core.interfaces.key_value_store import IKeyValueStore
from cachesql.core.lifecycle import CacheDisconnectedError, LifecycleGuard
from cachesql.infrastructure.stores.memory import MemoryStore

logger = logging.getLogger(__name__)


class KeyValueCacheBackend:
    """Cache backend passing through to a pluggable key-value store.

    The store owns expiration; this backend applies the configured TTL
    on every write. Once :meth:`disconnect` has been called every public
    operation raises :class:`CacheDisconnectedError` without touching
    the store.
    """

    def __init__(
        self,
        store: IKeyValueStore | None = None,
        ttl: timedelta = timedelta(milliseconds=60000),
    ) -> None:
        """Initialize the key-value backend.

        Args:
            store: Store adapter. Defaults to an in-process MemoryStore.
            ttl: Default TTL of written values.
        """
        if ttl <= timedelta(0):
            raise ValueError("ttl must be a positive duration")
        self._store: IKeyValueStore = store if store is not None else MemoryStore()
        self._ttl = ttl
        self._guard = LifecycleGuard(
            type(self).__name__,
            CacheDisconnectedError,
            "Cache has been disconnected",
        )
        self._guard.activate()

    @property
    def store(self) -> IKeyValueStore:
        """Return the underlying store."""
        return self._store

    @property
    def ttl(self) -> timedelta:
        """Return the default TTL."""
        return self._ttl

    @property
    def is_disconnected(self) -> bool:
        """Check whether the backend has been disconnected."""
        return self._guard.is_terminated

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        Store failures are logged and read as a miss.

        Raises:
            CacheDisconnectedError: If the backend was disconnected.
        """
        self._guard.check()
        try:
            return await self._store.get(key)
        except Exception:
            logger.exception("KeyValueCacheBackend: Error during get data from cache")
            return None

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Store value with the given or default TTL.

        Store failures are logged and the write is skipped.

        Raises:
            CacheDisconnectedError: If the backend was disconnected.
        """
        self._guard.check()
        try:
            await self._store.set(key, value, ttl or self._ttl)
        except Exception:
            logger.exception("KeyValueCacheBackend: Error during set data in cache")

    async def delete(self, key: str) -> bool:
        """Delete cached value.

        Store failures are logged and reported as nothing deleted.

        Raises:
            CacheDisconnectedError: If the backend was disconnected.
        """
        self._guard.check()
        try:
            return await self._store.delete(key)
        except Exception:
            logger.exception("KeyValueCacheBackend: Error during delete data from cache")
            return False

    async def clear(self) -> None:
        """Clear all cached values.

        Store failures are logged and the cache is left as is.

        Raises:
            CacheDisconnectedError: If the backend was disconnected.
        """
        self._guard.check()
        try:
            await self._store.clear()
        except Exception:
            logger.exception("KeyValueCacheBackend: Error during cache clean")

    async def disconnect(self) -> None:
        """Clear the cache, then release the store.

        The backend is disconnected even if clearing fails. Disconnecting
        twice is a no-op.
        """
        if self._guard.is_terminated:
            return
        try:
            await self.clear()
        finally:
            self._guard.terminate()
            await self._store.disconnect()

    async def __aenter__(self) -> "KeyValueCacheBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        if not self.is_disconnected:
            await self.disconnect()
