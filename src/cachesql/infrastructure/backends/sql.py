"""SQL cache backend implementation."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from datetime import timedelta

from sqlalchemy import MetaData, Table, delete, func, inspect, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from cachesql.core.entities.cache_config import SQLCacheConfig
from cachesql.core.entities.cache_entry import now_ms
from cachesql.core.interfaces.compressor import ICompressor
from cachesql.core.lifecycle import CacheDestroyedError, LifecycleGuard
from cachesql.infrastructure.backends.sql_dialects import (
    DialectPolicy,
    build_cache_table,
    get_dialect_policy,
)
from cachesql.infrastructure.compressors.zlib import CompressionError, ZlibCompressor
from cachesql.utils.scheduling import SweepScheduler

logger = logging.getLogger(__name__)

DEFAULT_URL = "sqlite+aiosqlite://"


def _milliseconds(duration: timedelta) -> int:
    return max(1, int(duration.total_seconds() * 1000))


def _ensure_schema(sync_conn: Connection, table: Table) -> None:
    """Create the cache table and any of its missing indexes."""
    inspector = inspect(sync_conn)
    if not inspector.has_table(table.name):
        table.create(sync_conn, checkfirst=True)
        return
    existing = {index["name"] for index in inspector.get_indexes(table.name)}
    for index in table.indexes:
        if index.name not in existing:
            index.create(sync_conn)


class SQLCacheBackend:
    """Cache backend storing entries in a single relational table.

    Each row carries its expiry and last access time. Expired rows and
    rows beyond the ``max`` most recently accessed ones are removed by a
    sweep, which runs periodically and shortly after writes.

    Use :meth:`create` to build an active backend::

        backend = await SQLCacheBackend.create(engine, SQLCacheConfig(max=100))
        ...
        await backend.destroy()
    """

    def __init__(
        self,
        engine: AsyncEngine,
        config: SQLCacheConfig | None = None,
        compressor: ICompressor | None = None,
    ) -> None:
        """Initialize the backend without touching the database.

        Args:
            engine: Engine of the database holding the cache table. The
                backend owns it and disposes it on :meth:`destroy`.
            config: Backend configuration. Uses defaults if not provided.
            compressor: Compressor for large values. Defaults to zlib.
        """
        self._config = config or SQLCacheConfig()
        self._engine = engine
        self._policy: DialectPolicy = get_dialect_policy(
            self._config.dialect or engine.dialect.name
        )
        self._table = build_cache_table(MetaData(), self._config.table_name)
        self._compressor: ICompressor = compressor or ZlibCompressor()
        self._guard = LifecycleGuard(
            type(self).__name__,
            CacheDestroyedError,
            "Cache has been destroyed",
        )
        self._scheduler = SweepScheduler(
            self._sweep,
            interval=self._config.sweep_interval,
            debounce=self._config.debounce_time,
            name=f"{type(self).__name__}[{self._config.table_name}]",
        )
        self._writer_lock = asyncio.Lock() if self._policy.single_writer else None

    @classmethod
    async def create(
        cls,
        engine: AsyncEngine | None = None,
        config: SQLCacheConfig | None = None,
        compressor: ICompressor | None = None,
    ) -> "SQLCacheBackend":
        """Create an active backend.

        Ensures the cache table exists, empties it and starts the
        periodic sweep.

        Args:
            engine: Engine of the cache database. Defaults to an
                in-memory SQLite database.
            config: Backend configuration.
            compressor: Compressor for large values.

        Returns:
            The active backend.
        """
        if engine is None:
            engine = create_async_engine(DEFAULT_URL, poolclass=StaticPool)
        backend = cls(engine, config, compressor)
        await backend._synchronize()
        return backend

    @property
    def engine(self) -> AsyncEngine:
        """Return the engine of the cache database."""
        return self._engine

    @property
    def table(self) -> Table:
        """Return the cache table."""
        return self._table

    @property
    def config(self) -> SQLCacheConfig:
        """Return the backend configuration."""
        return self._config

    @property
    def is_destroyed(self) -> bool:
        """Check whether the backend has been destroyed."""
        return self._guard.is_terminated

    async def get(self, key: str) -> bytes | None:
        """Retrieve a live value and mark it as just accessed.

        Args:
            key: The cache key to retrieve.

        Returns:
            The stored bytes, decompressed if needed, or None on a miss.
            Database and decompression failures are logged and read as a
            miss.

        Raises:
            CacheDestroyedError: If the backend was destroyed.
        """
        self._guard.check()
        try:
            async with self._transaction() as conn:
                entry = await self._policy.touch_and_fetch(
                    conn, self._table, key, now_ms()
                )
        except SQLAlchemyError:
            logger.exception("SQLCacheBackend: Error during getting data from DB")
            return None

        if entry is None:
            return None
        if not entry.compressed:
            return entry.value
        try:
            return self._compressor.decompress(entry.value)
        except CompressionError:
            logger.exception("SQLCacheBackend: Error during decompressing %s", key)
            return None

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Insert or overwrite a value, then request a sweep.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            ttl: Optional time-to-live. If None, uses the configured TTL.

        Raises:
            CacheDestroyedError: If the backend was destroyed.
        """
        self._guard.check()
        now = now_ms()
        try:
            payload, compressed = self._encode(value)
            async with self._transaction() as conn:
                await conn.execute(
                    self._policy.upsert(
                        self._table,
                        {
                            "key": key,
                            "value": payload,
                            "expires": now + _milliseconds(ttl or self._config.ttl),
                            "last_access": now,
                            "compressed": int(compressed),
                        },
                    )
                )
        except (SQLAlchemyError, CompressionError):
            logger.exception("SQLCacheBackend: Error during setting data in DB")
            return

        self._scheduler.request()

    async def clear(self) -> None:
        """Delete every row.

        Raises:
            CacheDestroyedError: If the backend was destroyed.
        """
        self._guard.check()
        await self._clear()

    async def sweep(self) -> None:
        """Run a sweep now, joining one that is already running.

        Raises:
            CacheDestroyedError: If the backend was destroyed.
        """
        self._guard.check()
        await self._scheduler.run_now()

    async def count(self) -> int:
        """Return the number of rows in the cache table.

        Raises:
            CacheDestroyedError: If the backend was destroyed.
        """
        self._guard.check()
        async with self._transaction() as conn:
            result = await conn.execute(select(func.count()).select_from(self._table))
            return int(result.scalar_one())

    async def destroy(self) -> None:
        """Clear the cache, stop sweeping and release the engine.

        Every later call fails with :class:`CacheDestroyedError`.
        Destroying twice is a no-op.
        """
        if self._guard.is_terminated:
            return
        self._guard.terminate()
        await self._scheduler.stop()
        await self._clear()
        await self._engine.dispose()

    async def __aenter__(self) -> "SQLCacheBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.destroy()

    async def _synchronize(self) -> None:
        """Bootstrap the schema, empty the table and start sweeping."""
        await self._bootstrap_schema()
        await self._clear()
        self._scheduler.start()
        self._guard.activate()

    async def _bootstrap_schema(self) -> None:
        """Ensure the table and indexes exist.

        A concurrent bootstrap may create them between our check and our
        CREATE; the failing statement is then retried once against the
        schema the other process created.
        """
        for attempt in range(2):
            try:
                async with self._engine.begin() as conn:
                    await conn.run_sync(_ensure_schema, self._table)
                return
            except DBAPIError:
                if attempt:
                    raise
                logger.warning(
                    "SQLCacheBackend: schema bootstrap of %s raced, retrying",
                    self._table.name,
                )

    async def _clear(self) -> None:
        try:
            async with self._transaction() as conn:
                await conn.execute(delete(self._table))
        except SQLAlchemyError:
            logger.exception("SQLCacheBackend: Error during cache clean")

    async def _sweep(self) -> None:
        """Delete expired rows, then rows beyond the ``max`` most recent."""
        try:
            async with self._transaction() as conn:
                await conn.execute(self._policy.delete_expired(self._table, now_ms()))
        except SQLAlchemyError:
            logger.exception("SQLCacheBackend: Error during delete expired items")

        if self._config.max > 0:
            try:
                async with self._transaction() as conn:
                    await conn.execute(
                        self._policy.delete_least_recently_used(
                            self._table, self._config.max
                        )
                    )
            except SQLAlchemyError:
                logger.exception(
                    "SQLCacheBackend: Error during delete older items than first %d",
                    self._config.max,
                )

    def _encode(self, value: bytes) -> tuple[bytes, bool]:
        if self._config.compression and len(value) >= self._config.compression_threshold:
            return self._compressor.compress(value), True
        return value, False

    @contextlib.asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncConnection]:
        """Open a transaction, one at a time on single-writer databases."""
        lock = self._writer_lock or contextlib.nullcontext()
        async with lock:
            async with self._engine.begin() as conn:
                yield conn
