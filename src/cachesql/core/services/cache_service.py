"""Cache service - read-through cache in front of a query executor."""

import logging
from collections.abc import Callable
from typing import Any

from cachesql.core.entities.cache_config import CacheConfig
from cachesql.core.interfaces.cache_backend import ICacheBackend
from cachesql.core.interfaces.key_builder import IKeyBuilder
from cachesql.core.interfaces.query_executor import IQueryExecutor
from cachesql.core.interfaces.serializer import ISerializer
from cachesql.core.lifecycle import CacheLifecycleError

logger = logging.getLogger(__name__)

ALL_ROWS = "all"
FIRST_ROW = "first"

_MISS = object()


class CacheService:
    """Domain service that answers queries from the cache when it can.

    Every call derives a key from the compiled query, reads the backend
    once and, on a miss, runs the query through the executor and writes
    the encoded result once. The live result is returned, never the
    re-decoded copy.

    The cache is best-effort: codec and backend failures are logged and
    degrade to a miss or a skipped write. Only lifecycle errors (a
    destroyed or disconnected backend) reach the caller.
    """

    def __init__(
        self,
        backend: ICacheBackend,
        executor: IQueryExecutor,
        key_builder: IKeyBuilder | None = None,
        serializer: ISerializer | None = None,
        config: CacheConfig | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            backend: The cache backend to use for storage.
            executor: The engine that runs queries on a miss.
            key_builder: The key builder for generating cache keys.
                Defaults to a DefaultKeyBuilder using the config prefix.
            serializer: The serializer for encoding/decoding results.
                Defaults to JsonSerializer.
            config: Optional cache configuration. Uses defaults if not provided.
        """
        from cachesql.infrastructure.key_builders.default import DefaultKeyBuilder
        from cachesql.infrastructure.serializers.json import JsonSerializer

        self._config = config or CacheConfig()
        self._backend = backend
        self._executor = executor
        self._key_builder = key_builder or DefaultKeyBuilder(self._config.key_prefix)
        self._serializer = serializer or JsonSerializer()

        # Statistics
        self._hits = 0
        self._misses = 0
        self._errors = 0

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def backend(self) -> ICacheBackend:
        """Get the cache backend."""
        return self._backend

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, errors, and total requests.
        """
        return {
            "hits": self._hits,
            "misses": self._misses,
            "errors": self._errors,
            "total": self._hits + self._misses,
        }

    def build_key(self, query: Any, variant: str = ALL_ROWS) -> str:
        """Derive the cache key of a query.

        Args:
            query: The query to fingerprint.
            variant: Result shape, ``"all"`` or ``"first"``.

        Returns:
            The cache key.
        """
        sql, parameters = self._executor.compile(query)
        return self._key_builder.build(sql, parameters, variant)

    async def execute(self, query: Any) -> list[dict[str, Any]]:
        """Return every row of the query, from the cache when possible.

        Args:
            query: The query to run.

        Returns:
            The result rows.
        """
        if not self._config.enabled:
            return await self._executor.fetch_all(query)

        key = self.build_key(query, ALL_ROWS)
        cached = await self._read(key)
        if cached is not _MISS:
            return cached  # type: ignore[return-value]

        result = await self._executor.fetch_all(query)
        await self._write(key, result)
        return result

    async def execute_take_first(self, query: Any) -> dict[str, Any] | None:
        """Return the first row of the query, or None, from the cache when possible.

        Args:
            query: The query to run.

        Returns:
            The first row, or None when the query has no result.
        """
        if not self._config.enabled:
            return await self._executor.fetch_first(query)

        key = self.build_key(query, FIRST_ROW)
        cached = await self._read(key)
        if cached is not _MISS:
            return cached  # type: ignore[return-value]

        result = await self._executor.fetch_first(query)
        await self._write(key, result)
        return result

    async def execute_take_first_or_raise(
        self,
        query: Any,
        error_factory: Callable[[Any], Exception] | None = None,
    ) -> dict[str, Any]:
        """Return the first row of the query, or raise if there is none.

        Shares its cache entries with :meth:`execute_take_first`; a cached
        empty result is ignored so that the executor raises.

        Args:
            query: The query to run.
            error_factory: Builds the error raised when there is no row.
                Defaults to the executor's not-found error.

        Returns:
            The first row.

        Raises:
            Exception: The executor's not-found error, unchanged.
        """
        if not self._config.enabled:
            return await self._executor.fetch_first_or_raise(query, error_factory)

        key = self.build_key(query, FIRST_ROW)
        cached = await self._read(key)
        if cached is not _MISS and cached is not None:
            return cached  # type: ignore[return-value]

        result = await self._executor.fetch_first_or_raise(query, error_factory)
        await self._write(key, result)
        return result

    async def clear(self) -> None:
        """Clear all cached entries."""
        await self._backend.clear()
        self._hits = 0
        self._misses = 0
        self._errors = 0

    async def _read(self, key: str) -> Any:
        """Read and decode a cached result, or return the miss sentinel."""
        try:
            cached_data = await self._backend.get(key)
            value = _MISS if cached_data is None else self._serializer.deserialize(cached_data)
        except CacheLifecycleError:
            raise
        except Exception:
            self._errors += 1
            logger.warning("CacheService: Error during get data from cache", exc_info=True)
            value = _MISS

        if value is _MISS:
            self._misses += 1
        else:
            self._hits += 1
        return value

    async def _write(self, key: str, result: Any) -> None:
        """Encode and store a result; failures only skip the write."""
        try:
            encoded = self._serializer.serialize(result)
            await self._backend.set(key, encoded, self._config.default_ttl)
        except CacheLifecycleError:
            raise
        except Exception:
            self._errors += 1
            logger.warning("CacheService: Error during set data in cache", exc_info=True)
