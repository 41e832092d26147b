"""CacheSQL - Read-through result cache for SQLAlchemy queries.

A Python library that answers SELECT queries from a cache when it
holds a still valid result, and otherwise runs the query, stores
the result and returns it. Results can live in process memory, in a
pluggable key-value store (Redis, ...) or in a table of a relational
database with TTL expiry and LRU eviction.

Example with the SQL backend:
    from sqlalchemy import select
    from sqlalchemy.ext.asyncio import create_async_engine
    from cachesql import (
        CacheService,
        SQLAlchemyExecutor,
        SQLCacheBackend,
        SQLCacheConfig,
    )

    engine = create_async_engine("postgresql+asyncpg://localhost/app")
    backend = await SQLCacheBackend.create(
        config=SQLCacheConfig(max=500, compression=True),
    )
    cache = CacheService(backend=backend, executor=SQLAlchemyExecutor(engine))

    users = await cache.execute(select(users_table))
    user = await cache.execute_take_first_or_raise(
        select(users_table).where(users_table.c.id == 1)
    )

    await backend.destroy()

Example with Redis:
    from cachesql import KeyValueCacheBackend
    from cachesql.infrastructure.stores.redis import RedisStore

    backend = KeyValueCacheBackend(
        store=RedisStore.from_url("redis://localhost:6379"),
        ttl=timedelta(minutes=5),
    )
"""

from cachesql.core.entities import (
    CacheConfig,
    CacheEntry,
    CacheKey,
    SQLCacheConfig,
)
from cachesql.core.interfaces import (
    ICacheBackend,
    ICompressor,
    IKeyBuilder,
    IKeyValueStore,
    IQueryExecutor,
    ISerializer,
)
from cachesql.core.lifecycle import (
    CacheDestroyedError,
    CacheDisconnectedError,
    CacheLifecycleError,
    CacheNotReadyError,
)
from cachesql.core.services import CacheService
from cachesql.infrastructure import (
    DefaultKeyBuilder,
    InMemoryCacheBackend,
    JsonSerializer,
    KeyValueCacheBackend,
    MemoryStore,
    SQLAlchemyExecutor,
    SQLCacheBackend,
    ZlibCompressor,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheConfig",
    "CacheEntry",
    "CacheKey",
    "SQLCacheConfig",
    # Core interfaces
    "ICacheBackend",
    "ICompressor",
    "IKeyBuilder",
    "IKeyValueStore",
    "IQueryExecutor",
    "ISerializer",
    # Lifecycle errors
    "CacheLifecycleError",
    "CacheNotReadyError",
    "CacheDestroyedError",
    "CacheDisconnectedError",
    # Core services
    "CacheService",
    # Infrastructure implementations
    "InMemoryCacheBackend",
    "KeyValueCacheBackend",
    "SQLCacheBackend",
    "MemoryStore",
    "SQLAlchemyExecutor",
    "DefaultKeyBuilder",
    "JsonSerializer",
    "ZlibCompressor",
]
