"""Core domain layer for cachesql."""

from cachesql.core.entities import CacheConfig, CacheEntry, CacheKey, SQLCacheConfig
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
    LifecycleGuard,
    LifecycleState,
)
from cachesql.core.services import CacheService

__all__ = [
    # Entities
    "CacheConfig",
    "CacheEntry",
    "CacheKey",
    "SQLCacheConfig",
    # Interfaces
    "ICacheBackend",
    "ICompressor",
    "IKeyBuilder",
    "IKeyValueStore",
    "IQueryExecutor",
    "ISerializer",
    # Lifecycle
    "CacheDestroyedError",
    "CacheDisconnectedError",
    "CacheLifecycleError",
    "CacheNotReadyError",
    "LifecycleGuard",
    "LifecycleState",
    # Services
    "CacheService",
]
