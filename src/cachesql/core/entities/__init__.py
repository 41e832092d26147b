"""Domain entities for cachesql."""

from cachesql.core.entities.cache_config import CacheConfig, SQLCacheConfig
from cachesql.core.entities.cache_entry import CacheEntry
from cachesql.core.entities.cache_key import CacheKey

__all__ = [
    "CacheEntry",
    "CacheKey",
    "CacheConfig",
    "SQLCacheConfig",
]
