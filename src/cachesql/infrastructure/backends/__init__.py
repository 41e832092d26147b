"""Cache backends for cachesql."""

from cachesql.infrastructure.backends.key_value import KeyValueCacheBackend
from cachesql.infrastructure.backends.memory import InMemoryCacheBackend
from cachesql.infrastructure.backends.sql import SQLCacheBackend
from cachesql.infrastructure.backends.sql_dialects import (
    DialectPolicy,
    build_cache_table,
    get_dialect_policy,
)

__all__ = [
    "DialectPolicy",
    "InMemoryCacheBackend",
    "KeyValueCacheBackend",
    "SQLCacheBackend",
    "build_cache_table",
    "get_dialect_policy",
]
