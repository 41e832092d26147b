"""Infrastructure layer implementations for cachesql."""

from cachesql.infrastructure.backends import (
    InMemoryCacheBackend,
    KeyValueCacheBackend,
    SQLCacheBackend,
)
from cachesql.infrastructure.compressors import ZlibCompressor
from cachesql.infrastructure.executors import SQLAlchemyExecutor
from cachesql.infrastructure.key_builders import DefaultKeyBuilder
from cachesql.infrastructure.serializers import JsonSerializer
from cachesql.infrastructure.stores import MemoryStore

__all__ = [
    "InMemoryCacheBackend",
    "KeyValueCacheBackend",
    "SQLCacheBackend",
    "MemoryStore",
    "SQLAlchemyExecutor",
    "DefaultKeyBuilder",
    "JsonSerializer",
    "ZlibCompressor",
]
