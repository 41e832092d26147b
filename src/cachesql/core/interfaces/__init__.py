"""Core interfaces (Protocol classes) for cachesql."""

from cachesql.core.interfaces.cache_backend import ICacheBackend
from cachesql.core.interfaces.compressor import ICompressor
from cachesql.core.interfaces.key_builder import IKeyBuilder
from cachesql.core.interfaces.key_value_store import IKeyValueStore
from cachesql.core.interfaces.query_executor import IQueryExecutor
from cachesql.core.interfaces.serializer import ISerializer

__all__ = [
    "ICacheBackend",
    "ICompressor",
    "IKeyBuilder",
    "IKeyValueStore",
    "IQueryExecutor",
    "ISerializer",
]
