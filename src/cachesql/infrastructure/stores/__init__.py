"""Key-value stores for the key-value cache backend.

The Redis store is imported lazily to keep redis an optional dependency:
``from cachesql.infrastructure.stores.redis import RedisStore``.
"""

from cachesql.infrastructure.stores.memory import MemoryStore

__all__ = ["MemoryStore"]
