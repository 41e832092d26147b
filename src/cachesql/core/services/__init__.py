"""Domain services for cachesql."""

from cachesql.core.services.cache_service import ALL_ROWS, FIRST_ROW, CacheService

__all__ = [
    "ALL_ROWS",
    "FIRST_ROW",
    "CacheService",
]
