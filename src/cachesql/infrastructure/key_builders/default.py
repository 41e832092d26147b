"""Default key builder implementation."""

from collections.abc import Sequence
from typing import Any

from cachesql.core.entities.cache_key import CacheKey


class DefaultKeyBuilder:
    """Default key builder using a hash of SQL text and parameters.

    Creates deterministic, fixed-length cache keys from compiled
    queries using SHA-256 hashing.
    """

    def __init__(self, prefix: str = "cachesql") -> None:
        """Initialize the key builder.

        Args:
            prefix: Prefix for all cache keys.
        """
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        """Return the key prefix."""
        return self._prefix

    def build(
        self,
        sql: str,
        parameters: Sequence[Any],
        variant: str | None = None,
    ) -> str:
        """Build unique cache key for a compiled query.

        Args:
            sql: The compiled SQL text.
            parameters: Bind parameters in positional order.
            variant: Optional result shape ("all", "first").

        Returns:
            A unique string key for caching the query result.
        """
        return str(
            CacheKey.from_components(
                prefix=self._prefix,
                sql=sql,
                parameters=parameters,
                variant=variant,
            )
        )
