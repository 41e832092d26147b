"""Cache key value object."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheKey:
    """Immutable cache key value object.

    Encapsulates the fingerprint of a compiled query together with
    the prefix that namespaces it.
    """

    prefix: str
    fingerprint: str

    def __str__(self) -> str:
        """Return the full cache key string.

        Returns:
            The complete cache key as a string.
        """
        return f"{self.prefix}:{self.fingerprint}"

    @classmethod
    def from_components(
        cls,
        prefix: str,
        sql: str,
        parameters: Sequence[Any],
        variant: str | None = None,
        hash_func: Callable[[Any], str] | None = None,
    ) -> "CacheKey":
        """Create a CacheKey from a compiled query.

        Args:
            prefix: Cache key prefix.
            sql: Canonical SQL text of the query.
            parameters: Positional bind parameters, in bind order.
            variant: Result shape requested from the engine.
            hash_func: Optional custom hash function.

        Returns:
            A new CacheKey instance.
        """
        from cachesql.utils.hashing import hash_value

        hasher = hash_func or hash_value

        return cls(
            prefix=prefix,
            fingerprint=hasher([variant, sql, list(parameters)]),
        )
