"""Key builder interface."""

from collections.abc import Sequence
from typing import Any, Protocol


class IKeyBuilder(Protocol):
    """Contract for building cache keys from a compiled query.

    Key builders are responsible for creating unique, deterministic
    cache keys from the SQL text and bind parameters of a query.
    """

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
        ...
