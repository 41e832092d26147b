"""Query executor interface."""

from collections.abc import Callable
from typing import Any, Protocol


class IQueryExecutor(Protocol):
    """Contract for the engine that actually runs queries.

    The cache service compiles queries through the executor to derive
    keys and only runs them on a cache miss.
    """

    def compile(self, query: Any) -> tuple[str, tuple[Any, ...]]:
        """Compile a query to its SQL text and positional parameters.

        Must be deterministic and free of side effects.
        """
        ...

    async def fetch_all(self, query: Any) -> list[dict[str, Any]]:
        """Run the query and return every row."""
        ...

    async def fetch_first(self, query: Any) -> dict[str, Any] | None:
        """Run the query and return the first row, or None."""
        ...

    async def fetch_first_or_raise(
        self,
        query: Any,
        error_factory: Callable[[Any], Exception] | None = None,
    ) -> dict[str, Any]:
        """Run the query and return the first row.

        Raises:
            Exception: The engine's not-found error, or the result of
                ``error_factory(query)`` when given, if there is no row.
        """
        ...
