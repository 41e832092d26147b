"""SQLAlchemy query executor implementation."""

from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.base import Executable


class SQLAlchemyExecutor:
    """Runs SQLAlchemy statements on an async engine.

    Rows are returned as plain dicts so they can be serialized and
    cached. The engine belongs to the caller; the executor never
    disposes it.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        """Initialize the executor.

        Args:
            engine: Engine of the database the queries run against.
        """
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        """Return the engine queries run against."""
        return self._engine

    def compile(self, query: Executable) -> tuple[str, tuple[Any, ...]]:
        """Compile a statement for the engine's dialect.

        Args:
            query: The statement to compile.

        Returns:
            The SQL text and its bind parameters in bind order.
        """
        compiled = query.compile(dialect=self._engine.dialect)  # type: ignore[attr-defined]
        params = compiled.params
        if compiled.positiontup is not None:
            parameters = tuple(params[name] for name in compiled.positiontup)
        else:
            parameters = tuple(params.values())
        return str(compiled), parameters

    async def fetch_all(self, query: Executable) -> list[dict[str, Any]]:
        """Run the statement and return every row."""
        async with self._engine.connect() as conn:
            result = await conn.execute(query)
            return [dict(row) for row in result.mappings().all()]

    async def fetch_first(self, query: Executable) -> dict[str, Any] | None:
        """Run the statement and return the first row, or None."""
        async with self._engine.connect() as conn:
            result = await conn.execute(query)
            row = result.mappings().first()
            return None if row is None else dict(row)

    async def fetch_first_or_raise(
        self,
        query: Executable,
        error_factory: Callable[[Any], Exception] | None = None,
    ) -> dict[str, Any]:
        """Run the statement and return the first row.

        Raises:
            NoResultFound: If there is no row and no ``error_factory``.
            Exception: ``error_factory(query)`` if there is no row.
        """
        row = await self.fetch_first(query)
        if row is None:
            if error_factory is not None:
                raise error_factory(query)
            raise NoResultFound("No row was found when one was required")
        return row
