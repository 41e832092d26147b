"""Pytest configuration for cachesql tests."""

from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import Column, Integer, MetaData, String, Table
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

metadata = MetaData()

person = Table(
    "person",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("first_name", String(255)),
    Column("last_name", String(255)),
    Column("gender", String(255)),
)


class FakeTimer:
    """Manually advanced clock in seconds."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeExecutor:
    """In-memory executor answering every query with canned rows."""

    def __init__(self, rows: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self.rows = rows or {}
        self.calls: list[tuple[str, str]] = []

    def compile(self, query: str) -> tuple[str, tuple[Any, ...]]:
        text, _, params = query.partition("|")
        return text, tuple(params.split(",")) if params else ()

    async def fetch_all(self, query: str) -> list[dict[str, Any]]:
        self.calls.append(("all", query))
        return [dict(row) for row in self.rows.get(query, [])]

    async def fetch_first(self, query: str) -> dict[str, Any] | None:
        self.calls.append(("first", query))
        rows = self.rows.get(query, [])
        return dict(rows[0]) if rows else None

    async def fetch_first_or_raise(
        self,
        query: str,
        error_factory: Callable[[Any], Exception] | None = None,
    ) -> dict[str, Any]:
        self.calls.append(("first_or_raise", query))
        rows = self.rows.get(query, [])
        if not rows:
            if error_factory is not None:
                raise error_factory(query)
            raise NoResultFound("No row was found when one was required")
        return dict(rows[0])


@pytest.fixture
def timer() -> FakeTimer:
    """Create a manually advanced clock."""
    return FakeTimer()


@pytest_asyncio.fixture
async def people_engine() -> AsyncIterator[AsyncEngine]:
    """Create an in-memory database holding one person."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        await conn.execute(
            person.insert().values(first_name="Max", last_name="Jack", gender="man")
        )
    yield engine
    await engine.dispose()
