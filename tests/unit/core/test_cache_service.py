"""Tests for CacheService."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import NoResultFound

from cachesql import (
    CacheConfig,
    CacheDestroyedError,
    CacheService,
    DefaultKeyBuilder,
    InMemoryCacheBackend,
    JsonSerializer,
)
from tests.conftest import FakeExecutor, FakeTimer

USERS = "SELECT * FROM person"
USER_BY_ID = "SELECT * FROM person WHERE id = ?"
ROWS = {
    USERS: [{"id": 1, "name": "Max"}, {"id": 2, "name": "Ada"}],
    f"{USER_BY_ID}|1": [{"id": 1, "name": "Max"}],
    f"{USER_BY_ID}|2": [{"id": 2, "name": "Ada"}],
}


class NotFound(Exception):
    """Custom not-found error."""


@pytest.fixture
def executor() -> FakeExecutor:
    """Create an executor answering canned rows."""
    return FakeExecutor(ROWS)


@pytest.fixture
def backend() -> InMemoryCacheBackend:
    """Create a backend for testing."""
    return InMemoryCacheBackend(max_size=100)


@pytest.fixture
def cache_service(backend: InMemoryCacheBackend, executor: FakeExecutor) -> CacheService:
    """Create a cache service for testing."""
    return CacheService(
        backend=backend,
        executor=executor,
        key_builder=DefaultKeyBuilder(),
        serializer=JsonSerializer(),
        config=CacheConfig(),
    )


class TestCacheService:
    """Tests for CacheService."""

    @pytest.mark.asyncio
    async def test_execute_caches_rows(
        self, cache_service: CacheService, executor: FakeExecutor
    ) -> None:
        """Test a second execution is answered from the cache."""
        first = await cache_service.execute(USERS)
        second = await cache_service.execute(USERS)

        assert first == ROWS[USERS]
        assert second == first
        assert executor.calls == [("all", USERS)]

    @pytest.mark.asyncio
    async def test_execute_returns_live_result_on_miss(
        self, executor: FakeExecutor
    ) -> None:
        """Test the executor's own result object is returned on a miss."""
        live = [{"id": 1}]
        executor.fetch_all = AsyncMock(return_value=live)  # type: ignore[method-assign]
        service = CacheService(InMemoryCacheBackend(), executor)

        result = await service.execute(USERS)

        assert result is live

    @pytest.mark.asyncio
    async def test_execute_stores_one_entry_per_query(
        self, cache_service: CacheService, backend: InMemoryCacheBackend
    ) -> None:
        """Test repeated executions keep a single entry."""
        await cache_service.execute(USERS)
        await cache_service.execute(USERS)

        assert len(backend) == 1

    @pytest.mark.asyncio
    async def test_different_parameters_different_entries(
        self, cache_service: CacheService, executor: FakeExecutor
    ) -> None:
        """Test queries differing in parameters are cached separately."""
        first = await cache_service.execute_take_first(f"{USER_BY_ID}|1")
        second = await cache_service.execute_take_first(f"{USER_BY_ID}|2")

        assert first == {"id": 1, "name": "Max"}
        assert second == {"id": 2, "name": "Ada"}
        assert len(executor.calls) == 2

    @pytest.mark.asyncio
    async def test_take_first_and_execute_do_not_share_entries(
        self, cache_service: CacheService
    ) -> None:
        """Test a cached row list is never returned as a single row."""
        rows = await cache_service.execute(USERS)
        first = await cache_service.execute_take_first(USERS)

        assert isinstance(rows, list)
        assert first == {"id": 1, "name": "Max"}

    @pytest.mark.asyncio
    async def test_take_first_caches_missing_row(
        self, cache_service: CacheService, executor: FakeExecutor
    ) -> None:
        """Test an empty result is cached for execute_take_first."""
        assert await cache_service.execute_take_first("SELECT nothing") is None
        assert await cache_service.execute_take_first("SELECT nothing") is None

        assert executor.calls == [("first", "SELECT nothing")]
        assert cache_service.stats["hits"] == 1

    @pytest.mark.asyncio
    async def test_take_first_or_raise_hits_cache(
        self, cache_service: CacheService, executor: FakeExecutor
    ) -> None:
        """Test execute_take_first_or_raise answers from the cache."""
        query = f"{USER_BY_ID}|1"
        await cache_service.execute_take_first_or_raise(query)
        row = await cache_service.execute_take_first_or_raise(query)

        assert row == {"id": 1, "name": "Max"}
        assert executor.calls == [("first_or_raise", query)]

    @pytest.mark.asyncio
    async def test_take_first_or_raise_propagates_not_found(
        self, cache_service: CacheService
    ) -> None:
        """Test the executor's not-found error reaches the caller unchanged."""
        with pytest.raises(NoResultFound):
            await cache_service.execute_take_first_or_raise("SELECT nothing")

    @pytest.mark.asyncio
    async def test_take_first_or_raise_uses_error_factory(
        self, cache_service: CacheService
    ) -> None:
        """Test a custom error constructor is applied."""
        with pytest.raises(NotFound, match="SELECT nothing"):
            await cache_service.execute_take_first_or_raise(
                "SELECT nothing", lambda query: NotFound(query)
            )

    @pytest.mark.asyncio
    async def test_take_first_or_raise_ignores_cached_missing_row(
        self, cache_service: CacheService
    ) -> None:
        """Test a cached empty result does not hide the not-found error."""
        await cache_service.execute_take_first("SELECT nothing")

        with pytest.raises(NoResultFound):
            await cache_service.execute_take_first_or_raise("SELECT nothing")

    @pytest.mark.asyncio
    async def test_backend_read_failure_degrades_to_miss(
        self, executor: FakeExecutor
    ) -> None:
        """Test a failing backend read still returns the query result."""
        backend = AsyncMock()
        backend.get.side_effect = ConnectionError("unreachable")
        service = CacheService(backend=backend, executor=executor)

        rows = await service.execute(USERS)

        assert rows == ROWS[USERS]
        backend.set.assert_awaited_once()
        assert service.stats["errors"] == 1
        assert service.stats["misses"] == 1

    @pytest.mark.asyncio
    async def test_backend_write_failure_is_swallowed(
        self, executor: FakeExecutor
    ) -> None:
        """Test a failing backend write still returns the query result."""
        backend = AsyncMock()
        backend.get.return_value = None
        backend.set.side_effect = ConnectionError("unreachable")
        service = CacheService(backend=backend, executor=executor)

        rows = await service.execute(USERS)

        assert rows == ROWS[USERS]
        assert service.stats["errors"] == 1

    @pytest.mark.asyncio
    async def test_undecodable_entry_degrades_to_miss(
        self,
        cache_service: CacheService,
        backend: InMemoryCacheBackend,
        executor: FakeExecutor,
    ) -> None:
        """Test a corrupted entry is treated as a miss and overwritten."""
        key = cache_service.build_key(USERS)
        await backend.set(key, b"\xff not json")

        rows = await cache_service.execute(USERS)

        assert rows == ROWS[USERS]
        assert executor.calls == [("all", USERS)]
        assert await backend.get(key) == JsonSerializer().serialize(ROWS[USERS])

    @pytest.mark.asyncio
    async def test_unserializable_result_skips_write(
        self, backend: InMemoryCacheBackend, executor: FakeExecutor
    ) -> None:
        """Test an encoding failure skips the write but returns the result."""
        live = [{"value": object()}]
        executor.fetch_all = AsyncMock(return_value=live)  # type: ignore[method-assign]
        service = CacheService(backend=backend, executor=executor)

        result = await service.execute(USERS)

        assert result is live
        assert len(backend) == 0

    @pytest.mark.asyncio
    async def test_lifecycle_errors_propagate(self, executor: FakeExecutor) -> None:
        """Test using a destroyed backend fails the call."""
        backend = AsyncMock()
        backend.get.side_effect = CacheDestroyedError("SQLCacheBackend: Cache has been destroyed")
        service = CacheService(backend=backend, executor=executor)

        with pytest.raises(CacheDestroyedError, match="Cache has been destroyed"):
            await service.execute(USERS)
        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_default_ttl_is_passed_to_backend(self, executor: FakeExecutor) -> None:
        """Test the configured TTL reaches the backend."""
        backend = AsyncMock()
        backend.get.return_value = None
        ttl = timedelta(seconds=30)
        service = CacheService(
            backend=backend, executor=executor, config=CacheConfig(default_ttl=ttl)
        )

        await service.execute(USERS)

        assert backend.set.await_args.args[2] == ttl

    @pytest.mark.asyncio
    async def test_default_ttl_expires_memory_entries(
        self, executor: FakeExecutor, timer: FakeTimer
    ) -> None:
        """Test the configured TTL shortens the lifetime of memory entries."""
        service = CacheService(
            backend=InMemoryCacheBackend(timer=timer),
            executor=executor,
            config=CacheConfig(default_ttl=timedelta(seconds=5)),
        )

        await service.execute(USERS)
        timer.advance(6)
        await service.execute(USERS)

        assert executor.calls == [("all", USERS), ("all", USERS)]

    @pytest.mark.asyncio
    async def test_cache_stats(self, cache_service: CacheService) -> None:
        """Test cache statistics tracking."""
        assert cache_service.stats == {"hits": 0, "misses": 0, "errors": 0, "total": 0}

        await cache_service.execute(USERS)
        assert cache_service.stats["misses"] == 1

        await cache_service.execute(USERS)
        assert cache_service.stats["hits"] == 1
        assert cache_service.stats["total"] == 2

    @pytest.mark.asyncio
    async def test_clear_cache(
        self, cache_service: CacheService, executor: FakeExecutor
    ) -> None:
        """Test clearing the cache forces re-execution."""
        await cache_service.execute(USERS)

        await cache_service.clear()
        await cache_service.execute(USERS)

        assert len(executor.calls) == 2
        assert cache_service.stats["misses"] == 1

    @pytest.mark.asyncio
    async def test_disabled_cache(
        self, backend: InMemoryCacheBackend, executor: FakeExecutor
    ) -> None:
        """Test that a disabled cache always executes."""
        service = CacheService(
            backend=backend, executor=executor, config=CacheConfig(enabled=False)
        )

        await service.execute(USERS)
        await service.execute_take_first(USERS)
        with pytest.raises(NoResultFound):
            await service.execute_take_first_or_raise("SELECT nothing")

        assert len(executor.calls) == 3
        assert len(backend) == 0

    def test_build_key_uses_config_prefix(self, executor: FakeExecutor) -> None:
        """Test the default key builder is namespaced by the config prefix."""
        service = CacheService(
            backend=InMemoryCacheBackend(),
            executor=executor,
            config=CacheConfig(key_prefix="app"),
        )

        assert service.build_key(USERS).startswith("app:")
        assert service.build_key(USERS) != service.build_key(USERS, "first")
