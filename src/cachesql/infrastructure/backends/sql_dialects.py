"""Per-dialect query generation for the SQL cache backend.

The sweep, read and write algorithms of :class:`SQLCacheBackend` are
dialect-agnostic; the statements they need that differ between
relational databases are produced by a :class:`DialectPolicy` chosen
once when the backend is built.
"""

from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import (
    BigInteger,
    Column,
    ColumnElement,
    Delete,
    Index,
    LargeBinary,
    MetaData,
    SmallInteger,
    String,
    Table,
    and_,
    delete,
    or_,
    select,
    text,
    update,
)
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql.dml import Insert

from cachesql.core.entities.cache_entry import CacheEntry

KEY_LENGTH = 255

_DIALECT_ALIASES = {
    "postgres": "postgresql",
    "mariadb": "mysql",
}


def build_cache_table(metadata: MetaData, name: str = "cache") -> Table:
    """Describe the cache table and its indexes.

    Columns: ``key`` (primary key), ``value`` (bytes), ``expires`` and
    ``last_access`` (epoch milliseconds) and ``compressed`` (0/1).
    """
    return Table(
        name,
        metadata,
        Column("key", String(KEY_LENGTH), primary_key=True),
        Column(
            "value",
            LargeBinary().with_variant(mysql.MEDIUMBLOB(), "mysql", "mariadb"),
            nullable=False,
        ),
        Column("expires", BigInteger, nullable=True),
        Column("last_access", BigInteger, nullable=False),
        Column(
            "compressed",
            SmallInteger,
            nullable=False,
            default=0,
            server_default=text("0"),
        ),
        Index(f"{name}_expires_index", "expires"),
        Index(f"{name}_last_access_index", "last_access"),
        Index(f"{name}_key_expires_index", "key", "expires"),
    )


class DialectPolicy(ABC):
    """Statements shared by every dialect.

    Subclasses provide the upsert and the atomic read-and-touch.
    """

    name = ""
    #: Whether the database accepts a single writer at a time.
    single_writer = False

    @abstractmethod
    def upsert(self, table: Table, values: dict[str, Any]) -> Insert:
        """Insert a row, or overwrite it in place when the key exists."""

    @abstractmethod
    async def touch_and_fetch(
        self,
        conn: AsyncConnection,
        table: Table,
        key: str,
        now: int,
    ) -> CacheEntry | None:
        """Bump ``last_access`` of a live row and return it, in one step."""

    def live_row(self, table: Table, key: str, now: int) -> ColumnElement[bool]:
        """Filter matching ``key`` whose expiry is absent or in the future."""
        return and_(
            table.c.key == key,
            or_(table.c.expires > now, table.c.expires.is_(None)),
        )

    def delete_expired(self, table: Table, now: int) -> Delete:
        """Delete every row that expired strictly before ``now``."""
        return delete(table).where(table.c.expires < now)

    def delete_least_recently_used(self, table: Table, keep: int) -> Delete:
        """Delete every row not among the ``keep`` most recently accessed.

        The victims are selected through a derived table, which every
        supported dialect accepts inside a DELETE on the same table.
        SQLAlchemy renders the bare OFFSET per dialect.
        """
        lru = (
            select(table.c.key)
            .order_by(table.c.last_access.desc(), table.c.key)
            .offset(keep)
            .subquery("lru")
        )
        return delete(table).where(table.c.key.in_(select(lru.c.key)))

    @staticmethod
    def _to_entry(row: Any) -> CacheEntry | None:
        if row is None:
            return None
        return CacheEntry(
            key=row.key,
            value=bytes(row.value),
            expires_at=row.expires,
            last_access=row.last_access,
            compressed=bool(row.compressed),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class _ReturningDialectPolicy(DialectPolicy):
    """Dialects supporting ``ON CONFLICT`` and ``UPDATE ... RETURNING``."""

    _insert = staticmethod(sqlite.insert)

    def upsert(self, table: Table, values: dict[str, Any]) -> Insert:
        stmt = self._insert(table).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=[table.c.key],
            set_={name: value for name, value in values.items() if name != "key"},
        )

    async def touch_and_fetch(
        self,
        conn: AsyncConnection,
        table: Table,
        key: str,
        now: int,
    ) -> CacheEntry | None:
        stmt = (
            update(table)
            .where(self.live_row(table, key, now))
            .values(last_access=now)
            .returning(*table.c)
        )
        result = await conn.execute(stmt)
        return self._to_entry(result.first())


class SQLiteDialectPolicy(_ReturningDialectPolicy):
    name = "sqlite"
    single_writer = True


class PostgreSQLDialectPolicy(_ReturningDialectPolicy):
    name = "postgresql"
    _insert = staticmethod(postgresql.insert)


class MySQLDialectPolicy(DialectPolicy):
    """MySQL and MariaDB: no RETURNING on UPDATE.

    The read is an update followed by a select on the same connection;
    the caller runs both inside one transaction, so the row stays
    locked between them.
    """

    name = "mysql"

    def upsert(self, table: Table, values: dict[str, Any]) -> Insert:
        stmt = mysql.insert(table).values(**values)
        return stmt.on_duplicate_key_update(
            {name: value for name, value in values.items() if name != "key"}
        )

    async def touch_and_fetch(
        self,
        conn: AsyncConnection,
        table: Table,
        key: str,
        now: int,
    ) -> CacheEntry | None:
        await conn.execute(
            update(table).where(self.live_row(table, key, now)).values(last_access=now)
        )
        result = await conn.execute(select(table).where(self.live_row(table, key, now)))
        return self._to_entry(result.first())


_POLICIES: dict[str, DialectPolicy] = {
    policy.name: policy
    for policy in (SQLiteDialectPolicy(), PostgreSQLDialectPolicy(), MySQLDialectPolicy())
}


def get_dialect_policy(name: str) -> DialectPolicy:
    """Return the policy for a dialect name such as ``engine.dialect.name``.

    Raises:
        ValueError: If the dialect is not supported.
    """
    normalized = _DIALECT_ALIASES.get(name, name)
    try:
        return _POLICIES[normalized]
    except KeyError:
        supported = ", ".join(sorted(_POLICIES))
        raise ValueError(
            f"Unsupported dialect {name!r}, expected one of {supported}"
        ) from None
