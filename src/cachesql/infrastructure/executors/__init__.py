"""Query executors for cachesql."""

from cachesql.infrastructure.executors.sqlalchemy import SQLAlchemyExecutor

__all__ = ["SQLAlchemyExecutor"]
