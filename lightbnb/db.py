# lightbnb/db.py
# Store session facility: async SQLAlchemy engine over PostgreSQL (production) or SQLite (dev)

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlparse

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine


class ExecutionError(Exception):
    """
    A statement failed in the store (connectivity, syntax, constraint violation).

    The driver exception is kept as __cause__; the message is safe to log but
    should not be returned to HTTP clients.
    """

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        self.query = query


def normalize_database_url(url: str) -> str:
    """Map plain postgres/sqlite URLs onto their async driver dialects."""
    if url.startswith("postgres://"):
        return "postgresql+asyncpg://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://"):]
    if url.startswith("sqlite://"):
        return "sqlite+aiosqlite://" + url[len("sqlite://"):]
    return url


def paramstyle_for_url(url: str) -> str:
    """
    Placeholder dialect for the given database URL.

    PostgreSQL takes $1, $2, ... (numeric_dollar); SQLite takes ?1, ?2, ... (numeric).
    """
    scheme = urlparse(url).scheme
    if scheme.startswith(("postgres", "postgresql")):
        return "numeric_dollar"
    if scheme.startswith("sqlite"):
        return "numeric"
    raise ValueError(f"Unsupported database URL scheme: {scheme!r}")


def _sqlite_case_sensitive_like(dbapi_connection, connection_record) -> None:
    """SQLite LIKE ignores ASCII case by default; city matching must not."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA case_sensitive_like = ON")
    cursor.close()


class Store:
    """
    Shared handle to the relational store.

    Opened by the application (or a test), passed into search and repository
    calls, and never owned by them. Each execute() checks out its own pooled
    connection, so concurrent in-flight calls do not share state.
    """

    def __init__(self, engine: AsyncEngine, paramstyle: str):
        self._engine = engine
        self._paramstyle = paramstyle

    @classmethod
    def from_url(cls, url: str) -> "Store":
        """Create the engine for DATABASE_URL (postgres:// or sqlite://)."""
        paramstyle = paramstyle_for_url(url)
        async_url = normalize_database_url(url)

        if paramstyle == "numeric_dollar":
            parsed = urlparse(async_url)
            if not parsed.netloc:
                raise ValueError(f"Invalid DATABASE_URL: {url[:20]}...")
            engine = create_async_engine(
                async_url,
                pool_pre_ping=True,  # Verify connections before use
                echo=False,
            )
            print(f"[DB] Using PostgreSQL ({parsed.hostname})")
        else:
            engine = create_async_engine(async_url, echo=False)
            event.listen(engine.sync_engine, "connect", _sqlite_case_sensitive_like)
            print(f"[DB] Using SQLite ({async_url.split(':///', 1)[-1]})")

        return cls(engine, paramstyle)

    @property
    def paramstyle(self) -> str:
        return self._paramstyle

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def execute(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Execute one statement with positional parameters.

        Returns the rows as plain dicts (empty list when the statement returns
        no rows). Raises ExecutionError on any store failure.
        """
        try:
            async with self._engine.begin() as conn:
                result = await conn.exec_driver_sql(query, tuple(params))
                if not result.returns_rows:
                    return []
                return [dict(row) for row in result.mappings().all()]
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            # Refused/unreachable connections surface from the driver unwrapped
            raise ExecutionError(str(e.__cause__ or e), query=query) from e

    async def dispose(self) -> None:
        await self._engine.dispose()
