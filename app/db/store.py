"""
Store client wrapping the pooled PostgreSQL engine.

Statements are plain SQL with positional ``$n`` placeholders, sent through
``exec_driver_sql`` so the asyncpg driver binds them directly. Every driver or
SQLAlchemy failure leaves this module as a ``StoreError`` tagged with an
``ErrorKind``.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from structlog import get_logger

from app.config import Settings
from app.core.errors import StoreError
from app.core.result import ErrorKind

logger = get_logger()

_UNAVAILABLE = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.TimeoutError,
    OSError,
    asyncio.TimeoutError,
)
_DRIVER_ERRORS = (sa_exc.SQLAlchemyError, OSError, asyncio.TimeoutError)


def translate_error(exc: BaseException) -> StoreError:
    if isinstance(exc, sa_exc.IntegrityError):
        kind = ErrorKind.CONSTRAINT_VIOLATION
    elif isinstance(exc, _UNAVAILABLE):
        kind = ErrorKind.STORE_UNAVAILABLE
    elif isinstance(exc, sa_exc.DBAPIError) and exc.connection_invalidated:
        kind = ErrorKind.STORE_UNAVAILABLE
    else:
        kind = ErrorKind.QUERY_FAILED
    # SQLAlchemy appends the statement and a docs link on further lines
    message = str(exc).splitlines()[0] if str(exc) else type(exc).__name__
    return StoreError(kind, message)


async def _fetch(conn: AsyncConnection, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
    result = await conn.exec_driver_sql(sql, tuple(params))
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings().all()]


class StoreSession:
    """Statements issued on one connection inside an open transaction."""

    def __init__(self, conn: AsyncConnection):
        self._conn = conn

    async def fetch(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        try:
            return await _fetch(self._conn, sql, params)
        except _DRIVER_ERRORS as e:
            raise translate_error(e) from e

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        rows = await self.fetch(sql, params)
        return rows[0] if rows else None


class Store:
    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    async def fetch(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Run a read. The connection is released without committing, so writes go through ``transaction``."""
        try:
            async with self._engine.connect() as conn:
                return await _fetch(conn, sql, params)
        except _DRIVER_ERRORS as e:
            raise translate_error(e) from e

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        rows = await self.fetch(sql, params)
        return rows[0] if rows else None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreSession]:
        """Commit when the block exits cleanly, roll back when it raises."""
        try:
            async with self._engine.begin() as conn:
                yield StoreSession(conn)
        except _DRIVER_ERRORS as e:
            raise translate_error(e) from e

    async def ping(self) -> None:
        await self.fetch("SELECT 1")

    async def dispose(self) -> None:
        await self._engine.dispose()


def create_store(settings: Settings) -> Store:
    engine = create_async_engine(
        settings.DATABASE_URL,
        pool_size=settings.DB_POOL_SIZE,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,
        connect_args={
            "timeout": settings.DB_CONNECT_TIMEOUT,
            "command_timeout": settings.DB_COMMAND_TIMEOUT,
        },
    )
    logger.info("Store engine created", pool_size=settings.DB_POOL_SIZE)
    return Store(engine)
