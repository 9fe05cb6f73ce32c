"""
Order API Connection Pool
=========================

What:  Async SQLAlchemy engine, bounded connection pool, and the FastAPI
       dependency that hands the pool to services.
How:   `Database` owns one async engine. `Database.connection()` checks a
       connection out, runs the caller's statement inside a transaction,
       commits or rolls back, and always returns the connection to the pool.
Who:   Built by `create_app()` and stored on `app.state.database`; services
       receive it through `get_database`.

Connection Pooling Strategy:
    pool_size=N, max_overflow=0:  at most N connections checked out at once
    pool_timeout:                 wait for a free connection (pool_exhausted)
    connect timeout:              driver-level, for opening new connections
    pool_pre_ping:                validates connections before use
    pool_recycle:                 recycles long-lived connections
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from order_api.config import Settings
from order_api.exceptions import classify_storage_error

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for the ORM-mapped tables this service writes to."""
    pass


def _connect_args(database_url: str, connect_timeout: float) -> Dict[str, Any]:
    """Driver keyword for the initial connect timeout, per backend."""
    backend = make_url(database_url).get_backend_name()
    if backend == "postgresql":
        return {"timeout": connect_timeout}
    if backend in ("mysql", "mariadb"):
        return {"connect_timeout": int(connect_timeout)}
    if backend == "sqlite":
        return {"timeout": connect_timeout}
    return {}


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create the async engine with a fixed-size pool and both timeouts."""
    return create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=settings.db_pool_recycle,
        connect_args=_connect_args(settings.database_url, settings.db_connect_timeout),
        echo=settings.log_level == "DEBUG",
    )


class Database:
    """
    Bounded pool of database connections shared by all in-flight requests.

    The engine is created eagerly but opens no connection until the first
    `connection()` call, so building a `Database` never touches the server.
    """

    def __init__(self, settings: Settings, engine: Optional[AsyncEngine] = None):
        self.settings = settings
        self.engine = engine or create_engine_from_settings(settings)

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        """
        Check out one connection for exactly one unit of work.

        How it works:
            1. Acquire a connection (bounded wait on the pool)
            2. Begin a transaction and yield the connection
            3. On success: commit; on error: roll back
            4. Always: release the connection back to the pool

        Raises:
            StorageError (classified) for any pool, driver or statement failure,
            including a bound parameter the driver cannot convert.
            Other exceptions raised by the caller propagate unchanged.
        """
        conn: Optional[AsyncConnection] = None
        try:
            conn = await self.engine.connect()
            async with conn.begin():
                yield conn
        except (SQLAlchemyError, OSError, OverflowError) as exc:
            error = classify_storage_error(exc)
            logger.error("Storage failure [%s]: %s", error.code, error.detail)
            raise error from exc
        finally:
            if conn is not None:
                await conn.close()

    def checked_out(self) -> int:
        """Number of connections currently handed out by the pool."""
        return self.engine.pool.checkedout()

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the pool owned by the running application."""
    return request.app.state.database
