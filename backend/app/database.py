"""
Tutorials API — Database Handle
================================

What:  Explicit handle around the async SQLAlchemy engine and session factory.
Why:   The handle is created once by the entry point, proven reachable by the
       startup connector, then passed to the app factory. Nothing holds an
       engine at module scope, so tests build as many handles as they like.
How:   `Database` owns an AsyncEngine plus an async_sessionmaker and exposes
       ping / session / dispose. FastAPI reaches it through app.state.
Who:   server.py (creates it), connector.py (pings it), main.py (stores it),
       routes (via the get_db_session dependency).

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings and only apply
    to pooled dialects. SQLite (used by the tests) gets SQLAlchemy's default pool.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations and
    the tests use to create the schema.
    """
    pass


class Database:
    """
    Handle to the backing store.

    Lifecycle:
        1. Built by the entry point from settings (no I/O yet; engines connect lazily)
        2. ping() is retried by the startup connector until it succeeds
        3. session() serves route handlers for the life of the process
        4. dispose() closes pooled connections at shutdown
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        self.url = url
        engine_options: Dict[str, Any] = {"echo": echo}
        if make_url(url).get_backend_name() != "sqlite":
            engine_options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=pool_pre_ping,
                pool_recycle=3600,  # Recycle after 1 hour to prevent stale connections
            )
        self.engine: AsyncEngine = create_async_engine(url, **engine_options)

        # expire_on_commit=False: attributes stay readable after the commit in session()
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle from application settings."""
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    @property
    def safe_url(self) -> str:
        """Connection URL with the password masked, for log lines."""
        return make_url(self.url).render_as_string(hide_password=True)

    async def ping(self) -> None:
        """
        Open a connection and run SELECT 1.

        This is one connection attempt as far as the startup connector is
        concerned. Any driver or network error propagates unchanged.
        """
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a session that commits on success and rolls back on error.

        Connection is returned to the pool even if the caller raises.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Close all connections in the pool."""
        await self.engine.dispose()
        logger.info("Database connections closed")


# ── FastAPI Dependencies ──────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """The handle create_app() stored on the application."""
    return request.app.state.database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/tutorials")
        async def list_tutorials(db: AsyncSession = Depends(get_db_session)):
            ...

    Database exceptions propagate to the global error handler.
    """
    async with get_database(request).session() as session:
        yield session
