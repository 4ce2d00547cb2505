"""
Tutorials API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession (service unit tests, no DB)
    ├── fake_database:   Mock Database handle whose ping() tests can script
    ├── no_sleep:        AsyncMock standing in for asyncio.sleep
    ├── database:        Real Database on a throwaway SQLite file, schema created
    └── test_client:     HTTPX AsyncClient bound to create_app(database)
"""

import os
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "http://test"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.database import Base, Database
import app.models.tutorial  # noqa: F401  (registers the table on Base.metadata)


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
            result = await tutorial_service.get(mock_db_session, str(row.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def fake_database():
    """A Database stand-in: set fake_database.ping.side_effect to script outcomes."""
    db = MagicMock(spec=Database)
    db.ping = AsyncMock(return_value=None)
    db.safe_url = "postgresql+asyncpg://tutorials:***@db:5432/tutorials"
    return db


@pytest.fixture
def no_sleep():
    """Replaces the connector's timer; await_args_list holds the requested delays."""
    return AsyncMock(return_value=None)


@pytest_asyncio.fixture
async def database(tmp_path):
    """A real handle on a fresh SQLite file with the schema created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'tutorials.db'}")
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server, no lifespan).

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
    """
    from app.main import create_app

    app = create_app(database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
