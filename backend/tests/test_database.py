"""
Tutorials API — Database Handle Tests
======================================

What we test:
    ✅ ping() succeeds on a reachable store and raises on an unreachable one
    ✅ session() commits on success, rolls back on error
    ✅ safe_url masks the password
    ✅ from_settings() copies the connection options
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.config import Settings
from app.database import Database
from app.models.tutorial import Tutorial


class TestPing:

    @pytest.mark.asyncio
    async def test_ping_reachable(self, database):
        await database.ping()

    @pytest.mark.asyncio
    async def test_ping_unreachable_raises(self, tmp_path):
        db = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'x.db'}")
        try:
            with pytest.raises(OperationalError):
                await db.ping()
        finally:
            await db.dispose()


class TestSession:

    @pytest.mark.asyncio
    async def test_commit_on_success(self, database):
        async with database.session() as session:
            session.add(Tutorial(title="Committed"))

        async with database.session() as session:
            count = (await session.execute(select(func.count(Tutorial.id)))).scalar()
        assert count == 1

    @pytest.mark.asyncio
    async def test_rollback_on_error(self, database):
        with pytest.raises(RuntimeError):
            async with database.session() as session:
                session.add(Tutorial(title="Rolled back"))
                await session.flush()
                raise RuntimeError("handler failed")

        async with database.session() as session:
            count = (await session.execute(select(func.count(Tutorial.id)))).scalar()
        assert count == 0


class TestConstruction:

    def test_safe_url_masks_password(self):
        db = Database("postgresql+asyncpg://tutorials:s3cret@db:5432/tutorials")
        assert "s3cret" not in db.safe_url
        assert "***" in db.safe_url

    def test_from_settings(self):
        config = Settings(
            _env_file=None,
            database_url="postgresql+asyncpg://u:p@db:5432/tutorials",
            db_pool_size=7,
            db_max_overflow=3,
        )
        db = Database.from_settings(config)

        assert db.url == config.database_url
        assert db.engine.pool.size() == 7
