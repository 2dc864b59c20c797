"""Root conftest — shared test configuration and SQLite fixtures.

Invariants:
    - Tests never reach a real database: DATABASE_URL points at SQLite
    - Every SQL test gets a fresh SQLite database in its tmp_path
"""

import os

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)

from donor_privacy.db.base import Base  # noqa: E402
import donor_privacy.models.user  # noqa: E402,F401
import donor_privacy.models.collective  # noqa: E402,F401
import donor_privacy.models.membership  # noqa: E402,F401
import donor_privacy.models.order  # noqa: E402,F401
import donor_privacy.models.transaction  # noqa: E402,F401


@pytest.fixture
async def test_engine(tmp_path):
    # File-backed: concurrent lookups each get their own connection to one DB
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'donors.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session
