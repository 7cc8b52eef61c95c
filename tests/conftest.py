"""Shared test fixtures."""

import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from equine_center.config import Settings
from equine_center.database import Base
from equine_center.models import Horse, Location, Owner

from tests.fixtures.factories import Stable, build_stable, create_horse, create_location, create_owner


@pytest.fixture
async def db_engine():
    """Create in-memory SQLite engine for tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session with transaction rollback."""
    async_session = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        database_url="sqlite:///:memory:",
        log_dir=tmp_path / "logs",
        seed_sample_data=False,
        command_center_monitor_enabled=False,
    )


@pytest.fixture
async def test_owner(db_session: AsyncSession) -> Owner:
    """Create a sample owner for testing."""
    owner = create_owner()
    db_session.add(owner)
    await db_session.flush()
    return owner


@pytest.fixture
async def test_horse(db_session: AsyncSession, test_owner: Owner) -> Horse:
    """Create a sample horse for testing."""
    horse = create_horse(owner_id=test_owner.id)
    db_session.add(horse)
    await db_session.flush()
    return horse


@pytest.fixture
async def test_location(db_session: AsyncSession) -> Location:
    """Create a sample location for testing."""
    location = create_location()
    db_session.add(location)
    await db_session.flush()
    return location


@pytest.fixture
async def stable(db_session: AsyncSession) -> Stable:
    """Owners, locations, horses, assignments and a race, linked together."""
    return await build_stable(db_session)
