"""Shared fixtures for API integration tests."""

import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from equine_center.database import Base, get_db
from equine_center.main import app
from equine_center.models import User
from equine_center.services import CommandCenterMonitor

from tests.fixtures.factories import Stable, build_stable, create_user


# Store engine globally but recreate per test session
_test_engine = None
_test_session_factory = None


def get_test_engine():
    """Get or create test engine."""
    global _test_engine
    if _test_engine is None:
        _test_engine = create_async_engine(
            "sqlite+aiosqlite:///:memory:",
            echo=False,
            future=True,
        )
    return _test_engine


def get_test_session_factory():
    """Get or create test session factory."""
    global _test_session_factory
    if _test_session_factory is None:
        _test_session_factory = async_sessionmaker(
            bind=get_test_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )
    return _test_session_factory


@pytest.fixture(scope="function")
async def db_engine():
    """Create in-memory SQLite engine for tests."""
    engine = get_test_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for tests."""
    session_factory = get_test_session_factory()
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="function")
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API tests."""
    # Create a dependency override that uses the test session
    async def get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = get_test_db
    previous_monitor = app.state.monitor
    app.state.monitor = CommandCenterMonitor(get_test_session_factory(), interval=3600)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up override
    app.state.monitor = previous_monitor
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def stable(db_session: AsyncSession) -> Stable:
    """Committed owners, locations, horses, assignments and a race."""
    return await build_stable(db_session, commit=True)


@pytest.fixture
async def owner_user(db_session: AsyncSession, stable: Stable) -> User:
    """Owner-role user linked to John Smith Racing by email."""
    user = create_user(username="johnsmith", email="john@smithracing.com", role="owner")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Admin user."""
    user = create_user()
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user
