"""
Quizo Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Test store:
    A throwaway SQLite file driven by aiosqlite. Tables are created from the
    ORM metadata before each test that needs them and dropped afterwards.
    The engine is disposed after every test because pooled aiosqlite
    connections belong to the event loop that opened them.

Fixture Hierarchy (all function-scoped):
    ├── setup_db: Creates and drops all tables
    ├── db_session: AsyncSession on the test store
    ├── seed_user: A known teacher account
    ├── quiz_app: A fresh FastAPI app (fresh rate-limit counters)
    └── test_client: HTTPX AsyncClient bound to quiz_app
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports
# Why: app.database builds its engine from settings at import time
_TEST_DIR = tempfile.mkdtemp(prefix="quizo_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/quizo_test.db"
os.environ["CORS_ORIGINS"] = "https://quizo-frontend.vercel.app"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from app.database import Base, async_session_factory, engine  # noqa: E402
from app.models.quiz import Quiz  # noqa: E402,F401
from app.models.user import User  # noqa: E402


TEST_USERNAME = "ms.frizzle"
TEST_PASSWORD = "magic-school-bus"


@pytest_asyncio.fixture
async def setup_db():
    """Create every table for one test, then drop them and close the pool."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(setup_db):
    """
    Provides a real AsyncSession against the SQLite test store.

    Usage:
        async def test_create(db_session):
            quiz = await quiz_service.create(db_session, "T", "D", 1)
    """
    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seed_user(setup_db):
    """Inserts one teacher account and returns its id and credentials."""
    async with async_session_factory() as session:
        user = User(username=TEST_USERNAME, password=TEST_PASSWORD)
        session.add(user)
        await session.commit()
        return {"id": user.id, "username": TEST_USERNAME, "password": TEST_PASSWORD}


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session for failure injection.

    What:    An AsyncMock that simulates AsyncSession behavior.
    Why:     Driver errors are easier to raise from a mock than from SQLite.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def quiz_app():
    """A freshly built app, so rate-limit and slow-down counters start at zero."""
    from app.main import create_app
    return create_app()


@pytest_asyncio.fixture
async def test_client(setup_db, quiz_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=quiz_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_quiz():
    """Request body for a valid quiz."""
    return {"title": "Algebra", "description": "Basics", "teacher_id": 7}
