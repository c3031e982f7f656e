"""
Notekeep Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests (no DB)
    ├── db_engine:       Fresh SQLite file database with all tables created
    ├── test_app:        App instance whose get_db_session uses db_engine
    ├── test_client:     HTTPX AsyncClient talking to test_app in-process
    └── auth_headers:    Builds an Authorization header for a given user id
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTH_JWT_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from datetime import datetime, timezone
from typing import AsyncGenerator, Callable, Dict
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.database import Base, get_db_session
from app.main import create_app
from app.security import UserContext, issue_session_token
import app.models  # noqa: F401  (registers tables on Base.metadata)


ALICE = "user-alice"
BOB = "user-bob"


# ══════════════════════════════════════════════════════════════════════════
# Service Unit Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
            result = await note_service.get_note(mock_db_session, user, note_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def alice() -> UserContext:
    return UserContext(user_id=ALICE)


@pytest.fixture
def bob() -> UserContext:
    return UserContext(user_id=BOB)


@pytest.fixture
def make_orm_tag():
    """Builds a plain object shaped like a Tag row."""
    def _make(tag_id: str = "t1", name: str = "Work", user_id: str = ALICE):
        now = datetime.now(timezone.utc)
        return SimpleNamespace(id=tag_id, user_id=user_id, name=name, created_at=now, updated_at=now)
    return _make


@pytest.fixture
def make_orm_note():
    """Builds a plain object shaped like a Note row."""
    def _make(note_id: str = "n1", user_id: str = ALICE, tags=None, **fields):
        note = SimpleNamespace()
        note.id = note_id
        note.user_id = user_id
        note.title = fields.get("title", "Groceries")
        note.content = fields.get("content", "milk, eggs")
        note.color = fields.get("color", "#ffffff")
        note.is_pinned = fields.get("is_pinned", False)
        note.is_archived = fields.get("is_archived", False)
        note.is_deleted = fields.get("is_deleted", False)
        note.reminder = fields.get("reminder", None)
        note.images = fields.get("images", [])
        note.created_at = datetime.now(timezone.utc)
        note.updated_at = datetime.now(timezone.utc)
        note.tags = tags or []
        return note
    return _make


# ══════════════════════════════════════════════════════════════════════════
# Endpoint Test Fixtures (real SQLite database)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A fresh SQLite database file per test, schema created from the models."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'notekeep_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def test_app(db_engine):
    """
    App instance whose session dependency is bound to db_engine.

    The override keeps the production commit/rollback behaviour so every
    request is one transaction, exactly as in get_db_session.
    """
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application = create_app()
    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    """auth_headers("user-alice") → {"Authorization": "Bearer <token for alice>"}"""
    def _headers(user_id: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {issue_session_token(user_id)}"}
    return _headers
