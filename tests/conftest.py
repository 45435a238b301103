"""
Snippetbox — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── snippet_store:   MagicMock standing in for SnippetService
    ├── user_store:      MagicMock standing in for UserService
    ├── application:     Application context wired with the fake stores
    ├── web_app:         FastAPI app built around `application`
    ├── test_client:     HTTPX AsyncClient for page-level tests
    └── logged_in_client: test_client after a successful login
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any snippetbox imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="snippetbox_test_"), "test.db"
)
os.environ["SESSION_SECRET_KEY"] = "test-session-secret-key-that-is-long-enough"
os.environ["SESSION_COOKIE_SECURE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from snippetbox.config import settings
from snippetbox.context import Application
from snippetbox.database import get_db_session
from snippetbox.main import create_app
from snippetbox.models.snippet import Snippet
from snippetbox.render import TemplateRenderer
from snippetbox.services.snippet_service import SnippetService
from snippetbox.services.user_service import UserService

LOGGED_IN_USER_ID = 7


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = snippet
            result = await service.get(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def renderer():
    return TemplateRenderer(settings.templates_dir)


@pytest.fixture
def snippet_store():
    store = MagicMock(spec=SnippetService)
    store.insert = AsyncMock(return_value=1)
    store.get = AsyncMock()
    store.latest = AsyncMock(return_value=[])
    return store


@pytest.fixture
def user_store():
    store = MagicMock(spec=UserService)
    store.insert = AsyncMock(return_value=None)
    store.authenticate = AsyncMock(return_value=LOGGED_IN_USER_ID)
    store.exists = AsyncMock(return_value=True)
    return store


@pytest.fixture
def application(renderer, snippet_store, user_store):
    return Application(renderer=renderer, snippets=snippet_store, users=user_store)


@pytest.fixture
def web_app(application, mock_db_session):
    app = create_app(application)

    async def override_db_session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = override_db_session
    return app


@pytest_asyncio.fixture
async def test_client(web_app):
    """
    HTTPX AsyncClient routed straight into the app through ASGITransport.

    Redirects are not followed so tests can assert on 303s. The client keeps
    cookies, so the session carries across requests within one test.
    """
    transport = ASGITransport(app=web_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def logged_in_client(test_client):
    response = await test_client.post(
        "/user/login", data={"email": "alice@example.com", "password": "pa55word!"}
    )
    assert response.status_code == 303
    return test_client


@pytest.fixture
def sample_snippet():
    now = datetime.now(timezone.utc)
    return Snippet(
        id=5,
        title="An old silent pond",
        content="An old silent pond...\nA frog jumps into the pond,\nsplash! Silence again.",
        created=now,
        expires=now + timedelta(days=7),
    )
