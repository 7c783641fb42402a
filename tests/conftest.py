"""
Users API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test gets its own empty SQLite database, so tests never share rows.
How:   aiosqlite file databases under pytest's tmp_path; the real application
       factory with that Database injected; HTTPX AsyncClient over ASGITransport.

Fixture Hierarchy (all function-scoped):
    ├── database:           empty Users table in a fresh SQLite file
    ├── user_service:       UserService bound to `database`
    ├── test_client:        AsyncClient talking to create_app(database=database)
    ├── unreachable_database: Database whose connections always fail
    └── broken_client:      AsyncClient whose store is unreachable
"""

import os
import tempfile

# Override settings BEFORE any users_api import: users_api.config reads the
# environment once, and create_app() falls back to those settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="users_api_test_"), "import.db"
)
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from users_api.database import Database
from users_api.main import create_app
from users_api.services.user_service import UserService


@pytest_asyncio.fixture
async def database(tmp_path):
    """
    Provides a Database with an empty Users table.

    What:    A fresh SQLite file per test.
    Why:     Tests assert on full-collection snapshots; shared rows would leak.
    """
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def user_service(database):
    return UserService(database)


@pytest_asyncio.fixture
async def unreachable_database(tmp_path):
    """
    Provides a Database that cannot open its file.

    What:    SQLite URL pointing into a directory that does not exist.
    Why:     Every statement fails at connect time, like a store that is down.
    """
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'users.db'}")
    yield db
    await db.dispose()


async def _client_for(database: Database):
    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP client for the app serving `database`.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/users")
            assert response.status_code == 200
    """
    async for client in _client_for(database):
        yield client


@pytest_asyncio.fixture
async def broken_client(unreachable_database):
    """Async HTTP client for an app whose store is unreachable."""
    async for client in _client_for(unreachable_database):
        yield client


@pytest.fixture
def alice():
    return {"username": "alice", "email": "alice@example.com", "age": 30}
