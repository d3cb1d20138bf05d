"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file with the full schema, and an
application wired to it through ``create_app(database=...)``.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from slowapi import Limiter
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

import src.taskflow.models  # noqa: F401 - registers tables on SQLModel.metadata
from src.taskflow.core import redis as redis_core
from src.taskflow.core.db import Database
from src.taskflow.core.rate_limit import limiter
from src.taskflow.core.shutdown import request_tracker
from src.taskflow.main import create_app
from tests.helpers import create_organization_via_api, register_and_login


@pytest.fixture(autouse=True)
async def _reset_redis_between_tests() -> AsyncGenerator[None]:
    """Redis clients hold a reference to their event loop; never reuse one across tests."""
    redis_core.reset_redis_state()
    yield
    await redis_core.close_redis()


@pytest.fixture(autouse=True)
def _reset_request_tracker() -> Generator[None]:
    request_tracker.reset()
    yield
    request_tracker.reset()


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database]:
    """Fresh schema in a per-test SQLite file."""
    db = Database.from_url(f"sqlite+aiosqlite:///{tmp_path / 'taskflow.db'}")
    event.listen(db.engine.sync_engine, "connect", _enable_foreign_keys)

    async with db.engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for arranging and inspecting data.

    The session does NOT auto-commit. Commit before calling the API so the
    application's own sessions see the data.
    """
    async with database.session() as session:
        yield session


@pytest.fixture
async def client(database: Database) -> AsyncGenerator[AsyncClient]:
    """HTTP client for an app bound to the per-test database."""
    app = create_app(database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def registered_user(client: AsyncClient) -> dict[str, Any]:
    """A freshly registered user: {"user", "access_token", "refresh_token", "password"}."""
    return await register_and_login(client)


@pytest.fixture
async def owner_with_organization(
    client: AsyncClient, registered_user: dict[str, Any]
) -> dict[str, Any]:
    """A registered user who created (and therefore owns) one organization."""
    organization = await create_organization_via_api(client, registered_user["access_token"])
    return {**registered_user, "organization": organization}


@pytest.fixture
def enabled_limiter() -> Generator[Limiter]:
    """Turn rate limiting on with empty buckets; it is disabled under APP_ENV=testing."""
    limiter.reset()
    limiter.enabled = True
    yield limiter
    limiter.enabled = False
    limiter.reset()
