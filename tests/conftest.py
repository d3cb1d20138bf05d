"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Must be set before any app imports: disables rate limiting and keeps
# password hashing cheap
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-access-signing-key-0123456789abcdef")
os.environ.setdefault("JWT_REFRESH_SECRET_KEY", "test-refresh-signing-key-0123456789abcdef")
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")
os.environ.pop("REDIS_URL", None)

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator

import pytest
from fakeredis import aioredis as fakeredis_aio
from redis.asyncio import Redis

from src.taskflow.core import redis as redis_core
from src.taskflow.core.config import get_settings

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


# --- Redis Test Fixtures (shared) ---


@pytest.fixture
async def fake_redis() -> AsyncGenerator[Redis]:
    """In-memory Redis that behaves like a real server."""
    client = fakeredis_aio.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def mock_redis(fake_redis: Redis, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[Redis]:
    """Patches get_redis() to return the fakeredis client.

    Patches both src.taskflow.core.redis and src.taskflow.core.cache, since
    the cache module imports get_redis by name.
    """
    redis_core.reset_redis_state()

    async def _get_fake_redis() -> Redis:
        return fake_redis

    monkeypatch.setattr("src.taskflow.core.redis.get_redis", _get_fake_redis)
    monkeypatch.setattr("src.taskflow.core.cache.get_redis", _get_fake_redis)
    yield fake_redis
    redis_core.reset_redis_state()


@pytest.fixture
async def mock_redis_unavailable(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[None]:
    """Patches get_redis() to return None (simulates Redis unavailable)."""
    redis_core.reset_redis_state()

    async def _get_none() -> None:
        return None

    monkeypatch.setattr("src.taskflow.core.redis.get_redis", _get_none)
    monkeypatch.setattr("src.taskflow.core.cache.get_redis", _get_none)
    yield
    redis_core.reset_redis_state()
