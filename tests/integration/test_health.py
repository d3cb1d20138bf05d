"""Tests for health checks and the metrics endpoint."""

import pytest
from httpx import AsyncClient
from redis.asyncio import Redis

from src.taskflow.core.config import get_settings
from src.taskflow.core.shutdown import request_tracker

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


async def test_liveness(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_liveness_reports_draining(client: AsyncClient):
    await request_tracker.start_shutdown()

    response = await client.get("/health")

    assert response.status_code == 503
    assert response.json() == {"status": "draining", "in_flight_requests": 0}


async def test_database_health(client: AsyncClient):
    response = await client.get("/health/db")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"


async def test_redis_health_without_redis(client: AsyncClient):
    response = await client.get("/health/redis")

    assert response.status_code == 200
    assert response.json()["redis"] == "not_configured"


async def test_redis_health_connected(
    client: AsyncClient, fake_redis: Redis, monkeypatch: pytest.MonkeyPatch
):
    async def _get_fake_redis() -> Redis:
        return fake_redis

    monkeypatch.setattr(get_settings(), "redis_url", "redis://localhost:6379/0")
    monkeypatch.setattr("src.taskflow.core.health.get_redis", _get_fake_redis)

    response = await client.get("/health/redis")

    assert response.status_code == 200
    assert response.json()["redis"] == "connected"


async def test_redis_health_unreachable(client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    async def _get_none() -> None:
        return None

    monkeypatch.setattr(get_settings(), "redis_url", "redis://localhost:6379/0")
    monkeypatch.setattr("src.taskflow.core.health.get_redis", _get_none)

    response = await client.get("/health/redis")

    assert response.status_code == 503
    assert response.json()["redis"] == "disconnected"


async def test_metrics_exposed(client: AsyncClient):
    await client.get("/api/v1/auth/me")

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "http_request" in response.text
