"""Tests for security headers on API, health and docs responses."""

import pytest
from httpx import AsyncClient

from tests.helpers import register

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

EXPECTED = {
    "x-content-type-options": "nosniff",
    "x-frame-options": "DENY",
    "strict-transport-security": "max-age=31536000; includeSubDomains",
    "referrer-policy": "no-referrer",
}


def _assert_security_headers(response):
    for header, value in EXPECTED.items():
        assert response.headers[header] == value, header


async def test_health_response(client: AsyncClient):
    response = await client.get("/health")

    _assert_security_headers(response)
    assert response.headers["content-security-policy"].startswith("default-src 'none'")


async def test_api_success_and_error_responses(client: AsyncClient):
    created = await register(client)
    unauthorized = await client.get("/api/v1/auth/me")

    assert created.status_code == 201
    assert unauthorized.status_code == 401
    _assert_security_headers(created)
    _assert_security_headers(unauthorized)


async def test_docs_allow_swagger_assets(client: AsyncClient):
    response = await client.get("/docs")

    _assert_security_headers(response)
    assert "https://cdn.jsdelivr.net" in response.headers["content-security-policy"]


async def test_rate_limited_response(client: AsyncClient, enabled_limiter):
    for _ in range(5):
        await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "wrong-password-123"},
        )

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@example.com", "password": "wrong-password-123"},
    )

    assert response.status_code == 429
    _assert_security_headers(response)
