"""
Tests for authentication and health endpoints.
"""

from typing import Dict

import pytest
from httpx import AsyncClient

from agrofinance.models.user import User


@pytest.mark.asyncio
async def test_login_returns_token(async_client: AsyncClient, admin_user: User) -> None:
    response = await async_client.post(
        "/api/v1/auth/login",
        data={"username": "admin@agrolink.org", "password": "adminpassword123"},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    summary = await async_client.get(
        "/api/v1/finance/summary",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert summary.status_code == 200


@pytest.mark.asyncio
async def test_login_with_wrong_password(async_client: AsyncClient, admin_user: User) -> None:
    response = await async_client.post(
        "/api/v1/auth/login",
        data={"username": "admin@agrolink.org", "password": "wrong-password"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(async_client: AsyncClient) -> None:
    response = await async_client.get(
        "/api/v1/finance/summary",
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_health_is_public(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "x-request-id" in response.headers


@pytest.mark.asyncio
async def test_request_id_is_echoed(async_client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    response = await async_client.get(
        "/api/v1/finance/summary",
        headers={**auth_headers, "X-Request-ID": "req-123"},
    )
    assert response.headers["x-request-id"] == "req-123"
