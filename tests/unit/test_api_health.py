from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.api.routes import health

pytestmark = pytest.mark.asyncio


async def test_health_endpoint_returns_service_metadata(
    async_client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(health, "get_session_factory", lambda: session_factory)

    response = await async_client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["service"]
    assert payload["status"] == "ok"
    assert payload["datastores"]["postgres"] == {"status": "ok"}
    assert payload["uptime_seconds"] >= 0
    assert response.headers["X-Request-ID"]


async def test_health_reports_degraded_database(
    async_client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def failing_check() -> dict:
        return {"status": "error", "message": "connection refused"}

    monkeypatch.setattr(health, "check_postgres", failing_check)

    response = await async_client.get("/health", headers={"x-request-id": "req-123"})

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.headers["X-Request-ID"] == "req-123"
