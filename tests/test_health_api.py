"""Health endpoint and shared HTTP behaviour."""
import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient
from framework.database.manager import DatabaseManager
from framework.middleware.logging_md import TRACE_HEADER

HEALTH = "/api/health/"


@pytest.fixture
async def database():
    manager = DatabaseManager.get_instance()
    yield manager
    await DatabaseManager.shutdown()


async def test_health_reports_database(client: AsyncClient, database):
    response = await client.get(HEALTH)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "Healthy"
    assert data["services"]["database"] == "Connected"
    assert data["version"]


async def test_health_when_database_is_down(client: AsyncClient, database, monkeypatch):
    monkeypatch.setattr(database.sql, "ping", AsyncMock(return_value=False))
    response = await client.get(HEALTH)
    assert response.status_code == 503
    body = response.json()
    assert body["state"] == "error"
    assert body["data"]["services"]["database"] == "Unavailable"


async def test_trace_id_is_echoed(client: AsyncClient, database):
    response = await client.get(HEALTH, headers={TRACE_HEADER: "trace-123"})
    assert response.headers[TRACE_HEADER] == "trace-123"


async def test_trace_id_is_generated(client: AsyncClient, database):
    response = await client.get(HEALTH)
    assert response.headers[TRACE_HEADER]


async def test_unknown_route_is_404(client: AsyncClient):
    response = await client.get("/api/v1/nothing-here")
    assert response.status_code == 404
