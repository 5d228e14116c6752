"""
Simple test cases to verify test configuration.
"""
from httpx import AsyncClient
from sqlalchemy import text
from sqlmodel.ext.asyncio.session import AsyncSession
from main import app


async def test_app_exists(client: AsyncClient):
    """Test that app exists."""
    assert client is not None
    assert app.title


async def test_database_session(async_session: AsyncSession):
    """Test that database session works."""
    result = await async_session.execute(text("SELECT 1"))
    assert result.scalar() == 1


async def test_openapi_lists_every_area(client: AsyncClient):
    """Every router is mounted."""
    response = await client.get("/openapi.json")
    assert response.status_code == 200
    paths = response.json()["paths"]
    for prefix in ["/api/v1/auth", "/api/v1/users", "/api/v1/roles", "/api/v1/facilities",
                   "/api/v1/accreditations", "/api/v1/billing", "/api/v1/sessions", "/api/health"]:
        assert any(path.startswith(prefix) for path in paths), prefix
