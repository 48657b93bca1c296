"""API tests: health and root endpoints."""
import pytest

pytestmark = [pytest.mark.api, pytest.mark.asyncio]


async def test_health_returns_200(client):
    """GET /health returns 200 and service info."""
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "locations-api"}


async def test_root_returns_info(client):
    """GET / returns service info and docs link."""
    r = await client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert data["docs"] == "/docs"
    assert data["health"] == "/health"
