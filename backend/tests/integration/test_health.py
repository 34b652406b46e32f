import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Health reports ok when the database answers."""
    response = await client.get("/_api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert body["uptime"] >= 0


@pytest.mark.asyncio
async def test_metrics_exposition(client: AsyncClient, seeded_servers):
    await client.get("/api/v1/lookup", params={"domain": "github.com"})

    response = await client.get("/_api/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert 'registry_lookup_requests_total{outcome="match"}' in response.text
    assert "registry_lookup_duration_seconds_bucket" in response.text
    assert 'registry_lookup_cache_total{result="miss"}' in response.text
