import pytest

from routers import health


@pytest.mark.asyncio
async def test_liveness(api_client):
    resp = await api_client.get("/health/live")
    assert resp.status_code == 200
    assert resp.json() == {"alive": True}


@pytest.mark.asyncio
async def test_readiness_reports_database_outage(api_client, monkeypatch):
    async def _down():
        return "down: connection refused"

    monkeypatch.setattr(health, "_database_status", _down)
    resp = await api_client.get("/health/ready")
    assert resp.status_code == 503
    assert resp.json() == {"ready": False, "database": "down: connection refused"}


@pytest.mark.asyncio
async def test_readiness_when_database_up(api_client, monkeypatch):
    async def _up():
        return "up"

    monkeypatch.setattr(health, "_database_status", _up)
    resp = await api_client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json() == {"ready": True}
