from app.db import mongo


class PingableClient:
    def __init__(self, healthy=True):
        self.healthy = healthy
        self.admin = self

    async def command(self, name):
        if not self.healthy:
            raise ConnectionError("no primary")
        return {"ok": 1}


def test_root(client):
    data = client.get("/").json()
    assert data["status"] == "running"
    assert data["name"] == "FinSplit Onboarding API"


def test_live(client):
    assert client.get("/live").json() == {"status": "alive"}


def test_health_without_database(client, monkeypatch):
    monkeypatch.setattr(mongo, "_client", None)

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["checks"]["database"] == "unhealthy"
    assert client.get("/ready").status_code == 503


def test_health_with_database(client, monkeypatch):
    monkeypatch.setattr(mongo, "_client", PingableClient())

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert client.get("/ready").json() == {"status": "ready"}


def test_process_time_header(client):
    assert "x-process-time" in client.get("/live").headers
