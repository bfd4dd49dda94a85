from __future__ import annotations


def test_health_check(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["status"] == "ok"
    assert payload["meta"]["source"] == "system"


def test_health_check_liveness(client):
    response = client.get("/api/v1/healthz")
    assert response.status_code == 200
    assert response.json()["data"] == {"status": "ok"}


def test_health_check_reports_version(client):
    payload = client.get("/api/v1/health").json()
    assert payload["data"]["version"] == "0.1.0"
    assert client.app.version == "0.1.0"
