from fastapi.testclient import TestClient

from research_links.config import settings
from research_links.main import app


def test_auth_accepts_admin_key(client, admin_headers):
    response = client.get("/api/auth", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"authenticated": True}


def test_auth_rejects_wrong_key(client):
    response = client.get("/api/auth", headers={"x-admin-key": "nope"})
    assert response.status_code == 401
    assert response.json() == {"detail": "unauthorized"}


def test_admin_endpoints_require_key(client):
    for path in ["/api/links", "/api/collections", "/api/stats", "/api/export", "/api/tags?action=stats"]:
        assert client.get(path).status_code == 401


def test_unset_admin_key_rejects_everything(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_KEY", None)

    assert client.get("/api/links").status_code == 401
    assert client.get("/api/links", headers={"x-admin-key": ""}).status_code == 401


def test_public_endpoints_are_open(client):
    assert client.get("/api/directory").status_code == 200
    assert client.get("/api/directory/collections").status_code == 200


def test_health_reports_store(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["store"] is True
    assert response.json()["status"] == "healthy"


def test_shutdown_closes_store(monkeypatch):
    closed = []
    monkeypatch.setattr("research_links.main.close_redis", lambda: closed.append(True))

    with TestClient(app):
        assert closed == []

    assert closed == [True]
