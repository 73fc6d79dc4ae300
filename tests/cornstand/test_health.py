from __future__ import annotations

from fastapi.testclient import TestClient

from cornstand.app import create_app


def test_health_reports_store_liveness(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "redis": "PONG"}


def test_health_fails_when_store_is_down(failing_client, failing_store):
    response = failing_client.get("/health")
    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Redis unavailable"}
    assert failing_store.calls == ["ping"]


def test_store_is_closed_on_shutdown(settings, failing_store):
    with TestClient(create_app(settings=settings, store=failing_store)):
        assert failing_store.closed is False
    assert failing_store.closed is True
