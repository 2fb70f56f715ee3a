"""Tests for admin authentication."""

from fastapi.testclient import TestClient

from meal_planner.api.app import create_app
from meal_planner.containers import AppContainer


def test_admin_health_requires_token(container: AppContainer) -> None:
    app = create_app(container)
    client = TestClient(app)

    response = client.get("/admin/health")

    assert response.status_code == 401


def test_admin_health_rejects_wrong_token(container: AppContainer) -> None:
    app = create_app(container)
    client = TestClient(app)

    response = client.get("/admin/health", headers={"X-Admin-Token": "nope"})

    assert response.status_code == 401


def test_admin_health_accepts_valid_token(container: AppContainer) -> None:
    app = create_app(container)
    client = TestClient(app)

    response = client.get("/admin/health", headers={"X-Admin-Token": "admin-token"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "environment": "test"}
