"""Tests for main application."""

from fastapi.testclient import TestClient

from olofalumni.main import app

client = TestClient(app)


def test_root() -> None:
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert data["status"] == "ok"


def test_health() -> None:
    """Test health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"


def test_api_health_reports_timestamp() -> None:
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "T" in data["timestamp"]


def test_routes_require_token() -> None:
    response = client.get("/api/posts")
    assert response.status_code == 401
    assert response.json()["detail"] == "Access token required"
