"""
Health endpoint tests.
"""

import pytest
from fastapi.testclient import TestClient

from medreminder.app import app


@pytest.fixture
def client():
    """Test client without the lifespan, so no database is attached."""
    return TestClient(app)


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["status"] == "healthy"
    assert "timestamp" in data["data"]
    assert "version" in data["data"]
    assert data["data"]["service"] == "MedReminder"


def test_liveness_endpoint(client):
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "alive"


def test_readiness_without_database(client):
    response = client.get("/health/ready")
    assert response.status_code == 503
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "NOT_READY"


def test_health_is_public_and_echoes_request_id(client):
    response = client.get("/health", headers={"X-Request-ID": "probe-123"})
    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "probe-123"
    assert response.json()["request_id"] == "probe-123"


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "MedReminder"
    assert "version" in data
    assert data["status"] == "running"
    assert data["endpoints"]["log_dose"] == "POST /reminders/{reminder_id}/log"
