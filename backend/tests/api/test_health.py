"""Tests for health check endpoints."""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from api.app import create_app
from api.dependencies import ServiceContainer


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client, test_settings):
        """Health endpoint should return 200 with status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == test_settings.app_version

    def test_health_response_structure(self, client):
        """Health response should have correct structure."""
        response = client.get("/api/health")
        assert set(response.json().keys()) == {"status", "version"}

    def test_readiness_check(self, client):
        """Readiness endpoint should return 200 with component status."""
        response = client.get("/api/ready")
        assert response.status_code == 200
        assert response.json() == {
            "status": "ready",
            "database": "connected",
            "payments": "not_configured",
        }

    def test_readiness_database_down(self, test_settings, memory_repository):
        """Readiness returns 503 when the database cannot be reached."""
        container = ServiceContainer(test_settings, repository=memory_repository)
        with patch.object(memory_repository, "ping", side_effect=ConnectionError("down")):
            with TestClient(create_app(settings=test_settings, container=container)) as client:
                response = client.get("/api/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "unavailable"
        assert response.json()["database"] == "unreachable"
