"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

from modules.gateway import GatewayError


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        """Health endpoint should return 200 with status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}

    def test_readiness_check(self, client):
        """Readiness endpoint reports the gateway backend."""
        response = client.get("/api/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "backend": "memory", "gateway": "connected"}

    def test_readiness_degraded(self, client, container):
        """A failing gateway is reported, not raised."""
        container.gateway.count_documents = AsyncMock(side_effect=GatewayError("down"))

        response = client.get("/api/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["gateway"] == "unavailable"
