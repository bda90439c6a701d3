from unittest.mock import patch

import pytest
from django.db import OperationalError

pytestmark = pytest.mark.integration


class TestHealthCheck:
    def test_healthy(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["services"]["database"]["status"] == "up"
        assert data["services"]["cache"]["status"] == "up"
        assert "response_time_ms" in data["services"]["cache"]

    def test_storage_reported_but_not_required(self, client, settings):
        settings.AWS_S3_BUCKET = ""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["services"]["storage"] == {"status": "disabled"}

    def test_storage_configured(self, client, settings):
        settings.AWS_S3_BUCKET = "nail-designs"
        data = client.get("/health").json()
        assert data["services"]["storage"]["status"] == "configured"

    def test_cache_down_is_503(self, client):
        with patch("modules.core.views.cache") as cache:
            cache.get.return_value = None
            response = client.get("/health")
        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["services"]["cache"] == {"status": "down"}

    def test_database_down_is_503(self, client):
        with patch("modules.core.views.connections") as connections:
            connections.__getitem__.return_value.ensure_connection.side_effect = (
                OperationalError("connection refused")
            )
            response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["services"]["database"] == {"status": "down"}
