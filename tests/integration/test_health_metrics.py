"""Integration tests for /healthz and /metrics endpoints."""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from backend.app.config import Settings
from backend.app.main import app
from backend.app.routing.executor import LookupConfig, get_breaker_registry


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


class TestHealthEndpoint:
    """Test /health and /healthz endpoints."""

    def test_health_is_always_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @patch("backend.app.api.routes.health.check_db")
    def test_healthz_returns_200_when_db_ok(
        self, mock_check_db: MagicMock, client: TestClient
    ) -> None:
        mock_check_db.return_value = (True, "ok")

        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["components"]["db"] == "ok"
        assert data["components"]["routing"] in ("google", "estimate")

    @patch("backend.app.api.routes.health.check_db")
    def test_healthz_returns_503_when_db_fails(
        self, mock_check_db: MagicMock, client: TestClient
    ) -> None:
        mock_check_db.return_value = (False, "connection refused")

        response = client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["db"] == "connection refused"

    @patch("backend.app.api.routes.health.check_db")
    def test_open_breaker_is_reported_but_not_fatal(
        self, mock_check_db: MagicMock, client: TestClient
    ) -> None:
        mock_check_db.return_value = (True, "ok")
        config = LookupConfig(hard_timeout_ms=1000, breaker_failure_threshold=1)
        breaker = get_breaker_registry().get_or_create("distance_matrix", config)
        breaker.record_failure(datetime.now())

        response = client.get("/healthz")

        assert response.status_code == 200
        assert "breaker open: distance_matrix" in response.json()["components"]["routing"]

    def test_check_db_against_sqlite(self, client: TestClient) -> None:
        """The real check runs SELECT 1 through the sync engine."""
        with patch(
            "backend.app.api.routes.health.get_settings",
            return_value=Settings(database_url="sqlite+aiosqlite:///:memory:"),
        ):
            response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["components"]["db"] == "ok"


class TestMetricsEndpoint:
    """Test /metrics endpoint."""

    def test_metrics_returns_prometheus_format(self, client: TestClient) -> None:
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert "# HELP" in response.text

    def test_metrics_includes_routing_metrics(self, client: TestClient) -> None:
        from backend.app.utils.metrics import (
            cascade_items_recomputed_total,
            distance_annotations_total,
            routing_cache_hits_total,
            routing_errors_total,
            routing_latency_ms,
        )

        routing_latency_ms.labels(lookup="test_lookup", outcome="success").observe(100)
        routing_errors_total.labels(lookup="test_lookup", reason="timeout").inc()
        routing_cache_hits_total.labels(lookup="test_lookup").inc()
        distance_annotations_total.labels(outcome="ok").inc()
        cascade_items_recomputed_total.inc()

        response = client.get("/metrics")

        assert response.status_code == 200
        text = response.text
        assert "routing_latency_ms" in text
        assert "routing_errors_total" in text
        assert "routing_cache_hits_total" in text
        assert "distance_annotations_total" in text
        assert "cascade_items_recomputed_total" in text


class TestRootEndpoint:
    def test_root_returns_api_info(self, client: TestClient) -> None:
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Itinerary Scheduler API"
        assert data["version"] == "0.1.0"
