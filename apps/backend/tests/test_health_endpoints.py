"""
Tests for health check and metrics endpoints.

Verifies:
- /health returns 200 with correct status and version fields
- /health/ready reports database and catalog provider checks
- /metrics exposes Prometheus text format
"""

import pytest
from fastapi.testclient import TestClient

from catalog.aggregator import SearchAggregator
from dependencies import get_search_aggregator
from factories import FakeProvider
from main import app


client = TestClient(app)


def test_health_returns_200():
    """Basic health check should always return 200."""
    response = client.get("/health")
    assert response.status_code == 200


def test_health_response_body():
    """Health check should return status and version fields."""
    response = client.get("/health")
    data = response.json()
    assert data["status"] == "healthy"
    assert isinstance(data["version"], str)


def test_health_echoes_request_id():
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_ready_with_database_and_providers(client):
    response = await client.get("/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["database"]["status"] == "ok"
    assert data["checks"]["catalog_providers"]["details"]["providers"] == {
        "books": "google_books",
        "videos": "imdb",
    }


@pytest.mark.asyncio
async def test_ready_degraded_without_video_provider(client):
    app.dependency_overrides[get_search_aggregator] = lambda: SearchAggregator(
        FakeProvider("google_books"), None
    )

    response = await client.get("/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["checks"]["catalog_providers"]["details"]["disabled"] == ["videos"]


@pytest.mark.asyncio
async def test_metrics_endpoint(client):
    await client.get("/search", params={"term": "dune"})

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]
    assert "catalog_provider_duration_seconds" in response.text
    assert "http_requests_total" in response.text
