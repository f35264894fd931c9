"""Tests for observability module."""

from httpx import AsyncClient

from hela.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    track_classification,
    track_generation_request,
    track_query_plan,
    track_search,
    track_tier_failure,
)


class TestMetricsEndpoint:
    """Tests for /metrics endpoint."""

    async def test_metrics_endpoint_returns_prometheus_format(
        self, client: AsyncClient
    ) -> None:
        """Metrics endpoint returns Prometheus format."""
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert b"# HELP" in response.content

    async def test_requests_are_counted(self, client: AsyncClient) -> None:
        """HTTP requests are recorded by the middleware."""
        await client.get("/health/live")
        metrics = (await client.get("/metrics")).text
        assert 'endpoint="/health"' in metrics


class TestMetricsFunctions:
    """Tests for metrics tracking functions."""

    def test_get_metrics_returns_bytes(self) -> None:
        """get_metrics returns bytes."""
        assert isinstance(get_metrics(), bytes)

    def test_track_generation_request(self) -> None:
        """Generation calls are recorded per tier."""
        track_generation_request(
            tier="on_device",
            model="test-model",
            duration=0.5,
            prompt_tokens=100,
            completion_tokens=50,
        )
        metrics = get_metrics().decode()
        assert "generation_request_duration_seconds" in metrics
        assert "generation_tokens_total" in metrics

    def test_track_classification(self) -> None:
        """Classifications and tier failures are recorded."""
        track_classification("deterministic", 0.01)
        track_tier_failure("remote", "INV-3000")

        metrics = get_metrics().decode()
        assert 'classifications_total{tier="deterministic"}' in metrics
        assert 'code="INV-3000"' in metrics

    def test_track_query_and_search(self) -> None:
        """Planner filters and search sizes are recorded."""
        track_query_plan(["color", "material"])
        track_search("keyword", 3)

        metrics = get_metrics().decode()
        assert 'query_plan_filters_total{kind="color"}' in metrics
        assert "search_results_returned" in metrics


class TestMetricsMiddleware:
    """Tests for endpoint normalization."""

    def test_normalize_endpoint(self) -> None:
        """Record IDs and health sub-paths collapse."""
        middleware = MetricsMiddleware(app=None)  # type: ignore[arg-type]

        assert middleware._normalize_endpoint("/health/ready") == "/health"
        assert middleware._normalize_endpoint("/api/v1/items/abc-123") == "/api/v1/items"
        assert middleware._normalize_endpoint("/other") == "/other"
