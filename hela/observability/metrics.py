"""Prometheus metrics for the inventory core.

Provides metrics instrumentation for:
- HTTP request latency and counts
- Generative capability latency and token usage per tier
- Classification outcomes and tier fallbacks
- Query planning and search result sizes
"""

import time
from collections.abc import Awaitable, Callable, Iterable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from hela.logging_config import get_logger

logger = get_logger(__name__)

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Generative capability metrics
GENERATION_REQUEST_DURATION = Histogram(
    "generation_request_duration_seconds",
    "Generative capability request duration in seconds",
    ["tier", "model", "status"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)

GENERATION_REQUEST_TOTAL = Counter(
    "generation_requests_total",
    "Total generative capability requests",
    ["tier", "model", "status"],
)

GENERATION_TOKENS_TOTAL = Counter(
    "generation_tokens_total",
    "Total tokens used by generative capabilities",
    ["tier", "model", "type"],  # "type" label values: prompt, completion
)

# Classification metrics
CLASSIFICATION_DURATION = Histogram(
    "classification_duration_seconds",
    "End-to-end classification duration in seconds",
    ["tier"],
    buckets=[0.01, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)

CLASSIFICATION_TOTAL = Counter(
    "classifications_total",
    "Classifications completed, by producing tier",
    ["tier"],
)

CLASSIFICATION_TIER_FAILURES = Counter(
    "classification_tier_failures_total",
    "Tiers skipped during classification",
    ["tier", "code"],
)

# Query and search metrics
QUERY_PLAN_FILTERS = Counter(
    "query_plan_filters_total",
    "Filters extracted by the query planner",
    ["kind"],
)

SEARCH_REQUEST_TOTAL = Counter(
    "search_requests_total",
    "Search requests by query mode",
    ["mode"],  # browse, keyword, natural_language, unified
)

SEARCH_RESULTS_RETURNED = Histogram(
    "search_results_returned",
    "Number of records returned per search",
    buckets=[0, 1, 2, 5, 10, 25, 50, 100, 250],
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware."""
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        endpoint = self._normalize_endpoint(request.url.path)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize endpoint path to reduce cardinality."""
        if path.startswith("/health"):
            return "/health"
        # Drop record ids: /api/v1/items/<id> -> /api/v1/items
        if path.startswith("/api/v1/"):
            parts = path.split("/")
            if len(parts) >= 4:
                return f"/api/v1/{parts[3]}"
        return path


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


def track_generation_request(
    tier: str,
    model: str,
    duration: float,
    prompt_tokens: int,
    completion_tokens: int,
    success: bool = True,
) -> None:
    """Track one generative capability call.

    Args:
        tier: Capability tier.
        model: Model name.
        duration: Request duration in seconds.
        prompt_tokens: Number of prompt tokens.
        completion_tokens: Number of completion tokens.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    GENERATION_REQUEST_DURATION.labels(tier=tier, model=model, status=status).observe(
        duration
    )
    GENERATION_REQUEST_TOTAL.labels(tier=tier, model=model, status=status).inc()

    if success:
        GENERATION_TOKENS_TOTAL.labels(tier=tier, model=model, type="prompt").inc(
            prompt_tokens
        )
        GENERATION_TOKENS_TOTAL.labels(tier=tier, model=model, type="completion").inc(
            completion_tokens
        )


def track_classification(tier: str, duration: float) -> None:
    """Track a completed classification.

    Args:
        tier: Tier that produced the record.
        duration: Total duration across all attempted tiers.
    """
    CLASSIFICATION_DURATION.labels(tier=tier).observe(duration)
    CLASSIFICATION_TOTAL.labels(tier=tier).inc()


def track_tier_failure(tier: str, code: str) -> None:
    """Track a skipped classification tier."""
    CLASSIFICATION_TIER_FAILURES.labels(tier=tier, code=code).inc()


def track_query_plan(filter_kinds: Iterable[str]) -> None:
    """Track the filters a query plan extracted."""
    for kind in filter_kinds:
        QUERY_PLAN_FILTERS.labels(kind=kind).inc()


def track_search(mode: str, results: int) -> None:
    """Track a search request.

    Args:
        mode: ``browse``, ``keyword``, ``natural_language`` or ``unified``.
        results: Number of records returned.
    """
    SEARCH_REQUEST_TOTAL.labels(mode=mode).inc()
    SEARCH_RESULTS_RETURNED.observe(results)
