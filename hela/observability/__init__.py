"""Observability module for metrics and monitoring."""

from hela.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    track_classification,
    track_generation_request,
    track_query_plan,
    track_search,
    track_tier_failure,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "track_classification",
    "track_generation_request",
    "track_query_plan",
    "track_search",
    "track_tier_failure",
]
