"""Query planning module."""

from hela.query.models import FilterKind, QueryPlan
from hela.query.planner import QueryPlanner, looks_like_natural_language

__all__ = [
    "FilterKind",
    "QueryPlan",
    "QueryPlanner",
    "looks_like_natural_language",
]
