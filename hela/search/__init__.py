"""Search and filter module."""

from hela.search.evaluator import SearchEvaluator, collections, sort_items
from hela.search.models import (
    ALL,
    HitKind,
    SearchHit,
    SearchMode,
    SearchOutcome,
    SearchRequest,
    SortOrder,
)

__all__ = [
    "ALL",
    "HitKind",
    "SearchEvaluator",
    "SearchHit",
    "SearchMode",
    "SearchOutcome",
    "SearchRequest",
    "SortOrder",
    "collections",
    "sort_items",
]
