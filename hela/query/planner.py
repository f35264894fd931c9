"""Natural-language query planner.

Splits a free-text search into structured filters (category, color,
pattern, material) and a residual full-text string. Matching is plain
substring containment against fixed dictionaries; dictionaries are scanned
in declaration order and the first hit per kind wins.
"""

import string

from hela.logging_config import get_logger
from hela.observability.metrics import track_query_plan
from hela.query.models import FilterKind, QueryPlan

logger = get_logger(__name__)

# keyword -> canonical category, in priority order
CATEGORY_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("bag", "bag"),
    ("bags", "bag"),
    ("purse", "bag"),
    ("recipe", "recipe"),
    ("recipes", "recipe"),
    ("receipt", "receipt"),
    ("receipts", "receipt"),
    ("fashion", "fashion"),
    ("clothing", "fashion"),
    ("clothes", "fashion"),
    ("decor", "decor"),
    ("decoration", "decor"),
    ("document", "document"),
    ("documents", "document"),
    ("grocery", "grocery"),
    ("groceries", "grocery"),
    ("meal plan", "meal_plan"),
    ("meal_plan", "meal_plan"),
)

COLORS: tuple[str, ...] = (
    "red",
    "blue",
    "green",
    "yellow",
    "orange",
    "purple",
    "pink",
    "black",
    "white",
    "gray",
    "grey",
    "brown",
    "beige",
    "navy",
    "teal",
    "turquoise",
    "maroon",
    "gold",
    "silver",
    "bronze",
)

PATTERNS: tuple[str, ...] = (
    "floral",
    "striped",
    "polka dot",
    "checkered",
    "plaid",
    "geometric",
    "solid",
    "abstract",
    "paisley",
    "camouflage",
)

MATERIALS: tuple[str, ...] = (
    "leather",
    "canvas",
    "denim",
    "silk",
    "cotton",
    "wool",
    "polyester",
    "nylon",
    "suede",
    "velvet",
    "satin",
    "linen",
)

STOPWORDS: frozenset[str] = frozenset(
    {"with", "and", "or", "the", "a", "an", "in", "on", "at"}
)

MIN_TERM_LENGTH = 3


def looks_like_natural_language(query: str) -> bool:
    """Whether a query should go through the planner.

    Multi-word queries, or queries containing ``with`` / ``and``, qualify.
    """
    lowered = query.strip().lower()
    return " " in lowered or "with" in lowered or "and" in lowered


class QueryPlanner:
    """Converts free-text search strings into QueryPlans.

    The planner is total: every input string yields a plan.
    """

    def __init__(
        self,
        category_keywords: tuple[tuple[str, str], ...] = CATEGORY_KEYWORDS,
        colors: tuple[str, ...] = COLORS,
        patterns: tuple[str, ...] = PATTERNS,
        materials: tuple[str, ...] = MATERIALS,
        stopwords: frozenset[str] = STOPWORDS,
    ) -> None:
        """Initialize the planner with keyword dictionaries.

        Args:
            category_keywords: Ordered (keyword, canonical category) pairs.
            colors: Ordered color names.
            patterns: Ordered pattern names.
            materials: Ordered material names.
            stopwords: Words dropped from the residual terms.
        """
        self._dictionaries: dict[FilterKind, tuple[tuple[str, str], ...]] = {
            FilterKind.CATEGORY: category_keywords,
            FilterKind.COLOR: tuple((c, c) for c in colors),
            FilterKind.PATTERN: tuple((p, p) for p in patterns),
            FilterKind.MATERIAL: tuple((m, m) for m in materials),
        }
        self._stopwords = stopwords
        self._keywords = {
            keyword
            for entries in self._dictionaries.values()
            for keyword, _ in entries
        }

    def plan(self, query: str) -> QueryPlan:
        """Plan a query.

        Args:
            query: Raw user search string.

        Returns:
            QueryPlan with filters and residual full-text terms.
        """
        normalized = query.strip().lower()

        filters: dict[FilterKind, str] = {}
        for kind, entries in self._dictionaries.items():
            match = self._first_match(normalized, entries)
            if match is not None:
                filters[kind] = match

        terms = self._residual_terms(normalized, filters)
        track_query_plan(kind.value for kind in filters)

        logger.debug(
            "Planned query",
            extra={
                "filters": {k.value: v for k, v in filters.items()},
                "terms": len(terms),
            },
        )
        return QueryPlan(filters=filters, full_text_terms=terms)

    @staticmethod
    def _first_match(
        query: str,
        entries: tuple[tuple[str, str], ...],
    ) -> str | None:
        for keyword, canonical in entries:
            if keyword in query:
                return canonical
        return None

    def removal_list(self, filters: dict[FilterKind, str]) -> list[str]:
        """Keywords and matched values to strip, longest first.

        Ties are broken alphabetically so the order never depends on set
        iteration.
        """
        removals = self._keywords | set(filters.values())
        return sorted(removals, key=lambda k: (-len(k), k))

    def _residual_terms(
        self,
        query: str,
        filters: dict[FilterKind, str],
    ) -> list[str]:
        remaining = query
        for keyword in self.removal_list(filters):
            remaining = remaining.replace(keyword, " ")

        terms: list[str] = []
        for raw in remaining.split():
            token = raw.strip(string.punctuation)
            if len(token) < MIN_TERM_LENGTH or token in self._stopwords:
                continue
            if token not in terms:
                terms.append(token)
        return terms
