"""Search and filter evaluation over stored records.

Filters are applied in a fixed order and AND-combined: category selector,
collection selector, then the query. A short query is a plain substring
match across title, summary, tags and OCR text. A natural-language query is
planned first; each extracted filter narrows the result independently and
the residual text must appear, as a whole, in one of the text fields.
"""

from collections.abc import Callable

from hela.logging_config import get_logger
from hela.observability.metrics import track_search
from hela.query.models import FilterKind, QueryPlan
from hela.query.planner import QueryPlanner, looks_like_natural_language
from hela.search.models import (
    ALL,
    HitKind,
    SearchHit,
    SearchMode,
    SearchOutcome,
    SearchRequest,
    SortOrder,
)
from hela.store.models import Item, Note

logger = get_logger(__name__)

RECENT_LIMIT = 10


def sort_items(items: list[Item], order: SortOrder) -> list[Item]:
    """Order items for display.

    Args:
        items: Items to order.
        order: Newest first, title A-Z, or largest quantity first.

    Returns:
        A new sorted list.
    """
    if order == SortOrder.TITLE:
        return sorted(items, key=lambda i: i.title.lower())
    if order == SortOrder.QUANTITY:
        return sorted(items, key=lambda i: i.quantity, reverse=True)
    return sorted(items, key=lambda i: i.created_at, reverse=True)


def collections(items: list[Item]) -> list[str]:
    """Distinct collection names, sorted. Items without one are skipped."""
    return sorted({i.collection for i in items if i.collection})


def _is_all(selector: str | None) -> bool:
    return selector is None or selector.strip().lower() == ALL


class SearchEvaluator:
    """Applies selectors and queries to item and note lists."""

    def __init__(self, planner: QueryPlanner | None = None) -> None:
        """Initialize the evaluator.

        Args:
            planner: Planner for natural-language queries.
        """
        self.planner = planner or QueryPlanner()

    def search(self, items: list[Item], request: SearchRequest) -> SearchOutcome:
        """Filter and sort items.

        Args:
            items: Candidate items.
            request: Selectors, query text and ordering.

        Returns:
            SearchOutcome with the visible items. An empty list is a valid
            result.
        """
        predicate, mode, plan = self.build_predicate(request)
        matched = sort_items([i for i in items if predicate(i)], request.sort)

        track_search(mode.value, len(matched))
        logger.info(
            f"Search matched {len(matched)} of {len(items)} items",
            extra={
                "mode": mode.value,
                "category": request.category,
                "collection": request.collection,
            },
        )
        return SearchOutcome(mode=mode, plan=plan, items=matched)

    def build_predicate(
        self,
        request: SearchRequest,
    ) -> tuple[Callable[[Item], bool], SearchMode, QueryPlan | None]:
        """Compile a request into a single item predicate.

        The predicate can be handed to a record store fetch.

        Returns:
            Tuple of (predicate, query mode, plan or None).
        """
        steps: list[Callable[[Item], bool]] = []

        if not _is_all(request.category):
            wanted = request.category.strip().lower()
            steps.append(lambda i: i.category.lower() == wanted)

        if not _is_all(request.collection):
            wanted_collection = request.collection
            steps.append(lambda i: i.collection == wanted_collection)

        query = request.query.strip().lower()
        plan: QueryPlan | None = None
        if not query:
            mode = SearchMode.BROWSE
        elif looks_like_natural_language(query):
            mode = SearchMode.NATURAL_LANGUAGE
            plan = self.planner.plan(query)
            steps.extend(self._plan_steps(plan))
        else:
            mode = SearchMode.KEYWORD
            steps.append(lambda i: self._keyword_match(i, query))

        def predicate(item: Item) -> bool:
            return all(step(item) for step in steps)

        return predicate, mode, plan

    @staticmethod
    def _keyword_match(item: Item, query: str) -> bool:
        return (
            query in item.title.lower()
            or query in item.summary.lower()
            or any(query in tag.lower() for tag in item.tags)
            or query in item.ocr_text.lower()
        )

    @staticmethod
    def _plan_steps(plan: QueryPlan) -> list[Callable[[Item], bool]]:
        steps: list[Callable[[Item], bool]] = []
        filters = plan.filters

        if FilterKind.CATEGORY in filters:
            category = filters[FilterKind.CATEGORY]
            steps.append(lambda i: i.category.lower() == category)

        if FilterKind.COLOR in filters:
            color = filters[FilterKind.COLOR]
            steps.append(lambda i: any(color in c.lower() for c in i.colors))

        for kind in (FilterKind.PATTERN, FilterKind.MATERIAL):
            if kind in filters:
                value = filters[kind]
                steps.append(
                    lambda i, v=value: v in i.attributes_json.lower()
                    or v in i.tags_csv.lower()
                )

        if plan.full_text_terms:
            text = plan.full_text
            steps.append(
                lambda i: text in i.title.lower()
                or text in i.summary.lower()
                or text in i.tags_csv.lower()
                or text in i.ocr_text.lower()
            )

        return steps

    def unified_search(
        self,
        items: list[Item],
        notes: list[Note],
        query: str,
        recent_limit: int = RECENT_LIMIT,
    ) -> list[SearchHit]:
        """Search items and notes together, newest first.

        An empty query returns the most recent items and notes instead.

        Args:
            items: Candidate items.
            notes: Candidate notes.
            query: Search text, matched as a case-insensitive substring.
            recent_limit: Per-type cap when the query is empty.

        Returns:
            Hits for both record types.
        """
        text = query.strip().lower()

        if not text:
            matched_items = sort_items(items, SortOrder.NEWEST)[:recent_limit]
            matched_notes = sorted(notes, key=lambda n: n.created_at, reverse=True)
            matched_notes = matched_notes[:recent_limit]
        else:
            matched_items = [
                i
                for i in items
                if any(
                    text in field.lower()
                    for field in (
                        i.title,
                        i.summary,
                        i.tags_csv,
                        i.ocr_text,
                        i.category,
                    )
                )
            ]
            matched_notes = [
                n
                for n in notes
                if any(
                    text in field.lower()
                    for field in (n.title, n.body, n.tags_csv, n.category)
                )
            ]

        hits = [_item_hit(i) for i in matched_items]
        hits.extend(_note_hit(n) for n in matched_notes)
        hits.sort(key=lambda h: h.created_at, reverse=True)

        track_search("unified", len(hits))
        return hits


def _item_hit(item: Item) -> SearchHit:
    return SearchHit(
        kind=HitKind.ITEM,
        id=item.id,
        title=item.title or item.category or "Untitled",
        subtitle=item.summary,
        category=item.category,
        created_at=item.created_at,
    )


def _note_hit(note: Note) -> SearchHit:
    return SearchHit(
        kind=HitKind.NOTE,
        id=note.id,
        title=note.title or "Untitled Note",
        subtitle=note.body,
        category=note.category,
        created_at=note.created_at,
    )
