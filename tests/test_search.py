"""Tests for search and filter evaluation."""

import json
from datetime import UTC, datetime, timedelta

import pytest

from hela.search.evaluator import SearchEvaluator, collections, sort_items
from hela.search.models import HitKind, SearchMode, SearchRequest, SortOrder
from hela.store.models import Item, Note

BASE_TIME = datetime(2024, 5, 1, tzinfo=UTC)


def _item(title: str, minutes: int = 0, **fields: object) -> Item:
    return Item(title=title, created_at=BASE_TIME + timedelta(minutes=minutes), **fields)


@pytest.fixture
def evaluator() -> SearchEvaluator:
    """Evaluator with the default planner."""
    return SearchEvaluator()


@pytest.fixture
def closet() -> list[Item]:
    """A small mixed inventory."""
    return [
        _item(
            "Blue Tote",
            minutes=1,
            category="bag",
            collection="Closet",
            tags_csv="blue,canvas,tote",
            attributes_json=json.dumps({"material": "canvas"}),
            colors_json=json.dumps(["Blue"]),
            quantity=2,
        ),
        _item(
            "Red Mug",
            minutes=2,
            category="bag",
            collection="Kitchen",
            tags_csv="red,ceramic,mug",
            colors_json=json.dumps(["Red"]),
        ),
        _item(
            "Leather Satchel",
            minutes=3,
            category="bag",
            tags_csv="brown,leather,vintage",
            colors_json=json.dumps(["Brown"]),
            ocr_text="Handmade Florence",
            quantity=5,
        ),
        _item(
            "Grocery Receipt",
            minutes=4,
            category="receipt",
            collection="Closet",
            summary="Weekly shop",
            ocr_text="TOTAL 12.99",
        ),
    ]


def _titles(items: list[Item]) -> list[str]:
    return [i.title for i in items]


class TestSelectors:
    """Tests for the category and collection selectors."""

    def test_category_and_collection(
        self, evaluator: SearchEvaluator, closet: list[Item]
    ) -> None:
        """Both selectors narrow the result together."""
        outcome = evaluator.search(
            closet[:2], SearchRequest(category="bag", collection="Closet")
        )
        assert _titles(outcome.items) == ["Blue Tote"]
        assert outcome.mode == SearchMode.BROWSE

    def test_category_case_insensitive(
        self, evaluator: SearchEvaluator, closet: list[Item]
    ) -> None:
        """Category matching ignores case."""
        outcome = evaluator.search(closet, SearchRequest(category="RECEIPT"))
        assert _titles(outcome.items) == ["Grocery Receipt"]

    def test_all_sentinel(self, evaluator: SearchEvaluator, closet: list[Item]) -> None:
        """The all sentinel skips a selector."""
        outcome = evaluator.search(closet, SearchRequest(category="All"))
        assert len(outcome.items) == 4

    def test_missing_collection_excluded(
        self, evaluator: SearchEvaluator, closet: list[Item]
    ) -> None:
        """Items without a collection never match a collection selector."""
        outcome = evaluator.search(closet, SearchRequest(collection="Closet"))
        assert "Leather Satchel" not in _titles(outcome.items)

    def test_empty_result(self, evaluator: SearchEvaluator, closet: list[Item]) -> None:
        """No matches is a valid result."""
        outcome = evaluator.search(closet, SearchRequest(collection="Garage"))
        assert outcome.items == []


class TestKeywordQuery:
    """Tests for single-token queries."""

    def test_matches_tags(self, evaluator: SearchEvaluator, closet: list[Item]) -> None:
        """A tag substring matches."""
        outcome = evaluator.search(closet, SearchRequest(query="cerami"))
        assert _titles(outcome.items) == ["Red Mug"]
        assert outcome.mode == SearchMode.KEYWORD

    def test_matches_ocr(self, evaluator: SearchEvaluator, closet: list[Item]) -> None:
        """OCR text is searched."""
        outcome = evaluator.search(closet, SearchRequest(query="FLORENCE"))
        assert _titles(outcome.items) == ["Leather Satchel"]

    def test_combined_with_selectors(
        self, evaluator: SearchEvaluator, closet: list[Item]
    ) -> None:
        """Queries AND-combine with selectors."""
        outcome = evaluator.search(
            closet, SearchRequest(query="weekly", collection="Kitchen")
        )
        assert outcome.items == []


class TestNaturalLanguageQuery:
    """Tests for planned queries."""

    def test_color_filter(self, evaluator: SearchEvaluator, closet: list[Item]) -> None:
        """Color filters check the stored color list."""
        outcome = evaluator.search(closet, SearchRequest(query="blue bag"))
        assert _titles(outcome.items) == ["Blue Tote"]
        assert outcome.mode == SearchMode.NATURAL_LANGUAGE
        assert outcome.plan is not None

    def test_color_filter_matches_shades(self, evaluator: SearchEvaluator) -> None:
        """A planned color matches stored color names that contain it."""
        items = [
            _item("Tote", colors_json=json.dumps(["Light Blue"])),
            _item("Mug", colors_json=json.dumps(["Red"])),
        ]
        outcome = evaluator.search(items, SearchRequest(query="blue tote"))
        assert _titles(outcome.items) == ["Tote"]

    def test_material_filter_uses_tags(
        self, evaluator: SearchEvaluator, closet: list[Item]
    ) -> None:
        """Material filters check tags as well as attributes."""
        outcome = evaluator.search(closet, SearchRequest(query="leather bag"))
        assert _titles(outcome.items) == ["Leather Satchel"]

    def test_material_filter_uses_attributes(
        self, evaluator: SearchEvaluator, closet: list[Item]
    ) -> None:
        """Material filters check the attribute blob."""
        closet[0] = closet[0].model_copy(update={"tags_csv": "blue,tote"})
        outcome = evaluator.search(closet, SearchRequest(query="canvas bag"))
        assert _titles(outcome.items) == ["Blue Tote"]

    def test_residual_must_match_whole(
        self, evaluator: SearchEvaluator, closet: list[Item]
    ) -> None:
        """The residual text matches as one string, not per token."""
        hit = evaluator.search(closet, SearchRequest(query="handmade florence"))
        miss = evaluator.search(closet, SearchRequest(query="florence handmade"))

        assert _titles(hit.items) == ["Leather Satchel"]
        assert miss.items == []

    def test_plan_category_and_selector(
        self, evaluator: SearchEvaluator, closet: list[Item]
    ) -> None:
        """Planned and selected categories narrow independently."""
        outcome = evaluator.search(
            closet, SearchRequest(query="red bag", category="receipt")
        )
        assert outcome.items == []


class TestSorting:
    """Tests for result ordering."""

    def test_newest_default(self, closet: list[Item]) -> None:
        """Newest items come first."""
        assert _titles(sort_items(closet, SortOrder.NEWEST))[0] == "Grocery Receipt"

    def test_title(self, closet: list[Item]) -> None:
        """Title order is A-Z."""
        assert _titles(sort_items(closet, SortOrder.TITLE)) == [
            "Blue Tote",
            "Grocery Receipt",
            "Leather Satchel",
            "Red Mug",
        ]

    def test_quantity(self, closet: list[Item]) -> None:
        """Quantity order puts the largest first."""
        assert _titles(sort_items(closet, SortOrder.QUANTITY))[:2] == [
            "Leather Satchel",
            "Blue Tote",
        ]


class TestCollections:
    """Tests for collection listing."""

    def test_distinct_sorted(self, closet: list[Item]) -> None:
        """Collections are distinct and sorted; missing ones are skipped."""
        assert collections(closet) == ["Closet", "Kitchen"]


class TestUnifiedSearch:
    """Tests for combined item and note search."""

    def test_matches_both_types(
        self, evaluator: SearchEvaluator, closet: list[Item]
    ) -> None:
        """Items and notes are searched together, newest first."""
        note = Note(
            title="Packing list",
            body="Bring the tote",
            created_at=BASE_TIME + timedelta(minutes=10),
        )
        hits = evaluator.unified_search(closet, [note], "tote")

        assert [h.kind for h in hits] == [HitKind.NOTE, HitKind.ITEM]
        assert hits[1].title == "Blue Tote"

    def test_empty_query_returns_recent(
        self, evaluator: SearchEvaluator, closet: list[Item]
    ) -> None:
        """An empty query lists recent records up to the limit per type."""
        hits = evaluator.unified_search(closet, [], "", recent_limit=2)
        assert [h.title for h in hits] == ["Grocery Receipt", "Leather Satchel"]

    def test_untitled_note(self, evaluator: SearchEvaluator) -> None:
        """Notes without a title get a placeholder."""
        hits = evaluator.unified_search([], [Note(body="milk")], "milk")
        assert hits[0].title == "Untitled Note"
