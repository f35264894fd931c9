"""Tests for the natural-language query planner."""

import pytest

from hela.query.models import FilterKind, QueryPlan
from hela.query.planner import QueryPlanner, looks_like_natural_language


@pytest.fixture
def planner() -> QueryPlanner:
    """Planner with the default dictionaries."""
    return QueryPlanner()


class TestPlan:
    """Tests for QueryPlanner.plan."""

    def test_all_filters_no_residual(self, planner: QueryPlanner) -> None:
        """Color, material and category are extracted with nothing left over."""
        plan = planner.plan("blue leather bag")

        assert plan.filters == {
            FilterKind.CATEGORY: "bag",
            FilterKind.COLOR: "blue",
            FilterKind.MATERIAL: "leather",
        }
        assert plan.full_text_terms == []

    def test_no_filters_residual_only(self, planner: QueryPlanner) -> None:
        """Unknown words become residual terms; stopwords are dropped."""
        plan = planner.plan("vintage arduino kit with notes")

        assert plan.filters == {}
        assert plan.full_text_terms == ["vintage", "arduino", "kit", "notes"]
        assert plan.full_text == "vintage arduino kit notes"

    def test_groceries_is_a_category(self, planner: QueryPlanner) -> None:
        """Grocery words map to the grocery category."""
        plan = planner.plan("groceries from market")
        assert plan.filters == {FilterKind.CATEGORY: "grocery"}
        assert plan.full_text_terms == ["from", "market"]

    def test_synonym_maps_to_canonical(self, planner: QueryPlanner) -> None:
        """Category synonyms map to their canonical value."""
        plan = planner.plan("Purse for travel")
        assert plan.filters[FilterKind.CATEGORY] == "bag"
        assert plan.full_text_terms == ["for", "travel"]

    def test_multi_word_keyword(self, planner: QueryPlanner) -> None:
        """Two-word keywords are matched and removed."""
        plan = planner.plan("polka dot dress")
        assert plan.filters[FilterKind.PATTERN] == "polka dot"
        assert plan.full_text_terms == ["dress"]

    def test_first_match_wins(self, planner: QueryPlanner) -> None:
        """At most one value per kind, taken in dictionary order."""
        plan = planner.plan("green and red scarf")
        assert plan.filters[FilterKind.COLOR] == "red"
        assert plan.full_text_terms == ["scarf"]

    def test_punctuation_and_duplicates(self, planner: QueryPlanner) -> None:
        """Punctuation is stripped and repeated terms appear once."""
        plan = planner.plan("Lamp, lamp! desk?")
        assert plan.full_text_terms == ["lamp", "desk"]

    def test_short_tokens_dropped(self, planner: QueryPlanner) -> None:
        """Tokens of two characters or fewer are not terms."""
        plan = planner.plan("usb c hub")
        assert plan.full_text_terms == ["usb", "hub"]

    def test_case_and_whitespace(self, planner: QueryPlanner) -> None:
        """Queries are lowercased and trimmed."""
        plan = planner.plan("   RED Silk   ")
        assert plan.filters == {
            FilterKind.COLOR: "red",
            FilterKind.MATERIAL: "silk",
        }

    @pytest.mark.parametrize("query", ["", "   ", "!!!", "a an the"])
    def test_total(self, planner: QueryPlanner, query: str) -> None:
        """Degenerate input yields an empty plan."""
        assert planner.plan(query).is_empty

    def test_terms_never_contain_keywords(self, planner: QueryPlanner) -> None:
        """Residual terms exclude matched values and stopwords."""
        plan = planner.plan("the red canvas receipts and teal")
        for term in plan.full_text_terms:
            assert term not in {"red", "canvas", "receipt", "teal", "the", "and"}


class TestRemovalList:
    """Tests for the keyword removal order."""

    def test_longest_first_then_alphabetical(self, planner: QueryPlanner) -> None:
        """Longer keywords are removed before their substrings."""
        removals = planner.removal_list({})
        assert removals.index("receipts") < removals.index("receipt")
        assert removals.index("bags") < removals.index("bag")
        same_length = [k for k in removals if len(k) == 4]
        assert same_length == sorted(same_length)


class TestLooksLikeNaturalLanguage:
    """Tests for the natural-language gate."""

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("blue bag", True),
            ("bagwithstrap", True),
            ("sandals", True),
            ("lamp", False),
            ("Tote", False),
        ],
    )
    def test_detection(self, query: str, expected: bool) -> None:
        """Spaces or the words with/and mark natural language."""
        assert looks_like_natural_language(query) is expected


class TestQueryPlan:
    """Tests for the QueryPlan model."""

    def test_full_text_joins_terms(self) -> None:
        """full_text joins terms with single spaces."""
        plan = QueryPlan(full_text_terms=["vintage", "kit"])
        assert plan.full_text == "vintage kit"
