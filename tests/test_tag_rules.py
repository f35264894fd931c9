"""Tests for rule-based tag derivation."""

from hela.classification.tag_rules import (
    clean_label,
    context_tags,
    derive_tags,
    function_tags,
    is_generic_label,
    material_tags,
    object_type_tags,
)
from hela.vision.models import DetectedObject


def _objects(*pairs: tuple[str, float]) -> list[DetectedObject]:
    return [DetectedObject(label=label, confidence=conf) for label, conf in pairs]


class TestCleanLabel:
    """Tests for label cleanup."""

    def test_underscores_become_spaces(self) -> None:
        """Compound labels read as words."""
        assert clean_label("flower_pot") == "flower pot"

    def test_truncates_at_comma(self) -> None:
        """Only the first alternative of a label is kept."""
        assert clean_label("tabby, tabby cat") == "tabby"

    def test_generic_labels(self) -> None:
        """Vague labels are recognized as generic."""
        assert is_generic_label("Household Item")
        assert is_generic_label("object")
        assert not is_generic_label("backpack")


class TestRuleFamilies:
    """Tests for the keyword rule families."""

    def test_material(self) -> None:
        """Material keywords map to material tags."""
        objects = _objects(("wooden_table", 0.9), ("steel_cup", 0.8))
        assert material_tags(objects) == ["metal", "wood"]

    def test_function(self) -> None:
        """Plants and flowers are decorative."""
        objects = _objects(("flower", 0.95), ("plant", 0.87))
        assert function_tags(objects) == ["decorative"]

    def test_context_two_word_keyword(self) -> None:
        """Two-word keywords match across the joined label string."""
        objects = _objects(("personal", 0.9), ("care", 0.8))
        assert context_tags(objects) == ["bathroom"]

    def test_family_tags_are_distinct(self) -> None:
        """A tag appears once even when several keywords match."""
        objects = _objects(("food", 0.9), ("kitchen", 0.8), ("cooking", 0.7))
        assert context_tags(objects) == ["kitchen"]

    def test_no_matches(self) -> None:
        """Unmatched labels produce no family tags."""
        objects = _objects(("zebra", 0.9))
        assert material_tags(objects) == []
        assert function_tags(objects) == []
        assert context_tags(objects) == []


class TestObjectTypeTags:
    """Tests for object-type tags."""

    def test_confidence_order(self) -> None:
        """Labels are taken highest confidence first."""
        objects = _objects(("plant", 0.5), ("flower", 0.9))
        assert object_type_tags(objects) == ["flower", "plant"]

    def test_limit(self) -> None:
        """At most four labels become tags."""
        objects = _objects(
            ("apple", 0.9), ("pear", 0.8), ("plum", 0.7), ("kiwi", 0.6), ("fig", 0.5)
        )
        assert object_type_tags(objects) == ["apple", "pear", "plum", "kiwi"]

    def test_skips_generic_and_short(self) -> None:
        """Generic and very short labels are skipped."""
        objects = _objects(("thing", 0.99), ("tv", 0.9), ("Desk_Lamp", 0.8))
        assert object_type_tags(objects) == ["desk lamp"]


class TestDeriveTags:
    """Tests for the combined derivation."""

    def test_ordered_union(self) -> None:
        """Families are concatenated in order without duplicates."""
        objects = _objects(("flower", 0.95), ("plant", 0.87))
        assert derive_tags(objects) == ["decorative", "flower", "plant"]

    def test_all_tags_distinct(self) -> None:
        """Derived tags are pairwise distinct."""
        objects = _objects(
            ("leather_bag", 0.9), ("leather", 0.8), ("travel_bag", 0.7), ("gift", 0.6)
        )
        tags = derive_tags(objects)
        assert len(tags) == len(set(tags))
        assert "leather" in tags
