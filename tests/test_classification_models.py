"""Tests for classification record models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from hela.classification.models import (
    VALID_CATEGORIES,
    ItemRecord,
    Tier,
    check_record,
)
from hela.exceptions import ErrorCode, RecordValidationError


def _record_data(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {
        "title": "Blue Tote",
        "summary": "A canvas tote bag.",
        "category": "bags",
        "tags": ["blue", "canvas", "tote"],
        "attributes": {"color": "blue", "reusable": True},
    }
    data.update(overrides)
    return data


class TestItemRecord:
    """Tests for ItemRecord acceptance rules."""

    def test_valid_record(self) -> None:
        """A record inside every rule is accepted."""
        record = ItemRecord.model_validate(_record_data())
        assert record.category == "bags"
        assert record.attributes["reusable"] is True

    def test_unknown_category_rejected(self) -> None:
        """Categories outside the closed set are rejected."""
        with pytest.raises(RecordValidationError) as exc_info:
            ItemRecord.model_validate(_record_data(category="spaceship"))
        assert exc_info.value.code == ErrorCode.RECORD_VALIDATION_FAILED

    @pytest.mark.parametrize("count", [0, 2, 16])
    def test_tag_count_outside_band_rejected(self, count: int) -> None:
        """Fewer than 3 or more than 15 tags is rejected."""
        tags = [f"tag{i}" for i in range(count)]
        with pytest.raises(RecordValidationError):
            ItemRecord.model_validate(_record_data(tags=tags))

    def test_duplicate_tags_rejected(self) -> None:
        """Tags must be pairwise distinct."""
        with pytest.raises(RecordValidationError):
            ItemRecord.model_validate(_record_data(tags=["blue", "tote", "blue"]))

    def test_tags_normalized_before_distinctness(self) -> None:
        """Case and whitespace variants count as duplicates."""
        with pytest.raises(RecordValidationError):
            ItemRecord.model_validate(_record_data(tags=["Blue", " blue", "tote"]))

    def test_tags_lowercased(self) -> None:
        """Accepted tags are stored lowercase."""
        record = ItemRecord.model_validate(_record_data(tags=["Blue", "Canvas", "Tote"]))
        assert record.tags == ["blue", "canvas", "tote"]

    def test_empty_tag_rejected(self) -> None:
        """Blank tags are rejected."""
        with pytest.raises(RecordValidationError):
            ItemRecord.model_validate(_record_data(tags=["blue", " ", "tote"]))

    def test_comma_in_tag_rejected(self) -> None:
        """Tags containing commas are rejected."""
        with pytest.raises(RecordValidationError) as exc_info:
            ItemRecord.model_validate(
                _record_data(tags=["red, ceramic", "mug", "cup"])
            )
        assert exc_info.value.code == ErrorCode.RECORD_VALIDATION_FAILED

    def test_record_is_immutable(self) -> None:
        """Accepted records cannot be mutated."""
        record = ItemRecord.model_validate(_record_data())
        with pytest.raises(PydanticValidationError):
            record.title = "Changed"  # type: ignore[misc]

    def test_every_category_accepted(self) -> None:
        """Every member of the closed set is accepted."""
        for category in VALID_CATEGORIES:
            assert ItemRecord.model_validate(_record_data(category=category))


class TestValidated:
    """Tests for ItemRecord.validated."""

    def test_wrong_shape_reports_shape_code(self) -> None:
        """Type errors are reported as shape failures."""
        with pytest.raises(RecordValidationError) as exc_info:
            ItemRecord.validated(_record_data(tags="blue,tote"))
        assert exc_info.value.code == ErrorCode.RECORD_SHAPE_INVALID

    def test_missing_title_reports_shape_code(self) -> None:
        """An empty title is a shape failure."""
        with pytest.raises(RecordValidationError) as exc_info:
            ItemRecord.validated(_record_data(title=""))
        assert exc_info.value.code == ErrorCode.RECORD_SHAPE_INVALID

    def test_tighter_band(self) -> None:
        """A tighter configured band rejects records the default accepts."""
        with pytest.raises(RecordValidationError):
            ItemRecord.validated(_record_data(), min_tags=5)

    def test_band_cannot_be_widened(self) -> None:
        """The accepted band never widens past 3-15."""
        with pytest.raises(RecordValidationError):
            ItemRecord.validated(_record_data(tags=["a1", "b2"]), min_tags=1)


class TestCheckRecord:
    """Tests for check_record."""

    def test_passes_valid_record(self) -> None:
        """A valid record passes silently."""
        record = ItemRecord.model_validate(_record_data())
        check_record(record, 3, 15)


class TestTier:
    """Tests for the Tier enum."""

    def test_values(self) -> None:
        """Tiers serialize to snake_case names."""
        assert [t.value for t in Tier] == ["on_device", "remote", "deterministic"]
