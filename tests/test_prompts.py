"""Tests for the classification prompt and response parsing."""

import pytest

from hela.classification.prompts import ClassificationPromptTemplate
from hela.classification.response_parser import (
    extract_json_object,
    parse_item_record,
)
from hela.exceptions import ErrorCode, GenerationFailedError, RecordValidationError
from hela.vision.models import VisionSummary

VALID_RESPONSE = """{
  "title": "Pink Flower",
  "summary": "A pink flower in a pot.",
  "category": "general",
  "tags": ["pink", "flower", "plant", "decorative", "indoor"],
  "attributes": {"color": "pink", "material": null}
}"""


class TestClassificationPromptTemplate:
    """Tests for ClassificationPromptTemplate."""

    def test_objects_with_percentages(self, flower_vision: VisionSummary) -> None:
        """Objects are listed with rounded confidence percentages."""
        template = ClassificationPromptTemplate()
        assert template.format_objects(flower_vision) == "flower (95%), plant (87%)"

    def test_build_prompt(self, flower_vision: VisionSummary) -> None:
        """User prompt carries the vision data and the output contract."""
        system, user = ClassificationPromptTemplate().build_prompt(flower_vision)

        assert "JSON" in system
        assert "- OCR Text: None" in user
        assert "- Colors: Pink" in user
        assert "one of: general, grocery, nails, bags" in user
        assert user.endswith("Return ONLY the JSON, no other text.")
        assert "User Hint" not in user

    def test_hint_line(self, flower_vision: VisionSummary) -> None:
        """A user hint adds its own line."""
        _, user = ClassificationPromptTemplate().build_prompt(
            flower_vision, hint="  birthday present "
        )
        assert "- User Hint: birthday present" in user

    def test_empty_vision(self) -> None:
        """Missing vision data renders as None."""
        _, user = ClassificationPromptTemplate().build_prompt(VisionSummary())
        assert "- Detected Objects: None" in user
        assert "- Colors: None" in user

    def test_tag_range(self) -> None:
        """The requested tag range follows the template settings."""
        template = ClassificationPromptTemplate(min_tags=4, max_tags=10)
        _, user = template.build_prompt(VisionSummary())
        assert "tags: 4-10 items" in user


class TestExtractJsonObject:
    """Tests for JSON extraction."""

    def test_plain_object(self) -> None:
        """A bare object is decoded."""
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_code_fence(self) -> None:
        """Markdown fences are tolerated."""
        text = 'Here you go:\n```json\n{"a": 1}\n```\nThanks!'
        assert extract_json_object(text) == {"a": 1}

    def test_no_object(self) -> None:
        """Text without an object is malformed."""
        with pytest.raises(GenerationFailedError) as exc_info:
            extract_json_object("I cannot help with that.")
        assert exc_info.value.code == ErrorCode.GENERATION_MALFORMED

    def test_invalid_json(self) -> None:
        """Broken JSON is malformed."""
        with pytest.raises(GenerationFailedError) as exc_info:
            extract_json_object('{"title": "x",}')
        assert exc_info.value.code == ErrorCode.GENERATION_MALFORMED


class TestParseItemRecord:
    """Tests for parse_item_record."""

    def test_valid_response(self) -> None:
        """A well-formed response becomes a record; null attributes drop out."""
        record = parse_item_record(VALID_RESPONSE)
        assert record.title == "Pink Flower"
        assert record.attributes == {"color": "pink"}

    def test_missing_field(self) -> None:
        """Missing required fields are malformed."""
        with pytest.raises(GenerationFailedError) as exc_info:
            parse_item_record('{"title": "x", "summary": "y"}')
        assert exc_info.value.details["missing"] == ["category", "tags"]

    def test_invalid_category(self) -> None:
        """Well-formed records outside the rules fail validation."""
        text = VALID_RESPONSE.replace('"general"', '"spaceship"')
        with pytest.raises(RecordValidationError):
            parse_item_record(text)

    def test_tighter_band(self) -> None:
        """The configured band applies to parsed records."""
        with pytest.raises(RecordValidationError):
            parse_item_record(VALID_RESPONSE, min_tags=6)
