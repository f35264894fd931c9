"""Classification data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from hela.exceptions import ErrorCode, RecordValidationError

AttributeValue = str | int | float | bool

VALID_CATEGORIES: tuple[str, ...] = (
    "general",
    "grocery",
    "nails",
    "bags",
    "recipe",
    "receipt",
    "fashion",
    "electronics",
)

MIN_TAGS = 3
MAX_TAGS = 15


class Tier(str, Enum):
    """A stage of the classification fallback chain, in attempt order."""

    ON_DEVICE = "on_device"
    REMOTE = "remote"
    DETERMINISTIC = "deterministic"


class ItemRecord(BaseModel):
    """Structured classification output.

    Construction enforces the acceptance rules: the category must be in
    ``VALID_CATEGORIES``, there must be 3-15 tags and no two tags may be
    equal. A broken rule raises RecordValidationError.

    Attributes:
        title: Short item name (2-5 words by convention).
        summary: One or two sentence description.
        category: Member of ``VALID_CATEGORIES``.
        tags: Lowercase, distinct tags.
        attributes: Open mapping of primitive values (color, material, ...).
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1, description="Item title")
    summary: str = Field(default="", description="Item summary")
    category: str = Field(description="Closed-set category")
    tags: list[str] = Field(description="Item tags")
    attributes: dict[str, AttributeValue] = Field(
        default_factory=dict,
        description="Free-form attributes",
    )

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [t.strip().lower() if isinstance(t, str) else t for t in value]
        return value

    @model_validator(mode="after")
    def _enforce_rules(self) -> "ItemRecord":
        check_record(self, MIN_TAGS, MAX_TAGS)
        return self

    @classmethod
    def validated(
        cls,
        data: dict[str, Any],
        min_tags: int = MIN_TAGS,
        max_tags: int = MAX_TAGS,
    ) -> "ItemRecord":
        """Build a record from raw fields, optionally with a tighter tag band.

        Args:
            data: Raw record fields.
            min_tags: Smallest accepted tag count (not below 3).
            max_tags: Largest accepted tag count (not above 15).

        Returns:
            The accepted record.

        Raises:
            RecordValidationError: If the shape is wrong or a rule is broken.
        """
        try:
            record = cls.model_validate(data)
        except ValueError as e:
            raise RecordValidationError(
                f"Record does not match the expected shape: {e}",
                code=ErrorCode.RECORD_SHAPE_INVALID,
                details={"error": str(e)},
            ) from e
        check_record(record, max(min_tags, MIN_TAGS), min(max_tags, MAX_TAGS))
        return record


def check_record(record: ItemRecord, min_tags: int, max_tags: int) -> None:
    """Raise RecordValidationError if a record breaks an acceptance rule."""
    if record.category not in VALID_CATEGORIES:
        raise RecordValidationError(
            f"Unknown category: {record.category}",
            details={"category": record.category},
        )

    if not min_tags <= len(record.tags) <= max_tags:
        raise RecordValidationError(
            f"Expected {min_tags}-{max_tags} tags, got {len(record.tags)}",
            details={"tag_count": len(record.tags)},
        )

    if any(not tag for tag in record.tags):
        raise RecordValidationError("Tags must be non-empty")

    # Tags are stored comma-joined.
    if any("," in tag for tag in record.tags):
        raise RecordValidationError(
            "Tags must not contain commas",
            details={"tags": list(record.tags)},
        )

    if len(set(record.tags)) != len(record.tags):
        raise RecordValidationError(
            "Tags must be distinct",
            details={"tags": list(record.tags)},
        )


class TierFailure(BaseModel):
    """Why a tier was skipped.

    Attributes:
        tier: The tier that failed.
        code: Error code of the failure.
        message: Failure message.
    """

    tier: Tier = Field(description="Failed tier")
    code: str = Field(description="Error code")
    message: str = Field(description="Failure message")


class ClassificationResult(BaseModel):
    """Outcome of a classification run.

    Attributes:
        record: The accepted record.
        tier: Tier that produced the record.
        failures: Earlier tiers that were skipped, in attempt order.
    """

    record: ItemRecord = Field(description="Accepted record")
    tier: Tier = Field(description="Producing tier")
    failures: list[TierFailure] = Field(
        default_factory=list,
        description="Skipped tiers",
    )
