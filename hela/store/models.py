"""Persisted record models."""

import json
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


def _new_id() -> str:
    return str(uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


def split_csv(value: str) -> list[str]:
    """Split a comma-joined tag string, dropping empty entries."""
    return [part for part in value.split(",") if part]


def load_json_object(value: str) -> dict[str, Any]:
    """Decode a JSON object column; anything else reads as empty."""
    if not value:
        return {}
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError:
        return {}
    return decoded if isinstance(decoded, dict) else {}


class Item(BaseModel):
    """A classified photo as stored.

    Record fields are flattened: tags are comma-joined and attributes and
    colors are JSON strings. Direct edits are not re-validated.

    Attributes:
        id: Unique item identifier.
        title: Item title.
        summary: Item summary.
        category: Item category.
        tags_csv: Comma-joined tags.
        attributes_json: JSON-encoded attribute mapping.
        ocr_text: Text recognized in the photo.
        colors_json: JSON-encoded dominant colors.
        collection: Optional user grouping label.
        quantity: How many of the item the user owns.
        image_id: Opaque photo store identifier.
        created_at: Creation time (UTC).
    """

    id: str = Field(default_factory=_new_id, description="Item ID")
    title: str = Field(default="", description="Item title")
    summary: str = Field(default="", description="Item summary")
    category: str = Field(default="general", description="Item category")
    tags_csv: str = Field(default="", description="Comma-joined tags")
    attributes_json: str = Field(default="{}", description="JSON attributes")
    ocr_text: str = Field(default="", description="Recognized text")
    colors_json: str = Field(default="[]", description="JSON color list")
    collection: str | None = Field(default=None, description="Collection name")
    quantity: int = Field(default=1, ge=1, description="Quantity owned")
    image_id: str | None = Field(default=None, description="Photo identifier")
    created_at: datetime = Field(default_factory=_now, description="Created at")

    @property
    def tags(self) -> list[str]:
        """Tags split back out of the CSV column."""
        return split_csv(self.tags_csv)

    @property
    def attributes(self) -> dict[str, Any]:
        """Decoded attribute mapping."""
        return load_json_object(self.attributes_json)

    @property
    def colors(self) -> list[str]:
        """Decoded dominant colors."""
        try:
            decoded = json.loads(self.colors_json or "[]")
        except json.JSONDecodeError:
            return []
        if not isinstance(decoded, list):
            return []
        return [str(c) for c in decoded]


class Note(BaseModel):
    """A stored text note.

    Attributes:
        id: Unique note identifier.
        title: Note title.
        body: Note text after the title line.
        category: Note category (note, recipe or meal_plan).
        tags_csv: Comma-joined tags.
        attributes_json: JSON-encoded attributes.
        created_at: Creation time (UTC).
    """

    id: str = Field(default_factory=_new_id, description="Note ID")
    title: str = Field(default="", description="Note title")
    body: str = Field(default="", description="Note body")
    category: str = Field(default="note", description="Note category")
    tags_csv: str = Field(default="", description="Comma-joined tags")
    attributes_json: str = Field(default="{}", description="JSON attributes")
    created_at: datetime = Field(default_factory=_now, description="Created at")

    @property
    def tags(self) -> list[str]:
        """Tags split back out of the CSV column."""
        return split_csv(self.tags_csv)

    @property
    def attributes(self) -> dict[str, Any]:
        """Decoded attribute mapping."""
        return load_json_object(self.attributes_json)


class ItemUpdate(BaseModel):
    """User edits to an item. Unset fields are left unchanged."""

    title: str | None = None
    summary: str | None = None
    category: str | None = None
    tags: list[str] | None = None
    collection: str | None = None
    quantity: int | None = Field(default=None, ge=1)

    def to_fields(self) -> dict[str, Any]:
        """Changed columns in stored form."""
        changes = self.model_dump(exclude_unset=True)
        if "tags" in changes:
            tags = changes.pop("tags") or []
            changes["tags_csv"] = ",".join(tags)
        return changes
