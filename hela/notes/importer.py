"""Plain-text note importer.

Turns pasted note text into a NoteDraft: a title, a body, a coarse category
(recipe, meal_plan or note), import tags and a handful of keywords.
"""

import json
import string
from enum import Enum

from pydantic import BaseModel, Field

from hela.exceptions import ValidationError
from hela.logging_config import get_logger
from hela.store.models import Note

logger = get_logger(__name__)

UNTITLED = "Untitled Note"
MAX_TITLE_LENGTH = 60
MAX_KEYWORDS = 5
MIN_CATEGORY_MATCHES = 2

IMPORT_TAGS = ("imported", "apple_notes")

RECIPE_KEYWORDS: tuple[str, ...] = (
    "ingredient",
    "cup",
    "tablespoon",
    "teaspoon",
    "tsp",
    "tbsp",
    "oven",
    "bake",
    "cook",
    "recipe",
    "serves",
    "yield",
    "preparation",
)

MEAL_PLAN_KEYWORDS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
    "breakfast",
    "lunch",
    "dinner",
    "meal plan",
    "day",
)

LIST_MARKERS = ("•", "-")


class NoteCategory(str, Enum):
    """Categories a note can be filed under."""

    NOTE = "note"
    RECIPE = "recipe"
    MEAL_PLAN = "meal_plan"


class NoteFormat(str, Enum):
    """Layout detected in the raw text."""

    LIST = "list"
    STRUCTURED = "structured"
    PLAIN = "plain"


class NoteDraft(BaseModel):
    """An imported note before it is stored.

    Attributes:
        raw_text: Text as pasted.
        title: First line, or a placeholder when it is too long.
        body: Remaining lines.
        category: Detected category.
        tags: Import tags plus the category tag.
        keywords: Up to five distinct longer words.
        detected_format: Detected layout.
    """

    raw_text: str = Field(description="Original text")
    title: str = Field(description="Note title")
    body: str = Field(default="", description="Note body")
    category: NoteCategory = Field(description="Note category")
    tags: list[str] = Field(default_factory=list, description="Note tags")
    keywords: list[str] = Field(default_factory=list, description="Keywords")
    detected_format: NoteFormat = Field(description="Text layout")

    def to_note(self) -> Note:
        """Build the storable note."""
        return Note(
            title=self.title,
            body=self.body,
            category=self.category.value,
            tags_csv=",".join(self.tags),
            attributes_json=json.dumps(
                {
                    "format": self.detected_format.value,
                    "keywords": self.keywords,
                }
            ),
        )


class NoteImporter:
    """Heuristic importer for free-text notes."""

    def import_note(self, text: str) -> NoteDraft:
        """Parse raw note text.

        Args:
            text: Pasted note text.

        Returns:
            NoteDraft ready to be stored.

        Raises:
            ValidationError: If the text is blank.
        """
        if not text.strip():
            raise ValidationError("Cannot import an empty note")

        lines = text.splitlines()
        first_line = lines[0] if lines else ""
        title = first_line if len(first_line) < MAX_TITLE_LENGTH else UNTITLED
        body = "\n".join(lines[1:]).strip()

        category = self.classify(title, body)
        tags = list(IMPORT_TAGS)
        if category != NoteCategory.NOTE:
            tags.append(category.value)

        draft = NoteDraft(
            raw_text=text,
            title=title or UNTITLED,
            body=body,
            category=category,
            tags=tags,
            keywords=self.extract_keywords(text),
            detected_format=self.detect_format(text),
        )
        logger.info(
            f"Imported note '{draft.title}'",
            extra={
                "category": draft.category.value,
                "format": draft.detected_format.value,
            },
        )
        return draft

    @staticmethod
    def classify(title: str, body: str) -> NoteCategory:
        """Pick a category from keyword hits in the title and body."""
        combined = f"{title} {body}".lower()

        recipe_hits = sum(1 for k in RECIPE_KEYWORDS if k in combined)
        if recipe_hits >= MIN_CATEGORY_MATCHES:
            return NoteCategory.RECIPE

        meal_hits = sum(1 for k in MEAL_PLAN_KEYWORDS if k in combined)
        if meal_hits >= MIN_CATEGORY_MATCHES:
            return NoteCategory.MEAL_PLAN

        return NoteCategory.NOTE

    @staticmethod
    def detect_format(text: str) -> NoteFormat:
        """Bulleted or dashed text is a list; blank-line blocks are structured."""
        if any(marker in text for marker in LIST_MARKERS):
            return NoteFormat.LIST
        if "\n\n" in text:
            return NoteFormat.STRUCTURED
        return NoteFormat.PLAIN

    @staticmethod
    def extract_keywords(text: str) -> list[str]:
        """Distinct words longer than three characters, first occurrence first."""
        keywords: list[str] = []
        for raw in text.lower().split():
            word = raw.strip(string.punctuation)
            if len(word) > 3 and word not in keywords:
                keywords.append(word)
                if len(keywords) == MAX_KEYWORDS:
                    break
        return keywords
