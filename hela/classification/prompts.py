"""Prompt templates for item classification."""

from abc import ABC, abstractmethod
from typing import Any

from hela.classification.models import MAX_TAGS, VALID_CATEGORIES
from hela.vision.models import VisionSummary


class PromptTemplate(ABC):
    """Abstract base class for prompt templates."""

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Format the template with provided variables.

        Args:
            **kwargs: Template variables.

        Returns:
            Formatted prompt string.
        """
        ...


class ClassificationPromptTemplate(PromptTemplate):
    """Prompt template that turns a VisionSummary into a JSON request.

    The same prompt is sent to every generative tier.
    """

    DEFAULT_SYSTEM_PROMPT = (
        "You are an inventory classification assistant. "
        "You reply with a single JSON object and nothing else."
    )

    DEFAULT_USER_TEMPLATE = """Analyze the following information and generate a JSON response.

VISION ANALYSIS:
- Detected Objects: {objects}
- OCR Text: {ocr_text}
- Colors: {colors}{hint}

INSTRUCTIONS:
Return STRICT JSON matching this exact structure:
{{
  "title": "concise item name (2-5 words)",
  "summary": "brief description (1-2 sentences)",
  "category": "one of: {categories}",
  "tags": ["{min_tags}-{max_tags} lowercase singular tags", "no duplicates"],
  "attributes": {{
    "color": "primary color if applicable",
    "material": "material if identifiable",
    "finish": "finish/texture if applicable"
  }}
}}

TAGGING GUIDANCE:
Draw tags from these families:
- colors visible in the item
- materials (fabric, metal, wood, plastic, paper, glass, ceramic, leather)
- function (wearable, consumable, readable, functional, decorative, electronic, storage)
- context (kitchen, bathroom, outdoor, indoor, workspace, portable, gift)
- object type (what the item is)
- brand names or meaningful words from the OCR text
- the broad category

RULES:
- title: short, descriptive, capitalize properly
- summary: 1-2 sentences describing the item
- category: MUST be one of the {category_count} categories listed
- tags: {min_tags}-{max_tags} items, lowercase, singular form, no duplicates
- attributes: string, number or boolean values only

Return ONLY the JSON, no other text."""

    def __init__(
        self,
        system_prompt: str | None = None,
        user_template: str | None = None,
        min_tags: int = 5,
        max_tags: int = MAX_TAGS,
    ) -> None:
        """Initialize the classification prompt template.

        Args:
            system_prompt: Custom system prompt.
            user_template: Custom user message template.
            min_tags: Lower end of the requested tag range.
            max_tags: Upper end of the requested tag range.
        """
        self.system_prompt = system_prompt or self.DEFAULT_SYSTEM_PROMPT
        self.user_template = user_template or self.DEFAULT_USER_TEMPLATE
        self.min_tags = min_tags
        self.max_tags = max_tags

    def format(self, **kwargs: Any) -> str:
        """Format the user template.

        Args:
            **kwargs: Must include 'objects', 'ocr_text', 'colors' and 'hint'.

        Returns:
            Formatted user prompt.
        """
        return self.user_template.format(
            categories=", ".join(VALID_CATEGORIES),
            category_count=len(VALID_CATEGORIES),
            min_tags=self.min_tags,
            max_tags=self.max_tags,
            **kwargs,
        )

    def format_objects(self, vision: VisionSummary) -> str:
        """Render detected objects as ``label (NN%)`` entries."""
        if not vision.objects:
            return "None"
        return ", ".join(
            f"{obj.label} ({obj.confidence * 100:.0f}%)" for obj in vision.objects
        )

    def build_prompt(
        self,
        vision: VisionSummary,
        hint: str | None = None,
    ) -> tuple[str, str]:
        """Build complete prompt from a vision summary and optional hint.

        Args:
            vision: Analyzer output.
            hint: Optional user hint about the item.

        Returns:
            Tuple of (system_prompt, user_prompt).
        """
        hint_line = f"\n- User Hint: {hint.strip()}" if hint and hint.strip() else ""
        user_prompt = self.format(
            objects=self.format_objects(vision),
            ocr_text=vision.ocr_text.strip() or "None",
            colors=", ".join(vision.colors) if vision.colors else "None",
            hint=hint_line,
        )
        return self.system_prompt, user_prompt
