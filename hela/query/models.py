"""Query planning data models."""

from enum import Enum

from pydantic import BaseModel, Field


class FilterKind(str, Enum):
    """Structured filter dimensions a query can carry."""

    CATEGORY = "category"
    COLOR = "color"
    PATTERN = "pattern"
    MATERIAL = "material"


class QueryPlan(BaseModel):
    """Structured filters plus residual full-text terms.

    Attributes:
        filters: At most one canonical value per filter kind.
        full_text_terms: Residual tokens in first-occurrence order.
    """

    filters: dict[FilterKind, str] = Field(
        default_factory=dict,
        description="Extracted filters",
    )
    full_text_terms: list[str] = Field(
        default_factory=list,
        description="Residual search terms",
    )

    @property
    def full_text(self) -> str:
        """Residual terms joined into one search string."""
        return " ".join(self.full_text_terms)

    @property
    def is_empty(self) -> bool:
        """True when the plan neither filters nor searches."""
        return not self.filters and not self.full_text_terms
