"""Search data models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from hela.query.models import QueryPlan
from hela.store.models import Item

ALL = "all"


class SortOrder(str, Enum):
    """Item list orderings."""

    NEWEST = "newest"
    TITLE = "title"
    QUANTITY = "quantity"


class SearchMode(str, Enum):
    """How a query string was interpreted."""

    BROWSE = "browse"
    KEYWORD = "keyword"
    NATURAL_LANGUAGE = "natural_language"


class HitKind(str, Enum):
    """Record type behind a unified search hit."""

    ITEM = "item"
    NOTE = "note"


class SearchHit(BaseModel):
    """One row of a unified item and note search.

    Attributes:
        kind: Whether the hit is an item or a note.
        id: Record ID.
        title: Display title.
        subtitle: Item summary or note body.
        category: Record category.
        created_at: Record creation time.
    """

    kind: HitKind = Field(description="Record type")
    id: str = Field(description="Record ID")
    title: str = Field(description="Display title")
    subtitle: str = Field(default="", description="Summary or body")
    category: str = Field(default="", description="Record category")
    created_at: datetime = Field(description="Creation time")


class SearchRequest(BaseModel):
    """Selectors and query for an item search.

    Attributes:
        query: Free-text query; empty lists everything.
        category: Category selector or ``all``.
        collection: Collection selector or ``all``.
        sort: Result ordering.
    """

    query: str = Field(default="", description="Search text")
    category: str = Field(default=ALL, description="Category selector")
    collection: str = Field(default=ALL, description="Collection selector")
    sort: SortOrder = Field(default=SortOrder.NEWEST, description="Ordering")


class SearchOutcome(BaseModel):
    """Items matched by a search plus how the query was read.

    Attributes:
        mode: Interpretation of the query text.
        plan: Query plan when the text was read as natural language.
        items: Matching items in result order.
    """

    mode: SearchMode = Field(description="Query interpretation")
    plan: QueryPlan | None = Field(default=None, description="Query plan")
    items: list[Item] = Field(default_factory=list, description="Matches")
