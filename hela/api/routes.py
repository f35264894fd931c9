"""API routes for classification, items, notes and search."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from hela.api.dependencies import Services, get_services
from hela.classification.models import ItemRecord, Tier, TierFailure
from hela.logging_config import get_logger
from hela.notes.importer import NoteDraft
from hela.query.models import QueryPlan
from hela.query.planner import looks_like_natural_language
from hela.search.evaluator import collections
from hela.search.models import ALL, SearchHit, SearchMode, SearchRequest, SortOrder
from hela.store.mappers import item_from_record
from hela.store.models import Item, ItemUpdate, Note
from hela.vision.models import VisionSummary

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

ServicesDep = Annotated[Services, Depends(get_services)]


class ItemResponse(BaseModel):
    """Stored item with decoded tags, attributes and colors."""

    id: str
    title: str
    summary: str
    category: str
    tags: list[str]
    attributes: dict[str, Any]
    ocr_text: str
    colors: list[str]
    collection: str | None
    quantity: int
    image_id: str | None
    created_at: str

    @classmethod
    def from_item(cls, item: Item) -> "ItemResponse":
        """Decode an item's flattened columns."""
        return cls(
            id=item.id,
            title=item.title,
            summary=item.summary,
            category=item.category,
            tags=item.tags,
            attributes=item.attributes,
            ocr_text=item.ocr_text,
            colors=item.colors,
            collection=item.collection,
            quantity=item.quantity,
            image_id=item.image_id,
            created_at=item.created_at.isoformat(),
        )


class ClassifyRequest(BaseModel):
    """Request body for classification."""

    vision: VisionSummary = Field(description="Vision analysis of the photo")
    hint: str | None = Field(default=None, description="Optional user hint")
    save: bool = Field(default=False, description="Store the result as an item")
    collection: str | None = Field(default=None, description="Collection name")
    quantity: int = Field(default=1, ge=1, description="Quantity owned")
    image_id: str | None = Field(default=None, description="Photo identifier")


class ClassifyResponse(BaseModel):
    """Classification result, with the stored item when saved."""

    record: ItemRecord = Field(description="Accepted record")
    tier: Tier = Field(description="Producing tier")
    failures: list[TierFailure] = Field(description="Skipped tiers")
    item: ItemResponse | None = Field(default=None, description="Stored item")


class QueryPlanResponse(BaseModel):
    """Planner output for a query string."""

    query: str
    natural_language: bool
    filters: dict[str, str]
    full_text_terms: list[str]
    full_text: str


class ItemCreateRequest(BaseModel):
    """Request body for storing an already classified record."""

    record: dict[str, Any] = Field(description="Record fields")
    vision: VisionSummary | None = Field(default=None, description="Vision data")
    collection: str | None = Field(default=None, description="Collection name")
    quantity: int = Field(default=1, ge=1, description="Quantity owned")
    image_id: str | None = Field(default=None, description="Photo identifier")


class ItemSearchResponse(BaseModel):
    """Filtered item list."""

    mode: SearchMode
    plan: QueryPlanResponse | None
    total: int
    items: list[ItemResponse]


class CollectionsResponse(BaseModel):
    """Distinct collection names."""

    collections: list[str]


class NoteImportRequest(BaseModel):
    """Request body for importing a text note."""

    text: str = Field(min_length=1, description="Raw note text")


class NoteImportResponse(BaseModel):
    """Imported note and the parse that produced it."""

    note: Note
    draft: NoteDraft


class UnifiedSearchResponse(BaseModel):
    """Items and notes matching a query."""

    total: int
    hits: list[SearchHit]


def _plan_response(query: str, plan: QueryPlan) -> QueryPlanResponse:
    return QueryPlanResponse(
        query=query,
        natural_language=looks_like_natural_language(query),
        filters={kind.value: value for kind, value in plan.filters.items()},
        full_text_terms=plan.full_text_terms,
        full_text=plan.full_text,
    )


@router.post("/classify", response_model=ClassifyResponse, tags=["Classification"])
async def classify_endpoint(
    request: ClassifyRequest,
    services: ServicesDep,
) -> ClassifyResponse:
    """Classify a vision summary, optionally storing the result."""
    result = await services.classifier.classify(request.vision, request.hint)

    item_response = None
    if request.save:
        item = await services.store.create_item(
            item_from_record(
                result.record,
                vision=request.vision,
                collection=request.collection,
                quantity=request.quantity,
                image_id=request.image_id,
            )
        )
        item_response = ItemResponse.from_item(item)
        logger.info(
            f"Stored classified item {item.id}",
            extra={"tier": result.tier.value, "category": item.category},
        )

    return ClassifyResponse(
        record=result.record,
        tier=result.tier,
        failures=result.failures,
        item=item_response,
    )


@router.get("/query/plan", response_model=QueryPlanResponse, tags=["Search"])
async def query_plan_endpoint(
    services: ServicesDep,
    q: Annotated[str, Query(description="Search text")] = "",
) -> QueryPlanResponse:
    """Show how a search string decomposes into filters and free text."""
    return _plan_response(q, services.planner.plan(q))


@router.post(
    "/items",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Items"],
)
async def create_item_endpoint(
    request: ItemCreateRequest,
    services: ServicesDep,
) -> ItemResponse:
    """Validate a record and store it as an item."""
    record = ItemRecord.validated(request.record)
    item = await services.store.create_item(
        item_from_record(
            record,
            vision=request.vision,
            collection=request.collection,
            quantity=request.quantity,
            image_id=request.image_id,
        )
    )
    return ItemResponse.from_item(item)


@router.get("/items", response_model=ItemSearchResponse, tags=["Items"])
async def list_items_endpoint(
    services: ServicesDep,
    q: Annotated[str, Query(description="Search text")] = "",
    category: Annotated[str, Query(description="Category or 'all'")] = ALL,
    collection: Annotated[str, Query(description="Collection or 'all'")] = ALL,
    sort: Annotated[SortOrder, Query(description="Ordering")] = SortOrder.NEWEST,
) -> ItemSearchResponse:
    """List items filtered by category, collection and query."""
    items = await services.store.fetch_items()
    outcome = services.search.search(
        items,
        SearchRequest(query=q, category=category, collection=collection, sort=sort),
    )
    plan = _plan_response(q, outcome.plan) if outcome.plan is not None else None
    return ItemSearchResponse(
        mode=outcome.mode,
        plan=plan,
        total=len(outcome.items),
        items=[ItemResponse.from_item(i) for i in outcome.items],
    )


@router.get("/items/{item_id}", response_model=ItemResponse, tags=["Items"])
async def get_item_endpoint(item_id: str, services: ServicesDep) -> ItemResponse:
    """Fetch one item."""
    return ItemResponse.from_item(await services.store.get_item(item_id))


@router.patch("/items/{item_id}", response_model=ItemResponse, tags=["Items"])
async def update_item_endpoint(
    item_id: str,
    update: ItemUpdate,
    services: ServicesDep,
) -> ItemResponse:
    """Apply user edits. Edits are stored as given, without re-classification."""
    item = await services.store.update_item(item_id, update.to_fields())
    return ItemResponse.from_item(item)


@router.delete(
    "/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Items"],
)
async def delete_item_endpoint(item_id: str, services: ServicesDep) -> Response:
    """Delete an item."""
    await services.store.delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/collections", response_model=CollectionsResponse, tags=["Items"])
async def collections_endpoint(services: ServicesDep) -> CollectionsResponse:
    """List distinct collection names."""
    items = await services.store.fetch_items()
    return CollectionsResponse(collections=collections(items))


@router.post(
    "/notes/import",
    response_model=NoteImportResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Notes"],
)
async def import_note_endpoint(
    request: NoteImportRequest,
    services: ServicesDep,
) -> NoteImportResponse:
    """Import a pasted text note."""
    draft = services.importer.import_note(request.text)
    note = await services.store.create_note(draft.to_note())
    return NoteImportResponse(note=note, draft=draft)


@router.get("/search", response_model=UnifiedSearchResponse, tags=["Search"])
async def unified_search_endpoint(
    services: ServicesDep,
    q: Annotated[str, Query(description="Search text")] = "",
) -> UnifiedSearchResponse:
    """Search items and notes together."""
    items = await services.store.fetch_items()
    notes = await services.store.fetch_notes()
    hits = services.search.unified_search(items, notes, q)
    return UnifiedSearchResponse(total=len(hits), hits=hits)
