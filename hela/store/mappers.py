"""Conversion between classification records and stored items."""

import json

from hela.classification.models import ItemRecord
from hela.store.models import Item
from hela.vision.models import VisionSummary


def item_from_record(
    record: ItemRecord,
    vision: VisionSummary | None = None,
    collection: str | None = None,
    quantity: int = 1,
    image_id: str | None = None,
) -> Item:
    """Flatten an accepted record into a storable item.

    Args:
        record: Accepted classification record.
        vision: Vision summary the record was built from, for OCR and colors.
        collection: Optional collection name.
        quantity: Quantity owned.
        image_id: Photo store identifier.

    Returns:
        New unsaved Item.
    """
    return Item(
        title=record.title,
        summary=record.summary,
        category=record.category,
        tags_csv=",".join(record.tags),
        attributes_json=json.dumps(record.attributes, sort_keys=True),
        ocr_text=vision.ocr_text if vision else "",
        colors_json=json.dumps(vision.colors if vision else []),
        collection=collection,
        quantity=quantity,
        image_id=image_id,
    )


def record_from_item(item: Item) -> ItemRecord:
    """Rebuild a record from an item's flattened columns.

    Raises:
        RecordValidationError: If user edits left the item outside the
            accepted record rules.
    """
    return ItemRecord(
        title=item.title,
        summary=item.summary,
        category=item.category,
        tags=item.tags,
        attributes=item.attributes,
    )
