"""Record store module."""

from hela.store.mappers import item_from_record, record_from_item
from hela.store.models import Item, ItemUpdate, Note
from hela.store.service import InMemoryRecordStore, RecordStore

__all__ = [
    "InMemoryRecordStore",
    "Item",
    "ItemUpdate",
    "Note",
    "RecordStore",
    "item_from_record",
    "record_from_item",
]
