"""Record store interface and in-memory implementation."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from hela.exceptions import RecordNotFoundError, RecordStoreError
from hela.logging_config import get_logger
from hela.store.models import Item, Note

logger = get_logger(__name__)

ItemPredicate = Callable[[Item], bool]
NotePredicate = Callable[[Note], bool]
ItemSort = Callable[[list[Item]], list[Item]]


def newest_first(items: list[Item]) -> list[Item]:
    """Default fetch order: most recently created first."""
    return sorted(items, key=lambda i: i.created_at, reverse=True)


class RecordStore(ABC):
    """Abstract base class for item and note persistence.

    Predicates are plain callables over a single record. Updates are
    last-writer-wins.
    """

    @abstractmethod
    async def create_item(self, item: Item) -> Item:
        """Persist a new item.

        Args:
            item: Item to store.

        Returns:
            The stored item.

        Raises:
            RecordStoreError: If an item with the same ID exists.
        """
        ...

    @abstractmethod
    async def create_note(self, note: Note) -> Note:
        """Persist a new note.

        Args:
            note: Note to store.

        Returns:
            The stored note.

        Raises:
            RecordStoreError: If a note with the same ID exists.
        """
        ...

    @abstractmethod
    async def get_item(self, item_id: str) -> Item:
        """Fetch one item by ID.

        Raises:
            RecordNotFoundError: If the item does not exist.
        """
        ...

    @abstractmethod
    async def fetch_items(
        self,
        predicate: ItemPredicate | None = None,
        sort: ItemSort | None = None,
    ) -> list[Item]:
        """Fetch items matching a predicate.

        Args:
            predicate: Filter; all items when None.
            sort: Ordering; newest first when None.

        Returns:
            Matching items.
        """
        ...

    @abstractmethod
    async def fetch_notes(self, predicate: NotePredicate | None = None) -> list[Note]:
        """Fetch notes matching a predicate, newest first."""
        ...

    @abstractmethod
    async def update_item(self, item_id: str, changes: dict[str, Any]) -> Item:
        """Apply field changes to an item without re-validation.

        Args:
            item_id: Item to change.
            changes: Column name to new value.

        Returns:
            The updated item.

        Raises:
            RecordNotFoundError: If the item does not exist.
            RecordStoreError: If a change names an unknown or read-only column.
        """
        ...

    @abstractmethod
    async def delete_item(self, item_id: str) -> None:
        """Delete an item.

        Raises:
            RecordNotFoundError: If the item does not exist.
        """
        ...

    @abstractmethod
    async def delete_note(self, note_id: str) -> None:
        """Delete a note.

        Raises:
            RecordNotFoundError: If the note does not exist.
        """
        ...

    @abstractmethod
    async def count_items(self, predicate: ItemPredicate | None = None) -> int:
        """Count items matching a predicate."""
        ...

    @abstractmethod
    async def count_notes(self, predicate: NotePredicate | None = None) -> int:
        """Count notes matching a predicate."""
        ...


class InMemoryRecordStore(RecordStore):
    """Dictionary-backed record store.

    Mutations are serialized with an asyncio lock. Reads return snapshots.
    """

    READ_ONLY_FIELDS = frozenset({"id", "created_at"})

    def __init__(self) -> None:
        self._items: dict[str, Item] = {}
        self._notes: dict[str, Note] = {}
        self._lock = asyncio.Lock()

    async def create_item(self, item: Item) -> Item:
        async with self._lock:
            if item.id in self._items:
                raise RecordStoreError(
                    f"Item already exists: {item.id}",
                    details={"id": item.id},
                )
            self._items[item.id] = item

        logger.info(
            f"Created item {item.id}",
            extra={"category": item.category, "collection": item.collection},
        )
        return item

    async def create_note(self, note: Note) -> Note:
        async with self._lock:
            if note.id in self._notes:
                raise RecordStoreError(
                    f"Note already exists: {note.id}",
                    details={"id": note.id},
                )
            self._notes[note.id] = note

        logger.info(f"Created note {note.id}", extra={"category": note.category})
        return note

    async def get_item(self, item_id: str) -> Item:
        item = self._items.get(item_id)
        if item is None:
            raise RecordNotFoundError(
                f"Item not found: {item_id}",
                details={"id": item_id},
            )
        return item

    async def fetch_items(
        self,
        predicate: ItemPredicate | None = None,
        sort: ItemSort | None = None,
    ) -> list[Item]:
        items = [i for i in self._items.values() if predicate is None or predicate(i)]
        return (sort or newest_first)(items)

    async def fetch_notes(self, predicate: NotePredicate | None = None) -> list[Note]:
        notes = [n for n in self._notes.values() if predicate is None or predicate(n)]
        return sorted(notes, key=lambda n: n.created_at, reverse=True)

    async def update_item(self, item_id: str, changes: dict[str, Any]) -> Item:
        unknown = set(changes) - set(Item.model_fields)
        blocked = set(changes) & self.READ_ONLY_FIELDS
        if unknown or blocked:
            raise RecordStoreError(
                "Cannot update these item fields",
                details={"fields": sorted(unknown | blocked)},
            )

        async with self._lock:
            current = await self.get_item(item_id)
            updated = current.model_copy(update=changes)
            self._items[item_id] = updated

        logger.info(f"Updated item {item_id}", extra={"fields": sorted(changes)})
        return updated

    async def delete_item(self, item_id: str) -> None:
        async with self._lock:
            if self._items.pop(item_id, None) is None:
                raise RecordNotFoundError(
                    f"Item not found: {item_id}",
                    details={"id": item_id},
                )
        logger.info(f"Deleted item {item_id}")

    async def delete_note(self, note_id: str) -> None:
        async with self._lock:
            if self._notes.pop(note_id, None) is None:
                raise RecordNotFoundError(
                    f"Note not found: {note_id}",
                    details={"id": note_id},
                )
        logger.info(f"Deleted note {note_id}")

    async def count_items(self, predicate: ItemPredicate | None = None) -> int:
        return len(await self.fetch_items(predicate))

    async def count_notes(self, predicate: NotePredicate | None = None) -> int:
        return len(await self.fetch_notes(predicate))
