"""Usage counters for expense/income subcategories and vendors.

Unlike the project aggregates, usage counts are adjusted incrementally
with a read-modify-write per change. A count can drift when a chain is
interrupted between the record write and the counter update; it never
goes below zero.
"""

import logging
from typing import List, Optional

from scaffold_ledger.errors import ValidationError
from scaffold_ledger.models.catalog import CatalogItem
from scaffold_ledger.store.base import (
    SERVER_TIMESTAMP,
    Collections,
    DocumentStore,
    FieldFilter,
    OrderBy,
)

logger = logging.getLogger(__name__)

CATALOG_COLLECTIONS = (
    Collections.EXPENSE_SUBCATEGORIES,
    Collections.INCOME_SUBCATEGORIES,
    Collections.VENDORS,
)


class UsageCounter:
    """Maintains ``usageCount`` on the items of one catalog collection.

    Example:
        >>> vendors = UsageCounter(store, Collections.VENDORS)
        >>> vendors.register("Home Depot")
        CatalogItem(id='...', name='Home Depot', category_id=None, usage_count=0)
        >>> vendors.increment("Home Depot")
        1
    """

    def __init__(self, store: DocumentStore, collection: str):
        if collection not in CATALOG_COLLECTIONS:
            raise ValueError(f"Not a usage-counted collection: {collection}")
        self.store = store
        self.collection = collection

    def find(self, name: str) -> Optional[CatalogItem]:
        """Find an item by exact name."""
        matches = self.store.query(self.collection, [FieldFilter("name", name)])
        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(
                f"{len(matches)} items named {name!r} in {self.collection}, "
                f"using {matches[0].id}"
            )
        return CatalogItem.from_document(matches[0].id, matches[0].data)

    def _adjust(self, name: Optional[str], delta: int) -> Optional[int]:
        if name is None or not name.strip():
            return None

        item = self.find(name)
        if item is None:
            logger.info(f"No {self.collection} item named {name!r}, count unchanged")
            return None

        new_count = max(item.usage_count + delta, 0)
        self.store.update(
            self.collection,
            item.id,
            {"usageCount": new_count, "updatedAt": SERVER_TIMESTAMP},
        )
        logger.debug(
            f"{self.collection}/{item.id} ({name!r}) usageCount "
            f"{item.usage_count} -> {new_count}"
        )
        return new_count

    def increment(self, name: Optional[str]) -> Optional[int]:
        """Add one use of ``name``.

        Returns:
            The new count, or None when the name is blank or unknown
        """
        return self._adjust(name, 1)

    def decrement(self, name: Optional[str]) -> Optional[int]:
        """Remove one use of ``name``, flooring the count at zero.

        Returns:
            The new count, or None when the name is blank or unknown
        """
        return self._adjust(name, -1)

    def apply_rename(self, old_name: Optional[str], new_name: Optional[str]) -> None:
        """Move one use from ``old_name`` to ``new_name`` when they differ."""
        if (old_name or None) == (new_name or None):
            return
        self.decrement(old_name)
        self.increment(new_name)

    def register(self, name: str, category_id: Optional[str] = None) -> CatalogItem:
        """Create a catalog item with a zero count.

        Args:
            name: Display name, unique case-insensitively
            category_id: Parent category for subcategories

        Returns:
            The created item

        Raises:
            ValidationError: If the name is blank or already taken
        """
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError(f"{self.collection} name cannot be empty")

        existing = {
            str(doc.get("name", "")).strip().lower()
            for doc in self.store.query(self.collection)
        }
        if cleaned.lower() in existing:
            raise ValidationError(f"{self.collection} item {cleaned!r} already exists")

        item = CatalogItem(name=cleaned, category_id=category_id, usage_count=0)
        data = item.to_document()
        data["createdAt"] = SERVER_TIMESTAMP
        item.id = self.store.create(self.collection, data)
        logger.info(f"Registered {self.collection} item {cleaned!r} ({item.id})")
        return item

    def list_items(self) -> List[CatalogItem]:
        """All items ordered by name."""
        documents = self.store.query(self.collection, order_by=OrderBy("name"))
        return [CatalogItem.from_document(doc.id, doc.data) for doc in documents]

    def most_used(self, limit: int = 5) -> List[CatalogItem]:
        """Items with the highest usage count, ties broken by name."""
        items = self.list_items()
        items.sort(key=lambda item: (-item.usage_count, item.name.lower()))
        return items[:limit]
