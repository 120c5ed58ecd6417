"""Document store contract consumed by the aggregators and the ledger.

The store is a set of named collections of schemaless documents. It
supports equality queries with an optional order-by, create with a
store-assigned id, set with a caller id, partial-merge update of an
existing document, delete, and a write-time timestamp sentinel.
Single-document writes are durable and ordered; nothing spans documents.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence


class Collections:
    """Collection names shared with the rest of the application."""

    TASK_ASSIGNMENTS = "taskAssignments"
    EXPENSES = "reimbursements"
    INCOMES = "incomes"
    PROJECT_PHOTOS = "projectPhotos"
    PROJECTS = "projects"
    EXPENSE_SUBCATEGORIES = "expenseSubcategories"
    INCOME_SUBCATEGORIES = "incomeSubcategories"
    VENDORS = "vendors"
    STAFF_MEMBERS = "staffMembers"


class _ServerTimestamp:
    """Sentinel replaced by the store's write time."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class FieldFilter:
    """Equality filter on one document field."""

    field: str
    value: Any


@dataclass(frozen=True)
class OrderBy:
    """Sort instruction; documents lacking the field are not returned."""

    field: str
    descending: bool = False


@dataclass
class Document:
    """A stored document: its id plus a copy of its fields."""

    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


class DocumentStore(ABC):
    """Abstract document store.

    Implementations raise ``NotFoundError`` from ``update`` when the target
    document does not exist and ``StoreError`` for transport or permission
    failures. ``delete`` of a missing document is a no-op.
    """

    @abstractmethod
    def get(self, collection: str, document_id: str) -> Optional[Document]:
        """Read one document, or None when it does not exist."""

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[OrderBy] = None,
        bulk: bool = False,
    ) -> List[Document]:
        """Read all documents matching every filter.

        Args:
            collection: Collection name
            filters: Equality filters, all of which must match
            order_by: Optional server-side ordering
            bulk: True for display-list reads, which are bounded by the
                configured bulk read timeout; recompute reads pass False
        """

    @abstractmethod
    def create(self, collection: str, data: Dict[str, Any]) -> str:
        """Create a document with a store-assigned id and return the id."""

    @abstractmethod
    def set(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        """Create or fully replace a document under a caller-chosen id."""

    @abstractmethod
    def update(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        """Merge fields into an existing document.

        Raises:
            NotFoundError: If the document does not exist
        """

    @abstractmethod
    def delete(self, collection: str, document_id: str) -> None:
        """Delete a document if it exists."""
