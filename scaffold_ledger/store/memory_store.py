"""In-memory document store.

Used for local runs and tests. Behaves like the hosted store for the
operations the core relies on: per-document writes, equality queries,
order-by that skips documents without the field, and server timestamps.
"""

import copy
import logging
import threading
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from scaffold_ledger.errors import NotFoundError
from scaffold_ledger.store.base import (
    SERVER_TIMESTAMP,
    Document,
    DocumentStore,
    FieldFilter,
    OrderBy,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDocumentStore(DocumentStore):
    """
    Thread-safe in-memory implementation of ``DocumentStore``.

    Features:
    - Insertion-ordered collections
    - Deep copies on read and write so callers never share state
    - Injectable clock for the SERVER_TIMESTAMP sentinel
    - Write log of (operation, collection, id) for inspection

    Example:
        >>> store = InMemoryDocumentStore()
        >>> project_id = store.create("projects", {"name": "Garage"})
        >>> store.get("projects", project_id).get("name")
        'Garage'
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize an empty store.

        Args:
            clock: Function returning the write time used for
                SERVER_TIMESTAMP (defaults to the current UTC time)
        """
        self._clock = clock or _utc_now
        self._collections: Dict[str, "OrderedDict[str, Dict[str, Any]]"] = {}
        self._lock = threading.Lock()
        self.write_log: List[Tuple[str, str, str]] = []

    def _collection(self, name: str) -> "OrderedDict[str, Dict[str, Any]]":
        return self._collections.setdefault(name, OrderedDict())

    def _resolve(self, data: Dict[str, Any]) -> Dict[str, Any]:
        now = self._clock()
        resolved = {}
        for key, value in data.items():
            resolved[key] = now if value is SERVER_TIMESTAMP else copy.deepcopy(value)
        return resolved

    def get(self, collection: str, document_id: str) -> Optional[Document]:
        with self._lock:
            data = self._collection(collection).get(document_id)
            if data is None:
                return None
            return Document(id=document_id, data=copy.deepcopy(data))

    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[OrderBy] = None,
        bulk: bool = False,
    ) -> List[Document]:
        with self._lock:
            matches = [
                Document(id=doc_id, data=copy.deepcopy(data))
                for doc_id, data in self._collection(collection).items()
                if all(
                    f.field in data and data[f.field] == f.value for f in filters
                )
            ]

        if order_by is not None:
            matches = [
                doc for doc in matches if doc.data.get(order_by.field) is not None
            ]
            matches.sort(
                key=lambda doc: doc.data[order_by.field],
                reverse=order_by.descending,
            )

        logger.debug(
            f"Query {collection} filters={list(filters)} returned {len(matches)} docs"
        )
        return matches

    def create(self, collection: str, data: Dict[str, Any]) -> str:
        document_id = uuid.uuid4().hex[:20]
        with self._lock:
            self._collection(collection)[document_id] = self._resolve(data)
            self.write_log.append(("create", collection, document_id))
        return document_id

    def set(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        with self._lock:
            self._collection(collection)[document_id] = self._resolve(data)
            self.write_log.append(("set", collection, document_id))

    def update(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        with self._lock:
            existing = self._collection(collection).get(document_id)
            if existing is None:
                raise NotFoundError(collection, document_id)
            existing.update(self._resolve(data))
            self.write_log.append(("update", collection, document_id))

    def delete(self, collection: str, document_id: str) -> None:
        with self._lock:
            removed = self._collection(collection).pop(document_id, None)
            if removed is not None:
                self.write_log.append(("delete", collection, document_id))

    def writes_to(self, collection: str) -> List[Tuple[str, str, str]]:
        """Return the logged writes that touched one collection."""
        return [entry for entry in self.write_log if entry[1] == collection]
