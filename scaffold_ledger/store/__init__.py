"""Document store backends for the ledger core."""

import logging
from typing import Any

from scaffold_ledger.store.base import (
    SERVER_TIMESTAMP,
    Collections,
    Document,
    DocumentStore,
    FieldFilter,
    OrderBy,
)
from scaffold_ledger.store.firestore_store import FirestoreDocumentStore
from scaffold_ledger.store.memory_store import InMemoryDocumentStore

logger = logging.getLogger(__name__)


def create_store(settings: Any) -> DocumentStore:
    """Create the document store selected by ``STORE_BACKEND``."""
    if settings.store_backend == "firestore":
        logger.info(
            f"Using Firestore store for project {settings.resolved_firestore_project}"
        )
        return FirestoreDocumentStore.from_settings(settings)

    logger.info("Using in-memory document store")
    return InMemoryDocumentStore()


__all__ = [
    "SERVER_TIMESTAMP",
    "Collections",
    "Document",
    "DocumentStore",
    "FieldFilter",
    "FirestoreDocumentStore",
    "InMemoryDocumentStore",
    "OrderBy",
    "create_store",
]
