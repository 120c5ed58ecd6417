"""Mapping of raw record documents into tagged ledger entries.

Ledger reads are lenient: documents written by older clients may miss
display names, carry a single legacy photo URL or hold amounts as
strings. Missing names fall back to the "Unknown ..." placeholders and
documents that still cannot be read are skipped with a warning.
"""

import logging
from typing import Any, Dict, Optional, Type

import pydantic

from scaffold_ledger.models.activity import (
    UNKNOWN_PROJECT,
    UNKNOWN_STAFF,
    UNKNOWN_USER,
    ActivityEntryBase,
    ActivityKind,
    AssignmentEntry,
    ExpenseEntry,
    IncomeEntry,
    PhotoEntry,
)
from scaffold_ledger.models.records import ExpenseStatus
from scaffold_ledger.store.base import Document

logger = logging.getLogger(__name__)

ENTRY_MODELS: Dict[ActivityKind, Type[ActivityEntryBase]] = {
    ActivityKind.ASSIGNMENT: AssignmentEntry,
    ActivityKind.EXPENSE: ExpenseEntry,
    ActivityKind.INCOME: IncomeEntry,
    ActivityKind.PHOTO: PhotoEntry,
}


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _with_display_defaults(kind: ActivityKind, data: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(data)
    if not _blank(data.get("projectId")) and _blank(data.get("projectName")):
        data["projectName"] = UNKNOWN_PROJECT

    if kind == ActivityKind.ASSIGNMENT and _blank(data.get("staffName")):
        data["staffName"] = UNKNOWN_STAFF
    elif kind == ActivityKind.EXPENSE and _blank(data.get("staffName")):
        data["staffName"] = None if _blank(data.get("staffId")) else UNKNOWN_STAFF
    elif kind == ActivityKind.PHOTO and _blank(data.get("uploadedByName")):
        data["uploadedByName"] = UNKNOWN_USER

    if kind == ActivityKind.ASSIGNMENT and data.get("staffId") is None:
        data["staffId"] = ""
    if kind in (ActivityKind.EXPENSE, ActivityKind.INCOME) and _blank(
        data.get("status")
    ):
        data["status"] = ExpenseStatus.PENDING.value

    for key in (
        "taskDescription",
        "itemDescription",
        "category",
        "subcategory",
        "description",
    ):
        if key in data and data[key] is None:
            data[key] = ""
    return data


def entry_from_document(
    kind: ActivityKind, document: Document
) -> Optional[ActivityEntryBase]:
    """Map a record document to its ledger entry.

    Args:
        kind: Kind of the collection the document came from
        document: Stored record

    Returns:
        The entry, or None when the document cannot be read
    """
    kind = ActivityKind(kind)
    model = ENTRY_MODELS[kind]
    try:
        return model.from_document(
            document.id, _with_display_defaults(kind, document.data)
        )
    except pydantic.ValidationError as e:
        logger.warning(
            f"Skipping unreadable {kind.value} document {document.id}: "
            f"{e.error_count()} invalid field(s)"
        )
        return None


def kind_of(entry: ActivityEntryBase) -> ActivityKind:
    """Kind tag of an entry."""
    for kind, model in ENTRY_MODELS.items():
        if isinstance(entry, model):
            return kind
    raise TypeError(f"Unsupported activity entry: {type(entry).__name__}")
