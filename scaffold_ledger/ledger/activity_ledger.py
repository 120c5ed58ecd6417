"""Unified activity ledger over assignments, expenses, incomes and photos.

The ledger reads the four record collections, maps each document into a
tagged entry and merges them into one feed. Edits and deletes go back to
exactly one collection through the transaction service, which also brings
the affected project aggregates and usage counters up to date.
"""

import datetime as dt
import logging
from typing import Callable, Dict, List, Optional, Union

from scaffold_ledger.errors import NotFoundError
from scaffold_ledger.ledger.editing import changes_from_draft, draft_from_entry
from scaffold_ledger.ledger.entries import entry_from_document, kind_of
from scaffold_ledger.ledger.query import (
    apply_filter,
    group_by_month,
    sort_by_created,
    sort_entries,
)
from scaffold_ledger.models.activity import (
    ActivityEntryBase,
    ActivityFilter,
    ActivityKind,
    EditDraft,
    MonthGroup,
    SortState,
)
from scaffold_ledger.services.transaction_service import (
    RECORD_KINDS,
    TransactionService,
)
from scaffold_ledger.store.base import DocumentStore, FieldFilter
from scaffold_ledger.utils.logging_utils import LogContext
from scaffold_ledger.validators.draft_validator import DraftValidator

logger = logging.getLogger(__name__)

ACTIVITIES = "activities"

EntryRef = Union[str, ActivityEntryBase]


class ActivityLedger:
    """
    Merged, filterable, sortable view of every project activity.

    Features:
    - One feed over four record collections, newest first
    - Composable filters and free-text search
    - Stable user-selected sort and month grouping
    - Kind-aware edit drafts, validation and save/delete dispatch

    Example:
        >>> ledger = ActivityLedger(store, transactions)
        >>> entries = ledger.list_activities(ActivityFilter(kind="expense"))
        >>> draft = ledger.start_edit(entries[0])
        >>> draft.amount = Decimal("140.00")
        >>> ledger.save_edit(entries[0], draft)
    """

    def __init__(
        self,
        store: DocumentStore,
        transactions: TransactionService,
        today: Callable[[], dt.date] = dt.date.today,
    ):
        """
        Initialize the ledger.

        Args:
            store: Document store holding the record collections
            transactions: Write path used for saves and deletes
            today: Clock used to pick the expanded month group
        """
        self.store = store
        self.transactions = transactions
        self._today = today
        self._entries: Dict[str, ActivityEntryBase] = {}

    def load(self, project_id: Optional[str] = None) -> List[ActivityEntryBase]:
        """Read every record kind and merge them newest first.

        Args:
            project_id: Only read records of this project

        Returns:
            Entries sorted by creation time, newest first

        Raises:
            StoreError: If a collection cannot be read
        """
        filters = [FieldFilter("projectId", project_id)] if project_id else []
        entries: List[ActivityEntryBase] = []
        for kind, record_kind in RECORD_KINDS.items():
            documents = self.store.query(record_kind.collection, filters, bulk=True)
            for document in documents:
                entry = entry_from_document(kind, document)
                if entry is not None:
                    entries.append(entry)

        entries = sort_by_created(entries)
        self._entries.update((entry.id, entry) for entry in entries)
        logger.debug(f"Loaded {len(entries)} activities")
        return entries

    def list_activities(
        self,
        filter: Optional[ActivityFilter] = None,
        sort: Optional[SortState] = None,
        project_id: Optional[str] = None,
    ) -> List[ActivityEntryBase]:
        """Filtered and sorted entries.

        Args:
            filter: Criteria every entry must satisfy
            sort: Active sort (date descending when omitted)
            project_id: Restrict the underlying reads to one project

        Returns:
            Matching entries in display order
        """
        entries = self.load(project_id)
        return sort_entries(apply_filter(entries, filter), sort)

    def grouped_activities(
        self,
        filter: Optional[ActivityFilter] = None,
        sort: Optional[SortState] = None,
        project_id: Optional[str] = None,
    ) -> List[MonthGroup]:
        """Filtered and sorted entries bucketed by calendar month."""
        entries = self.list_activities(filter, sort, project_id)
        return group_by_month(entries, today=self._today())

    def get_entry(self, entry: EntryRef) -> ActivityEntryBase:
        """Resolve an entry or entry id.

        Raises:
            NotFoundError: If no record has this id
        """
        if isinstance(entry, ActivityEntryBase):
            return entry
        if entry not in self._entries:
            self.load()
        try:
            return self._entries[entry]
        except KeyError:
            raise NotFoundError(ACTIVITIES, entry) from None

    def start_edit(self, entry: EntryRef) -> EditDraft:
        """Draft holding the editable fields of an entry."""
        return draft_from_entry(self.get_entry(entry))

    def save_edit(self, entry: EntryRef, draft: EditDraft) -> ActivityEntryBase:
        """Validate a draft and write it back to the entry's collection.

        Display names are re-resolved, and the aggregates of the old and
        new project are recomputed when the project changed.

        Args:
            entry: Entry or entry id being edited
            draft: Edited values

        Returns:
            The refreshed entry

        Raises:
            ValidationError: If a field required by the entry kind is missing
            NotFoundError: If the entry no longer exists
            StoreError: If the record write fails
        """
        current = self.get_entry(entry)
        kind = kind_of(current)
        with LogContext(entry_kind=kind.value, entry_id=current.id):
            report = DraftValidator.validate(kind, draft)
            report.raise_if_invalid(f"Cannot save {kind.value} {current.id}")

            changes = changes_from_draft(kind, draft)
            self.transactions.update(kind, current.id, changes)
            return self._refresh(kind, current.id)

    def delete_entry(self, entry: EntryRef) -> None:
        """Delete an entry's record and recompute its project.

        A project that no longer exists is logged and never blocks the
        delete.

        Raises:
            NotFoundError: If the entry no longer exists
            StoreError: If the delete fails
        """
        current = self.get_entry(entry)
        kind = kind_of(current)
        with LogContext(entry_kind=kind.value, entry_id=current.id):
            self.transactions.delete(kind, current.id)
            self._entries.pop(current.id, None)

    def _refresh(self, kind: ActivityKind, entry_id: str) -> ActivityEntryBase:
        document = self.transactions.get_record(kind, entry_id)
        refreshed = entry_from_document(kind, document)
        if refreshed is None:
            raise NotFoundError(RECORD_KINDS[kind].collection, entry_id)
        self._entries[entry_id] = refreshed
        return refreshed
