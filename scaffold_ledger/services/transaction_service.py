"""
Create, update and delete transaction records.

Every mutation runs the same sequential chain: validate, write the record,
recompute the affected project aggregates, then adjust catalog usage
counts. Nothing spans documents, so an interrupted chain leaves stale
aggregates that the next recompute for the project repairs.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from scaffold_ledger.aggregators.recompute_handler import (
    Aggregate,
    RecomputeHandler,
    dirty_signals,
)
from scaffold_ledger.aggregators.usage_counter import UsageCounter
from scaffold_ledger.errors import NotFoundError, StoreError
from scaffold_ledger.models.activity import (
    UNKNOWN_PROJECT,
    UNKNOWN_STAFF,
    ActivityKind,
)
from scaffold_ledger.models.base import BaseDataModel
from scaffold_ledger.models.records import (
    Expense,
    Income,
    ProjectPhoto,
    TaskAssignment,
)
from scaffold_ledger.store.base import (
    SERVER_TIMESTAMP,
    Collections,
    Document,
    DocumentStore,
)
from scaffold_ledger.utils.logging_utils import LogContext, new_correlation_id
from scaffold_ledger.validators.draft_validator import validate_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordKind:
    """How one record kind is stored and which figures it feeds.

    Attributes:
        kind: Ledger kind
        collection: Store collection
        model: Write-path validation model
        aggregate: Project aggregate fed by the kind, None for photos
        catalog_fields: Catalog collection -> record field whose value keys
            the usage counter
        has_staff: Whether the record references a staff member
    """

    kind: ActivityKind
    collection: str
    model: Type[BaseDataModel]
    aggregate: Optional[Aggregate] = None
    catalog_fields: Dict[str, str] = field(default_factory=dict)
    has_staff: bool = False


RECORD_KINDS: Dict[ActivityKind, RecordKind] = {
    ActivityKind.ASSIGNMENT: RecordKind(
        kind=ActivityKind.ASSIGNMENT,
        collection=Collections.TASK_ASSIGNMENTS,
        model=TaskAssignment,
        aggregate=Aggregate.COST,
        has_staff=True,
    ),
    ActivityKind.EXPENSE: RecordKind(
        kind=ActivityKind.EXPENSE,
        collection=Collections.EXPENSES,
        model=Expense,
        aggregate=Aggregate.COST,
        catalog_fields={
            Collections.EXPENSE_SUBCATEGORIES: "subcategory",
            Collections.VENDORS: "vendor",
        },
        has_staff=True,
    ),
    ActivityKind.INCOME: RecordKind(
        kind=ActivityKind.INCOME,
        collection=Collections.INCOMES,
        model=Income,
        aggregate=Aggregate.REVENUE,
        catalog_fields={Collections.INCOME_SUBCATEGORIES: "category"},
    ),
    ActivityKind.PHOTO: RecordKind(
        kind=ActivityKind.PHOTO,
        collection=Collections.PROJECT_PHOTOS,
        model=ProjectPhoto,
    ),
}


def _aliased(model: Type[BaseDataModel], data: Dict[str, Any]) -> Dict[str, Any]:
    """Rename snake_case keys to the model's store aliases."""
    aliased = {}
    for key, value in data.items():
        info = model.model_fields.get(key)
        aliased[info.alias if info is not None and info.alias else key] = value
    return aliased


class TransactionService:
    """
    Write path for assignments, expenses, incomes and photos.

    Features:
    - Record validation before any write
    - Staff and project display names resolved from their collections
    - Server timestamps for createdAt/updatedAt
    - Dirty signals for the old and new project of every mutation
    - Usage counters for subcategories and vendors

    Example:
        >>> service = TransactionService(store, recompute_handler)
        >>> expense = service.create_expense(
        ...     {"projectId": "p-1", "subcategory": "Lumber", "amount": 120,
        ...      "date": "2024-03-05", "status": "approved"}
        ... )
    """

    def __init__(
        self,
        store: DocumentStore,
        recompute_handler: RecomputeHandler,
        usage_counters: Optional[Dict[str, UsageCounter]] = None,
    ):
        """
        Initialize the service.

        Args:
            store: Document store
            recompute_handler: Consumer of dirty-project signals
            usage_counters: Counter per catalog collection (built on the
                same store when omitted)
        """
        self.store = store
        self.recompute_handler = recompute_handler
        self.usage_counters = usage_counters or {
            collection: UsageCounter(store, collection)
            for collection in (
                Collections.EXPENSE_SUBCATEGORIES,
                Collections.INCOME_SUBCATEGORIES,
                Collections.VENDORS,
            )
        }

    def resolve_staff_name(self, staff_id: Optional[str]) -> Optional[str]:
        """Current display name of a staff member, None without a reference."""
        if not staff_id:
            return None
        document = self.store.get(Collections.STAFF_MEMBERS, staff_id)
        if document is None or not document.get("name"):
            return UNKNOWN_STAFF
        return document.get("name")

    def resolve_project_name(self, project_id: Optional[str]) -> Optional[str]:
        """Current display name of a project, None without a reference."""
        if not project_id:
            return None
        document = self.store.get(Collections.PROJECTS, project_id)
        if document is None or not document.get("name"):
            return UNKNOWN_PROJECT
        return document.get("name")

    def get_record(self, kind: ActivityKind, record_id: str) -> Document:
        """Read a record document.

        Raises:
            NotFoundError: If the record does not exist
        """
        record_kind = RECORD_KINDS[ActivityKind(kind)]
        document = self.store.get(record_kind.collection, record_id)
        if document is None:
            raise NotFoundError(record_kind.collection, record_id)
        return document

    def _validated(
        self, record_kind: RecordKind, data: Dict[str, Any]
    ) -> BaseDataModel:
        record = validate_record(record_kind.model, data)
        record.project_name = self.resolve_project_name(record.project_id)
        if record_kind.has_staff:
            record.staff_name = self.resolve_staff_name(record.staff_id)
        return record

    def _catalog_names(
        self, record_kind: RecordKind, record: BaseDataModel
    ) -> Dict[str, Optional[str]]:
        return {
            collection: getattr(record, attribute, None)
            for collection, attribute in record_kind.catalog_fields.items()
        }

    def _stored_catalog_names(
        self, record_kind: RecordKind, document: Document
    ) -> Dict[str, Optional[str]]:
        names = {}
        for collection, attribute in record_kind.catalog_fields.items():
            alias = record_kind.model.model_fields[attribute].alias or attribute
            names[collection] = document.get(alias) or None
        return names

    def _after_write(
        self,
        record_kind: RecordKind,
        project_ids: Tuple[Optional[str], ...],
        old_names: Dict[str, Optional[str]],
        new_names: Dict[str, Optional[str]],
    ) -> None:
        if record_kind.aggregate is not None:
            signals = dirty_signals(record_kind.aggregate, *project_ids)
            self.recompute_handler.dispatch(signals)

        for collection in record_kind.catalog_fields:
            counter = self.usage_counters.get(collection)
            if counter is None:
                continue
            try:
                counter.apply_rename(
                    old_names.get(collection), new_names.get(collection)
                )
            except StoreError as e:
                logger.error(f"Usage count update failed for {collection}: {e}")

    def create(self, kind: ActivityKind, data: Dict[str, Any]) -> BaseDataModel:
        """Validate and store a new record.

        Args:
            kind: Record kind
            data: Field values (snake_case or camelCase)

        Returns:
            The stored record with its new id

        Raises:
            ValidationError: If the record is invalid (nothing is written)
            StoreError: If the record write fails
        """
        record_kind = RECORD_KINDS[ActivityKind(kind)]
        with LogContext(
            correlation_id=new_correlation_id(), entry_kind=record_kind.kind.value
        ):
            record = self._validated(record_kind, _aliased(record_kind.model, data))

            document = record.to_document()
            document["createdAt"] = SERVER_TIMESTAMP
            document["updatedAt"] = SERVER_TIMESTAMP
            record.id = self.store.create(record_kind.collection, document)
            logger.info(f"Created {record_kind.kind.value} {record.id}")

            self._after_write(
                record_kind,
                (record.project_id,),
                old_names={},
                new_names=self._catalog_names(record_kind, record),
            )
            return record

    def update(
        self, kind: ActivityKind, record_id: str, changes: Dict[str, Any]
    ) -> BaseDataModel:
        """Apply changes to an existing record.

        The previous document is read first so that the old project and the
        old catalog names can be brought up to date as well.

        Args:
            kind: Record kind
            record_id: Record document id
            changes: Fields to change (snake_case or camelCase)

        Returns:
            The updated record

        Raises:
            NotFoundError: If the record does not exist
            ValidationError: If the changed record is invalid (nothing written)
            StoreError: If the record write fails
        """
        record_kind = RECORD_KINDS[ActivityKind(kind)]
        with LogContext(
            correlation_id=new_correlation_id(),
            entry_kind=record_kind.kind.value,
            entry_id=record_id,
        ):
            previous_document = self.get_record(record_kind.kind, record_id)

            merged = dict(previous_document.data)
            merged.update(_aliased(record_kind.model, changes))
            record = self._validated(record_kind, merged)
            record.id = record_id

            document = record.to_document(exclude_none=False)
            document["updatedAt"] = SERVER_TIMESTAMP
            self.store.update(record_kind.collection, record_id, document)
            logger.info(f"Updated {record_kind.kind.value} {record_id}")

            self._after_write(
                record_kind,
                (previous_document.get("projectId"), record.project_id),
                old_names=self._stored_catalog_names(record_kind, previous_document),
                new_names=self._catalog_names(record_kind, record),
            )
            return record

    def delete(self, kind: ActivityKind, record_id: str) -> None:
        """Delete a record and bring its project and counters up to date.

        Raises:
            NotFoundError: If the record does not exist
            StoreError: If the delete fails
        """
        record_kind = RECORD_KINDS[ActivityKind(kind)]
        with LogContext(
            correlation_id=new_correlation_id(),
            entry_kind=record_kind.kind.value,
            entry_id=record_id,
        ):
            previous_document = self.get_record(record_kind.kind, record_id)
            project_id = previous_document.get("projectId") or None
            old_names = self._stored_catalog_names(record_kind, previous_document)

            self.store.delete(record_kind.collection, record_id)
            logger.info(f"Deleted {record_kind.kind.value} {record_id}")

            self._after_write(
                record_kind, (project_id,), old_names=old_names, new_names={}
            )

    def create_assignment(self, data: Dict[str, Any]) -> TaskAssignment:
        return self.create(ActivityKind.ASSIGNMENT, data)

    def update_assignment(
        self, record_id: str, changes: Dict[str, Any]
    ) -> TaskAssignment:
        return self.update(ActivityKind.ASSIGNMENT, record_id, changes)

    def delete_assignment(self, record_id: str) -> None:
        self.delete(ActivityKind.ASSIGNMENT, record_id)

    def create_expense(self, data: Dict[str, Any]) -> Expense:
        return self.create(ActivityKind.EXPENSE, data)

    def update_expense(self, record_id: str, changes: Dict[str, Any]) -> Expense:
        return self.update(ActivityKind.EXPENSE, record_id, changes)

    def delete_expense(self, record_id: str) -> None:
        self.delete(ActivityKind.EXPENSE, record_id)

    def create_income(self, data: Dict[str, Any]) -> Income:
        return self.create(ActivityKind.INCOME, data)

    def update_income(self, record_id: str, changes: Dict[str, Any]) -> Income:
        return self.update(ActivityKind.INCOME, record_id, changes)

    def delete_income(self, record_id: str) -> None:
        self.delete(ActivityKind.INCOME, record_id)

    def create_photo(self, data: Dict[str, Any]) -> ProjectPhoto:
        return self.create(ActivityKind.PHOTO, data)

    def update_photo(self, record_id: str, changes: Dict[str, Any]) -> ProjectPhoto:
        return self.update(ActivityKind.PHOTO, record_id, changes)

    def delete_photo(self, record_id: str) -> None:
        self.delete(ActivityKind.PHOTO, record_id)

    def pending_recomputes(self) -> List[Any]:
        """Dirty signals whose recompute is waiting for a retry."""
        return self.recompute_handler.pending
