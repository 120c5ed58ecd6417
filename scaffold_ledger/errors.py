"""Exception hierarchy shared by the store, aggregators and ledger."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from scaffold_ledger.validators.validation_report import ValidationReport


class LedgerError(Exception):
    """Base class for all errors raised by the ledger core."""

    pass


class ValidationError(LedgerError):
    """Raised before any write when a record or edit draft is invalid.

    Attributes:
        report: Validation report listing every failed rule, if available
    """

    def __init__(self, message: str, report: Optional["ValidationReport"] = None):
        self.report = report
        super().__init__(message)


class NotFoundError(LedgerError):
    """Raised when a referenced document does not exist."""

    def __init__(self, collection: str, document_id: str):
        self.collection = collection
        self.document_id = document_id
        super().__init__(f"Document {collection}/{document_id} not found")


class StoreError(LedgerError):
    """Raised when the document store fails (network, permission, quota)."""

    pass
