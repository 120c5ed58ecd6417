"""Validation layer for ledger records and edit drafts."""

from scaffold_ledger.validators.draft_validator import (
    DraftValidator,
    report_from_pydantic,
    validate_record,
)
from scaffold_ledger.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
)

__all__ = [
    "DraftValidator",
    "ValidationIssue",
    "ValidationReport",
    "report_from_pydantic",
    "validate_record",
]
