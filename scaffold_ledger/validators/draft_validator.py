"""Validation of ledger edit drafts and new records.

Edit drafts share one shape across every kind, so the required fields are
checked per kind before anything is written. New records are validated by
their pydantic models; ``validate_record`` turns model failures into the
same ``ValidationReport`` / ``ValidationError`` pair.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, Optional, Type, TypeVar

import pydantic

from scaffold_ledger.models.activity import ActivityKind, EditDraft
from scaffold_ledger.models.base import BaseDataModel
from scaffold_ledger.models.records import ExpenseStatus, IncomeStatus
from scaffold_ledger.validators.validation_report import ValidationReport

ModelT = TypeVar("ModelT", bound=BaseDataModel)

_STATUSES = {
    ActivityKind.EXPENSE: {status.value for status in ExpenseStatus},
    ActivityKind.INCOME: {status.value for status in IncomeStatus},
}


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class DraftValidator:
    """Per-kind rules for saving an edit draft.

    Required fields:
    - assignment: staff_id
    - expense: item_description and amount > 0
    - income: item_description (the income category)
    - photo: project_id

    Dates, rates and statuses are checked when the draft carries them.

    Example:
        >>> draft = EditDraft(item_description="Lumber", amount=0)
        >>> DraftValidator.validate(ActivityKind.EXPENSE, draft).is_valid()
        False
    """

    @staticmethod
    def validate(kind: ActivityKind, draft: EditDraft) -> ValidationReport:
        """Validate a draft for the given entry kind.

        Args:
            kind: Kind of the entry being edited
            draft: Edited values

        Returns:
            ValidationReport with every failed rule
        """
        kind = ActivityKind(kind)
        report = ValidationReport()
        context = {"kind": kind.value}

        if kind == ActivityKind.ASSIGNMENT:
            if _is_blank(draft.staff_id):
                report.add_error(
                    "staff_id", "Staff member is required", draft.staff_id, context
                )
            if draft.daily_rate is not None and draft.daily_rate < 0:
                report.add_error(
                    "daily_rate",
                    "Daily rate cannot be negative",
                    draft.daily_rate,
                    context,
                )
        elif kind == ActivityKind.EXPENSE:
            if _is_blank(draft.item_description):
                report.add_error(
                    "item_description",
                    "Description is required",
                    draft.item_description,
                    context,
                )
            DraftValidator._validate_amount(draft.amount, report, context)
        elif kind == ActivityKind.INCOME:
            if _is_blank(draft.item_description):
                report.add_error(
                    "item_description",
                    "Category is required",
                    draft.item_description,
                    context,
                )
            if draft.amount is not None and draft.amount <= 0:
                report.add_error(
                    "amount", "Amount must be greater than 0", draft.amount, context
                )
        elif kind == ActivityKind.PHOTO:
            if _is_blank(draft.project_id):
                report.add_error(
                    "project_id", "Project is required", draft.project_id, context
                )

        DraftValidator._validate_date(draft.date, report, context)
        DraftValidator._validate_status(kind, draft.status, report, context)
        return report

    @staticmethod
    def _validate_amount(
        amount: Optional[Decimal], report: ValidationReport, context: Dict[str, Any]
    ) -> None:
        if amount is None or amount <= 0:
            report.add_error("amount", "Amount must be greater than 0", amount, context)

    @staticmethod
    def _validate_date(
        date: Optional[str], report: ValidationReport, context: Dict[str, Any]
    ) -> None:
        if _is_blank(date):
            return
        try:
            dt.date.fromisoformat(str(date).strip())
        except ValueError:
            report.add_error("date", "Date must be in YYYY-MM-DD format", date, context)

    @staticmethod
    def _validate_status(
        kind: ActivityKind,
        status: Optional[str],
        report: ValidationReport,
        context: Dict[str, Any],
    ) -> None:
        allowed = _STATUSES.get(kind)
        if allowed is None or _is_blank(status):
            return
        if status not in allowed:
            report.add_error(
                "status", f"Status must be one of: {sorted(allowed)}", status, context
            )


def report_from_pydantic(
    error: pydantic.ValidationError, context: Optional[Dict[str, Any]] = None
) -> ValidationReport:
    """Convert a pydantic validation failure into a ValidationReport."""
    report = ValidationReport()
    for detail in error.errors():
        field = ".".join(str(part) for part in detail.get("loc", ())) or "record"
        report.add_error(
            field, detail.get("msg", "Invalid value"), detail.get("input"), context
        )
    return report


def validate_record(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """Validate raw record data against its model.

    Args:
        model: Record model class (TaskAssignment, Expense, Income, ProjectPhoto)
        data: Field values, snake_case or camelCase

    Returns:
        The validated model instance

    Raises:
        ValidationError: If the data does not satisfy the model
    """
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        report = report_from_pydantic(e, {"record": model.__name__})
        report.raise_if_invalid(f"Invalid {model.__name__}")
        raise
