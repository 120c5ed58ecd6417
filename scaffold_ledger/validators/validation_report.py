"""Validation report collecting the failed rules of a record or edit draft."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from scaffold_ledger.errors import ValidationError


@dataclass
class ValidationIssue:
    """A single failed validation rule.

    Attributes:
        field: The field name that failed
        message: Human-readable description of the failure
        value: The rejected value
        context: Optional context information (e.g., kind, record model)
    """

    field: str
    message: str
    value: Any
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        context_str = ""
        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            context_str = f" ({', '.join(context_parts)})"
        return f"{self.field}: {self.message}{context_str}"


class ValidationReport:
    """Collects validation errors for a record or edit draft.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("amount", "Amount must be greater than 0", 0)
        >>> report.is_valid()
        False
    """

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    @property
    def error_count(self) -> int:
        return len(self.issues)

    def is_valid(self) -> bool:
        return not self.issues

    def has_errors(self) -> bool:
        return bool(self.issues)

    def add_error(
        self,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add an error to the report.

        Args:
            field: The field name with the error
            message: Human-readable error description
            value: The value that caused the error
            context: Optional context information
        """
        self.issues.append(ValidationIssue(field, message, value, context))

    def get_errors(self) -> List[ValidationIssue]:
        return list(self.issues)

    def format(self) -> str:
        """Multi-line listing used by the CLI in debug mode."""
        if not self.issues:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.error_count} error(s)", "=" * 60]
        lines.extend(f"  - {issue}" for issue in self.issues)
        return "\n".join(lines)

    def raise_if_invalid(self, message: str) -> None:
        """Raise ``ValidationError`` carrying this report when it has errors.

        Args:
            message: Prefix for the error message

        Raises:
            ValidationError: If the report contains at least one error
        """
        if self.has_errors():
            details = "; ".join(
                f"{issue.field}: {issue.message}" for issue in self.issues
            )
            raise ValidationError(f"{message}: {details}", report=self)
