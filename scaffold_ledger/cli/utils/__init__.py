"""CLI utility functions."""

from scaffold_ledger.cli.utils.formatters import (
    format_error,
    format_info,
    format_money,
    format_percent,
    format_success,
    format_table,
    format_warning,
)

__all__ = [
    "format_error",
    "format_info",
    "format_money",
    "format_percent",
    "format_success",
    "format_table",
    "format_warning",
]
