"""Output formatting utilities for CLI."""

from decimal import Decimal
from typing import Any, List

import click

from scaffold_ledger.utils.money import format_currency


def format_success(message: str) -> str:
    """Format a success message in green."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message in red."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message in yellow."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message in blue."""
    return click.style(f"ℹ {message}", fg="blue")


def format_money(value: Any) -> str:
    """Currency string for a table cell, blank for missing values."""
    if value is None:
        return ""
    return format_currency(value)


def format_percent(value: Decimal) -> str:
    return f"{value:.2f}%"


def format_table(headers: List[str], rows: List[List[Any]], max_width: int = 40) -> str:
    """Format rows as a bordered text table.

    Args:
        headers: Column headers
        rows: Data rows (each row is a list of cell values)
        max_width: Maximum width of a column; longer cells are cut

    Returns:
        Formatted table as a string
    """
    if not headers:
        return ""

    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(headers)]):
            col_widths[i] = max(col_widths[i], len(str(cell)))
    col_widths = [min(w, max_width) for w in col_widths]

    def render(cells: List[Any]) -> str:
        padded = [
            f" {str(cell)[: col_widths[i]]:<{col_widths[i]}} "
            for i, cell in enumerate(cells[: len(headers)])
        ]
        return "|" + "|".join(padded) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in col_widths) + "+"
    lines = [separator, render(headers), separator]
    if rows:
        lines.extend(render(row) for row in rows)
        lines.append(separator)
    return "\n".join(lines)
