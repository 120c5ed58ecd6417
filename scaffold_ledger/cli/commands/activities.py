"""List activity ledger entries command."""

from typing import List, Optional

import click

from scaffold_ledger.cli.error_handlers import with_error_handling
from scaffold_ledger.cli.utils.context import build_services
from scaffold_ledger.cli.utils.formatters import (
    format_info,
    format_money,
    format_success,
    format_table,
)
from scaffold_ledger.ledger.entries import kind_of
from scaffold_ledger.ledger.export import export_csv
from scaffold_ledger.models.activity import (
    STATUS_VALUES,
    ActivityEntryBase,
    ActivityFilter,
    ActivityKind,
    AssignmentEntry,
    SortDirection,
    SortField,
    SortState,
    amount_of,
    descriptions_of,
    staff_name_of,
    status_of,
)

HEADERS = ["Date", "Kind", "Project", "Staff", "Description", "Amount", "Status"]


def _row(entry: ActivityEntryBase) -> List[str]:
    amount = amount_of(entry)
    if isinstance(entry, AssignmentEntry):
        amount = entry.daily_rate
    return [
        entry.date or "-",
        kind_of(entry).value,
        entry.project_name or "",
        staff_name_of(entry) or "",
        " ".join(descriptions_of(entry)).strip(),
        format_money(amount),
        status_of(entry) or "",
    ]


@click.command(name="activities")
@click.option("--project-id", type=str, default=None, help="Only this project")
@click.option(
    "--kind",
    type=click.Choice(["all"] + [kind.value for kind in ActivityKind]),
    default="all",
    show_default=True,
    help="Only this entry kind",
)
@click.option("--staff-id", type=str, default=None, help="Only this staff member")
@click.option(
    "--status",
    type=click.Choice(["all"] + sorted(STATUS_VALUES)),
    default="all",
    show_default=True,
    help="Only expenses/incomes with this status",
)
@click.option("--search", type=str, default="", help="Free-text search")
@click.option(
    "--sort-field",
    type=click.Choice([field.value for field in SortField]),
    default=SortField.DATE.value,
    show_default=True,
)
@click.option("--ascending", is_flag=True, help="Sort ascending instead of descending")
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Also export the listed entries to this CSV file",
)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def activities(
    project_id: Optional[str],
    kind: str,
    staff_id: Optional[str],
    status: str,
    search: str,
    sort_field: str,
    ascending: bool,
    csv_path: Optional[str],
    debug: bool,
):
    """List assignments, expenses, incomes and photos grouped by month.

    Example:
        scaffold-ledger activities --project-id abc123 --kind expense
        scaffold-ledger activities --search "125.00" --csv out.csv
    """
    with with_error_handling(debug):
        services = build_services()
        criteria = ActivityFilter(
            kind=kind,
            project_id=project_id,
            staff_id=staff_id,
            status=status,
            search=search,
        )
        sort = SortState(
            field=SortField(sort_field),
            direction=SortDirection.ASC if ascending else SortDirection.DESC,
        )

        groups = services.ledger.grouped_activities(
            criteria, sort, project_id=project_id
        )
        total = sum(len(group.entries) for group in groups)

        if total == 0:
            click.echo(format_info("No activities match the given filters."))
            return

        for group in groups:
            marker = "▼" if group.expanded else "▶"
            click.echo()
            click.echo(f"{marker} {group.label} ({len(group.entries)})")
            rows = [_row(entry) for entry in group.entries]
            click.echo(format_table(HEADERS, rows))

        click.echo()
        noun = "activity" if total == 1 else "activities"
        click.echo(format_success(f"Found {total} {noun}"))

        if csv_path:
            entries = [entry for group in groups for entry in group.entries]
            written = export_csv(entries, csv_path)
            click.echo(format_success(f"Exported {written} row(s) to {csv_path}"))
