"""Recompute project aggregates command."""

from typing import Dict, List, Optional

import click

from scaffold_ledger.cli.error_handlers import with_error_handling
from scaffold_ledger.cli.utils.context import build_services
from scaffold_ledger.cli.utils.formatters import (
    format_info,
    format_money,
    format_success,
    format_table,
)
from scaffold_ledger.store.base import Collections


@click.command(name="recompute")
@click.option("--project-id", type=str, default=None, help="Project to recompute")
@click.option("--all", "all_projects", is_flag=True, help="Recompute every project")
@click.option(
    "--aggregate",
    type=click.Choice(["cost", "revenue", "both"]),
    default="both",
    show_default=True,
    help="Which aggregate to recompute",
)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def recompute(
    project_id: Optional[str], all_projects: bool, aggregate: str, debug: bool
):
    """Recompute cost and/or revenue of one or all projects.

    Aggregates are rebuilt from the records, so running this repeatedly
    is safe and repairs any stale figures.

    Example:
        scaffold-ledger recompute --project-id abc123
        scaffold-ledger recompute --all --aggregate cost
    """
    if bool(project_id) == all_projects:
        raise click.UsageError("Specify exactly one of --project-id or --all")

    with with_error_handling(debug):
        services = build_services()

        if all_projects:
            projects = services.store.query(Collections.PROJECTS)
            project_ids = [doc.id for doc in projects]
        else:
            project_ids = [project_id]

        click.echo(
            format_info(f"Recomputing {aggregate} for {len(project_ids)} project(s)...")
        )

        rows: List[List[str]] = []
        for pid in project_ids:
            row: Dict[str, str] = {"project": pid, "cost": "", "revenue": ""}
            if aggregate in ("cost", "both"):
                costs = services.cost_aggregator.recompute_project_cost(pid)
                row["cost"] = format_money(costs.actual_cost)
            if aggregate in ("revenue", "both"):
                revenue = services.revenue_aggregator.recompute_project_revenue(pid)
                row["revenue"] = format_money(revenue)
            rows.append([row["project"], row["cost"], row["revenue"]])

        if rows:
            click.echo()
            headers = ["Project", "Actual Cost", "Actual Revenue"]
            click.echo(format_table(headers, rows))
            click.echo()
        click.echo(format_success(f"Recomputed {len(rows)} project(s)"))
