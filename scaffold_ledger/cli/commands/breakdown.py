"""Project cost and revenue breakdown command."""

import click

from scaffold_ledger.cli.error_handlers import with_error_handling
from scaffold_ledger.cli.utils.context import build_services
from scaffold_ledger.cli.utils.formatters import (
    format_money,
    format_percent,
    format_table,
    format_warning,
)


@click.command(name="breakdown")
@click.option("--project-id", type=str, required=True, help="Project to report on")
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def breakdown(project_id: str, debug: bool):
    """Show a project's cost against budget and its income by status.

    Figures are computed from the current records without writing.

    Example:
        scaffold-ledger breakdown --project-id abc123
    """
    with with_error_handling(debug):
        services = build_services()
        costs = services.cost_aggregator.cost_breakdown(project_id)
        revenue = services.revenue_aggregator.revenue_breakdown(project_id)

        rows = [
            ["Labor", format_money(costs.labor_cost)],
            ["Reimbursements", format_money(costs.reimbursement_cost)],
            ["Total cost", format_money(costs.total_cost)],
            ["Budget", format_money(costs.budget)],
            ["Remaining", format_money(costs.remaining)],
            ["Budget used", format_percent(costs.percent_used)],
            ["Revenue received", format_money(revenue.received)],
            ["Revenue pending", format_money(revenue.pending)],
            ["Revenue cancelled", format_money(revenue.cancelled)],
        ]

        click.echo()
        click.echo(f"Project {project_id}")
        click.echo(format_table(["Item", "Amount"], rows))

        if costs.remaining < 0:
            overrun = format_money(-costs.remaining)
            click.echo(format_warning(f"Over budget by {overrun}"))
