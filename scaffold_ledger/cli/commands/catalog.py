"""Catalog usage command."""

from typing import Optional

import click

from scaffold_ledger.aggregators.usage_counter import CATALOG_COLLECTIONS
from scaffold_ledger.cli.error_handlers import with_error_handling
from scaffold_ledger.cli.utils.context import build_services
from scaffold_ledger.cli.utils.formatters import format_info, format_table
from scaffold_ledger.config.settings import get_config


@click.command(name="most-used")
@click.argument("collection", type=click.Choice(list(CATALOG_COLLECTIONS)))
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Number of items to show (default: MOST_USED_LIMIT)",
)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def most_used(collection: str, limit: Optional[int], debug: bool):
    """List the most used vendors or subcategories of COLLECTION.

    Items are ordered by usage count, ties by name. Requires
    STORE_BACKEND=firestore.

    Example:
        scaffold-ledger most-used vendors --limit 3
    """
    with with_error_handling(debug):
        services = build_services()
        if limit is None:
            limit = get_config().most_used_limit

        items = services.usage_counter(collection).most_used(limit)
        if not items:
            click.echo(format_info(f"No {collection} registered"))
            return

        rows = [[item.name, item.usage_count] for item in items]
        click.echo(format_table(["Name", "Uses"], rows))
