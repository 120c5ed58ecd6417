"""Scaffold Ledger CLI.

This module provides a command-line interface for the ledger core.
It includes commands for recomputing project aggregates, showing a project's
financial breakdown, listing the activity ledger and ranking catalog
items by usage. Every command needs STORE_BACKEND=firestore.
"""

import click

from scaffold_ledger import __version__
from scaffold_ledger.cli.commands.activities import activities
from scaffold_ledger.cli.commands.breakdown import breakdown
from scaffold_ledger.cli.commands.catalog import most_used
from scaffold_ledger.cli.commands.recompute import recompute


@click.group(
    help=(
        "Scaffold Ledger CLI - Project costs, revenue and activity ledger. "
        "Commands read the Firestore store (STORE_BACKEND=firestore)."
    )
)
@click.version_option(version=__version__)
def cli():
    """Scaffold Ledger CLI main entry point."""
    pass


# Register commands
cli.add_command(recompute)
cli.add_command(breakdown)
cli.add_command(activities)
cli.add_command(most_used)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
