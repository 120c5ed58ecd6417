"""CLI commands for the ledger."""
