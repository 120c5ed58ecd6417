"""Activity ledger: one feed over every project record kind."""

from scaffold_ledger.ledger.activity_ledger import ActivityLedger
from scaffold_ledger.ledger.export import entries_to_dataframe, export_csv
from scaffold_ledger.ledger.query import (
    apply_filter,
    group_by_month,
    matches_search,
    search_terms,
    sort_entries,
)

__all__ = [
    "ActivityLedger",
    "apply_filter",
    "entries_to_dataframe",
    "export_csv",
    "group_by_month",
    "matches_search",
    "search_terms",
    "sort_entries",
]
