"""Project aggregates and catalog usage counters.

This package derives the stored money fields of a project from its
records, keeps subcategory and vendor usage counts, and routes
dirty-project signals to the right aggregator.
"""

from scaffold_ledger.aggregators.cost_aggregator import CostAggregator, ProjectCosts
from scaffold_ledger.aggregators.recompute_handler import (
    Aggregate,
    ProjectFinancialsDirty,
    RecomputeHandler,
    dirty_signals,
)
from scaffold_ledger.aggregators.revenue_aggregator import RevenueAggregator
from scaffold_ledger.aggregators.usage_counter import CATALOG_COLLECTIONS, UsageCounter

__all__ = [
    "Aggregate",
    "CATALOG_COLLECTIONS",
    "CostAggregator",
    "ProjectCosts",
    "ProjectFinancialsDirty",
    "RecomputeHandler",
    "RevenueAggregator",
    "UsageCounter",
    "dirty_signals",
]
