"""Data models for the ledger core.

This package contains Pydantic models for all stored and derived entities:
- BaseDataModel: Base class with alias and document helpers
- Project, ProjectCostBreakdown, ProjectRevenueBreakdown
- TaskAssignment, Expense, Income, ProjectPhoto: transaction records
- CatalogItem: usage-counted subcategory or vendor
- Activity entries, EditDraft, ActivityFilter and sort/group types
"""

from scaffold_ledger.models.activity import (
    ActivityEntry,
    ActivityEntryBase,
    ActivityFilter,
    ActivityKind,
    AssignmentEntry,
    EditDraft,
    ExpenseEntry,
    IncomeEntry,
    MonthGroup,
    PhotoEntry,
    SortDirection,
    SortField,
    SortState,
)
from scaffold_ledger.models.base import BaseDataModel
from scaffold_ledger.models.catalog import CatalogItem
from scaffold_ledger.models.project import (
    Project,
    ProjectCostBreakdown,
    ProjectRevenueBreakdown,
)
from scaffold_ledger.models.records import (
    Expense,
    ExpenseStatus,
    Income,
    IncomeStatus,
    ProjectPhoto,
    TaskAssignment,
)

__all__ = [
    "ActivityEntry",
    "ActivityEntryBase",
    "ActivityFilter",
    "ActivityKind",
    "AssignmentEntry",
    "BaseDataModel",
    "CatalogItem",
    "EditDraft",
    "Expense",
    "ExpenseEntry",
    "ExpenseStatus",
    "Income",
    "IncomeEntry",
    "IncomeStatus",
    "MonthGroup",
    "PhotoEntry",
    "Project",
    "ProjectCostBreakdown",
    "ProjectPhoto",
    "ProjectRevenueBreakdown",
    "SortDirection",
    "SortField",
    "SortState",
    "TaskAssignment",
]
