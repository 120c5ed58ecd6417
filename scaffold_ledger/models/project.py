"""Project data models for the ledger core.

This module defines the Project document (budget plus the derived cost and
revenue fields) and the read-only breakdowns computed from it.
"""

from decimal import Decimal
from typing import Optional, Union

from pydantic import Field, field_validator

from scaffold_ledger.models.base import BaseDataModel
from scaffold_ledger.utils.money import to_decimal


class Project(BaseDataModel):
    """Represents a project document.

    The derived fields (actual_cost, labor_cost, reimbursement_cost,
    actual_revenue) are only ever written by the aggregators.

    Attributes:
        id: Document id
        name: Display name
        budget: Planned budget
        actual_cost: labor_cost + reimbursement_cost, rounded to cents
        labor_cost: Sum of assignment daily rates, rounded to cents
        reimbursement_cost: Sum of approved expense amounts, rounded to cents
        actual_revenue: Sum of received income amounts, rounded to cents
        start_date: Business start date ("YYYY-MM-DD")
        end_date: Business end date ("YYYY-MM-DD")
    """

    id: Optional[str] = None
    name: str = "Unnamed Project"
    budget: Decimal = Decimal("0")
    actual_cost: Decimal = Field(Decimal("0"), alias="actualCost")
    labor_cost: Decimal = Field(Decimal("0"), alias="laborCost")
    reimbursement_cost: Decimal = Field(Decimal("0"), alias="reimbursementCost")
    actual_revenue: Decimal = Field(Decimal("0"), alias="actualRevenue")
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")

    @field_validator(
        "budget",
        "actual_cost",
        "labor_cost",
        "reimbursement_cost",
        "actual_revenue",
        mode="before",
    )
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal, None]) -> Decimal:
        """Convert stored numbers to Decimal; missing values count as zero."""
        return to_decimal(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_date(cls, v):
        """Keep only the date part of stored date or datetime values."""
        if v is None or v == "":
            return None
        if hasattr(v, "isoformat"):
            return v.isoformat()[:10]
        return str(v)[:10]


class ProjectCostBreakdown(BaseDataModel):
    """Cost position of a project against its budget.

    Attributes:
        project_id: Project document id
        labor_cost: Rounded sum of assignment daily rates
        reimbursement_cost: Rounded sum of approved expenses
        total_cost: Rounded labor + reimbursement
        budget: Project budget
        remaining: Rounded budget - total_cost
        percent_used: total_cost / budget * 100 (0 when budget <= 0)
    """

    project_id: str
    labor_cost: Decimal
    reimbursement_cost: Decimal
    total_cost: Decimal
    budget: Decimal
    remaining: Decimal
    percent_used: Decimal


class ProjectRevenueBreakdown(BaseDataModel):
    """Income totals of a project split by status."""

    project_id: str
    received: Decimal
    pending: Decimal
    cancelled: Decimal
