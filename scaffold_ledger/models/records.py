"""Transaction record models.

This module defines the four independently-editable record kinds that feed
the project aggregates and the activity ledger:
- TaskAssignment: a staff member's paid day on a project
- Expense: a purchase or reimbursement, counted when approved
- Income: a payment received from a client, counted when received
- ProjectPhoto: a dated group of progress photos

These models validate records on the write path. The ledger reads raw
documents leniently through its own entry models.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from pydantic import Field, field_validator, model_validator

from scaffold_ledger.models.base import BaseDataModel
from scaffold_ledger.utils.money import to_decimal

MAX_PHOTOS_PER_ENTRY = 9


class ExpenseStatus(str, Enum):
    """Approval state of an expense. Only approved expenses count as cost."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class IncomeStatus(str, Enum):
    """Collection state of an income. Only received income counts as revenue."""

    PENDING = "pending"
    RECEIVED = "received"
    CANCELLED = "cancelled"


def validate_business_date(value: Union[str, dt.date]) -> str:
    """Validate a business date and return it as "YYYY-MM-DD".

    Raises:
        ValueError: If the value is not a valid ISO calendar date
    """
    if isinstance(value, dt.datetime):
        return value.date().isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    text = str(value).strip()
    try:
        return dt.date.fromisoformat(text).isoformat()
    except ValueError as e:
        raise ValueError(f"date must be in YYYY-MM-DD format, got {value!r}") from e


def legacy_photo_urls(data):
    """Read a legacy single ``photoUrl`` document as a one-element ``photoUrls``."""
    if not isinstance(data, dict):
        return data
    if data.get("photoUrls") or data.get("photo_urls"):
        return data
    legacy = data.get("photoUrl")
    if legacy:
        data = dict(data)
        data["photoUrls"] = [legacy]
    return data


def _strip_required(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{field_name} cannot be empty or whitespace")
    return str(value).strip()


def _strip_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped or None


class TaskAssignment(BaseDataModel):
    """A staff member assigned to a project for one business day.

    Assignments have no status; every assignment counts toward labor cost.

    Example:
        >>> assignment = TaskAssignment(
        ...     project_id="p-1",
        ...     staff_id="s-1",
        ...     daily_rate=Decimal("180.00"),
        ...     date="2024-03-05",
        ...     task_description="Framing",
        ... )
        >>> assignment.daily_rate
        Decimal('180.00')
    """

    id: Optional[str] = None
    project_id: str = Field(..., alias="projectId")
    project_name: Optional[str] = Field(None, alias="projectName")
    staff_id: str = Field(..., alias="staffId")
    staff_name: Optional[str] = Field(None, alias="staffName")
    daily_rate: Decimal = Field(..., ge=0, alias="dailyRate")
    date: str
    task_description: str = Field("", alias="taskDescription")

    @field_validator("project_id", "staff_id")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate that reference fields are not empty or whitespace only."""
        return _strip_required(v, info.field_name)

    @field_validator("daily_rate", mode="before")
    @classmethod
    def convert_to_decimal(cls, v) -> Decimal:
        """Convert numeric values to Decimal for precision."""
        return to_decimal(v)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v) -> str:
        return validate_business_date(v)

    @field_validator("task_description", mode="before")
    @classmethod
    def strip_description(cls, v) -> str:
        return (v or "").strip()


class Expense(BaseDataModel):
    """A project or overhead expense, also used for staff reimbursements.

    ``subcategory`` doubles as the category label and as the key of the
    expense subcategory usage counter. ``item_description`` defaults to the
    subcategory name when not given.
    """

    id: Optional[str] = None
    project_id: Optional[str] = Field(None, alias="projectId")
    project_name: Optional[str] = Field(None, alias="projectName")
    staff_id: Optional[str] = Field(None, alias="staffId")
    staff_name: Optional[str] = Field(None, alias="staffName")
    subcategory: str
    item_description: Optional[str] = Field(None, alias="itemDescription")
    amount: Decimal = Field(..., gt=0)
    date: str
    status: ExpenseStatus = ExpenseStatus.PENDING
    receipt_url: Optional[str] = Field(None, alias="receiptUrl")
    vendor: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("subcategory")
    @classmethod
    def validate_subcategory(cls, v: str, info) -> str:
        return _strip_required(v, info.field_name)

    @field_validator(
        "project_id", "staff_id", "vendor", "notes", "receipt_url", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v):
        """Treat blank optional references as absent."""
        return _strip_optional(v)

    @field_validator("amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v) -> Decimal:
        return to_decimal(v)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v) -> str:
        return validate_business_date(v)

    @model_validator(mode="before")
    @classmethod
    def default_item_description(cls, data):
        """Use the subcategory as description when none is given."""
        if not isinstance(data, dict):
            return data
        description = data.get("itemDescription", data.get("item_description"))
        if description is None or not str(description).strip():
            data = {
                key: value
                for key, value in data.items()
                if key not in ("itemDescription", "item_description")
            }
            data["itemDescription"] = data.get("subcategory")
        return data

    @field_validator("item_description", mode="before")
    @classmethod
    def strip_description(cls, v):
        return _strip_optional(v)


class Income(BaseDataModel):
    """A payment from a client, optionally tied to a project.

    ``category`` is the income subcategory name and keys its usage counter.
    """

    id: Optional[str] = None
    project_id: Optional[str] = Field(None, alias="projectId")
    project_name: Optional[str] = Field(None, alias="projectName")
    category: str
    amount: Decimal = Field(..., gt=0)
    date: str
    status: IncomeStatus = IncomeStatus.PENDING
    invoice_url: Optional[str] = Field(None, alias="invoiceUrl")
    client: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str, info) -> str:
        return _strip_required(v, info.field_name)

    @field_validator("project_id", "client", "notes", "invoice_url", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _strip_optional(v)

    @field_validator("amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v) -> Decimal:
        return to_decimal(v)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v) -> str:
        return validate_business_date(v)


class ProjectPhoto(BaseDataModel):
    """A dated group of up to nine progress photos for one project."""

    id: Optional[str] = None
    project_id: str = Field(..., alias="projectId")
    project_name: Optional[str] = Field(None, alias="projectName")
    date: str
    description: str = ""
    photo_urls: List[str] = Field(..., alias="photoUrls")
    uploaded_by_name: str = Field("Unknown User", alias="uploadedByName")

    @field_validator("project_id")
    @classmethod
    def validate_project(cls, v: str, info) -> str:
        return _strip_required(v, info.field_name)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v) -> str:
        return validate_business_date(v)

    @field_validator("photo_urls")
    @classmethod
    def validate_photo_urls(cls, v: List[str]) -> List[str]:
        """Require between one and nine non-empty URLs, order preserved."""
        urls = [url.strip() for url in v if url and url.strip()]
        if not urls:
            raise ValueError("photo_urls must contain at least one URL")
        if len(urls) > MAX_PHOTOS_PER_ENTRY:
            raise ValueError(
                f"photo_urls cannot contain more than {MAX_PHOTOS_PER_ENTRY} URLs"
            )
        return urls

    @model_validator(mode="before")
    @classmethod
    def read_legacy_photo_url(cls, data):
        return legacy_photo_urls(data)
