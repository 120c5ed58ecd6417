"""Activity ledger models.

The ledger merges four unrelated record kinds into one feed. Each kind is a
separate entry model sharing the common fields of ``ActivityEntryBase``;
``ActivityEntry`` is the tagged union discriminated by ``kind``. Code that
needs a kind-specific value goes through the accessor functions at the
bottom of this module, which dispatch on the entry type and fail loudly on
an unknown kind.
"""

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field, field_validator, model_validator

from scaffold_ledger.models.base import BaseDataModel
from scaffold_ledger.models.records import (
    ExpenseStatus,
    IncomeStatus,
    legacy_photo_urls,
)
from scaffold_ledger.utils.money import to_decimal

UNKNOWN_STAFF = "Unknown Staff"
UNKNOWN_PROJECT = "Unknown Project"
UNKNOWN_USER = "Unknown User"


class ActivityKind(str, Enum):
    """Record kinds merged into the activity ledger."""

    ASSIGNMENT = "assignment"
    EXPENSE = "expense"
    INCOME = "income"
    PHOTO = "photo"


STATUS_VALUES = {status.value for status in ExpenseStatus} | {
    status.value for status in IncomeStatus
}


class ActivityEntryBase(BaseDataModel):
    """Fields shared by every ledger entry.

    Attributes:
        id: Id of the underlying document
        date: Business date ("YYYY-MM-DD"), empty when the record has none
        project_id: Owning project, if any
        project_name: Project display name snapshot
        created_at: Write-time timestamp assigned by the store
    """

    id: str
    date: str = ""
    project_id: Optional[str] = Field(None, alias="projectId")
    project_name: Optional[str] = Field(None, alias="projectName")
    created_at: Optional[dt.datetime] = Field(None, alias="createdAt")

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v) -> str:
        if v is None:
            return ""
        if isinstance(v, (dt.date, dt.datetime)):
            return v.isoformat()[:10]
        return str(v)

    @field_validator("project_id", "project_name", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v


class AssignmentEntry(ActivityEntryBase):
    """Ledger view of a task assignment."""

    kind: Literal["assignment"] = "assignment"
    staff_id: str = Field("", alias="staffId")
    staff_name: str = Field(UNKNOWN_STAFF, alias="staffName")
    task_description: str = Field("", alias="taskDescription")
    daily_rate: Decimal = Field(Decimal("0"), alias="dailyRate")

    @field_validator("daily_rate", mode="before")
    @classmethod
    def convert_to_decimal(cls, v) -> Decimal:
        return to_decimal(v)


class ExpenseEntry(ActivityEntryBase):
    """Ledger view of an expense."""

    kind: Literal["expense"] = "expense"
    staff_id: Optional[str] = Field(None, alias="staffId")
    staff_name: Optional[str] = Field(None, alias="staffName")
    subcategory: str = ""
    item_description: str = Field("", alias="itemDescription")
    amount: Decimal = Decimal("0")
    status: str = ExpenseStatus.PENDING.value
    receipt_url: Optional[str] = Field(None, alias="receiptUrl")
    vendor: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v) -> Decimal:
        return to_decimal(v)


class IncomeEntry(ActivityEntryBase):
    """Ledger view of an income."""

    kind: Literal["income"] = "income"
    category: str = ""
    amount: Decimal = Decimal("0")
    status: str = IncomeStatus.PENDING.value
    invoice_url: Optional[str] = Field(None, alias="invoiceUrl")
    client: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v) -> Decimal:
        return to_decimal(v)


class PhotoEntry(ActivityEntryBase):
    """Ledger view of a progress photo group."""

    kind: Literal["photo"] = "photo"
    description: str = ""
    photo_urls: List[str] = Field(default_factory=list, alias="photoUrls")
    uploaded_by_name: str = Field(UNKNOWN_USER, alias="uploadedByName")

    @model_validator(mode="before")
    @classmethod
    def read_legacy_photo_url(cls, data):
        return legacy_photo_urls(data)


ActivityEntry = Annotated[
    Union[AssignmentEntry, ExpenseEntry, IncomeEntry, PhotoEntry],
    Field(discriminator="kind"),
]


class EditDraft(BaseDataModel):
    """Shared mutable edit shape for every entry kind.

    Each kind uses a subset of the fields:
    - assignment: staff_id, project_id, date, notes (task), daily_rate
    - expense: staff_id, project_id, date, item_description, amount,
      status, notes
    - income: project_id, date, item_description (category), amount, status
    - photo: project_id, date, notes (description)
    """

    staff_id: Optional[str] = Field(None, alias="staffId")
    project_id: Optional[str] = Field(None, alias="projectId")
    date: Optional[str] = None
    notes: Optional[str] = None
    daily_rate: Optional[Decimal] = Field(None, alias="dailyRate")
    item_description: Optional[str] = Field(None, alias="itemDescription")
    amount: Optional[Decimal] = None
    status: Optional[str] = None

    @field_validator("daily_rate", "amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v) -> Optional[Decimal]:
        if v is None or v == "":
            return None
        return to_decimal(v)


class ActivityFilter(BaseDataModel):
    """Composable ledger filter; every set criterion must hold.

    Attributes:
        kind: Only entries of this kind
        project_id: Only entries of this project
        staff_id: Only entries of this staff member (photos never match)
        status: Only expenses/incomes with this status (others pass)
        search: Case-insensitive free-text query
    """

    kind: Optional[ActivityKind] = None
    project_id: Optional[str] = None
    staff_id: Optional[str] = None
    status: Optional[str] = None
    search: str = ""

    @field_validator("kind", "project_id", "staff_id", "status", mode="before")
    @classmethod
    def all_means_unset(cls, v):
        """Treat "all" and blank values as no filter."""
        if v is None or (isinstance(v, str) and v.strip().lower() in ("", "all")):
            return None
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in STATUS_VALUES:
            raise ValueError(f"status must be one of: {sorted(STATUS_VALUES)}")
        return v

    @field_validator("search", mode="before")
    @classmethod
    def coerce_search(cls, v) -> str:
        return "" if v is None else str(v)


class SortField(str, Enum):
    """User-selectable ledger sort fields."""

    DATE = "date"
    AMOUNT = "amount"
    STAFF_NAME = "staffName"
    PROJECT_NAME = "projectName"


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortState:
    """Active ledger sort.

    Selecting the active field flips the direction; selecting another
    field switches to it descending.

    Example:
        >>> state = SortState()
        >>> state.toggle(SortField.DATE).direction
        <SortDirection.ASC: 'asc'>
        >>> state.toggle(SortField.AMOUNT).direction
        <SortDirection.DESC: 'desc'>
    """

    field: SortField = SortField.DATE
    direction: SortDirection = SortDirection.DESC

    def toggle(self, selected: SortField) -> "SortState":
        selected = SortField(selected)
        if selected == self.field:
            flipped = (
                SortDirection.ASC
                if self.direction == SortDirection.DESC
                else SortDirection.DESC
            )
            return SortState(field=self.field, direction=flipped)
        return SortState(field=selected, direction=SortDirection.DESC)


@dataclass
class MonthGroup:
    """Entries of one calendar month, in the already-applied sort order.

    Attributes:
        label: "Mon YYYY", or "Undated" for entries without a valid date
        month: First day of the month, None for the undated bucket
        entries: Entries in display order
        expanded: Whether the group starts expanded
    """

    label: str
    month: Optional[dt.date]
    entries: List[ActivityEntryBase] = field(default_factory=list)
    expanded: bool = False


def staff_id_of(entry: ActivityEntryBase) -> Optional[str]:
    """Staff reference of an entry; photos and incomes carry none."""
    if isinstance(entry, (AssignmentEntry, ExpenseEntry)):
        return entry.staff_id or None
    if isinstance(entry, (IncomeEntry, PhotoEntry)):
        return None
    raise TypeError(f"Unsupported activity entry: {type(entry).__name__}")


def staff_name_of(entry: ActivityEntryBase) -> Optional[str]:
    """Staff display name of an entry, if the kind has one."""
    if isinstance(entry, (AssignmentEntry, ExpenseEntry)):
        return entry.staff_name
    if isinstance(entry, (IncomeEntry, PhotoEntry)):
        return None
    raise TypeError(f"Unsupported activity entry: {type(entry).__name__}")


def amount_of(entry: ActivityEntryBase) -> Optional[Decimal]:
    """Monetary amount of an expense or income; None for other kinds."""
    if isinstance(entry, (ExpenseEntry, IncomeEntry)):
        return entry.amount
    if isinstance(entry, (AssignmentEntry, PhotoEntry)):
        return None
    raise TypeError(f"Unsupported activity entry: {type(entry).__name__}")


def status_of(entry: ActivityEntryBase) -> Optional[str]:
    """Status of an expense or income; None for kinds without status."""
    if isinstance(entry, (ExpenseEntry, IncomeEntry)):
        return entry.status
    if isinstance(entry, (AssignmentEntry, PhotoEntry)):
        return None
    raise TypeError(f"Unsupported activity entry: {type(entry).__name__}")


def descriptions_of(entry: ActivityEntryBase) -> List[str]:
    """Description-like text of an entry (task, item, category, caption)."""
    if isinstance(entry, AssignmentEntry):
        return [entry.task_description]
    if isinstance(entry, ExpenseEntry):
        return [entry.item_description]
    if isinstance(entry, IncomeEntry):
        return [entry.category]
    if isinstance(entry, PhotoEntry):
        return [entry.description]
    raise TypeError(f"Unsupported activity entry: {type(entry).__name__}")
