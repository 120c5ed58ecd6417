"""Unit tests for activity ledger models and accessors."""

from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from scaffold_ledger.models.activity import (
    ActivityEntry,
    ActivityEntryBase,
    ActivityFilter,
    ActivityKind,
    AssignmentEntry,
    EditDraft,
    ExpenseEntry,
    IncomeEntry,
    PhotoEntry,
    SortDirection,
    SortField,
    SortState,
    amount_of,
    descriptions_of,
    staff_id_of,
    staff_name_of,
    status_of,
)


@pytest.fixture
def entries():
    return {
        "assignment": AssignmentEntry(
            id="a-1", staffId="s-1", staffName="Alice", dailyRate=180
        ),
        "expense": ExpenseEntry(
            id="e-1", staffId="s-1", itemDescription="Lumber", amount=125
        ),
        "income": IncomeEntry(id="i-1", category="Deposit", amount=2500),
        "photo": PhotoEntry(id="ph-1", description="Framing done"),
    }


class TestEntryModels:
    """Test entry parsing."""

    def test_tagged_union_dispatches_on_kind(self):
        adapter = TypeAdapter(ActivityEntry)

        entry = adapter.validate_python(
            {"kind": "income", "id": "i-1", "category": "Deposit", "amount": "10"}
        )

        assert isinstance(entry, IncomeEntry)
        assert entry.amount == Decimal("10")

    def test_date_coercion(self):
        import datetime as dt

        assert AssignmentEntry(id="a", date=None).date == ""
        assert AssignmentEntry(id="a", date=dt.date(2024, 3, 5)).date == "2024-03-05"

    def test_blank_project_reads_as_none(self):
        entry = ExpenseEntry(id="e", projectId="  ", projectName="")
        assert entry.project_id is None
        assert entry.project_name is None

    def test_photo_legacy_url(self):
        entry = PhotoEntry.from_document("ph", {"photoUrl": "https://a/1.jpg"})
        assert entry.photo_urls == ["https://a/1.jpg"]

    def test_photo_list_preferred_over_legacy_url(self):
        entry = PhotoEntry.from_document(
            "ph", {"photoUrl": "https://old", "photoUrls": ["https://new"]}
        )
        assert entry.photo_urls == ["https://new"]


class TestAccessors:
    """Test kind-aware accessor functions."""

    def test_staff_id_of(self, entries):
        assert staff_id_of(entries["assignment"]) == "s-1"
        assert staff_id_of(entries["expense"]) == "s-1"
        assert staff_id_of(entries["income"]) is None
        assert staff_id_of(entries["photo"]) is None

    def test_staff_name_of(self, entries):
        assert staff_name_of(entries["assignment"]) == "Alice"
        assert staff_name_of(entries["income"]) is None

    def test_amount_of(self, entries):
        assert amount_of(entries["expense"]) == Decimal("125")
        assert amount_of(entries["income"]) == Decimal("2500")
        assert amount_of(entries["assignment"]) is None
        assert amount_of(entries["photo"]) is None

    def test_status_of(self, entries):
        assert status_of(entries["expense"]) == "pending"
        assert status_of(entries["photo"]) is None

    def test_descriptions_of(self, entries):
        assert descriptions_of(entries["expense"]) == ["Lumber"]
        assert descriptions_of(entries["income"]) == ["Deposit"]
        assert descriptions_of(entries["photo"]) == ["Framing done"]

    @pytest.mark.parametrize(
        "accessor",
        [staff_id_of, staff_name_of, amount_of, status_of, descriptions_of],
    )
    def test_unknown_kind_fails_loudly(self, accessor):
        with pytest.raises(TypeError, match="Unsupported activity entry"):
            accessor(ActivityEntryBase(id="x"))


class TestActivityFilter:
    """Test filter normalization."""

    def test_all_and_blank_mean_unset(self):
        criteria = ActivityFilter(
            kind="all", project_id="", staff_id="ALL", status="all"
        )

        assert criteria.kind is None
        assert criteria.project_id is None
        assert criteria.staff_id is None
        assert criteria.status is None

    def test_kind_value(self):
        assert ActivityFilter(kind="expense").kind == ActivityKind.EXPENSE

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            ActivityFilter(kind="invoice")

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError, match="status must be one of"):
            ActivityFilter(status="paid")

    def test_search_none_is_blank(self):
        assert ActivityFilter(search=None).search == ""


class TestSortState:
    """Test sort toggling."""

    def test_default_is_date_descending(self):
        state = SortState()
        assert state.field == SortField.DATE
        assert state.direction == SortDirection.DESC

    def test_toggle_same_field_flips(self):
        state = SortState().toggle(SortField.DATE)
        assert state.direction == SortDirection.ASC
        assert state.toggle(SortField.DATE).direction == SortDirection.DESC

    def test_toggle_other_field_starts_descending(self):
        state = SortState(SortField.DATE, SortDirection.ASC).toggle("amount")
        assert state.field == SortField.AMOUNT
        assert state.direction == SortDirection.DESC


class TestEditDraft:
    """Test draft coercion."""

    def test_blank_numbers_are_unset(self):
        draft = EditDraft(amount="", daily_rate=None)
        assert draft.amount is None
        assert draft.daily_rate is None

    def test_numbers_become_decimal(self):
        assert EditDraft(amount="140.5").amount == Decimal("140.5")
