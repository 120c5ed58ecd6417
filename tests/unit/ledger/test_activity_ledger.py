"""
Unit tests for the activity ledger on the in-memory store.
"""

from decimal import Decimal

import pytest

from scaffold_ledger.errors import NotFoundError, ValidationError
from scaffold_ledger.models.activity import (
    ActivityFilter,
    ActivityKind,
    ExpenseEntry,
    PhotoEntry,
    SortDirection,
    SortField,
    SortState,
    amount_of,
)
from scaffold_ledger.store import Collections


@pytest.fixture
def ledger(services):
    return services.ledger


@pytest.fixture
def transactions(services):
    return services.transactions


@pytest.fixture
def garage(make_project):
    return make_project("Garage Build")


@pytest.fixture
def kitchen(make_project):
    return make_project("Kitchen")


def add_expense(transactions, project_id, amount, date="2024-03-05", **fields):
    data = {
        "projectId": project_id,
        "subcategory": "Lumber",
        "amount": amount,
        "date": date,
        "status": "approved",
    }
    data.update(fields)
    return transactions.create_expense(data)


def add_assignment(transactions, project_id, staff_id, rate, date="2024-03-04"):
    return transactions.create_assignment(
        {
            "projectId": project_id,
            "staffId": staff_id,
            "dailyRate": rate,
            "date": date,
            "taskDescription": "Framing",
        }
    )


@pytest.fixture
def populated(transactions, garage, kitchen, make_staff):
    """Two assignments, three expenses, one income and one photo on the garage."""
    staff_id = make_staff()
    add_assignment(transactions, garage, staff_id, 125, date="2024-02-27")
    add_assignment(transactions, garage, staff_id, 180)
    add_expense(transactions, garage, 125, date="2024-03-02")
    add_expense(transactions, garage, 40, date="2024-02-10", status="pending")
    add_expense(transactions, garage, 310.4, date="2024-03-09")
    transactions.create_income(
        {
            "projectId": garage,
            "category": "Deposit",
            "amount": 2500,
            "date": "2024-03-01",
            "status": "received",
        }
    )
    transactions.create_photo(
        {
            "projectId": garage,
            "date": "2024-03-07",
            "photoUrls": ["https://example.com/1.jpg", "https://example.com/2.jpg"],
        }
    )
    add_expense(transactions, kitchen, 99, date="2024-03-03")
    return staff_id


def project_cost(store, project_id):
    return store.get(Collections.PROJECTS, project_id).get("actualCost")


class TestListActivities:
    """Test the merged feed, filters and search."""

    def test_counts_per_project(self, ledger, garage, populated):
        entries = ledger.list_activities(project_id=garage)

        assert len(entries) == 7
        expenses = ledger.list_activities(
            ActivityFilter(kind="expense"), project_id=garage
        )
        assert len(expenses) == 3
        assert all(isinstance(entry, ExpenseEntry) for entry in expenses)

    def test_all_projects(self, ledger, populated):
        assert len(ledger.list_activities()) == 8

    def test_search_formatted_amount(self, ledger, populated):
        matches = ledger.list_activities(ActivityFilter(search="125.00"))

        assert sorted(entry.kind for entry in matches) == ["assignment", "expense"]

    def test_staff_filter_excludes_photos(self, ledger, populated):
        matches = ledger.list_activities(ActivityFilter(staff_id=populated))

        assert {entry.kind for entry in matches} == {"assignment"}

    def test_status_filter_keeps_kinds_without_status(self, ledger, garage, populated):
        matches = ledger.list_activities(
            ActivityFilter(status="approved"), project_id=garage
        )

        assert sorted(entry.kind for entry in matches) == [
            "assignment",
            "assignment",
            "expense",
            "expense",
            "photo",
        ]

    def test_default_sort_is_date_descending(self, ledger, garage, populated):
        dates = [entry.date for entry in ledger.list_activities(project_id=garage)]

        assert dates == sorted(dates, reverse=True)

    def test_unreadable_documents_skipped(self, store, ledger, garage, populated):
        store.create(
            Collections.EXPENSES,
            {"projectId": garage, "amount": 5, "createdAt": "not a timestamp"},
        )

        assert len(ledger.list_activities(project_id=garage)) == 7

    def test_legacy_photo_url(self, store, ledger, garage):
        store.create(
            Collections.PROJECT_PHOTOS,
            {
                "projectId": garage,
                "date": "2024-03-01",
                "photoUrl": "https://example.com/old.jpg",
            },
        )

        (photo,) = ledger.list_activities()
        assert isinstance(photo, PhotoEntry)
        assert photo.photo_urls == ["https://example.com/old.jpg"]
        assert photo.uploaded_by_name == "Unknown User"

    def test_null_fields_are_defaulted(self, store, ledger, garage):
        """Explicit nulls read like missing fields instead of dropping the record."""
        store.create(
            Collections.EXPENSES,
            {"projectId": garage, "amount": 10, "date": "2024-03-02", "status": None},
        )
        store.create(
            Collections.TASK_ASSIGNMENTS,
            {
                "projectId": garage,
                "staffId": None,
                "dailyRate": 150,
                "date": "2024-03-03",
            },
        )
        store.create(
            Collections.EXPENSES,
            {
                "projectId": garage,
                "amount": 7,
                "date": "2024-03-04",
                "status": "approved",
                "subcategory": None,
            },
        )

        entries = ledger.list_activities(project_id=garage)

        assert len(entries) == 3
        by_kind = {}
        for entry in entries:
            by_kind.setdefault(entry.kind, []).append(entry)
        (assignment,) = by_kind[ActivityKind.ASSIGNMENT]
        assert assignment.staff_id == ""
        assert assignment.staff_name == "Unknown Staff"
        statuses = sorted(entry.status for entry in by_kind[ActivityKind.EXPENSE])
        assert statuses == ["approved", "pending"]
        subcategories = [entry.subcategory for entry in by_kind[ActivityKind.EXPENSE]]
        assert subcategories == ["", ""]


class TestGroupedActivities:
    """Test month grouping."""

    def test_two_months_newest_first(self, ledger, garage, populated):
        sort = SortState(field=SortField.AMOUNT, direction=SortDirection.ASC)

        groups = ledger.grouped_activities(
            ActivityFilter(kind="expense"), sort, project_id=garage
        )

        assert [group.label for group in groups] == ["Mar 2024", "Feb 2024"]
        assert groups[0].expanded is True
        assert groups[1].expanded is False
        march = [amount_of(entry) for entry in groups[0].entries]
        assert march == sorted(march)

    def test_no_matches(self, ledger, populated):
        assert ledger.grouped_activities(ActivityFilter(search="zzz")) == []


class TestEditing:
    """Test draft saves through the ledger."""

    def test_save_amount_recomputes(self, store, ledger, garage, populated):
        entry = ledger.list_activities(
            ActivityFilter(kind="expense", search="310.4"), project_id=garage
        )[0]
        before = project_cost(store, garage)

        draft = ledger.start_edit(entry)
        draft.amount = Decimal("300.40")
        refreshed = ledger.save_edit(entry.id, draft)

        assert refreshed.amount == Decimal("300.4")
        assert project_cost(store, garage) == pytest.approx(before - 10)

    def test_reject_expense_removes_its_cost(self, store, ledger, garage, populated):
        entry = ledger.list_activities(
            ActivityFilter(kind="expense", search="$125.00"), project_id=garage
        )[0]
        before = project_cost(store, garage)

        draft = ledger.start_edit(entry)
        draft.status = "rejected"
        ledger.save_edit(entry, draft)

        assert project_cost(store, garage) == pytest.approx(before - 125)

    def test_move_expense_between_projects(
        self, store, ledger, garage, kitchen, populated
    ):
        entry = ledger.list_activities(
            ActivityFilter(kind="expense", search="310.4")
        )[0]
        garage_before = project_cost(store, garage)
        kitchen_before = project_cost(store, kitchen)

        draft = ledger.start_edit(entry)
        draft.project_id = kitchen
        refreshed = ledger.save_edit(entry, draft)

        assert refreshed.project_name == "Kitchen"
        assert project_cost(store, garage) == pytest.approx(garage_before - 310.4)
        assert project_cost(store, kitchen) == pytest.approx(kitchen_before + 310.4)

    def test_invalid_draft_writes_nothing(self, store, ledger, populated):
        entry = ledger.list_activities(ActivityFilter(kind="expense"))[0]
        before = list(store.write_log)

        draft = ledger.start_edit(entry)
        draft.item_description = "  "
        with pytest.raises(ValidationError, match="item_description"):
            ledger.save_edit(entry, draft)

        assert store.write_log == before

    def test_photo_caption_edit(self, ledger, populated):
        entry = ledger.list_activities(ActivityFilter(kind="photo"))[0]

        draft = ledger.start_edit(entry.id)
        draft.notes = "Slab poured"
        refreshed = ledger.save_edit(entry.id, draft)

        assert refreshed.description == "Slab poured"
        assert len(refreshed.photo_urls) == 2

    def test_unknown_entry(self, ledger, populated):
        with pytest.raises(NotFoundError) as exc_info:
            ledger.start_edit("gone")

        assert exc_info.value.collection == "activities"


class TestDeleting:
    """Test deletes through the ledger."""

    def test_delete_recomputes(self, store, ledger, garage, populated):
        entry = ledger.list_activities(
            ActivityFilter(kind="assignment", search="180"), project_id=garage
        )[0]
        before = project_cost(store, garage)

        ledger.delete_entry(entry)

        assert project_cost(store, garage) == pytest.approx(before - 180)
        assert len(ledger.list_activities(project_id=garage)) == 6

    def test_delete_after_project_deleted(
        self, store, ledger, transactions, make_project, make_staff
    ):
        project_id = make_project("Shed")
        assignment = add_assignment(transactions, project_id, make_staff(), 200)
        store.delete(Collections.PROJECTS, project_id)
        project_writes = store.writes_to(Collections.PROJECTS)

        ledger.delete_entry(assignment.id)

        assert store.get(Collections.TASK_ASSIGNMENTS, assignment.id) is None
        assert store.writes_to(Collections.PROJECTS) == project_writes
        assert store.get(Collections.PROJECTS, project_id) is None

    def test_usage_count_follows_deletes(self, services, ledger, garage):
        subcategories = services.usage_counter(Collections.EXPENSE_SUBCATEGORIES)
        subcategories.register("Lumber")
        created = [
            add_expense(services.transactions, garage, amount) for amount in (1, 2, 3)
        ]

        ledger.delete_entry(created[0].id)

        assert subcategories.find("Lumber").usage_count == 2

    def test_usage_count_never_negative(self, services, ledger, garage):
        created = [
            add_expense(services.transactions, garage, amount) for amount in (1, 2)
        ]
        subcategories = services.usage_counter(Collections.EXPENSE_SUBCATEGORIES)
        subcategories.register("Lumber")

        for expense in reversed(created):
            ledger.delete_entry(expense.id)

        assert subcategories.find("Lumber").usage_count == 0

    def test_delete_income(self, ledger, populated):
        entry = ledger.list_activities(ActivityFilter(kind=ActivityKind.INCOME))[0]

        ledger.delete_entry(entry)

        assert ledger.list_activities(ActivityFilter(kind="income")) == []
