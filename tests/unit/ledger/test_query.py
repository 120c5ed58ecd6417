"""Unit tests for ledger filtering, search, sorting and grouping."""

import datetime as dt

import pytest

from scaffold_ledger.ledger.query import (
    apply_filter,
    group_by_month,
    matches_search,
    search_terms,
    sort_by_created,
    sort_entries,
)
from scaffold_ledger.models.activity import (
    ActivityFilter,
    AssignmentEntry,
    ExpenseEntry,
    IncomeEntry,
    PhotoEntry,
    SortDirection,
    SortField,
    SortState,
)


def created(minute):
    return dt.datetime(2024, 3, 1, 12, minute, tzinfo=dt.timezone.utc)


@pytest.fixture
def feed():
    """One entry of every kind across two months plus an undated one."""
    return [
        AssignmentEntry(
            id="a-1",
            date="2024-03-05",
            projectId="p-1",
            projectName="Garage",
            staffId="s-1",
            staffName="Alice Ng",
            taskDescription="Framing",
            dailyRate=180,
            createdAt=created(4),
        ),
        ExpenseEntry(
            id="e-1",
            date="2024-03-07",
            projectId="p-1",
            projectName="Garage",
            staffId="s-2",
            staffName="Bob Ray",
            itemDescription="Lumber",
            amount=125,
            status="approved",
            createdAt=created(3),
        ),
        IncomeEntry(
            id="i-1",
            date="2024-02-20",
            projectId="p-2",
            projectName="Kitchen",
            category="Deposit",
            amount=2500,
            status="received",
            createdAt=created(2),
        ),
        PhotoEntry(
            id="ph-1",
            date="",
            projectId="p-1",
            projectName="Garage",
            description="Slab poured",
            photoUrls=["https://a/1.jpg"],
            createdAt=created(1),
        ),
    ]


def ids(entries):
    return [entry.id for entry in entries]


class TestSearch:
    """Test free-text search."""

    @pytest.mark.parametrize(
        "query,expected",
        [
            ("lumber", ["e-1"]),
            ("GARAGE", ["a-1", "e-1", "ph-1"]),
            ("alice", ["a-1"]),
            ("125.00", ["e-1"]),
            ("$125", ["e-1"]),
            ("180", ["a-1"]),
            ("2,500", ["i-1"]),
            ("3/5/2024", ["a-1"]),
            ("Feb 2024", ["i-1"]),
            ("Mar 7, 2024", ["e-1"]),
            ("slab", ["ph-1"]),
            ("Unknown User", ["ph-1"]),
            ("", ["a-1", "e-1", "i-1", "ph-1"]),
        ],
    )
    def test_matches_search(self, feed, query, expected):
        assert ids(e for e in feed if matches_search(e, query)) == expected

    def test_search_terms_include_amount_forms(self, feed):
        terms = search_terms(feed[1])
        assert "125" in terms
        assert "$125.00" in terms


class TestFilter:
    """Test composable filters."""

    def test_no_criteria_returns_everything(self, feed):
        assert ids(apply_filter(feed)) == ids(feed)

    def test_kind(self, feed):
        assert ids(apply_filter(feed, ActivityFilter(kind="income"))) == ["i-1"]

    def test_project(self, feed):
        result = apply_filter(feed, ActivityFilter(project_id="p-1"))
        assert ids(result) == ["a-1", "e-1", "ph-1"]

    def test_staff_never_matches_photos_or_incomes(self, feed):
        result = apply_filter(feed, ActivityFilter(staff_id="s-1"))
        assert ids(result) == ["a-1"]

    def test_status_passes_kinds_without_status(self, feed):
        result = apply_filter(feed, ActivityFilter(status="approved"))
        assert ids(result) == ["a-1", "e-1", "ph-1"]

    def test_criteria_combine(self, feed):
        criteria = ActivityFilter(project_id="p-1", kind="expense", search="lumber")
        assert ids(apply_filter(feed, criteria)) == ["e-1"]

    def test_filter_is_subset_in_original_order(self, feed):
        result = apply_filter(feed, ActivityFilter(search="a"))
        positions = [ids(feed).index(entry_id) for entry_id in ids(result)]
        assert positions == sorted(positions)


class TestSort:
    """Test stable sorting."""

    def test_default_is_date_descending(self, feed):
        assert ids(sort_entries(feed)) == ["e-1", "a-1", "i-1", "ph-1"]

    def test_date_ascending(self, feed):
        state = SortState(SortField.DATE, SortDirection.ASC)
        assert ids(sort_entries(feed, state)) == ["ph-1", "i-1", "a-1", "e-1"]

    def test_amount_treats_assignments_and_photos_as_zero(self, feed):
        state = SortState(SortField.AMOUNT, SortDirection.DESC)
        assert ids(sort_entries(feed, state)) == ["i-1", "e-1", "a-1", "ph-1"]

    def test_staff_name(self, feed):
        state = SortState(SortField.STAFF_NAME, SortDirection.ASC)
        assert ids(sort_entries(feed, state)) == ["i-1", "ph-1", "a-1", "e-1"]

    def test_project_name(self, feed):
        state = SortState(SortField.PROJECT_NAME, SortDirection.DESC)
        assert ids(sort_entries(feed, state)) == ["i-1", "a-1", "e-1", "ph-1"]

    def test_ties_keep_incoming_order_in_both_directions(self):
        tied = [
            ExpenseEntry(id=f"e-{i}", date="2024-03-01", amount=10) for i in range(4)
        ]
        for direction in SortDirection:
            state = SortState(SortField.AMOUNT, direction)
            assert ids(sort_entries(tied, state)) == ["e-0", "e-1", "e-2", "e-3"]

    def test_sort_by_created_newest_first_missing_last(self, feed):
        undated = IncomeEntry(id="i-x", category="Misc", amount=1)
        result = sort_by_created([feed[3], undated, feed[0], feed[2]])
        assert ids(result) == ["a-1", "i-1", "ph-1", "i-x"]

    def test_sort_by_created_mixes_naive_and_aware(self):
        naive = IncomeEntry(
            id="n", category="x", amount=1, createdAt=dt.datetime(2024, 3, 2)
        )
        aware = IncomeEntry(id="a", category="x", amount=1, createdAt=created(0))
        assert ids(sort_by_created([aware, naive])) == ["n", "a"]


class TestGroupByMonth:
    """Test month grouping."""

    def test_groups_newest_first_with_undated_last(self, feed):
        groups = group_by_month(sort_entries(feed), today=dt.date(2024, 3, 15))

        assert [group.label for group in groups] == ["Mar 2024", "Feb 2024", "Undated"]
        assert ids(groups[0].entries) == ["e-1", "a-1"]
        assert groups[0].expanded is True
        assert groups[1].expanded is False
        assert groups[2].month is None

    def test_groups_keep_sorted_order_inside(self, feed):
        state = SortState(SortField.DATE, SortDirection.ASC)
        groups = group_by_month(sort_entries(feed, state), today=dt.date(2024, 3, 1))

        assert [group.label for group in groups] == ["Mar 2024", "Feb 2024", "Undated"]
        assert ids(groups[0].entries) == ["a-1", "e-1"]

    def test_no_group_expanded_outside_current_month(self, feed):
        groups = group_by_month(feed, today=dt.date(2025, 1, 1))
        assert not any(group.expanded for group in groups)

    def test_partition_covers_every_entry_once(self, feed):
        groups = group_by_month(feed, today=dt.date(2024, 3, 15))
        grouped = [entry.id for group in groups for entry in group.entries]
        assert sorted(grouped) == sorted(ids(feed))

    def test_empty_feed(self):
        assert group_by_month([], today=dt.date(2024, 3, 15)) == []
