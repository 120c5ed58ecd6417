"""Filtering, free-text search, sorting and month grouping of ledger entries.

All functions are pure: they take a list of entries and return a new list
(or groups) without touching the store.
"""

import datetime as dt
from collections import OrderedDict
from decimal import Decimal
from typing import Callable, Iterable, List, Optional

from scaffold_ledger.ledger.dates import (
    UNDATED_LABEL,
    date_search_forms,
    format_month_label,
    month_start,
    parse_business_date,
)
from scaffold_ledger.models.activity import (
    ActivityEntryBase,
    ActivityFilter,
    AssignmentEntry,
    MonthGroup,
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
from scaffold_ledger.utils.money import ZERO, format_currency, format_raw_number


def search_terms(entry: ActivityEntryBase) -> List[str]:
    """Every text value of an entry that free-text search looks at.

    Amounts and daily rates are included both raw ("125", "125.5") and
    currency formatted ("$125.00"); dates in all their display forms.
    """
    terms = list(descriptions_of(entry))
    terms.append(staff_name_of(entry) or "")
    terms.append(entry.project_name or "")

    if isinstance(entry, PhotoEntry):
        terms.append(entry.uploaded_by_name)

    money: Optional[Decimal] = amount_of(entry)
    if isinstance(entry, AssignmentEntry):
        money = entry.daily_rate
    if money is not None:
        terms.append(format_raw_number(money))
        terms.append(format_currency(money))

    terms.extend(date_search_forms(entry.date))
    return [term for term in terms if term]


def matches_search(entry: ActivityEntryBase, query: str) -> bool:
    """Case-insensitive substring match; a blank query matches everything.

    Example:
        >>> matches_search(expense_of_125, "125.00")
        True
    """
    needle = (query or "").strip().lower()
    if not needle:
        return True
    return any(needle in term.lower() for term in search_terms(entry))


def matches_filter(entry: ActivityEntryBase, criteria: ActivityFilter) -> bool:
    """Whether an entry satisfies every criterion that is set."""
    if criteria.kind is not None and entry.kind != criteria.kind:
        return False
    if criteria.project_id is not None and entry.project_id != criteria.project_id:
        return False
    if criteria.staff_id is not None:
        # Photos carry no staff reference and never match a staff filter
        if staff_id_of(entry) != criteria.staff_id:
            return False
    if criteria.status is not None:
        status = status_of(entry)
        if status is not None and status != criteria.status:
            return False
    return matches_search(entry, criteria.search)


def apply_filter(
    entries: Iterable[ActivityEntryBase], criteria: Optional[ActivityFilter] = None
) -> List[ActivityEntryBase]:
    """Entries satisfying ``criteria``, in their original order."""
    if criteria is None:
        return list(entries)
    return [entry for entry in entries if matches_filter(entry, criteria)]


def _sort_key(field: SortField) -> Callable[[ActivityEntryBase], object]:
    if field == SortField.DATE:
        return lambda entry: entry.date or ""
    if field == SortField.AMOUNT:

        def amount_key(entry: ActivityEntryBase) -> Decimal:
            amount = amount_of(entry)
            return ZERO if amount is None else amount

        return amount_key
    if field == SortField.STAFF_NAME:
        return lambda entry: staff_name_of(entry) or ""
    if field == SortField.PROJECT_NAME:
        return lambda entry: entry.project_name or ""
    raise ValueError(f"Unsupported sort field: {field}")


def sort_entries(
    entries: Iterable[ActivityEntryBase], state: Optional[SortState] = None
) -> List[ActivityEntryBase]:
    """Stable sort by the active field and direction.

    Entries that compare equal keep their incoming order in both
    directions.
    """
    state = state or SortState()
    return sorted(
        entries,
        key=_sort_key(SortField(state.field)),
        reverse=SortDirection(state.direction) == SortDirection.DESC,
    )


def _created_key(entry: ActivityEntryBase):
    created = entry.created_at
    if created is None:
        return (0, 0.0)
    if created.tzinfo is None:
        created = created.replace(tzinfo=dt.timezone.utc)
    return (1, created.timestamp())


def sort_by_created(entries: Iterable[ActivityEntryBase]) -> List[ActivityEntryBase]:
    """Newest first by creation time; entries without one go last."""
    return sorted(entries, key=_created_key, reverse=True)


def group_by_month(
    entries: Iterable[ActivityEntryBase], today: Optional[dt.date] = None
) -> List[MonthGroup]:
    """Bucket already sorted entries by the calendar month of their date.

    Groups are ordered newest month first with entries keeping their
    order inside a group. Entries without a valid date form a trailing
    "Undated" group. The group of the current month starts expanded.

    Args:
        entries: Filtered and sorted entries
        today: Reference date for the expanded group (defaults to today)

    Returns:
        Month groups
    """
    current_month = month_start(today or dt.date.today())
    buckets: "OrderedDict[Optional[dt.date], List[ActivityEntryBase]]" = OrderedDict()
    for entry in entries:
        parsed = parse_business_date(entry.date)
        month = month_start(parsed) if parsed is not None else None
        buckets.setdefault(month, []).append(entry)

    dated_months = sorted((m for m in buckets if m is not None), reverse=True)
    groups = [
        MonthGroup(
            label=format_month_label(month),
            month=month,
            entries=buckets[month],
            expanded=month == current_month,
        )
        for month in dated_months
    ]
    if None in buckets:
        groups.append(
            MonthGroup(label=UNDATED_LABEL, month=None, entries=buckets[None])
        )
    return groups
