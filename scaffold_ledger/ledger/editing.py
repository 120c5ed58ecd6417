"""Projection between ledger entries and the shared edit draft."""

from typing import Any, Dict

from scaffold_ledger.models.activity import (
    ActivityEntryBase,
    ActivityKind,
    AssignmentEntry,
    EditDraft,
    ExpenseEntry,
    IncomeEntry,
    PhotoEntry,
)


def draft_from_entry(entry: ActivityEntryBase) -> EditDraft:
    """Copy an entry's editable fields into a draft.

    ``notes`` holds the assignment task description and the photo
    description; ``item_description`` holds the income category.
    """
    common = {
        "project_id": entry.project_id,
        "date": entry.date or None,
    }
    if isinstance(entry, AssignmentEntry):
        return EditDraft(
            staff_id=entry.staff_id or None,
            notes=entry.task_description,
            daily_rate=entry.daily_rate,
            **common,
        )
    if isinstance(entry, ExpenseEntry):
        return EditDraft(
            staff_id=entry.staff_id,
            item_description=entry.item_description,
            amount=entry.amount,
            status=entry.status,
            notes=entry.notes,
            **common,
        )
    if isinstance(entry, IncomeEntry):
        return EditDraft(
            item_description=entry.category,
            amount=entry.amount,
            status=entry.status,
            **common,
        )
    if isinstance(entry, PhotoEntry):
        return EditDraft(notes=entry.description, **common)
    raise TypeError(f"Unsupported activity entry: {type(entry).__name__}")


def changes_from_draft(kind: ActivityKind, draft: EditDraft) -> Dict[str, Any]:
    """Record field changes (store names) carried by a validated draft.

    Unset date, amount, rate and status leave the stored value alone.
    References are always written so a cleared project is saved as such.
    """
    kind = ActivityKind(kind)
    changes: Dict[str, Any] = {"projectId": draft.project_id}
    if draft.date:
        changes["date"] = draft.date

    if kind == ActivityKind.ASSIGNMENT:
        changes["staffId"] = draft.staff_id
        changes["taskDescription"] = draft.notes or ""
        if draft.daily_rate is not None:
            changes["dailyRate"] = draft.daily_rate
    elif kind == ActivityKind.EXPENSE:
        changes["staffId"] = draft.staff_id
        changes["itemDescription"] = draft.item_description
        changes["amount"] = draft.amount
        changes["notes"] = draft.notes
        if draft.status:
            changes["status"] = draft.status
    elif kind == ActivityKind.INCOME:
        changes["category"] = draft.item_description
        if draft.amount is not None:
            changes["amount"] = draft.amount
        if draft.status:
            changes["status"] = draft.status
    elif kind == ActivityKind.PHOTO:
        changes["description"] = draft.notes or ""
    return changes
