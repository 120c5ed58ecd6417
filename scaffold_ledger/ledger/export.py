"""Tabular export of ledger entries through pandas."""

import logging
from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from scaffold_ledger.ledger.entries import kind_of
from scaffold_ledger.models.activity import (
    ActivityEntryBase,
    AssignmentEntry,
    amount_of,
    descriptions_of,
    staff_name_of,
    status_of,
)

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "kind",
    "id",
    "date",
    "project_id",
    "project_name",
    "staff_name",
    "description",
    "amount",
    "status",
    "created_at",
]


def entries_to_dataframe(entries: Iterable[ActivityEntryBase]) -> pd.DataFrame:
    """One row per entry; assignments report their daily rate as amount.

    Amounts are floats rounded to cents so the frame sorts and sums
    naturally.
    """
    rows = []
    for entry in entries:
        amount = amount_of(entry)
        if isinstance(entry, AssignmentEntry):
            amount = entry.daily_rate
        rows.append(
            {
                "kind": kind_of(entry).value,
                "id": entry.id,
                "date": entry.date,
                "project_id": entry.project_id,
                "project_name": entry.project_name,
                "staff_name": staff_name_of(entry),
                "description": " ".join(descriptions_of(entry)).strip(),
                "amount": round(float(amount), 2) if amount is not None else None,
                "status": status_of(entry),
                "created_at": entry.created_at,
            }
        )
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_csv(entries: Iterable[ActivityEntryBase], path: Union[str, Path]) -> int:
    """Write entries to a CSV file.

    Returns:
        Number of rows written
    """
    df = entries_to_dataframe(entries)
    df.to_csv(path, index=False)
    logger.info(f"Exported {len(df)} activities to {path}")
    return len(df)
