"""Business date parsing and the display forms matched by ledger search."""

import datetime as dt
from typing import List, Optional

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

UNDATED_LABEL = "Undated"


def parse_business_date(value: Optional[str]) -> Optional[dt.date]:
    """Parse a "YYYY-MM-DD" business date, None when missing or invalid.

    Example:
        >>> parse_business_date("2024-03-05")
        datetime.date(2024, 3, 5)
        >>> parse_business_date("03/05/2024") is None
        True
    """
    if not value:
        return None
    try:
        return dt.date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def month_start(value: dt.date) -> dt.date:
    return value.replace(day=1)


def format_month_label(value: dt.date) -> str:
    """Render as "Mon YYYY", e.g. "Mar 2024"."""
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.year}"


def format_short_date(value: dt.date) -> str:
    """Render as "M/D/YYYY" without zero padding, e.g. "3/5/2024"."""
    return f"{value.month}/{value.day}/{value.year}"


def format_long_date(value: dt.date) -> str:
    """Render as "Mon D, YYYY", e.g. "Mar 5, 2024"."""
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.day}, {value.year}"


def date_search_forms(value: Optional[str]) -> List[str]:
    """Every rendering of a business date that search should match.

    Unparsable dates are matched by their raw text only.

    Example:
        >>> date_search_forms("2024-03-05")
        ['3/5/2024', '2024-03-05', 'Mar 2024', 'Mar 5, 2024']
    """
    parsed = parse_business_date(value)
    if parsed is None:
        return [value] if value else []
    return [
        format_short_date(parsed),
        parsed.isoformat(),
        format_month_label(parsed),
        format_long_date(parsed),
    ]
