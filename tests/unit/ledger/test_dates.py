"""Unit tests for business date helpers."""

import datetime as dt

import pytest

from scaffold_ledger.ledger.dates import (
    date_search_forms,
    format_long_date,
    format_month_label,
    format_short_date,
    parse_business_date,
)


class TestParseBusinessDate:
    """Test lenient date parsing."""

    def test_iso_date(self):
        assert parse_business_date("2024-03-05") == dt.date(2024, 3, 5)

    def test_timestamp_prefix(self):
        assert parse_business_date("2024-03-05T10:00:00Z") == dt.date(2024, 3, 5)

    @pytest.mark.parametrize("value", [None, "", "03/05/2024", "2024-02-30"])
    def test_invalid_is_none(self, value):
        assert parse_business_date(value) is None


class TestDisplayForms:
    """Test the renderings matched by search."""

    def test_formats(self):
        day = dt.date(2024, 3, 5)
        assert format_short_date(day) == "3/5/2024"
        assert format_month_label(day) == "Mar 2024"
        assert format_long_date(day) == "Mar 5, 2024"

    def test_search_forms(self):
        assert date_search_forms("2024-12-25") == [
            "12/25/2024",
            "2024-12-25",
            "Dec 2024",
            "Dec 25, 2024",
        ]

    def test_unparsable_date_matched_raw(self):
        assert date_search_forms("sometime") == ["sometime"]
        assert date_search_forms("") == []
