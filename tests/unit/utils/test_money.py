"""Unit tests for money helpers."""

from decimal import Decimal

import pytest

from scaffold_ledger.utils.money import (
    format_currency,
    format_raw_number,
    round_to_cents,
    sum_to_cents,
    to_decimal,
    to_store_number,
)


class TestToDecimal:
    """Test coercion of stored values."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (12.5, Decimal("12.5")),
            ("180", Decimal("180")),
            (" 42.10 ", Decimal("42.10")),
            (Decimal("3.33"), Decimal("3.33")),
            (7, Decimal("7")),
        ],
    )
    def test_numeric_values(self, value, expected):
        """Test numbers and numeric strings convert exactly."""
        assert to_decimal(value) == expected

    @pytest.mark.parametrize(
        "value", [None, "", "abc", float("nan"), float("inf"), True]
    )
    def test_unreadable_values_count_as_zero(self, value):
        """Test missing, non-numeric and non-finite values read as zero."""
        assert to_decimal(value) == Decimal("0")

    def test_float_does_not_carry_binary_noise(self):
        """Test floats go through their shortest repr."""
        assert to_decimal(0.1) == Decimal("0.1")


class TestRounding:
    """Test cent rounding and sums."""

    def test_round_half_up(self):
        assert round_to_cents(Decimal("10.005")) == Decimal("10.01")
        assert round_to_cents(Decimal("10.004")) == Decimal("10.00")

    def test_float_sum_rounds_cleanly(self):
        assert round_to_cents(0.1 + 0.2) == Decimal("0.30")

    def test_sum_to_cents_skips_garbage(self):
        """Test a sum ignores unreadable values instead of failing."""
        assert sum_to_cents([100, "25.5", None, "x", 4.495]) == Decimal("130.00")

    def test_sum_of_nothing_is_zero(self):
        assert sum_to_cents([]) == Decimal("0.00")

    def test_many_small_amounts_do_not_drift(self):
        """Test summing many float cents stays exact."""
        assert sum_to_cents([0.1] * 1000) == Decimal("100.00")


class TestFormatting:
    """Test the display forms used by ledger search."""

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_currency(125) == "$125.00"
        assert format_currency(-5) == "-$5.00"
        assert format_currency(None) == "$0.00"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("125.00"), "125"),
            (125.5, "125.5"),
            (1200, "1200"),
            (Decimal("0.00"), "0"),
            (Decimal("1E+3"), "1000"),
        ],
    )
    def test_format_raw_number(self, value, expected):
        """Test the shortest plain rendering without exponents."""
        assert format_raw_number(value) == expected

    def test_to_store_number_is_float(self):
        value = to_store_number(Decimal("19.99"))
        assert isinstance(value, float)
        assert value == 19.99
