"""Money utilities for project aggregates and ledger search.

This module provides low-level helpers used wherever amounts are summed
or displayed:
- Coercing stored numbers (floats, strings, missing values) to Decimal
- Rounding to cents (half-up, like the stored aggregates expect)
- Rendering the raw and currency-formatted strings the ledger search matches

All helpers are pure and work on Decimal to keep sums free of float drift.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored numeric value to Decimal.

    Missing, non-numeric and non-finite values count as zero, mirroring how
    the document store is read elsewhere (``Number(x) || 0``).

    Args:
        value: Value read from a document (int, float, str, Decimal or None)

    Returns:
        The value as a finite Decimal

    Example:
        >>> to_decimal(12.5)
        Decimal('12.5')
        >>> to_decimal("abc")
        Decimal('0')
        >>> to_decimal(None)
        Decimal('0')
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not result.is_finite():
        return ZERO
    return result


def round_to_cents(value: Any) -> Decimal:
    """Round a value to two decimal places, half-up.

    Example:
        >>> round_to_cents(Decimal("10.005"))
        Decimal('10.01')
        >>> round_to_cents(0.1 + 0.2)
        Decimal('0.30')
    """
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def sum_to_cents(values: Iterable[Any]) -> Decimal:
    """Sum stored values and round the total to cents.

    Example:
        >>> sum_to_cents([100, 25.5, "4.495"])
        Decimal('130.00')
    """
    total = ZERO
    for value in values:
        total += to_decimal(value)
    return round_to_cents(total)


def format_currency(value: Any) -> str:
    """Format an amount as a US dollar string.

    Example:
        >>> format_currency(Decimal("1234.5"))
        '$1,234.50'
        >>> format_currency(-5)
        '-$5.00'
    """
    amount = round_to_cents(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_raw_number(value: Any) -> str:
    """Render a number in its shortest plain form.

    Trailing zeros are dropped so ``125.00`` renders as ``125`` and
    ``125.50`` as ``125.5``; exponent notation is never used.

    Example:
        >>> format_raw_number(Decimal("125.00"))
        '125'
        >>> format_raw_number(1200)
        '1200'
    """
    amount = to_decimal(value)
    if amount == ZERO:
        return "0"
    text = format(amount.normalize(), "f")
    return text


def to_store_number(value: Any) -> float:
    """Convert a Decimal amount to the float written to the document store.

    Example:
        >>> to_store_number(Decimal("19.99"))
        19.99
    """
    return float(to_decimal(value))
