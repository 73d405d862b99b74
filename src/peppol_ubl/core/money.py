"""Monetary rounding and wire formatting.

Every amount is rounded to two decimals with ``ROUND_HALF_UP`` (half away from
zero for ``Decimal``) at the point it is computed, so aggregation never sees
unrounded intermediates.
"""

from decimal import Decimal, ROUND_HALF_UP

DecimalLike = Decimal | str | int | float

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: DecimalLike) -> Decimal:
    """
    Convert input deterministically to ``Decimal``.

    Floats go through ``str`` first so binary representation errors do not
    leak into the amount.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Unsupported decimal input: {type(value)!r}")
    if isinstance(value, (int, str, float)):
        return Decimal(str(value))
    raise TypeError(f"Unsupported decimal input: {type(value)!r}")


def round_amount(amount: DecimalLike) -> Decimal:
    """Round to two decimal places, half away from zero."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    """Format a monetary amount with exactly two decimals."""
    return f"{round_amount(amount):.2f}"


def format_decimal(value: Decimal) -> str:
    """Format quantities, prices and percentages without trailing zeros."""
    normalized = to_decimal(value).normalize()
    if normalized == 0:
        return "0"
    return format(normalized, "f")
