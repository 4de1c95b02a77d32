"""Currency formatting for amounts stored in minor units (cents)."""

from decimal import Decimal

MINOR_UNITS_PER_MAJOR = 100
CURRENCY_SYMBOL = "$"


def to_major_units(amount: int | None) -> Decimal:
    """Convert an integer amount in cents to an exact Decimal in dollars."""
    return Decimal(amount or 0) / MINOR_UNITS_PER_MAJOR


def format_currency(amount: int | None) -> str:
    """
    Render an amount in minor units as an en-US dollar string.

    Missing aggregates (``None``) are treated as zero.

    Examples:
        >>> format_currency(123456)
        '$1,234.56'
        >>> format_currency(None)
        '$0.00'
        >>> format_currency(-500)
        '-$5.00'
    """
    value = to_major_units(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.2f}"
