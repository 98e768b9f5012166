"""Money and rate rounding helpers.

Amounts are stored as integer cents. Statutory math runs on Decimal euros
and is rounded back to whole cents only at the output boundary.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

CENTS_PER_EURO = Decimal(100)

_WHOLE = Decimal("1")
_RATE_PLACES = Decimal("0.0001")
_ONE_DECIMAL = Decimal("0.1")

Number = Union[int, float, str, Decimal]


def as_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal.

    Floats go through str() so 0.185 becomes Decimal("0.185") rather than
    its binary expansion.

    Raises:
        ValueError: If the value is not a number
    """
    if isinstance(value, Decimal):
        return value
    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"'{value}' is not a decimal number") from e


def to_euros(cents: int) -> Decimal:
    """Convert integer cents to Decimal euros."""
    return Decimal(cents) / CENTS_PER_EURO


def round_cents(value: Decimal) -> int:
    """Round a Decimal cent amount to whole cents (0.5 rounds up)."""
    return int(as_decimal(value).quantize(_WHOLE, rounding=ROUND_HALF_UP))


def to_cents(euros: Decimal) -> int:
    """Convert Decimal euros to whole cents (0.5 cent rounds up)."""
    return round_cents(as_decimal(euros) * CENTS_PER_EURO)


def round_rate(rate: Decimal) -> Decimal:
    """Round a rate to basis-point precision (4 decimal places)."""
    return as_decimal(rate).quantize(_RATE_PLACES, rounding=ROUND_HALF_UP)


def to_percent(rate: Decimal) -> Decimal:
    """Convert a rate to a percentage with one decimal (0.25213 -> 25.2)."""
    return (as_decimal(rate) * 100).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)


def whole_percent(rate: Decimal) -> int:
    """Convert a rate to a whole percentage (0.155 -> 16)."""
    return int((as_decimal(rate) * 100).quantize(_WHOLE, rounding=ROUND_HALF_UP))
