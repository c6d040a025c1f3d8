"""Integer-cent money helpers.

Every amount that flows through the planner is held as an ``int`` number of
cents. Conversions from user input happen once, here, with half-up rounding.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")

MoneyInput = Decimal | int | str | float


def as_decimal(value: MoneyInput) -> Decimal:
    """Coerce user input to ``Decimal`` without passing through binary floats."""

    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean is not a valid amount")
    if isinstance(value, float):
        # str() gives the shortest repr, so 0.1 becomes Decimal("0.1") not 0.1000000000000000055...
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Not a numeric amount: {value!r}") from exc


def round_half_up(value: Decimal) -> int:
    """Round a Decimal number of cents to a whole cent."""

    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def round_up(value: Decimal) -> int:
    """Round a Decimal number of cents up to the next whole cent."""

    return int(value.quantize(Decimal(1), rounding=ROUND_CEILING))


def to_cents(value: MoneyInput) -> int:
    """Convert a currency amount (dollars) to integer cents."""

    return round_half_up(as_decimal(value) * 100)


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a two-place Decimal amount."""

    return (Decimal(cents) / 100).quantize(CENT)


def format_currency(cents: int) -> str:
    """Render cents as ``$1,234.56`` (negative amounts as ``-$5.00``)."""

    sign = "-" if cents < 0 else ""
    return f"{sign}${from_cents(abs(cents)):,.2f}"
