"""Debt-to-income ratio."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable

from ..errors import DivisionByZero, InvalidInput
from ..models.debt import Debt
from ..money import MoneyInput, to_cents

RATIO_PLACES = Decimal("0.0001")
TARGET_DTI = Decimal("0.36")


class DtiBand(str, Enum):
    """Lender-style risk bands for a debt-to-income ratio."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"

    @classmethod
    def for_ratio(cls, ratio: Decimal) -> "DtiBand":
        if ratio > Decimal("0.50"):
            return cls.SEVERE
        if ratio > Decimal("0.43"):
            return cls.HIGH
        if ratio > TARGET_DTI:
            return cls.MODERATE
        return cls.LOW


def debt_to_income_ratio(debts: Iterable[Debt], monthly_income: MoneyInput) -> Decimal:
    """Return total minimum payments divided by monthly income, as a fraction.

    Raises :class:`DivisionByZero` when ``monthly_income`` is zero or negative.
    An empty debt list is a valid 0 ratio.
    """

    try:
        income = to_cents(monthly_income)
    except (TypeError, ValueError, ArithmeticError) as exc:
        raise InvalidInput(f"Monthly income must be numeric: {monthly_income!r}") from exc
    if income <= 0:
        raise DivisionByZero("Monthly income must be positive to compute a debt-to-income ratio")

    payments = sum(debt.minimum_cents for debt in debts)
    return (Decimal(payments) / Decimal(income)).quantize(RATIO_PLACES, rounding=ROUND_HALF_UP)
