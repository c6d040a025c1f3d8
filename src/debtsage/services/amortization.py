"""Single-period amortization math in integer cents."""

from __future__ import annotations

from decimal import Decimal
from typing import NamedTuple

from ..errors import InsufficientPayment, InsufficientPaymentError
from ..money import round_half_up, round_up

MONTHS_PER_YEAR = 12


class PeriodResult(NamedTuple):
    """Outcome of applying one payment to one balance for one month."""

    interest: int
    principal: int
    new_balance: int
    payment: int  # amount actually applied: interest + principal
    unapplied: int  # part of the offered payment not needed to clear the balance


def monthly_interest(balance: int, apr: Decimal) -> int:
    """Interest accrued on ``balance`` cents for one month, rounded half-up once."""

    if balance <= 0 or apr == 0:
        return 0
    return round_half_up(Decimal(balance) * apr / MONTHS_PER_YEAR)


def apply_period(balance: int, apr: Decimal, payment: int, *, debt_id: str = "") -> PeriodResult:
    """Split ``payment`` into interest and principal for one period.

    The final payment on a debt is ``balance + interest``; anything offered
    beyond that is handed back as ``unapplied`` so the caller can direct it
    elsewhere in the same period. A payment smaller than the interest raises
    :class:`InsufficientPaymentError` instead of letting the balance grow.
    """

    if balance < 0 or payment < 0:
        raise ValueError("Balance and payment must be non-negative cents")

    interest = monthly_interest(balance, apr)
    if payment < interest:
        raise InsufficientPaymentError(
            InsufficientPayment(debt_id=debt_id, interest_due=interest, minimum_payment=payment)
        )

    principal = min(payment - interest, balance)
    applied = interest + principal
    return PeriodResult(
        interest=interest,
        principal=principal,
        new_balance=balance - principal,
        payment=applied,
        unapplied=payment - applied,
    )


def amortizing_payment(balance: int, apr: Decimal, term_months: int) -> int:
    """Level monthly payment that retires ``balance`` within ``term_months``.

    Standard annuity formula ``P * r / (1 - (1 + r) ** -n)``, rounded up to the
    cent.
    """

    if term_months <= 0:
        raise ValueError("term_months must be positive")
    if balance <= 0:
        return 0
    if apr == 0:
        return round_up(Decimal(balance) / term_months)

    rate = apr / MONTHS_PER_YEAR
    growth = (1 + rate) ** term_months
    return round_up(Decimal(balance) * rate * growth / (growth - 1))
