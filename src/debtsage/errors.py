"""Planner error taxonomy.

Malformed input is rejected with an exception before any simulation work.
Conditions that arise while planning (a minimum that cannot cover interest,
a budget that never clears the debt) are expected financial outcomes and are
returned on the schedule as plain records instead.
"""

from __future__ import annotations

from dataclasses import dataclass


class PlanningError(ValueError):
    """Base class for recoverable planner errors."""


class InvalidInput(PlanningError):
    """Input was rejected before simulation started."""


class DivisionByZero(PlanningError):
    """A ratio was requested against a non-positive denominator."""


@dataclass(slots=True, frozen=True)
class InsufficientPayment:
    """A debt whose minimum payment does not cover its monthly interest."""

    debt_id: str
    interest_due: int  # cents
    minimum_payment: int  # cents


@dataclass(slots=True, frozen=True)
class Stalled:
    """The safety horizon was reached with balance still outstanding."""

    periods_simulated: int
    remaining_balance: int  # cents


class InsufficientPaymentError(PlanningError):
    """Raised by the amortization calculator when a payment cannot cover interest."""

    def __init__(self, outcome: InsufficientPayment) -> None:
        super().__init__(
            f"Payment of {outcome.minimum_payment} cents does not cover "
            f"{outcome.interest_due} cents of interest on debt {outcome.debt_id!r}"
        )
        self.outcome = outcome
