"""Simulation output records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from ..errors import InsufficientPayment, Stalled
from ..money import from_cents
from .debt import Debt, Strategy


class SimulationState(str, Enum):
    """Lifecycle of a single simulation run."""

    RUNNING = "running"
    COMPLETE = "complete"
    STALLED = "stalled"
    BLOCKED = "blocked"


@dataclass(slots=True, frozen=True)
class RepaymentPeriod:
    """One simulated month for one debt. Amounts are integer cents."""

    debt_id: str
    period_index: int
    payment_amount: int
    interest_portion: int
    principal_portion: int
    ending_balance: int

    @property
    def payment(self) -> Decimal:
        return from_cents(self.payment_amount)

    @property
    def interest(self) -> Decimal:
        return from_cents(self.interest_portion)

    @property
    def principal(self) -> Decimal:
        return from_cents(self.principal_portion)

    @property
    def balance(self) -> Decimal:
        return from_cents(self.ending_balance)


@dataclass(slots=True, frozen=True)
class RepaymentSchedule:
    """Complete, immutable result of one simulation run."""

    strategy: Strategy
    debts: tuple[Debt, ...]
    order: tuple[str, ...]
    discretionary_budget: int
    periods: tuple[RepaymentPeriod, ...]
    status: SimulationState
    total_interest_paid: int
    total_paid: int
    months_to_payoff: Optional[int]
    payoff_order: tuple[str, ...]
    insufficient_payments: tuple[InsufficientPayment, ...] = ()
    stalled: Optional[Stalled] = None

    @property
    def period_count(self) -> int:
        """Number of months simulated."""

        if not self.periods:
            return 0
        return self.periods[-1].period_index + 1

    @property
    def is_complete(self) -> bool:
        return self.status is SimulationState.COMPLETE

    def periods_for(self, debt_id: str) -> list[RepaymentPeriod]:
        """Return the rows for a single debt in period order."""

        return [p for p in self.periods if p.debt_id == debt_id]

    def debt(self, debt_id: str) -> Debt:
        for item in self.debts:
            if item.id == debt_id:
                return item
        raise KeyError(debt_id)


@dataclass(slots=True, frozen=True)
class DebtPayoff:
    """Per-debt line of a plan summary."""

    debt_id: str
    name: str
    payoff_period: int
    payoff_date: date
    interest_paid: int
    total_paid: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "debt_id": self.debt_id,
            "name": self.name,
            "payoff_period": self.payoff_period,
            "payoff_date": self.payoff_date.isoformat(),
            "interest_paid": str(from_cents(self.interest_paid)),
            "total_paid": str(from_cents(self.total_paid)),
        }


@dataclass(slots=True, frozen=True)
class PlanSummary:
    """Caller-facing digest of a repayment schedule."""

    strategy: Strategy
    status: SimulationState
    months_to_debt_free: Optional[int]
    debt_free_date: Optional[date]
    total_interest_paid: int
    total_paid: int
    payoffs: tuple[DebtPayoff, ...] = field(default_factory=tuple)
    unpaid_debt_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def payoff_order(self) -> list[str]:
        return [p.debt_id for p in self.payoffs]

    def as_dict(self) -> dict[str, Any]:
        """JSON-friendly view; money rendered as decimal strings."""

        return {
            "strategy": self.strategy.value,
            "status": self.status.value,
            "months_to_debt_free": self.months_to_debt_free,
            "debt_free_date": self.debt_free_date.isoformat() if self.debt_free_date else None,
            "total_interest_paid": str(from_cents(self.total_interest_paid)),
            "total_paid": str(from_cents(self.total_paid)),
            "payoffs": [p.as_dict() for p in self.payoffs],
            "unpaid_debt_ids": list(self.unpaid_debt_ids),
        }
