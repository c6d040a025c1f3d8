"""Pytest configuration and shared fixtures for debtsage tests.

Provides debt factories, a seeded random debt generator for property tests,
and cent-exact assertion helpers for schedules.
"""

from __future__ import annotations

import logging
import random
from collections import defaultdict
from decimal import Decimal

import pytest

from debtsage.models import Debt, RepaymentSchedule
from debtsage.money import from_cents
from debtsage.services.amortization import monthly_interest


@pytest.fixture(autouse=True)
def _reset_debtsage_logger():
    """Drop handlers installed by setup_logging so tests don't share streams."""
    yield
    logger = logging.getLogger("debtsage")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def debt_factory():
    """Factory for building Debt inputs with sensible defaults.

    Returns:
        Callable: Function that creates Debt instances
    """

    def _create_debt(
        id: str = "debt-1",
        balance: str | Decimal = "1000.00",
        apr: str | Decimal = "0.18",
        minimum_payment: str | Decimal = "50.00",
        term_months: int | None = None,
        name: str = "",
    ) -> Debt:
        return Debt(
            id=id,
            principal_balance=Decimal(balance),
            apr=Decimal(apr),
            minimum_payment=Decimal(minimum_payment),
            term_months=term_months,
            name=name,
        )

    return _create_debt


@pytest.fixture
def two_cards(debt_factory):
    """Card A: $2,000 at 24% ($50 min); Card B: $5,000 at 12% ($100 min)."""
    return [
        debt_factory(id="A", balance="2000", apr="0.24", minimum_payment="50", name="Card A"),
        debt_factory(id="B", balance="5000", apr="0.12", minimum_payment="100", name="Card B"),
    ]


def random_debts(rng: random.Random, *, count: int | None = None) -> list[Debt]:
    """Generate an amortizing debt set with distinct APRs.

    Minimums always exceed first-month interest by 1-3% of the balance so
    every debt makes progress on its own.
    """
    count = count or rng.randint(2, 5)
    aprs = rng.sample(range(3, 33, 3), count)
    debts = []
    for index, apr_pct in enumerate(aprs):
        apr = Decimal(apr_pct) / 100
        balance = rng.randint(50_000, 2_000_000)  # cents
        interest = monthly_interest(balance, apr)
        minimum = interest + balance * rng.randint(1, 3) // 100 + rng.randint(0, 999)
        debts.append(
            Debt(
                id=f"debt-{index:02d}",
                principal_balance=from_cents(balance),
                apr=apr,
                minimum_payment=from_cents(minimum),
            )
        )
    rng.shuffle(debts)
    return debts


def random_budget(rng: random.Random) -> Decimal:
    return from_cents(rng.randint(20_000, 80_000))


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_conserved(schedule: RepaymentSchedule) -> None:
    """Every row splits its payment exactly into interest and principal."""
    for period in schedule.periods:
        assert period.interest_portion + period.principal_portion == period.payment_amount, period
        assert period.interest_portion >= 0
        assert period.principal_portion >= 0


def assert_monotonic(schedule: RepaymentSchedule) -> None:
    """Each debt's ending balance never increases from one period to the next."""
    last: dict[str, int] = {}
    for period in schedule.periods:
        previous = last.get(period.debt_id, schedule.debt(period.debt_id).balance_cents)
        assert period.ending_balance <= previous, period
        last[period.debt_id] = period.ending_balance


def outflow_by_period(schedule: RepaymentSchedule) -> list[int]:
    """Total cents paid across all debts, indexed by period."""
    totals: dict[int, int] = defaultdict(int)
    for period in schedule.periods:
        totals[period.period_index] += period.payment_amount
    return [totals[i] for i in range(schedule.period_count)]
