"""Reduce a raw schedule to the caller-facing plan summary."""

from __future__ import annotations

from collections import defaultdict
from datetime import date

from ..models.schedule import DebtPayoff, PlanSummary, RepaymentSchedule, SimulationState


def _add_months(value: date, months: int) -> date:
    """Return the first of the month ``months`` after ``value``."""

    month_index = value.month - 1 + months
    return date(value.year + month_index // 12, month_index % 12 + 1, 1)


def period_date(start: date, period_index: int) -> date:
    """Calendar month (first day) in which ``period_index`` falls."""

    return _add_months(start.replace(day=1), period_index)


def summarize(schedule: RepaymentSchedule, *, start: date | None = None) -> PlanSummary:
    """Condense ``schedule`` into months to debt-free, totals and payoff dates.

    Period 0 is the month containing ``start`` (default: today).
    """

    start = (start or date.today()).replace(day=1)
    interest_by_debt: dict[str, int] = defaultdict(int)
    paid_by_debt: dict[str, int] = defaultdict(int)
    payoff_period: dict[str, int] = {}
    for period in schedule.periods:
        interest_by_debt[period.debt_id] += period.interest_portion
        paid_by_debt[period.debt_id] += period.payment_amount
        if period.ending_balance == 0:
            payoff_period[period.debt_id] = period.period_index

    payoffs = tuple(
        DebtPayoff(
            debt_id=debt_id,
            name=schedule.debt(debt_id).label,
            payoff_period=payoff_period[debt_id],
            payoff_date=period_date(start, payoff_period[debt_id]),
            interest_paid=interest_by_debt[debt_id],
            total_paid=paid_by_debt[debt_id],
        )
        for debt_id in schedule.payoff_order
    )
    unpaid = tuple(
        debt.id
        for debt in schedule.debts
        if debt.balance_cents > 0 and debt.id not in payoff_period
    )

    # Blocked or stalled plans never reach debt-free.
    months = None
    debt_free = None
    if schedule.status is SimulationState.COMPLETE:
        months = schedule.months_to_payoff
        # Debt-free in the month of the final payment.
        debt_free = period_date(start, months - 1) if months else start

    return PlanSummary(
        strategy=schedule.strategy,
        status=schedule.status,
        months_to_debt_free=months,
        debt_free_date=debt_free,
        total_interest_paid=schedule.total_interest_paid,
        total_paid=schedule.total_paid,
        payoffs=payoffs,
        unpaid_debt_ids=unpaid,
    )
