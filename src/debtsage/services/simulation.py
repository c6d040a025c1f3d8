"""Month-by-month debt repayment simulation.

Each period every outstanding debt receives its minimum payment, then the
surplus pool (discretionary budget plus minimums freed by debts paid off in
earlier periods) is poured into debts in strategy order. A debt that is paid
off releases its minimum into the pool starting the following period.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..errors import InsufficientPayment, InvalidInput, Stalled
from ..models.debt import Debt, HybridWeights, Strategy, validate_debts
from ..models.schedule import RepaymentPeriod, RepaymentSchedule, SimulationState
from ..money import MoneyInput, to_cents
from .amortization import apply_period, monthly_interest
from .ordering import order_strategy

logger = logging.getLogger(__name__)

DEFAULT_SAFETY_HORIZON = 600  # 50 years of monthly periods


class RepaymentSimulator:
    """Single-use state machine that drives one simulation run."""

    def __init__(
        self,
        debts: list[Debt],
        strategy: Strategy,
        budget: int,
        *,
        weights: HybridWeights | None = None,
        max_periods: int = DEFAULT_SAFETY_HORIZON,
    ) -> None:
        self.debts = {d.id: d for d in debts}
        self.inputs = tuple(debts)
        self.strategy = strategy
        self.budget = budget
        self.max_periods = max_periods
        self.order = tuple(order_strategy(debts, strategy, weights))
        self.state = SimulationState.RUNNING

        self.balances = {debt_id: self.debts[debt_id].balance_cents for debt_id in self.order}
        self.blocked: list[InsufficientPayment] = []
        self.periods: list[RepaymentPeriod] = []
        self.payoff_order: list[str] = []
        self.rollover = 0
        self.period_index = 0
        self.total_interest = 0
        self.total_paid = 0

    def _screen_minimums(self) -> list[str]:
        """Flag debts whose minimum cannot cover interest; return the rest in order."""

        active: list[str] = []
        for debt_id in self.order:
            debt = self.debts[debt_id]
            interest = monthly_interest(self.balances[debt_id], debt.apr)
            if debt.minimum_cents < interest:
                outcome = InsufficientPayment(
                    debt_id=debt_id, interest_due=interest, minimum_payment=debt.minimum_cents
                )
                self.blocked.append(outcome)
                logger.warning(
                    "Debt %s is non-amortizing: minimum %s < interest %s",
                    debt_id,
                    debt.minimum_cents,
                    interest,
                    extra={"debt_id": debt_id, "strategy": self.strategy},
                )
                continue
            active.append(debt_id)
        return active

    def _step(self, outstanding: list[str]) -> None:
        payoff_amounts: dict[str, int] = {}
        offered: dict[str, int] = {}
        surplus = self.rollover + self.budget

        # (1) minimums; any part of a minimum the debt no longer needs is freed now
        for debt_id in outstanding:
            debt = self.debts[debt_id]
            balance = self.balances[debt_id]
            payoff_amounts[debt_id] = balance + monthly_interest(balance, debt.apr)
            minimum = min(debt.minimum_cents, payoff_amounts[debt_id])
            offered[debt_id] = minimum
            surplus += debt.minimum_cents - minimum

        # (2) surplus walks the strategy order
        for debt_id in outstanding:
            if surplus <= 0:
                break
            extra = min(payoff_amounts[debt_id] - offered[debt_id], surplus)
            offered[debt_id] += extra
            surplus -= extra

        freed = 0
        for debt_id in outstanding:
            debt = self.debts[debt_id]
            result = apply_period(
                self.balances[debt_id], debt.apr, offered[debt_id], debt_id=debt_id
            )
            self.periods.append(
                RepaymentPeriod(
                    debt_id=debt_id,
                    period_index=self.period_index,
                    payment_amount=result.payment,
                    interest_portion=result.interest,
                    principal_portion=result.principal,
                    ending_balance=result.new_balance,
                )
            )
            self.balances[debt_id] = result.new_balance
            self.total_interest += result.interest
            self.total_paid += result.payment
            if result.new_balance == 0:
                self.payoff_order.append(debt_id)
                freed += debt.minimum_cents

        # Rollover only applies from the next period on.
        self.rollover += freed
        self.period_index += 1

    def run(self) -> RepaymentSchedule:
        if self.state is not SimulationState.RUNNING:
            raise RuntimeError("RepaymentSimulator instances are single-use")

        logger.debug(
            "Simulating %d debts with %s strategy, budget=%s cents",
            len(self.order),
            self.strategy.value,
            self.budget,
        )
        active = self._screen_minimums()
        stalled: Stalled | None = None

        while True:
            outstanding = [debt_id for debt_id in active if self.balances[debt_id] > 0]
            if not outstanding:
                break
            if self.period_index >= self.max_periods:
                stalled = Stalled(
                    periods_simulated=self.period_index,
                    remaining_balance=sum(self.balances[debt_id] for debt_id in outstanding),
                )
                break
            self._step(outstanding)

        if self.blocked:
            self.state = SimulationState.BLOCKED
        elif stalled is not None:
            self.state = SimulationState.STALLED
        else:
            self.state = SimulationState.COMPLETE

        months = None if stalled is not None else self.period_index
        logger.info(
            "Simulation finished: state=%s periods=%d interest=%s cents",
            self.state.value,
            self.period_index,
            self.total_interest,
            extra={
                "strategy": self.strategy,
                "state": self.state,
                "periods": self.period_index,
                "budget_cents": self.budget,
                "interest_cents": self.total_interest,
            },
        )
        return RepaymentSchedule(
            strategy=self.strategy,
            debts=self.inputs,
            order=self.order,
            discretionary_budget=self.budget,
            periods=tuple(self.periods),
            status=self.state,
            total_interest_paid=self.total_interest,
            total_paid=self.total_paid,
            months_to_payoff=months,
            payoff_order=tuple(self.payoff_order),
            insufficient_payments=tuple(self.blocked),
            stalled=stalled,
        )


def simulate(
    debts: Iterable[Debt],
    strategy: Strategy | str,
    discretionary_budget: MoneyInput,
    *,
    weights: HybridWeights | None = None,
    max_periods: int = DEFAULT_SAFETY_HORIZON,
) -> RepaymentSchedule:
    """Simulate paying off ``debts`` under ``strategy``.

    ``discretionary_budget`` is the monthly amount available on top of all
    minimum payments. Input problems raise :class:`InvalidInput`; a debt that
    cannot amortize or a budget that never clears the balance is reported on
    the returned schedule instead.
    """

    items = validate_debts(debts)
    strategy = Strategy.parse(strategy)
    try:
        budget = to_cents(discretionary_budget)
    except (TypeError, ValueError, ArithmeticError) as exc:
        raise InvalidInput(f"Discretionary budget must be numeric: {discretionary_budget!r}") from exc
    if budget < 0:
        raise InvalidInput("Discretionary budget cannot be negative")
    if isinstance(max_periods, bool) or not isinstance(max_periods, int) or max_periods <= 0:
        raise InvalidInput("max_periods must be a positive integer")

    return RepaymentSimulator(
        items, strategy, budget, weights=weights, max_periods=max_periods
    ).run()
