"""Debt consolidation what-if comparison.

Several debts are paid off by one new loan. The origination fee is added to
the new loan's balance and its payment is the level annuity payment over the
offered term. Every other debt, the strategy and the budget are held fixed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ..errors import InvalidInput
from ..models.debt import Debt, HybridWeights, Strategy, validate_debts
from ..models.schedule import RepaymentSchedule
from ..money import MoneyInput, as_decimal, from_cents, to_cents
from .amortization import amortizing_payment
from .simulation import DEFAULT_SAFETY_HORIZON, simulate

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ConsolidationOffer:
    """A new loan that replaces ``debt_ids``."""

    debt_ids: tuple[str, ...]
    apr: Decimal
    term_months: int
    origination_fee: Decimal = Decimal("0")
    loan_id: str = "consolidated"
    name: str = "Consolidation loan"


@dataclass(slots=True, frozen=True)
class ConsolidationResult:
    """Current debts versus the consolidated loan. Money fields are integer cents."""

    debt_ids: tuple[str, ...]
    loan: Debt
    baseline_total_interest: int
    alternative_total_interest: int
    interest_saved: int
    baseline_months: Optional[int]
    alternative_months: Optional[int]
    origination_fee: int
    net_savings: int
    monthly_payment_savings: int
    break_even_months: Optional[int]
    baseline: RepaymentSchedule
    alternative: RepaymentSchedule

    def as_dict(self) -> dict:
        return {
            "debt_ids": list(self.debt_ids),
            "loan_balance": str(self.loan.principal_balance),
            "loan_payment": str(self.loan.minimum_payment),
            "baseline_total_interest": str(from_cents(self.baseline_total_interest)),
            "alternative_total_interest": str(from_cents(self.alternative_total_interest)),
            "interest_saved": str(from_cents(self.interest_saved)),
            "baseline_months": self.baseline_months,
            "alternative_months": self.alternative_months,
            "origination_fee": str(from_cents(self.origination_fee)),
            "net_savings": str(from_cents(self.net_savings)),
            "monthly_payment_savings": str(from_cents(self.monthly_payment_savings)),
            "break_even_months": self.break_even_months,
        }


def _offer_terms(offer: ConsolidationOffer) -> tuple[tuple[str, ...], Decimal, int, int]:
    ids = tuple(str(debt_id) for debt_id in offer.debt_ids)
    if len(ids) < 2:
        raise InvalidInput("Consolidation needs at least two debts")
    if len(set(ids)) != len(ids):
        raise InvalidInput(f"Consolidation lists a debt more than once: {list(ids)}")
    try:
        apr = as_decimal(offer.apr)
        fee = as_decimal(offer.origination_fee)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Consolidation terms must be numeric: {offer!r}") from exc
    if not apr.is_finite() or apr < 0:
        raise InvalidInput("Consolidation APR must be a non-negative number")
    if not fee.is_finite() or fee < 0:
        raise InvalidInput("Origination fee cannot be negative")
    term = offer.term_months
    if isinstance(term, bool) or not isinstance(term, int) or term <= 0:
        raise InvalidInput("Consolidation term must be a positive number of months")
    return ids, apr, term, to_cents(fee)


def compare_consolidation(
    debts: Iterable[Debt],
    strategy: Strategy | str,
    discretionary_budget: MoneyInput,
    offer: ConsolidationOffer,
    *,
    weights: HybridWeights | None = None,
    max_periods: int = DEFAULT_SAFETY_HORIZON,
) -> ConsolidationResult:
    """Simulate the current debts and the consolidated alternative side by side.

    The new loan takes the list position of the first consolidated debt.
    ``interest_saved`` excludes the fee; ``net_savings`` subtracts it.
    ``monthly_payment_savings`` is the sum of the replaced minimums minus the
    new loan's payment, and ``break_even_months`` is set only when there is a
    fee and that difference is positive.
    """

    items = validate_debts(debts)
    ids, apr, term, fee = _offer_terms(offer)
    known = {d.id for d in items}
    missing = [debt_id for debt_id in ids if debt_id not in known]
    if missing:
        raise InvalidInput(f"Consolidation targets are not among the debts: {missing}")

    chosen = [d for d in items if d.id in ids]
    balance = sum(d.balance_cents for d in chosen) + fee
    loan = Debt(
        id=offer.loan_id,
        name=offer.name,
        principal_balance=from_cents(balance),
        apr=apr,
        minimum_payment=from_cents(amortizing_payment(balance, apr, term)),
        term_months=term,
    )

    alternative_debts: list[Debt] = []
    for debt in items:
        if debt.id not in ids:
            alternative_debts.append(debt)
        elif debt is chosen[0]:
            alternative_debts.append(loan)

    baseline = simulate(
        items, strategy, discretionary_budget, weights=weights, max_periods=max_periods
    )
    scenario = simulate(
        alternative_debts, strategy, discretionary_budget, weights=weights, max_periods=max_periods
    )

    interest_saved = baseline.total_interest_paid - scenario.total_interest_paid
    payment_savings = sum(d.minimum_cents for d in chosen) - loan.minimum_cents
    break_even = None
    if fee > 0 and payment_savings > 0:
        break_even = -(-fee // payment_savings)

    logger.info(
        "Consolidation of %d debts: interest saved=%s cents, payment change=%s cents",
        len(ids),
        interest_saved,
        payment_savings,
        extra={"debt_ids": ids, "strategy": baseline.strategy, "savings_cents": interest_saved},
    )
    return ConsolidationResult(
        debt_ids=ids,
        loan=loan,
        baseline_total_interest=baseline.total_interest_paid,
        alternative_total_interest=scenario.total_interest_paid,
        interest_saved=interest_saved,
        baseline_months=baseline.months_to_payoff,
        alternative_months=scenario.months_to_payoff,
        origination_fee=fee,
        net_savings=interest_saved - fee,
        monthly_payment_savings=payment_savings,
        break_even_months=break_even,
        baseline=baseline,
        alternative=scenario,
    )
