"""Refinancing what-if comparison."""

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
class RefinanceOffer:
    """Alternative terms for one debt.

    ``term_months`` of ``None`` keeps the current minimum payment; a term
    re-amortizes the balance over that many months at the offered APR.
    """

    debt_id: str
    apr: Decimal
    term_months: Optional[int] = None
    closing_costs: Decimal = Decimal("0")


@dataclass(slots=True, frozen=True)
class InterestSavingsResult:
    """Baseline versus alternative outcome. Money fields are integer cents."""

    debt_id: str
    baseline_total_interest: int
    alternative_total_interest: int
    savings: int
    baseline_months: Optional[int]
    alternative_months: Optional[int]
    closing_costs: int
    net_savings: int
    monthly_payment_change: int
    break_even_months: Optional[int]
    baseline: RepaymentSchedule
    alternative: RepaymentSchedule

    @property
    def months_saved(self) -> Optional[int]:
        if self.baseline_months is None or self.alternative_months is None:
            return None
        return self.baseline_months - self.alternative_months

    def as_dict(self) -> dict:
        return {
            "debt_id": self.debt_id,
            "baseline_total_interest": str(from_cents(self.baseline_total_interest)),
            "alternative_total_interest": str(from_cents(self.alternative_total_interest)),
            "savings": str(from_cents(self.savings)),
            "baseline_months": self.baseline_months,
            "alternative_months": self.alternative_months,
            "closing_costs": str(from_cents(self.closing_costs)),
            "net_savings": str(from_cents(self.net_savings)),
            "monthly_payment_change": str(from_cents(self.monthly_payment_change)),
            "break_even_months": self.break_even_months,
        }


def _refinanced(debt: Debt, offer: RefinanceOffer) -> Debt:
    try:
        apr = as_decimal(offer.apr)
        closing = as_decimal(offer.closing_costs)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Refinance offer terms must be numeric: {offer!r}") from exc
    if not apr.is_finite() or apr < 0:
        raise InvalidInput("Refinance APR must be a non-negative number")
    if not closing.is_finite() or closing < 0:
        raise InvalidInput("Closing costs cannot be negative")
    if offer.term_months is None:
        return debt.with_terms(apr=apr)
    if int(offer.term_months) <= 0:
        raise InvalidInput("Refinance term must be a positive number of months")

    payment = amortizing_payment(debt.balance_cents, apr, int(offer.term_months))
    return debt.with_terms(
        apr=apr,
        minimum_payment=from_cents(payment),
        term_months=int(offer.term_months),
    )


def compare_refinancing(
    debts: Iterable[Debt],
    strategy: Strategy | str,
    discretionary_budget: MoneyInput,
    alternative: RefinanceOffer,
    *,
    weights: HybridWeights | None = None,
    max_periods: int = DEFAULT_SAFETY_HORIZON,
) -> InterestSavingsResult:
    """Simulate current terms and a refinancing offer side by side.

    Only the targeted debt changes; the other debts, the strategy and the
    budget are held fixed. ``savings`` is baseline minus alternative and is
    negative when the offer is worse.
    """

    items = validate_debts(debts)
    index = next((i for i, d in enumerate(items) if d.id == str(alternative.debt_id)), None)
    if index is None:
        raise InvalidInput(f"Refinance target {alternative.debt_id!r} is not among the debts")

    current = items[index]
    replacement = _refinanced(current, alternative)
    alternative_debts = list(items)
    alternative_debts[index] = replacement

    baseline = simulate(
        items, strategy, discretionary_budget, weights=weights, max_periods=max_periods
    )
    scenario = simulate(
        alternative_debts, strategy, discretionary_budget, weights=weights, max_periods=max_periods
    )

    closing_costs = to_cents(alternative.closing_costs)
    savings = baseline.total_interest_paid - scenario.total_interest_paid
    payment_change = current.minimum_cents - replacement.minimum_cents
    break_even = None
    if closing_costs > 0 and payment_change > 0:
        break_even = -(-closing_costs // payment_change)

    logger.info(
        "Refinance comparison for %s: savings=%s cents (baseline %s, alternative %s)",
        current.id,
        savings,
        baseline.total_interest_paid,
        scenario.total_interest_paid,
        extra={"debt_id": current.id, "strategy": baseline.strategy, "savings_cents": savings},
    )
    return InterestSavingsResult(
        debt_id=current.id,
        baseline_total_interest=baseline.total_interest_paid,
        alternative_total_interest=scenario.total_interest_paid,
        savings=savings,
        baseline_months=baseline.months_to_payoff,
        alternative_months=scenario.months_to_payoff,
        closing_costs=closing_costs,
        net_savings=savings - closing_costs,
        monthly_payment_change=payment_change,
        break_even_months=break_even,
        baseline=baseline,
        alternative=scenario,
    )
