"""Strategy ordering for extra payments."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from ..models.debt import Debt, HybridWeights, Strategy, validate_debts


def _avalanche_key(debt: Debt):
    return (-debt.apr, debt.balance_cents, debt.id)


def _snowball_key(debt: Debt):
    return (debt.balance_cents, -debt.apr, debt.id)


def _normalize(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    # Flat dimension: nothing to distinguish, so it contributes nothing.
    if high == low:
        return Decimal(0)
    return (value - low) / (high - low)


def hybrid_scores(debts: list[Debt], weights: HybridWeights | None = None) -> dict[str, Decimal]:
    """Return ``weight_apr * norm(apr) + weight_balance * (1 - norm(balance))`` per debt.

    Both dimensions are min-max normalized across ``debts``.
    """

    weights = weights or HybridWeights()
    if not debts:
        return {}
    aprs = [d.apr for d in debts]
    balances = [Decimal(d.balance_cents) for d in debts]
    apr_lo, apr_hi = min(aprs), max(aprs)
    bal_lo, bal_hi = min(balances), max(balances)

    scores: dict[str, Decimal] = {}
    for debt, balance in zip(debts, balances):
        norm_apr = _normalize(debt.apr, apr_lo, apr_hi)
        norm_balance = _normalize(balance, bal_lo, bal_hi)
        scores[debt.id] = (
            weights.apr_weight * norm_apr + weights.balance_weight * (1 - norm_balance)
        )
    return scores


def order_strategy(
    debts: Iterable[Debt],
    strategy: Strategy,
    weights: HybridWeights | None = None,
) -> list[str]:
    """Return debt ids in the order they should receive surplus payments.

    Only debts with an outstanding balance are ordered. Ties always fall back
    to ascending id so identical input yields identical output.
    """

    items = validate_debts(debts)
    strategy = Strategy.parse(strategy)
    outstanding = [d for d in items if d.balance_cents > 0]

    if strategy is Strategy.AVALANCHE:
        ranked = sorted(outstanding, key=_avalanche_key)
    elif strategy is Strategy.SNOWBALL:
        ranked = sorted(outstanding, key=_snowball_key)
    else:
        scores = hybrid_scores(outstanding, weights)
        ranked = sorted(outstanding, key=lambda d: (-scores[d.id], d.id))
    return [d.id for d in ranked]
