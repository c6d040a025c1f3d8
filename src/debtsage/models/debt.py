"""Debt inputs and payoff strategies."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Optional

from ..errors import InvalidInput
from ..money import CENT, MoneyInput, as_decimal, to_cents


class Strategy(str, Enum):
    """Closed set of payoff strategies understood by the simulator."""

    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"
    HYBRID = "hybrid"

    @classmethod
    def parse(cls, name: str) -> "Strategy":
        """Map an upstream strategy name onto the enum, rejecting unknown values."""

        if isinstance(name, cls):
            return name
        key = str(name or "").strip().lower()
        for member in cls:
            if member.value == key:
                return member
        raise InvalidInput(f"Invalid debt payoff strategy: {name!r}")


@dataclass(slots=True, frozen=True)
class HybridWeights:
    """Weights for the hybrid score: APR priority versus small-balance priority."""

    apr_weight: Decimal = Decimal("0.6")
    balance_weight: Decimal = Decimal("0.4")

    def __post_init__(self) -> None:
        apr_weight = _coerce(self.apr_weight, "apr_weight")
        balance_weight = _coerce(self.balance_weight, "balance_weight")
        if apr_weight < 0 or balance_weight < 0:
            raise InvalidInput("Hybrid weights must be non-negative")
        if apr_weight == 0 and balance_weight == 0:
            raise InvalidInput("Hybrid weights cannot both be zero")
        object.__setattr__(self, "apr_weight", apr_weight)
        object.__setattr__(self, "balance_weight", balance_weight)


@dataclass(slots=True, frozen=True)
class Debt:
    """One liability handed to the planner.

    Money fields are normalized to two-place Decimals on construction so the
    engine can convert them to integer cents without loss. ``apr`` is a
    fraction (``Decimal("0.1899")`` for 18.99%).
    """

    id: str
    principal_balance: Decimal
    apr: Decimal
    minimum_payment: Decimal
    term_months: Optional[int] = None
    name: str = ""

    def __post_init__(self) -> None:
        if self.id is None or str(self.id).strip() == "":
            raise InvalidInput("Debt id is required")
        object.__setattr__(self, "id", str(self.id))

        balance = _money(self.principal_balance, "principal_balance")
        apr = _coerce(self.apr, "apr")
        minimum = _money(self.minimum_payment, "minimum_payment")
        if balance < 0:
            raise InvalidInput(f"Debt {self.id!r} has a negative balance")
        if apr < 0:
            raise InvalidInput(f"Debt {self.id!r} has a negative APR")
        if minimum < 0:
            raise InvalidInput(f"Debt {self.id!r} has a negative minimum payment")
        term = _term(self.term_months, self.id)

        object.__setattr__(self, "principal_balance", balance)
        object.__setattr__(self, "apr", apr)
        object.__setattr__(self, "minimum_payment", minimum)
        object.__setattr__(self, "term_months", term)

    @property
    def balance_cents(self) -> int:
        return to_cents(self.principal_balance)

    @property
    def minimum_cents(self) -> int:
        return to_cents(self.minimum_payment)

    @property
    def label(self) -> str:
        return self.name or self.id

    def with_terms(
        self,
        *,
        apr: MoneyInput | None = None,
        minimum_payment: MoneyInput | None = None,
        term_months: int | None = None,
    ) -> "Debt":
        """Return a copy with replaced loan terms; the original is untouched."""

        changes: dict = {}
        if apr is not None:
            changes["apr"] = apr
        if minimum_payment is not None:
            changes["minimum_payment"] = minimum_payment
        if term_months is not None:
            changes["term_months"] = term_months
        return replace(self, **changes)


def validate_debts(debts: Iterable[Debt]) -> list[Debt]:
    """Materialize the debt list and reject empty input or duplicate ids."""

    items = list(debts)
    if not items:
        raise InvalidInput("At least one debt is required")
    seen: set[str] = set()
    for debt in items:
        if not isinstance(debt, Debt):
            raise InvalidInput(f"Expected Debt, got {type(debt).__name__}")
        if debt.id in seen:
            raise InvalidInput(f"Duplicate debt id: {debt.id!r}")
        seen.add(debt.id)
    return items


def _coerce(value: MoneyInput, field_name: str) -> Decimal:
    try:
        result = as_decimal(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"{field_name} must be numeric, got {value!r}") from exc
    if not result.is_finite():
        raise InvalidInput(f"{field_name} must be finite, got {value!r}")
    return result


def _money(value: MoneyInput, field_name: str) -> Decimal:
    """Coerce to a two-place amount using the same half-up rule as ``to_cents``."""

    amount = _coerce(value, field_name)
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except ArithmeticError as exc:
        raise InvalidInput(f"{field_name} is out of range: {value!r}") from exc


def _term(value, debt_id: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidInput(f"Debt {debt_id!r} term must be a whole number of months")
    try:
        term = value if isinstance(value, int) else int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidInput(
            f"Debt {debt_id!r} term must be a whole number of months, got {value!r}"
        ) from exc
    if term <= 0:
        raise InvalidInput(f"Debt {debt_id!r} has a non-positive term")
    return term
