"""debtsage: debt repayment planning engine.

The planner entry points are re-exported here; everything they accept
and return lives in :mod:`debtsage.models`.
"""

from __future__ import annotations

from .errors import (
    DivisionByZero,
    InsufficientPayment,
    InvalidInput,
    PlanningError,
    Stalled,
)
from .models import (
    Debt,
    DebtPayoff,
    HybridWeights,
    PlanSummary,
    RepaymentPeriod,
    RepaymentSchedule,
    SimulationState,
    Strategy,
)
from .services.consolidation import ConsolidationOffer, ConsolidationResult, compare_consolidation
from .services.income import debt_to_income_ratio
from .services.ordering import order_strategy
from .services.refinancing import InterestSavingsResult, RefinanceOffer, compare_refinancing
from .services.simulation import simulate
from .services.summary import summarize

__all__ = [
    "ConsolidationOffer",
    "ConsolidationResult",
    "Debt",
    "DebtPayoff",
    "DivisionByZero",
    "HybridWeights",
    "InsufficientPayment",
    "InterestSavingsResult",
    "InvalidInput",
    "PlanSummary",
    "PlanningError",
    "RefinanceOffer",
    "RepaymentPeriod",
    "RepaymentSchedule",
    "SimulationState",
    "Stalled",
    "Strategy",
    "compare_consolidation",
    "compare_refinancing",
    "debt_to_income_ratio",
    "order_strategy",
    "simulate",
    "summarize",
]
