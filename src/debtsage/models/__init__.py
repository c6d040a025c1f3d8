"""Planner value objects."""

from .debt import Debt, HybridWeights, Strategy, validate_debts
from .schedule import (
    DebtPayoff,
    PlanSummary,
    RepaymentPeriod,
    RepaymentSchedule,
    SimulationState,
)

__all__ = [
    "Debt",
    "DebtPayoff",
    "HybridWeights",
    "PlanSummary",
    "RepaymentPeriod",
    "RepaymentSchedule",
    "SimulationState",
    "Strategy",
    "validate_debts",
]
