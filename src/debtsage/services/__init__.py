"""Service module exports."""

from . import (
    amortization,
    consolidation,
    export_csv,
    import_csv,
    income,
    ordering,
    refinancing,
    simulation,
    summary,
)

__all__ = [
    "amortization",
    "consolidation",
    "export_csv",
    "import_csv",
    "income",
    "ordering",
    "refinancing",
    "simulation",
    "summary",
]
