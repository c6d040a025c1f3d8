"""CSV export helpers for repayment schedules."""

from __future__ import annotations

import csv
from pathlib import Path

from ..models.schedule import RepaymentSchedule
from ..money import from_cents

HEADERS = [
    "period_index",
    "debt_id",
    "payment_amount",
    "interest_portion",
    "principal_portion",
    "ending_balance",
]


def export_schedule_csv(*, schedule: RepaymentSchedule, output_path: Path) -> Path:
    """Write ``schedule`` rows to CSV at ``output_path``.

    Columns are deterministic (see ``HEADERS``); money is written in currency
    units with two decimals. Returns the path written.
    """

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for period in schedule.periods:
            writer.writerow(
                {
                    "period_index": period.period_index,
                    "debt_id": period.debt_id,
                    "payment_amount": from_cents(period.payment_amount),
                    "interest_portion": from_cents(period.interest_portion),
                    "principal_portion": from_cents(period.principal_portion),
                    "ending_balance": from_cents(period.ending_balance),
                }
            )

    return output_path
