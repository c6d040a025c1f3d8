"""CSV ingestion of debt lists."""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path

import pandas as pd

from ..errors import InvalidInput
from ..models.debt import Debt, validate_debts

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("id", "balance", "apr", "minimum_payment")


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing.

    Every cell is read as text so money never passes through float parsing.
    """

    try:
        frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as exc:
        raise InvalidInput(f"Debt CSV {file_path} is empty") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise InvalidInput(f"Debt CSV {file_path} could not be parsed: {exc}") from exc
    frame.columns = [str(c).strip().lower() for c in frame.columns]
    return frame


def _apr_fraction(raw: str) -> Decimal:
    """Accept ``0.1899``, ``18.99`` or ``18.99%`` and return the fraction.

    A bare value up to and including 1 is already a fraction, so ``1`` means
    100% and ``0.5`` means 50%. Anything above 1 is a percentage: ``1.5`` is
    1.5%. Write ``1%`` for one percent.
    """

    text = raw.strip()
    percent = text.endswith("%")
    value = Decimal(text.rstrip("%").strip())
    if percent or value > 1:
        return value / 100
    return value


def debts_from_frame(frame: pd.DataFrame) -> list[Debt]:
    """Convert a normalized frame into validated ``Debt`` objects."""

    missing = [col for col in REQUIRED_COLUMNS if col not in frame.columns]
    if missing:
        raise InvalidInput(f"Debt CSV is missing columns: {', '.join(missing)}")

    debts: list[Debt] = []
    for row_num, row in enumerate(frame.to_dict(orient="records"), start=2):
        try:
            term = str(row.get("term_months", "") or "").strip()
            debts.append(
                Debt(
                    id=str(row["id"]).strip(),
                    name=str(row.get("name", "") or "").strip(),
                    principal_balance=Decimal(str(row["balance"]).replace(",", "").strip()),
                    apr=_apr_fraction(str(row["apr"])),
                    minimum_payment=Decimal(str(row["minimum_payment"]).replace(",", "").strip()),
                    term_months=int(term) if term else None,
                )
            )
        except InvalidInput as exc:
            raise InvalidInput(f"Row {row_num}: {exc}") from exc
        except (ArithmeticError, ValueError) as exc:
            raise InvalidInput(f"Row {row_num}: could not parse debt ({exc})") from exc

    logger.info("Loaded %d debts from CSV", len(debts), extra={"row_count": len(frame)})
    return validate_debts(debts)


def load_debts_csv(path: Path, *, encoding: str = "utf-8") -> list[Debt]:
    """Read a debt list from ``path``."""

    return debts_from_frame(normalize_frame(file_path=Path(path), encoding=encoding))
