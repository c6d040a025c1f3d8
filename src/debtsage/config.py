"""Application configuration objects and helpers."""

from __future__ import annotations

import logging
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import load_dotenv

from .models.debt import HybridWeights
from .services.simulation import DEFAULT_SAFETY_HORIZON

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_decimal(name: str, default: str) -> Decimal:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return Decimal(default)
    try:
        return Decimal(value.strip())
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


def _env_log_level(name: str, default: str = "INFO") -> int:
    value = (os.getenv(name) or default).strip().upper()
    level = logging.getLevelName(value)
    if not isinstance(level, int):
        raise ValueError(f"{name} must be a logging level name, got {value!r}")
    return level


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "debtsage"
    LOG_FILENAME = "debtsage.log"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DEBTSAGE_DEV_MODE", default=True)
        self.LOG_LEVEL = _env_log_level("DEBTSAGE_LOG_LEVEL")
        self.SAFETY_HORIZON = _env_int("DEBTSAGE_SAFETY_HORIZON", DEFAULT_SAFETY_HORIZON)
        if self.SAFETY_HORIZON <= 0:
            raise ValueError("DEBTSAGE_SAFETY_HORIZON must be positive.")
        self.HYBRID_APR_WEIGHT = _env_decimal("DEBTSAGE_HYBRID_APR_WEIGHT", "0.6")
        self.HYBRID_BALANCE_WEIGHT = _env_decimal("DEBTSAGE_HYBRID_BALANCE_WEIGHT", "0.4")
        # Fail at startup rather than on the first hybrid plan.
        self.hybrid_weights()

    def _resolve_data_dir(self) -> Path:
        """Return the directory where log files live."""

        data_root = os.getenv("DEBTSAGE_DATA_DIR", "instance")
        return Path(data_root).expanduser().resolve()

    def hybrid_weights(self) -> HybridWeights:
        """Hybrid strategy weights as configured."""

        return HybridWeights(
            apr_weight=self.HYBRID_APR_WEIGHT,
            balance_weight=self.HYBRID_BALANCE_WEIGHT,
        )
