"""Logging setup for the planner: human console output plus JSON-lines files.

Planner modules log through ``logging.getLogger(__name__)`` and attach their
context with ``extra=``. The fields in :data:`PLAN_FIELDS` are lifted to the
top level of each JSON line so log files can be filtered by debt, strategy or
outcome without digging into nested objects.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import BaseConfig

ROOT_LOGGER = "debtsage"

PLAN_FIELDS = (
    "debt_id",
    "debt_ids",
    "strategy",
    "state",
    "periods",
    "budget_cents",
    "interest_cents",
    "savings_cents",
    "row_count",
)

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (tuple, set, frozenset)):
        return [_plain(item) for item in value]
    return value


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with planner context at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        extra: dict[str, Any] = {}
        for key, value in vars(record).items():
            if key in _RECORD_ATTRS:
                continue
            if key in PLAN_FIELDS:
                entry[key] = _plain(value)
            else:
                extra[key] = _plain(value)
        if extra:
            entry["extra"] = extra

        if record.exc_info and record.exc_info[0] is not None:
            entry["error"] = {
                "type": record.exc_info[0].__name__,
                "detail": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


def _console_handler(config: BaseConfig) -> logging.Handler:
    handler = logging.StreamHandler()
    if config.DEV_MODE:
        handler.setLevel(config.LOG_LEVEL)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", "%H:%M:%S")
        )
    else:
        handler.setLevel(max(config.LOG_LEVEL, logging.WARNING))
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    return handler


def _file_handler(config: BaseConfig) -> logging.Handler:
    logs_dir = Path(config.DATA_DIR) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        filename=logs_dir / config.LOG_FILENAME,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(config.LOG_LEVEL)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(config: BaseConfig) -> logging.Logger:
    """Attach console and JSON file handlers to the ``debtsage`` logger.

    Safe to call more than once; earlier handlers are closed and replaced.

    Args:
        config: Supplies DATA_DIR, DEV_MODE, LOG_LEVEL and LOG_FILENAME

    Returns:
        The configured ``debtsage`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(config.LOG_LEVEL)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = _file_handler(config)
    logger.addHandler(_console_handler(config))
    logger.addHandler(file_handler)

    logger.info(
        "Logging initialized",
        extra={"log_file": file_handler.baseFilename, "dev_mode": config.DEV_MODE},
    )
    return logger
