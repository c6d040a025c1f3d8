"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from decimal import Decimal

import pytest

from debtsage import SimulationState, Strategy, simulate
from debtsage.config import BaseConfig
from debtsage.logging_config import JSONFormatter, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    record = logging.LogRecord(
        name="debtsage.test",
        level=kwargs.pop("level", logging.INFO),
        pathname="test.py",
        lineno=42,
        msg=kwargs.pop("msg", "Test message"),
        args=(),
        exc_info=kwargs.pop("exc_info", None),
    )
    record.module = "test_module"
    record.funcName = "test_function"
    for key, value in kwargs.items():
        setattr(record, key, value)
    return record


def _flush(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        handler.flush()


def _json_lines(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("DEBTSAGE_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("DEBTSAGE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("DEBTSAGE_DEV_MODE", raising=False)
    return BaseConfig()


def test_json_formatter():
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "debtsage.test"
    assert log_data["message"] == "Test message"
    assert log_data["location"] == "test_module.test_function:42"
    assert "timestamp" in log_data
    assert "extra" not in log_data
    assert "error" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(
        JSONFormatter().format(_record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info))
    )

    assert log_data["error"]["type"] == "ValueError"
    assert log_data["error"]["detail"] == "Test error"
    assert "Traceback" in log_data["error"]["traceback"]


def test_plan_fields_are_top_level_and_plain():
    record = _record(
        debt_id="visa",
        strategy=Strategy.SNOWBALL,
        state=SimulationState.STALLED,
        interest_cents=1234,
        debt_ids=("a", "b"),
    )
    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["debt_id"] == "visa"
    assert log_data["strategy"] == "snowball"
    assert log_data["state"] == "stalled"
    assert log_data["interest_cents"] == 1234
    assert log_data["debt_ids"] == ["a", "b"]
    assert "extra" not in log_data


def test_other_extra_fields_are_nested():
    log_data = json.loads(JSONFormatter().format(_record(rate=Decimal("0.0125"))))

    assert log_data["extra"] == {"rate": "0.0125"}


def test_setup_logging(config, tmp_path):
    """Logging setup creates a JSON log file under DATA_DIR/logs."""
    logger = setup_logging(config)

    assert logger.name == "debtsage"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "debtsage.log"
    logger.warning("Test warning message")
    _flush(logger)

    entries = _json_lines(log_file)
    assert [e["message"] for e in entries] == ["Logging initialized", "Test warning message"]
    assert entries[0]["extra"]["log_file"] == str(config.DATA_DIR / "logs" / "debtsage.log")


def test_setup_logging_is_idempotent(config):
    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


@pytest.mark.parametrize(
    "dev_mode,level,expected",
    [
        ("true", "INFO", logging.INFO),
        ("true", "DEBUG", logging.DEBUG),
        ("false", "INFO", logging.WARNING),
        ("false", "ERROR", logging.ERROR),
    ],
)
def test_console_level_follows_mode_and_level(tmp_path, monkeypatch, dev_mode, level, expected):
    monkeypatch.setenv("DEBTSAGE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DEBTSAGE_DEV_MODE", dev_mode)
    monkeypatch.setenv("DEBTSAGE_LOG_LEVEL", level)

    logger = setup_logging(BaseConfig())

    console_handler = next(
        handler
        for handler in logger.handlers
        if not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    assert console_handler.level == expected


def test_simulation_outcome_reaches_log_file(config, tmp_path, two_cards):
    logger = setup_logging(config)

    simulate(two_cards, Strategy.AVALANCHE, Decimal("200"))
    _flush(logger)

    (finished,) = [
        e for e in _json_lines(tmp_path / "logs" / "debtsage.log")
        if e["logger"] == "debtsage.services.simulation"
    ]
    assert finished["strategy"] == "avalanche"
    assert finished["state"] == "complete"
    assert finished["budget_cents"] == 20_000
    assert finished["periods"] > 0


def test_blocked_debt_logs_warning_with_debt_id(caplog, debt_factory):
    debt = debt_factory(id="upside-down", balance="100000", apr="0.24", minimum_payment="100")
    with caplog.at_level(logging.WARNING, logger="debtsage"):
        simulate([debt], Strategy.SNOWBALL, Decimal("0"))

    (warning,) = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert "non-amortizing" in warning.getMessage()
    assert warning.debt_id == "upside-down"
