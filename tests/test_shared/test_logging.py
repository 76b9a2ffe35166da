"""Tests for src.shared.logging."""

from __future__ import annotations

import json
import logging
import sys

from src.shared.logging import JSONFormatter, run_id_var, setup_logging, start_run


def _record(msg: str = "hello %s", args=("world",), exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="src.test_suite.generator",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


class TestJSONFormatter:
    def test_fields(self):
        token = run_id_var.set("run-123")
        try:
            entry = json.loads(JSONFormatter(service_name="testplan").format(_record()))
        finally:
            run_id_var.reset(token)
        assert entry["level"] == "INFO"
        assert entry["service_name"] == "testplan"
        assert entry["run_id"] == "run-123"
        assert entry["logger"] == "src.test_suite.generator"
        assert entry["message"] == "hello world"
        assert "timestamp" in entry
        assert "exception" not in entry

    def test_exception(self):
        try:
            raise ValueError("bad data")
        except ValueError:
            record = _record("failed", (), sys.exc_info())
        entry = json.loads(JSONFormatter().format(record))
        assert entry["exception"] == "bad data"
        assert entry["service_name"] == "unknown"


class TestSetupLogging:
    def test_configures_service_and_package_loggers(self):
        logger = setup_logging("testplan", "debug")
        assert logger.name == "testplan"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        package_logger = logging.getLogger("src")
        assert package_logger.level == logging.DEBUG
        assert package_logger.handlers == logger.handlers
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_repeat_calls_do_not_stack_handlers(self):
        setup_logging("testplan")
        logger = setup_logging("testplan")
        assert len(logger.handlers) == 1

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging("testplan", "chatty").level == logging.INFO


class TestStartRun:
    def test_sets_run_id(self):
        run_id = start_run()
        assert run_id
        assert run_id_var.get() == run_id
        assert start_run() != run_id
