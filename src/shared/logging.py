"""Structured JSON logging with run_id support."""
from __future__ import annotations

import contextvars
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

# Context variable for the id of the current CLI invocation
run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "run_id", default=""
)


class JSONFormatter(logging.Formatter):
    """Custom JSON log formatter."""

    def __init__(self, service_name: str = "unknown") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service_name": self.service_name,
            "run_id": run_id_var.get(""),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


def setup_logging(service_name: str, level: str = "INFO") -> logging.Logger:
    """Configure structured JSON logging for the tooling.

    Module loggers under ``src`` propagate to the handler installed here.

    Args:
        service_name: Name of the tool for log entries.
        level: Log level string (e.g. "INFO", "DEBUG").

    Returns:
        Configured logger instance.
    """
    resolved = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(service_name)
    logger.setLevel(resolved)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter(service_name=service_name))
    logger.addHandler(handler)

    package_logger = logging.getLogger("src")
    package_logger.setLevel(resolved)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)

    return logger


def start_run() -> str:
    """Assign a fresh run_id to the current context and return it."""
    run_id = str(uuid.uuid4())
    run_id_var.set(run_id)
    return run_id
