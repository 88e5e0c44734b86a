"""
Structured JSON logging with operation ID propagation.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from .context import get_operation_id, get_operation_name

# LogRecord attributes that are not user-supplied "extra" fields
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "message",
        "taskName",
    }
)


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {
        "timestamp": "2024-01-15T10:30:00.000Z",
        "level": "INFO",
        "logger": "routine_anchor.schedule",
        "message": "Block saved",
        "operation_id": "op-abc123",
        "operation": "add_block",
        "block_id": "...",
        ...
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        operation_id = get_operation_id()
        if operation_id:
            log_obj["operation_id"] = operation_id
        operation = get_operation_name()
        if operation:
            log_obj["operation"] = operation

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_obj[key] = value

        return json.dumps(log_obj, default=str)


class HumanFormatter(logging.Formatter):
    """Human-readable formatter for local development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        operation_id = get_operation_id()
        op_str = f"[{operation_id[:12]}] " if operation_id else ""
        return f"{timestamp} [{record.levelname}] {record.name}: {op_str}{record.getMessage()}"


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format. If None, auto-detect based on environment.
    """
    if json_format is None:
        # JSON when piped (services, CI), human format on a terminal
        json_format = not sys.stderr.isatty()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_format else HumanFormatter())
    root_logger.addHandler(handler)


def configure_from_env() -> None:
    """Configure logging from ROUTINE_ANCHOR_LOG_LEVEL / ROUTINE_ANCHOR_LOG_JSON."""
    from routine_anchor import config

    configure_logging(level=config.LOG_LEVEL, json_format=config.LOG_JSON)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("Refreshed statuses", extra={"changed": 2})
    """
    return logging.getLogger(name)
