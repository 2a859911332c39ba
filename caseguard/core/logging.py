"""
Structured JSON logging configuration.

Every module gets its logger via ``logging.getLogger(__name__)``; this module
only wires handlers and formatting for the root logger.
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from caseguard.core.config import settings


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter that stamps service/environment on every record."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()

        if log_record.get("level"):
            log_record["level"] = log_record["level"].upper()
        else:
            log_record["level"] = record.levelname

        log_record["service"] = settings.app_name
        log_record["environment"] = settings.env
        log_record["logger"] = record.name


def setup_logging(level: str | None = None, json_format: bool | None = None) -> None:
    """
    Configure application logging.

    Args:
        level: Log level name; defaults to ``settings.log_level``.
        json_format: JSON output (default from ``settings.log_json``);
            plain text is friendlier for local runs.
    """
    log_level = (level or settings.log_level or "INFO").upper()
    use_json = settings.log_json if json_format is None else json_format

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if use_json:
        formatter: logging.Formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)

    root_logger.info(
        "Logging configured",
        extra={"log_level": log_level, "json_format": use_json, "environment": settings.env},
    )


def log_event(logger: logging.Logger, event: str, level: str = "INFO", **context: Any) -> None:
    """Log a named event with structured context fields."""
    log_method = getattr(logger, level.lower(), logger.info)
    log_method(event, extra={"event": event, **context})
