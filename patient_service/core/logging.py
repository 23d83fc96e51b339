"""Centralized logging configuration.

Logs are JSON objects, one per line, on stdout. Patient data (names, emails,
addresses, dates) must never be passed to a logger; identifiers are fine.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
from datetime import UTC, datetime
from typing import Any

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# `extra` keys copied onto the JSON payload when present on a record.
_EXTRA_FIELDS = (
    "request_id",
    "http_method",
    "request_path",
    "status_code",
    "duration_ms",
    "patient_id",
    "error",
    "fields",
)


class JsonFormatter(logging.Formatter):
    """Emit JSON logs, tolerating records that carry none of the `extra` fields.

    Third-party loggers (uvicorn, sqlalchemy) never set our extras, so a
    `%(request_id)s` style format string would raise KeyError for them.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str | None = None) -> None:
    """Configure application logging (JSON to stdout)."""

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": "patient_service.core.logging.JsonFormatter",
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                }
            },
            "root": {
                "level": (level or LOG_LEVEL).upper(),
                "handlers": ["default"],
            },
        }
    )
