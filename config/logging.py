"""
Logging configuration.

Plain text in development, JSON lines (python-json-logger) when LOG_JSON is set.
"""
from __future__ import annotations

import logging
import logging.config
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from config import settings


class ServiceJsonFormatter(JsonFormatter):
    """JSON formatter that stamps every record with level, logger and environment."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["environment"] = settings.APP_ENV


def build_logging_config(level: str | None = None, as_json: bool | None = None) -> dict[str, Any]:
    level = (level or settings.LOG_LEVEL).upper()
    as_json = settings.LOG_JSON if as_json is None else as_json
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
            "json": {
                "()": ServiceJsonFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json" if as_json else "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "api": {"level": level, "handlers": ["console"], "propagate": False},
            "core": {"level": level, "handlers": ["console"], "propagate": False},
            "db": {"level": level, "handlers": ["console"], "propagate": False},
            "sqlalchemy.engine": {
                "level": "INFO" if settings.DEBUG else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {"level": level, "handlers": ["console"]},
    }


def setup_logging(level: str | None = None, as_json: bool | None = None) -> None:
    """Apply the logging configuration. Safe to call more than once."""
    logging.config.dictConfig(build_logging_config(level, as_json))
