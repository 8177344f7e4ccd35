"""Structured JSON logging with correlation ID support."""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from .correlation import get_correlation_id

SERVICE_NAME = "staycal"

LOG_LEVEL_ENV = "STAYCAL_LOG_LEVEL"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with correlation ID and extra_fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = get_correlation_id()
        if correlation_id:
            log_obj["correlationId"] = correlation_id

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Context passed as extra={"extra_fields": {...}}
        if hasattr(record, "extra_fields"):
            log_obj.update(record.extra_fields)

        return json.dumps(log_obj, default=str)


def _level_from_env() -> int:
    name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Get a logger configured for JSON output.

    Level comes from STAYCAL_LOG_LEVEL (default INFO).
    """
    logger = logging.getLogger(name)

    # Only configure if no handlers (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(_level_from_env())
        logger.propagate = False

    return logger
