from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from famtime.core.config import settings

SERVICE_NAME = "famtime-api"

# Structured fields copied from ``extra={...}`` when present on a record.
STRUCTURED_FIELDS = (
    "request_id",
    "user_id",
    "route",
    "method",
    "status_code",
    "execution_time_ms",
    "mood",
    "generation",
    "request_seq",
    "transport",
    "refinement_status",
    "slot_count",
)


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def __init__(self, *, service: str = SERVICE_NAME, environment: str | None = None) -> None:
        super().__init__()
        self.service = service
        self.environment = environment or settings.app_env

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service,
            "environment": self.environment,
        }
        for name in STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def setup_json_logging(level: str | None = None) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel((level or settings.log_level).upper())
