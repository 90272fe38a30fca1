"""Structured JSON logging configuration."""

import json
import logging
import sys
from typing import Any

# Extra record attributes copied into the JSON payload under a camelCase key
_EXTRA_FIELDS = {
    "request_id": "requestId",
    "session_id": "sessionId",
    "usage_file": "usageFile",
}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        for attr, key in _EXTRA_FIELDS.items():
            if hasattr(record, attr):
                log_obj[key] = getattr(record, attr)

        return json.dumps(log_obj, default=str)


def setup_logging(debug: bool = False) -> None:
    """Configure structured JSON logging."""
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    logging.root.handlers = [handler]
    logging.root.setLevel(level)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
