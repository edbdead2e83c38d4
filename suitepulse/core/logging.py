"""SuitePulse — Structured JSON Logging.

One JSON object per line on stdout. Request-scoped details travel through
``extra=`` and are copied onto the line when present.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from suitepulse.config import settings

SERVICE = "suitepulse"

EXTRA_FIELDS = (
    "source",
    "endpoint",
    "function",
    "table",
    "attempt",
    "duration_ms",
    "status_code",
)


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "service": SERVICE,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            {key: getattr(record, key) for key in EXTRA_FIELDS if hasattr(record, key)}
        )
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(JSONFormatter())


def get_logger(name: str) -> logging.Logger:
    """``suitepulse.<name>`` logger writing JSON lines at the configured level."""
    logger = logging.getLogger(f"{SERVICE}.{name}")
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
        # uvicorn configures the root logger; avoid printing twice
        logger.propagate = False
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return logger
