"""Structured logging configuration for pocketnotes.

- JSON structured logging with StructuredFormatter
- Logger hierarchy under the pocketnotes namespace
- Environment variable control (POCKETNOTES_LOG_LEVEL, POCKETNOTES_LOG_FORMAT)
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Optional

ROOT_LOGGER = "pocketnotes"

REDACTED = "[REDACTED]"

# Extras whose values must never reach log output
SENSITIVE_KEYS = frozenset({
    "password", "token", "secret", "apikey", "api_key",
    "authorization", "credential", "auth", "key", "bearer",
})

# Attributes every LogRecord carries; anything else came in through extra={...}
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


def redact(value: Any, key: str = "") -> Any:
    """Mask a context value if its key is sensitive, recursing into dicts."""
    if key.lower() in SENSITIVE_KEYS:
        return REDACTED
    if isinstance(value, dict):
        return {k: redact(v, str(k)) for k, v in value.items()}
    return value


class StructuredFormatter(logging.Formatter):
    """JSON log formatter.

    Outputs one JSON object per record with:
    - timestamp: UTC ISO 8601 format with 'Z' suffix
    - level: Log level name (INFO, ERROR, etc.)
    - logger: Logger name (pocketnotes hierarchy)
    - message: Log message (an event name such as "category_scored")
    - context: Fields passed through extra={...}, sensitive ones redacted
    - exception: Formatted traceback, when the record carries one
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {
            k: redact(v, k)
            for k, v in record.__dict__.items()
            if k not in _RESERVED_ATTRS and not k.startswith("_")
        }
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter for local development (POCKETNOTES_LOG_FORMAT=text)."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Attach a single stream handler to the pocketnotes logger.

    Safe to call repeatedly: the existing handler is reused and only its level
    and formatter change.

    Args:
        level: Log level name. Defaults to POCKETNOTES_LOG_LEVEL, then INFO.
            Unknown names fall back to INFO.
        fmt: "json" or "text". Defaults to POCKETNOTES_LOG_FORMAT, then json.
    """
    level = level or os.getenv("POCKETNOTES_LOG_LEVEL", "INFO")
    fmt = (fmt or os.getenv("POCKETNOTES_LOG_FORMAT", "json")).lower()

    formatter = TextFormatter() if fmt == "text" else StructuredFormatter()

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        logger.addHandler(logging.StreamHandler())
    for handler in logger.handlers:
        handler.setFormatter(formatter)

    logger.propagate = False
