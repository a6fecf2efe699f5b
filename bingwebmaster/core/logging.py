"""BingWebmaster — Structured JSON Logging.

Every module logs through a ``bingwebmaster.<name>`` child logger. A single
stdout handler sits on the package logger, so an embedding application can
silence or reroute the whole client in one place. Bearer tokens and
``apikey`` values are masked before a line is written.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import IO, Any, Dict, Optional

from bingwebmaster.core.config import settings

ROOT_LOGGER = "bingwebmaster"

# Request-tracing fields lifted from ``extra=``. Unset or None values are omitted.
TRACE_FIELDS = ("endpoint", "attempt", "status_code", "duration_ms", "cache")

MASK = "***"
_SECRET_PATTERNS = (
    re.compile(r"(Bearer\s+)[^\s\"',]+", re.IGNORECASE),
    re.compile(r"(apikey=)[^&\s\"',]+", re.IGNORECASE),
)


def redact(text: str) -> str:
    """Mask bearer tokens and API keys in a log line."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(lambda m: m.group(1) + MASK, text)
    return text


class JSONFormatter(logging.Formatter):
    """One JSON object per line for request tracing."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
        }
        for key in TRACE_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = redact(self.formatException(record.exc_info))
        return json.dumps(entry, default=str)


def resolve_level(debug: bool = False, level: str = "INFO") -> int:
    """``debug`` wins over ``level``; unknown level names fall back to INFO."""
    if debug:
        return logging.DEBUG
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else logging.INFO


def _json_handler(logger: logging.Logger) -> Optional[logging.StreamHandler]:
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and isinstance(
            handler.formatter, JSONFormatter
        ):
            return handler
    return None


def configure_logging(
    level: Optional[int] = None, stream: Optional[IO[str]] = None
) -> logging.Logger:
    """Attach the JSON handler to the package logger and set its level.

    Safe to call repeatedly: the handler is added once, later calls only
    move it to ``stream`` and change the level. Without an explicit level
    the ``BING_WEBMASTER_DEBUG`` / ``BING_WEBMASTER_LOG_LEVEL`` settings apply.
    """
    root = logging.getLogger(ROOT_LOGGER)
    handler = _json_handler(root)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    elif stream is not None:
        handler.setStream(stream)

    if level is None:
        level = resolve_level(settings.debug, settings.log_level)
    root.setLevel(level)
    return root


def get_logger(name: str) -> logging.Logger:
    """Return the ``bingwebmaster.<name>`` logger, configuring the package on first use."""
    if _json_handler(logging.getLogger(ROOT_LOGGER)) is None:
        configure_logging()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
