import json
import logging
from typing import Any, Dict, Optional


# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_KEYS = set(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {
    "message",
    "asctime",
}

SERVICE_NAME = "lvcheck"


class StructuredFormatter(logging.Formatter):
    """Render logs as JSON with consistent fields."""

    def format(self, record: logging.LogRecord) -> str:
        base: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_KEYS and not key.startswith("_")
        }
        event = extras.pop("event", None)
        if event:
            base["event"] = event
        if extras:
            base["extra"] = extras
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, default=str)


def init_logging(level: str = "INFO") -> None:
    """Configure root logger with the JSON formatter."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.basicConfig(level=log_level, handlers=[handler], force=True)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-scoped logger."""
    return logging.getLogger(name if name else SERVICE_NAME)
