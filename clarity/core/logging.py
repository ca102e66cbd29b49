"""Structured logging configuration for the Clarity intelligence engine."""

import logging
import sys
from typing import Any

# Context fields promoted to top-level keys when passed via ``extra``
_CONTEXT_FIELDS = ("company_id", "stage", "error_kind")


class StructuredFormatter(logging.Formatter):
    """Formats records as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        for key in _CONTEXT_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        line = " ".join(f"{k}={v}" for k, v in log_data.items())
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

        try:
            from clarity.core.config import get_settings

            settings = get_settings()
            logger.setLevel(logging.DEBUG if settings.CLARITY_ENV == "dev" else logging.INFO)
        except Exception:
            # Settings unavailable (e.g. missing Supabase env) - fall back to INFO
            logger.setLevel(logging.INFO)

    return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    """
    Log with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **kwargs: Context fields (company_id, stage, counts, ...)
    """
    extra: dict[str, Any] = {}
    for key in _CONTEXT_FIELDS:
        if key in kwargs:
            extra[key] = kwargs.pop(key)
    extra["extra_data"] = kwargs

    logger.log(level, msg, extra=extra)
