"""
Structured logging utilities.

Every component logs through :func:`get_logger`, which returns a
:class:`StructuredLogger` adapter whose bound fields (``stage``, ``table``...)
are merged into each record's ``extra_fields``. Records render as one JSON
object per line or as a compact console line, depending on the configured
:class:`~ParquetGen.settings.LogFormat`. Logs go to stderr so that batch status
lines on stdout stay machine-readable.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .settings import LogFormat

__all__ = [
    "JSONFormatter",
    "ConsoleFormatter",
    "StructuredLogger",
    "get_logger",
    "configure_logging",
    "module_logger",
    "log_event",
]


class JSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        """Render ``record`` as a JSON string with structured fields merged in."""

        now = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            payload.update(extra_fields)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-oriented ``LEVEL message key=value`` formatter."""

    def format(self, record: logging.LogRecord) -> str:
        base = f"{record.levelname:<7} {record.getMessage()}"
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict) and extra_fields:
            rendered = " ".join(f"{k}={v}" for k, v in extra_fields.items())
            base = f"{base} [{rendered}]"
        if record.exc_info:
            base = f"{base}\n{self.formatException(record.exc_info)}"
        return base


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter that enriches structured logs with shared context."""

    def __init__(
        self, logger: logging.Logger, base_fields: Optional[Dict[str, Any]] = None
    ) -> None:
        """Store underlying logger and initial structured ``base_fields``."""

        super().__init__(logger, {})
        self.base_fields: Dict[str, Any] = dict(base_fields or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        """Merge adapter context into ``extra`` metadata for structured output."""

        extra = kwargs.setdefault("extra", {})
        fields = dict(self.base_fields)
        extra_fields = extra.get("extra_fields")
        if isinstance(extra_fields, dict):
            fields.update(extra_fields)
        extra["extra_fields"] = fields
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **fields: object) -> "StructuredLogger":
        """Attach additional persistent fields to the adapter and return ``self``."""

        filtered = {k: v for k, v in fields.items() if v is not None}
        self.base_fields.update(filtered)
        return self

    def child(self, **fields: object) -> "StructuredLogger":
        """Create a new adapter inheriting context with optional overrides."""

        merged = dict(self.base_fields)
        merged.update({k: v for k, v in fields.items() if v is not None})
        return StructuredLogger(self.logger, merged)


def _make_formatter(log_format: LogFormat | str) -> logging.Formatter:
    if LogFormat(log_format) is LogFormat.JSON:
        return JSONFormatter()
    return ConsoleFormatter()


def get_logger(
    name: str,
    level: str = "INFO",
    *,
    log_format: LogFormat | str = LogFormat.CONSOLE,
    base_fields: Optional[Dict[str, Any]] = None,
) -> StructuredLogger:
    """Get a structured logger writing to stderr."""

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_make_formatter(log_format))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    return StructuredLogger(logger, base_fields)


def configure_logging(
    level: str = "INFO", log_format: LogFormat | str = LogFormat.CONSOLE
) -> StructuredLogger:
    """(Re)configure the package root logger and return an adapter for it."""

    logger = logging.getLogger("ParquetGen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    return get_logger("ParquetGen", level, log_format=log_format)


def module_logger(name: str, **base_fields: object) -> StructuredLogger:
    """Return an adapter over ``logging.getLogger(name)`` without installing handlers."""

    return StructuredLogger(logging.getLogger(name), dict(base_fields))


def log_event(
    logger: logging.LoggerAdapter | logging.Logger, level: str, message: str, **fields: object
) -> None:
    """Emit a structured log record using the ``extra_fields`` convention."""

    normalised_level = str(level).lower()
    base_stage = getattr(logger, "base_fields", {}).get("stage")
    if "stage" not in fields and base_stage is not None:
        fields["stage"] = base_stage
    if normalised_level in {"warning", "error"}:
        fields.setdefault("stage", "unknown")
        error_code = fields.get("error_code")
        fields["error_code"] = str(error_code).upper() if error_code else "UNKNOWN"

    emitter = getattr(logger, normalised_level, None)
    if not callable(emitter):
        raise AttributeError(f"Logger has no level '{level}'")
    emitter(message, extra={"extra_fields": fields})
