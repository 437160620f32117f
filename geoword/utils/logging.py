"""Structured logging for the word validation engine.

All modules obtain loggers through ``get_logger`` so that every record can
carry a request id (one per validation) and optional structured fields passed
via ``extra_data``.
"""

import json
import logging
import os
import sys
import threading
from typing import Any, Dict, Optional

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | [%(request_id)s] %(message)s"
_ROOT_LOGGER = "geoword"

_context = threading.local()
_configured = False


def set_request_id(request_id: Optional[str]) -> None:
    """Attach a request id to log records emitted from this thread."""
    _context.request_id = request_id


def get_request_id() -> Optional[str]:
    """Return the request id bound to this thread, if any."""
    return getattr(_context, "request_id", None)


class _RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        if not hasattr(record, "extra_data"):
            record.extra_data = {}
        return True


class JSONFormatter(logging.Formatter):
    """Formats records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        extra = getattr(record, "extra_data", None)
        if extra:
            payload["data"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter that accepts an ``extra_data`` keyword."""

    def process(self, msg, kwargs):
        extra_data = kwargs.pop("extra_data", None)
        extra = kwargs.setdefault("extra", {})
        if extra_data:
            extra["extra_data"] = extra_data
        return msg, kwargs


def _resolve_level(level) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).strip().upper(), logging.INFO)


def setup_logging(level=None, json_format: bool = False, force: bool = False) -> None:
    """Configure the package logger.

    Args:
        level: Log level name or number. Falls back to ``GEOWORD_LOG_LEVEL``.
        json_format: Emit JSON lines instead of plain text.
        force: Reconfigure even if logging was already set up.
    """
    global _configured
    if _configured and not force:
        return

    resolved = _resolve_level(level if level is not None else os.environ.get("GEOWORD_LOG_LEVEL"))

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(_RequestIdFilter())
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))

    root = logging.getLogger(_ROOT_LOGGER)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(resolved)
    root.propagate = False
    _configured = True


def get_logger(name: str) -> StructuredLogger:
    """Return a structured logger for ``name``."""
    return StructuredLogger(logging.getLogger(name), {})


def log_llm_call(
    logger: StructuredLogger,
    provider: str,
    model: str,
    duration_ms: int,
    success: bool,
    operation: str = "chat",
    error: Optional[str] = None,
    **fields: Any,
) -> None:
    """Emit one structured record for an external model call."""
    data: Dict[str, Any] = {
        "provider": provider,
        "model": model,
        "operation": operation,
        "duration_ms": duration_ms,
        "success": success,
    }
    data.update(fields)
    if error:
        data["error"] = error
        logger.warning(f"{provider} {operation} call failed after {duration_ms}ms: {error}", extra_data=data)
    else:
        logger.debug(f"{provider} {operation} call completed in {duration_ms}ms", extra_data=data)
