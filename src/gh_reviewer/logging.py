"""Structured logging configuration.

Uses standard library logging with a JSON formatter. Records emitted while a
workflow run is active carry the run's thread and run identifiers.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

_RESERVED_LOG_RECORD_ATTRS: set[str] = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
    "thread_id",
    "run_id",
}

_run_identity: ContextVar[tuple[str, str] | None] = ContextVar("gh_reviewer_run", default=None)


@contextmanager
def run_log_context(*, thread_id: str, run_id: str) -> Iterator[None]:
    """Attach a run's identity to every record logged inside the block."""

    token = _run_identity.set((thread_id, run_id))
    try:
        yield
    finally:
        _run_identity.reset(token)


class RunContextFilter(logging.Filter):
    """Copy the active run identity (if any) onto log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (record)
        identity = _run_identity.get()
        if identity is not None:
            record.thread_id, record.run_id = identity
        return True


class JsonFormatter(logging.Formatter):
    """A minimal JSON formatter for logging records."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        thread_id = getattr(record, "thread_id", None)
        if thread_id is not None:
            payload["run"] = {"thread_id": thread_id, "run_id": getattr(record, "run_id", None)}

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Configure root logging with structured JSON output."""

    root = logging.getLogger()

    # Remove any existing handlers to avoid duplicate logs when re-configuring.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RunContextFilter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    # Keep HTTP client loggers quiet; they log every request at DEBUG/INFO.
    for name in ("github", "httpx", "urllib3", "anthropic", "openai"):
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
