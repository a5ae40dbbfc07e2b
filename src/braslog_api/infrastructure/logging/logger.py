# src/braslog_api/infrastructure/logging/logger.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Structured logging for the API, the CLI and migrations.

One JSON object per line with the keys ``ts``, ``level``, ``logger`` and
``message``, plus:

    * ``service`` from ``SERVICE_NAME`` (default ``braslog-api``);
    * ``request_id`` / ``trace_id`` of the request being served, taken from
      the record, then from the context set by ``RequestIdMiddleware``;
    * every key passed through ``extra=`` (``inserted``, ``date``, ...).

``LOG_FORMAT=text`` switches to a single readable line per record, which is
what an operator running ``braslog report ...`` in a terminal wants.

Typical usage:
    configure_root_logging()
    log = get_json_logger(__name__)
    log.info("kpi.snapshot.saved", extra={"date": "2025-01-08", "inserted": 2})
"""

from __future__ import annotations

import json
import logging
import os
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, Final

__all__ = [
    "configure_root_logging",
    "get_json_logger",
    "get_request_id",
    "get_trace_id",
    "set_request_context",
]

_REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("braslog_request_id", default=None)
_TRACE_ID_CTX: ContextVar[str | None] = ContextVar("braslog_trace_id", default=None)

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def set_request_context(*, request_id: str | None = None, trace_id: str | None = None) -> None:
    """Bind correlation ids to the current task; ``None`` leaves a value unchanged."""
    if request_id is not None:
        _REQUEST_ID_CTX.set(request_id)
    if trace_id is not None:
        _TRACE_ID_CTX.set(trace_id)


def get_request_id() -> str | None:
    return _REQUEST_ID_CTX.get(None)


def get_trace_id() -> str | None:
    return _TRACE_ID_CTX.get(None)


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    out = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}
    # ``extra={"extra": {...}}`` is flattened one level.
    nested = out.pop("extra", None)
    if isinstance(nested, dict):
        out.update(nested)
    return out


class _JsonFormatter(logging.Formatter):
    """Render a record as one compact JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": os.getenv("SERVICE_NAME") or "braslog-api",
        }

        rid = getattr(record, "request_id", None) or _REQUEST_ID_CTX.get(None)
        if rid:
            payload["request_id"] = rid
        tid = getattr(record, "trace_id", None) or _TRACE_ID_CTX.get(None)
        if tid:
            payload["trace_id"] = tid

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)

        for key, value in _extras(record).items():
            payload.setdefault(key, value)

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


class _TextFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger: message key=value ...`` for terminals."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S")
        pairs = " ".join(f"{k}={v}" for k, v in _extras(record).items())
        line = f"{stamp} {record.levelname:<7} {record.name}: {record.getMessage()}"
        if pairs:
            line = f"{line} {pairs}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_root_logging(level: str | int | None = None) -> None:
    """Install the root handler once; later calls only adjust the level.

    Args:
        level: Level or level name; defaults to ``LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()
    env_level = os.getenv("LOG_LEVEL")
    root.setLevel(level if level is not None else (env_level or "INFO").upper())

    if root.handlers:
        return

    handler = logging.StreamHandler()
    text = (os.getenv("LOG_FORMAT") or "json").strip().lower() == "text"
    handler.setFormatter(_TextFormatter() if text else _JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)`` propagating to the root handler.

    Does not configure anything; call :func:`configure_root_logging` at startup.
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
