# src/braslog_api/infrastructure/middleware/access_log.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Access Log Middleware.

One structured ``http.access`` record per request. Probe and scrape traffic
(``/health/*``, ``/metrics``) is logged at DEBUG so dashboards polling the
API do not drown the KPI write log; server errors are logged at WARNING.

Fields:
    method, route (templated path when matched), path, status, elapsed_ms,
    request_id, ok (False when the handler raised).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Final

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from braslog_api.infrastructure.logging.logger import get_json_logger
from braslog_api.infrastructure.middleware.request_metrics import route_template

_logger: logging.Logger = get_json_logger(__name__)

_QUIET_PREFIXES: Final[tuple[str, ...]] = ("/health/", "/metrics")


def _level_for(path: str, status: int) -> int:
    if status >= 500:
        return logging.WARNING
    if path.startswith(_QUIET_PREFIXES):
        return logging.DEBUG
    return logging.INFO


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Structured access logging middleware."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        t0 = time.perf_counter()
        status = 500
        ok = False
        try:
            response = await call_next(request)
            status = response.status_code
            ok = True
            return response
        finally:
            path = request.url.path
            record: dict[str, Any] = {
                "method": request.method,
                "route": route_template(request),
                "path": path,
                "status": status,
                "elapsed_ms": round((time.perf_counter() - t0) * 1000.0, 2),
                "request_id": getattr(request.state, "request_id", None),
                "ok": ok,
            }
            _logger.log(_level_for(path, status), "http.access", extra=record)
