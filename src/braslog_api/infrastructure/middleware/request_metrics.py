# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Request latency middleware (Prometheus).

Records server-side latency to ``braslog_http_request_duration_seconds``
labelled by method, templated route and status. Unmatched paths collapse
into a single ``<unmatched>`` label so scanners cannot blow up the series
count.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Final

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from braslog_api.infrastructure.observability.metrics import _get_or_create_hist

if TYPE_CHECKING:
    from prometheus_client import Histogram

__all__ = ["RequestLatencyMiddleware", "get_http_request_duration_seconds", "route_template"]

logger = logging.getLogger(__name__)

UNMATCHED_ROUTE: Final[str] = "<unmatched>"
_BUCKETS: Final[tuple[float, ...]] = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)


def route_template(request: Request) -> str:
    """Return the matched route template (``/v1/clients/{client_id}``) or a sentinel."""
    route = request.scope.get("route")
    return getattr(route, "path_format", None) or getattr(route, "path", None) or UNMATCHED_ROUTE


def get_http_request_duration_seconds() -> Histogram:
    """Histogram[method, route, status] of request latency in seconds."""
    return _get_or_create_hist(
        "braslog_http_request_duration_seconds",
        "HTTP request duration in seconds, server side.",
        buckets=_BUCKETS,
        labelnames=("method", "route", "status"),
    )


class RequestLatencyMiddleware(BaseHTTPMiddleware):
    """Record request latency to Prometheus."""

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._hist = get_http_request_duration_seconds()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            try:
                self._hist.labels(request.method, route_template(request), str(status)).observe(
                    time.perf_counter() - start
                )
            except ValueError:
                logger.debug("metrics.latency_observe_failed", exc_info=True)
