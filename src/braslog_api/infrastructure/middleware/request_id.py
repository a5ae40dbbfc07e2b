# src/braslog_api/infrastructure/middleware/request_id.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Request correlation middleware.

Every request gets an id: the caller's ``X-Request-ID`` when it is safe to
echo back, a fresh UUID4 otherwise. The id is stored on ``request.state``,
pushed into the logging context and written to the response header.

When the caller sends a W3C ``traceparent`` header its trace id becomes the
request's ``trace_id``; without one the request id doubles as trace id. The
error envelope reports that value.
"""

from __future__ import annotations

import re
import uuid
from typing import Final

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from braslog_api.infrastructure.logging.logger import set_request_context

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"
TRACEPARENT_HEADER: Final[str] = "traceparent"

_SAFE_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9\-_.:@]{1,128}$")
# version-traceid-parentid-flags; an all-zero trace id is invalid.
_TRACEPARENT_RE: Final[re.Pattern[str]] = re.compile(
    r"^[0-9a-f]{2}-(?!0{32})([0-9a-f]{32})-[0-9a-f]{16}-[0-9a-f]{2}$"
)


def coerce_request_id(raw: str | None) -> str:
    """Return ``raw`` when it is a safe header value, else a new UUID4 string."""
    if raw and _SAFE_RE.match(raw):
        return raw
    return str(uuid.uuid4())


def trace_id_from_traceparent(raw: str | None) -> str | None:
    """Extract the 32-hex trace id of a ``traceparent`` header, if well formed."""
    if not raw:
        return None
    match = _TRACEPARENT_RE.match(raw.strip().lower())
    return match.group(1) if match else None


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach ``request_id``/``trace_id`` to the request and echo the id back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        req_id = coerce_request_id(request.headers.get(REQUEST_ID_HEADER))
        trace_id = trace_id_from_traceparent(request.headers.get(TRACEPARENT_HEADER)) or req_id

        request.state.request_id = req_id
        request.state.trace_id = trace_id
        set_request_context(request_id=req_id, trace_id=trace_id)

        response = await call_next(request)
        response.headers.setdefault(REQUEST_ID_HEADER, req_id)
        return response
