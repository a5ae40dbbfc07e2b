# src/braslog_api/infrastructure/http/errors.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""HTTP error envelope and exception handlers.

Every failure leaves the API as::

    {"error": {"code": ..., "http_status": ..., "message": ..., "details": ..., "trace_id": ...}}

Domain errors carry their own ``code``; the table below maps it to a status.
"""

from __future__ import annotations

import logging
from typing import Any, Final

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.responses import Response

from braslog_api.domain.exceptions.base import DomainError

logger = logging.getLogger(__name__)

DOMAIN_STATUS: Final[dict[str, int]] = {
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "BAD_REQUEST": 400,
    "INTERNAL": 500,
}


def _trace_id(request: Request) -> str | None:
    state = getattr(request, "state", None)
    return getattr(state, "trace_id", None) or getattr(state, "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details is not None:
        err["details"] = details
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


async def handle_domain_error(request: Request, exc: Exception) -> Response:
    """Translate a :class:`DomainError` into its envelope and status."""
    assert isinstance(exc, DomainError)
    status = DOMAIN_STATUS.get(exc.code, 500)
    if status >= 500:
        logger.error(
            "http.domain_error",
            extra={"code": exc.code, "path": request.url.path, "details": exc.details},
        )
    payload = error_envelope(
        code=exc.code,
        http_status=status,
        message=exc.message,
        details=jsonable_encoder(exc.details),
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=status, content=payload)


async def handle_validation_error(request: Request, exc: Exception) -> Response:
    assert isinstance(exc, RequestValidationError)
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Dados da requisição inválidos",
        details={"errors": jsonable_encoder(exc.errors())},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=payload)


async def handle_http_exception(request: Request, exc: Exception) -> Response:
    assert isinstance(exc, HTTPException)
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    logger.exception("http.unhandled_exception", extra={"path": request.url.path})
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Erro interno do servidor",
        details=None,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)
