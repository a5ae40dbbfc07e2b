# src/braslog_api/adapters/schemas/http/envelopes.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""HTTP Envelopes (Adapters Layer).

Single resources answer ``{"data": ...}``; list endpoints answer
``{"page", "page_size", "total", "items"}``; failures answer
``{"error": {...}}``. The error shape here documents what
``infrastructure.http.errors`` emits.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from braslog_api.adapters.schemas.http.base import BaseHTTPSchema

__all__ = [
    "ErrorEnvelope",
    "ErrorObject",
    "PaginatedEnvelope",
    "SuccessEnvelope",
]


class ErrorObject(BaseModel):
    """Body of an error response.

    Domain codes: NOT_FOUND, CONFLICT, BAD_REQUEST, INTERNAL.
    Transport codes: VALIDATION_ERROR, HTTP_ERROR, INTERNAL_ERROR.
    """

    model_config = ConfigDict(
        title="ErrorObject",
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "code": "CONFLICT",
                    "http_status": 409,
                    "message": "Não é possível excluir um cliente que possui entradas de KPI",
                    "details": {"kpi_entries": 42},
                    "trace_id": "4bf92f3577b34da6a3ce929d0e0e4736",
                },
                {
                    "code": "BAD_REQUEST",
                    "http_status": 400,
                    "message": "Percentual deve ser entre 0 e 100",
                    "details": {"errors": [{"client_id": "…", "field": "on_time"}]},
                },
            ]
        },
    )

    code: str = Field(..., description="Stable error code.")
    http_status: int = Field(..., description="HTTP status of the response.")
    message: str = Field(..., description="Portuguese message safe to show to end users.")
    details: dict[str, Any] | None = Field(default=None, description="Machine-readable context.")
    trace_id: str | None = Field(default=None, description="Correlation id of the request.")


class ErrorEnvelope(BaseHTTPSchema):
    """``{"error": ErrorObject}``."""

    model_config = ConfigDict(title="ErrorEnvelope", extra="forbid")

    error: ErrorObject


class SuccessEnvelope[T](BaseHTTPSchema):
    """``{"data": T}``."""

    model_config = ConfigDict(title="SuccessEnvelope", extra="forbid")

    data: T


class PaginatedEnvelope[T](BaseHTTPSchema):
    """One page of a list endpoint; ``total`` counts every match, not just this page."""

    model_config = ConfigDict(title="PaginatedEnvelope", extra="forbid")

    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=200)
    total: int = Field(..., ge=0)
    items: Sequence[T]
