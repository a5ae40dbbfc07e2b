# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Health endpoints (Adapters Layer).

Purpose:
    Expose liveness and readiness signals suitable for container orchestrators and
    load balancers while keeping this adapters layer decoupled from infrastructure.

Design:
    * Adapters boundary respected: no direct DB imports. The probe is injected.
    * Deterministic OpenAPI: stable operation_id/summary; typed response models.
    * Testability: a provider instance (`probe_provider`) is the DI token so overrides
      match by identity reliably; `use_cache=False` honors late overrides.
"""

from __future__ import annotations

import time
import typing as t
from enum import Enum
from typing import Annotated, Protocol

from fastapi import APIRouter, Depends, Response, status
from pydantic import Field

from braslog_api.adapters.dependencies.health_probe import probe_dependency
from braslog_api.adapters.schemas.http.base import BaseHTTPSchema
from braslog_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)
router = APIRouter()


class HealthState(str, Enum):
    """Overall service health classification."""

    OK = "ok"
    DEGRADED = "degraded"


class CheckResult(BaseHTTPSchema):
    """Result of a single dependency check."""

    name: str = Field(..., examples=["db"])
    status: t.Literal["ok", "down"]
    detail: str | None = None
    duration_ms: float


class ReadinessResponse(BaseHTTPSchema):
    """Aggregated readiness response."""

    status: HealthState
    checks: list[CheckResult] = Field(default_factory=list)


class LivenessResponse(BaseHTTPSchema):
    """Liveness response indicating the process is running."""

    status: t.Literal["ok"] = "ok"


class HealthProbe(Protocol):
    """Protocol for minimal, non-destructive dependency checks.

    Implementations return ``(is_ok, detail)`` where ``detail`` is an optional
    diagnostic string suitable for logs/JSON responses.
    """

    async def db(self) -> tuple[bool, str | None]: ...


class ProbeProvider:
    """Dependency token object for readiness routes."""

    def __call__(self) -> HealthProbe:
        return probe_dependency()


probe_provider = ProbeProvider()


@router.get(
    "/liveness",
    summary="Liveness",
    operation_id="health_liveness",
    response_model=LivenessResponse,
    status_code=status.HTTP_200_OK,
)
async def liveness() -> LivenessResponse:
    """Return a fast liveness signal (no external I/O)."""
    return LivenessResponse()


@router.get(
    "/readiness",
    summary="Readiness",
    operation_id="health_readiness",
    response_model=ReadinessResponse,
    responses={503: {"description": "Service degraded", "model": ReadinessResponse}},
)
async def readiness(
    response: Response,
    probe: Annotated[HealthProbe, Depends(probe_provider, use_cache=False)],
) -> ReadinessResponse:
    """Run the database probe; HTTP 503 when it fails."""
    start = time.perf_counter()
    ok, detail = await probe.db()
    check = CheckResult(
        name="db",
        status="ok" if ok else "down",
        detail=detail,
        duration_ms=(time.perf_counter() - start) * 1000.0,
    )
    if not ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    payload = ReadinessResponse(
        status=HealthState.OK if ok else HealthState.DEGRADED, checks=[check]
    )
    logger.info(
        "readiness_probe",
        extra={"overall": payload.status.value, "checks": [check.model_dump_http()]},
    )
    if check.duration_ms > 200.0:
        logger.warning("readiness_probe_slow", extra={"duration_ms": check.duration_ms})
    return payload
