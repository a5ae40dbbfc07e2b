# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (``/metrics``).

Labelled collectors only export children that exist, so the handler creates
the known label combinations before rendering. A fresh process then shows
every KPI series at zero instead of omitting them.
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from braslog_api.infrastructure.middleware.request_metrics import (
    get_http_request_duration_seconds,
)
from braslog_api.infrastructure.observability.metrics import (
    get_kpi_reconciled_rows_total,
    get_kpi_snapshot_writes_total,
    get_readyz_db_latency_seconds,
)

router = APIRouter()


def _ensure_series() -> None:
    get_readyz_db_latency_seconds()
    get_http_request_duration_seconds().labels("GET", "/metrics", "200")
    rows = get_kpi_reconciled_rows_total()
    for operation in ("insert", "update", "delete"):
        rows.labels(operation=operation)
    writes = get_kpi_snapshot_writes_total()
    for result in ("applied", "noop"):
        writes.labels(result=result)


@router.get("/metrics", include_in_schema=False)
async def metrics_probe() -> Response:
    """Render the default registry in the Prometheus text format."""
    _ensure_series()
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
