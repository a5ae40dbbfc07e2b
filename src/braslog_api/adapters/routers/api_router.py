# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""API Router Aggregator (Adapters Layer).

Purpose:
    Compose and expose the top-level `router` that includes all feature routers.

Responsibilities:
    • Mount health endpoints under `/health`.
    • Mount the Prometheus scrape endpoint at `/metrics`.
    • Mount the KPI resources under `/v1/...`.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter

from braslog_api.adapters.routers.clients_router import router as clients_router
from braslog_api.adapters.routers.cost_centers_router import router as cost_centers_router
from braslog_api.adapters.routers.dashboard_router import router as dashboard_router
from braslog_api.adapters.routers.health_router import router as health_router
from braslog_api.adapters.routers.kpi_entries_router import router as kpi_entries_router
from braslog_api.adapters.routers.metrics_router import router as metrics_router

router = APIRouter()

router.include_router(health_router, prefix="/health", tags=["Health"])
router.include_router(metrics_router)

# BaseRouter instances already carry their /v1/<resource> prefixes.
router.include_router(cost_centers_router)
router.include_router(clients_router)
router.include_router(kpi_entries_router)
router.include_router(dashboard_router)
