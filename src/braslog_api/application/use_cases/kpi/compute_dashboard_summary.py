# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: month-to-date dashboard summary.

Purpose:
    Resolve the MTD and prior-month windows for the reference date, load the
    matching entries and budget clients, and delegate the arithmetic to
    ``domain/services/dashboard_summary.py``.

Layer:
    application/use_cases/kpi

Notes:
    The client-id and cost-center-id filters are intersected. Budgets come
    from the ACTIVE clients that satisfy both filters.
"""

from __future__ import annotations

import logging
from typing import cast

from braslog_api.application.schemas.dto.kpi import ComputeDashboardSummaryRequest
from braslog_api.application.uow import UnitOfWork
from braslog_api.domain.enums.kpi import RecordStatus
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import (
    KpiEntryFilter,
    KpiEntryRepository,
)
from braslog_api.domain.services.dashboard_summary import (
    DashboardSummary,
    compute_dashboard_summary,
    resolve_windows,
)

logger = logging.getLogger(__name__)


class ComputeDashboardSummaryUseCase:
    """Compute actual / budget / prior-month figures for the five KPI types."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: ComputeDashboardSummaryRequest) -> DashboardSummary:
        windows = resolve_windows(req.date, req.day_of_month)
        client_ids = req.client_ids or None
        cost_center_ids = req.cost_center_ids or None

        async with self._uow as tx:
            clients = cast(ClientRepository, tx.get_repository(ClientRepository))
            entries = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))

            mtd_entries = await entries.list_matching(
                KpiEntryFilter(
                    start=windows.mtd_start,
                    end=windows.mtd_end,
                    client_ids=client_ids,
                    cost_center_ids=cost_center_ids,
                )
            )
            prior_entries = await entries.list_matching(
                KpiEntryFilter(
                    start=windows.prior_start,
                    end=windows.prior_end,
                    client_ids=client_ids,
                    cost_center_ids=cost_center_ids,
                )
            )
            budget_clients = await clients.list_matching(
                client_ids=client_ids,
                cost_center_ids=cost_center_ids,
                status=RecordStatus.ACTIVE,
            )

        summary = compute_dashboard_summary(
            req.date,
            mtd_entries=mtd_entries,
            prior_entries=prior_entries,
            budget_clients=budget_clients,
            requested_day=req.day_of_month,
        )
        logger.info(
            "kpi.dashboard_summary.computed",
            extra={
                "date": req.date.isoformat(),
                "day_of_month": summary.day_of_month,
                "mtd_entries": len(mtd_entries),
                "budget_clients": len(budget_clients),
            },
        )
        return summary
