# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: build the monthly KPI pivot.

Purpose:
    Load everything the pivot engine needs for one month in a single Unit of
    Work (entries of the month and of the previous month, the client set,
    and cost center names) and delegate aggregation to
    ``domain/services/monthly_pivot.py``.

Layer:
    application/use_cases/kpi

Notes:
    Client set: the filtered client when ``client_id`` is given; otherwise
    every ACTIVE client plus any client (of any status) with entries in the
    month or in the previous month. "Today" comes from the injected clock, which callers bind to the
    business timezone.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import cast

from braslog_api.application.schemas.dto.kpi import BuildMonthlyPivotRequest, MonthlyPivotResult
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.clients.get_client import load_client
from braslog_api.domain.entities.client import Client
from braslog_api.domain.enums.kpi import RecordStatus
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.cost_center_repository import (
    CostCenterRepository,
)
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import (
    KpiEntryFilter,
    KpiEntryRepository,
)
from braslog_api.domain.services.monthly_pivot import build_monthly_pivot

logger = logging.getLogger(__name__)


class BuildMonthlyPivotUseCase:
    """Build the pivot tables of a month.

    Args:
        uow: Application UnitOfWork used for repository resolution.
        clock: Returns the current date in the business timezone.

    Raises:
        EntityNotFound: When ``client_id`` is given and does not exist.
    """

    def __init__(self, *, uow: UnitOfWork, clock: Callable[[], date] = date.today) -> None:
        self._uow = uow
        self._clock = clock

    async def execute(self, req: BuildMonthlyPivotRequest) -> MonthlyPivotResult:
        month = req.month
        prior = month.previous()
        only = (req.client_id,) if req.client_id is not None else None

        async with self._uow as tx:
            clients_repo = cast(ClientRepository, tx.get_repository(ClientRepository))
            centers_repo = cast(CostCenterRepository, tx.get_repository(CostCenterRepository))
            entries_repo = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))

            clients: list[Client]
            if req.client_id is not None:
                clients = [await load_client(clients_repo, req.client_id)]
            else:
                clients = await clients_repo.list_matching(status=RecordStatus.ACTIVE)

            entries = await entries_repo.list_matching(
                KpiEntryFilter(start=month.first_day, end=month.last_day, client_ids=only)
            )
            prior_entries = await entries_repo.list_matching(
                KpiEntryFilter(start=prior.first_day, end=prior.last_day, client_ids=only)
            )

            known = {c.id for c in clients}
            extra_ids = list(
                dict.fromkeys(
                    e.client_id for e in (*entries, *prior_entries) if e.client_id not in known
                )
            )
            if extra_ids:
                clients.extend(await clients_repo.list_by_ids(extra_ids))

            cost_center_names = {cc.id: cc.name for cc in await centers_repo.list_all()}

        pivot = build_monthly_pivot(
            month,
            clients=clients,
            cost_center_names=cost_center_names,
            entries=entries,
            prior_entries=prior_entries,
            today=self._clock(),
        )

        logger.info(
            "kpi.monthly_pivot.built",
            extra={
                "month": str(month),
                "client_id": str(req.client_id) if req.client_id else None,
                "entries": len(entries),
                "clients": len(clients),
            },
        )
        return MonthlyPivotResult(entries=tuple(entries), clients=tuple(clients), pivot=pivot)
