# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use cases: paginated KPI entry listing and entry counts."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, timedelta
from typing import cast

from braslog_api.application.schemas.dto.base import PageDTO
from braslog_api.application.schemas.dto.kpi import (
    KpiEntryDTO,
    KpiEntryStatsDTO,
    ListKpiEntriesRequest,
)
from braslog_api.application.uow import UnitOfWork
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import (
    KpiEntryFilter,
    KpiEntryRepository,
)
from braslog_api.domain.services.kpi_calendar import YearMonth


class ListKpiEntriesUseCase:
    """List entries ordered by date (newest first), client, then KPI type."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: ListKpiEntriesRequest) -> PageDTO[KpiEntryDTO]:
        flt = KpiEntryFilter(
            start=req.start_date,
            end=req.end_date,
            client_ids=(req.client_id,) if req.client_id is not None else None,
            kpi_type=req.kpi_type,
        )
        async with self._uow as tx:
            repo = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))
            rows, total = await repo.list_page(
                flt, offset=(req.page - 1) * req.page_size, limit=req.page_size
            )
        return PageDTO[KpiEntryDTO](
            items=[KpiEntryDTO.from_entity(e) for e in rows],
            total=total,
            page=req.page,
            page_size=req.page_size,
        )


class GetKpiEntryStatsUseCase:
    """Count entries: total, today, last 7 days (today included), this month, by type."""

    def __init__(self, *, uow: UnitOfWork, clock: Callable[[], date] = date.today) -> None:
        self._uow = uow
        self._clock = clock

    async def execute(self) -> KpiEntryStatsDTO:
        today = self._clock()
        month = YearMonth.of(today)
        async with self._uow as tx:
            repo = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))
            total = await repo.count()
            today_count = await repo.count(KpiEntryFilter(start=today, end=today))
            week = await repo.count(KpiEntryFilter(start=today - timedelta(days=6), end=today))
            this_month = await repo.count(
                KpiEntryFilter(start=month.first_day, end=month.last_day)
            )
            by_type = await repo.count_by_type()
        return KpiEntryStatsDTO(
            total=total,
            today=today_count,
            last_7_days=week,
            this_month=this_month,
            by_type={k: by_type.get(k, 0) for k in KpiType},
        )
