# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: read one day's KPI entries in raw and form shapes."""

from __future__ import annotations

from typing import cast

from braslog_api.application.schemas.dto.kpi import (
    DailySnapshotDTO,
    FormProjectionDTO,
    GetDailySnapshotRequest,
    KpiEntryDTO,
)
from braslog_api.application.uow import UnitOfWork
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import KpiEntryRepository
from braslog_api.domain.services.kpi_values import build_form_projection


class GetDailySnapshotUseCase:
    """Return the entries dated ``req.date``, optionally narrowed."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: GetDailySnapshotRequest) -> DailySnapshotDTO:
        async with self._uow as tx:
            repo = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))
            rows = await repo.list_for_date(
                req.date,
                client_ids=[req.client_id] if req.client_id is not None else None,
                kpi_type=req.kpi_type,
            )
        return DailySnapshotDTO(
            date=req.date,
            entries=[KpiEntryDTO.from_entity(e) for e in rows],
            form_projection=FormProjectionDTO.from_projection(
                build_form_projection(req.date, rows)
            ),
        )
