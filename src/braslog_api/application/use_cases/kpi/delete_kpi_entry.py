# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: delete a single KPI entry."""

from __future__ import annotations

import logging
from typing import Final, cast
from uuid import UUID

from braslog_api.application.schemas.dto.base import DeletedDTO
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.kpi.get_kpi_entry import load_entry
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import KpiEntryRepository

logger = logging.getLogger(__name__)

ENTRY_DELETED: Final[str] = "Entrada de KPI excluída com sucesso"


class DeleteKpiEntryUseCase:
    """Delete one KPI entry; raises ``EntityNotFound`` when it is absent."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, entry_id: UUID) -> DeletedDTO:
        async with self._uow as tx:
            repo = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))
            entry = await load_entry(repo, entry_id)
            await repo.delete(entry.id)
            await tx.commit()

        logger.info(
            "kpi.entry.delete.success",
            extra={"entry_id": str(entry_id), "date": entry.date.isoformat()},
        )
        return DeletedDTO(id=entry_id, message=ENTRY_DELETED)
