# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: fetch a single KPI entry by id."""

from __future__ import annotations

from typing import Final, cast
from uuid import UUID

from braslog_api.application.schemas.dto.kpi import KpiEntryDTO
from braslog_api.application.uow import UnitOfWork
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.exceptions.common import EntityNotFound
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import KpiEntryRepository

ENTRY_NOT_FOUND: Final[str] = "Entrada de KPI não encontrada"


async def load_entry(repo: KpiEntryRepository, entry_id: UUID) -> KpiEntry:
    """Return the entry or raise ``EntityNotFound``."""
    entry = await repo.get(entry_id)
    if entry is None:
        raise EntityNotFound(ENTRY_NOT_FOUND, details={"entry_id": str(entry_id)})
    return entry


class GetKpiEntryUseCase:
    """Return one KPI entry projection."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, entry_id: UUID) -> KpiEntryDTO:
        async with self._uow as tx:
            repo = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))
            entry = await load_entry(repo, entry_id)
        return KpiEntryDTO.from_entity(entry)
