# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: delete a client that has no KPI entries."""

from __future__ import annotations

import logging
from typing import Final, cast
from uuid import UUID

from braslog_api.application.schemas.dto.base import DeletedDTO
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.clients.get_client import load_client
from braslog_api.domain.exceptions.common import EntityConflict
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import (
    KpiEntryFilter,
    KpiEntryRepository,
)

logger = logging.getLogger(__name__)

CLIENT_HAS_ENTRIES: Final[str] = (
    "Não é possível excluir cliente que possui lançamentos de KPI. "
    "Desative o cliente em vez de excluí-lo."
)
CLIENT_DELETED: Final[str] = "Cliente excluído com sucesso"


class DeleteClientUseCase:
    """Delete a client.

    Raises:
        EntityNotFound: When the client does not exist.
        EntityConflict: When any KPI entry references the client.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, client_id: UUID) -> DeletedDTO:
        async with self._uow as tx:
            clients = cast(ClientRepository, tx.get_repository(ClientRepository))
            entries = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))

            client = await load_client(clients, client_id)
            referencing = await entries.count(KpiEntryFilter(client_ids=(client.id,)))
            if referencing:
                raise EntityConflict(
                    CLIENT_HAS_ENTRIES,
                    details={"client_id": str(client.id), "kpi_entries": referencing},
                )

            await clients.delete(client.id)
            await tx.commit()

        logger.info("clients.delete.success", extra={"client_id": str(client_id)})
        return DeletedDTO(id=client_id, message=CLIENT_DELETED)
