# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: fetch a single client by id."""

from __future__ import annotations

from typing import Final, cast
from uuid import UUID

from braslog_api.application.schemas.dto.clients import ClientDTO
from braslog_api.application.uow import UnitOfWork
from braslog_api.domain.entities.client import Client
from braslog_api.domain.exceptions.common import EntityNotFound
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository

CLIENT_NOT_FOUND: Final[str] = "Cliente não encontrado"


async def load_client(repo: ClientRepository, client_id: UUID) -> Client:
    """Return the client or raise ``EntityNotFound``."""
    client = await repo.get(client_id)
    if client is None:
        raise EntityNotFound(CLIENT_NOT_FOUND, details={"client_id": str(client_id)})
    return client


class GetClientUseCase:
    """Return one client projection."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, client_id: UUID) -> ClientDTO:
        async with self._uow as tx:
            repo = cast(ClientRepository, tx.get_repository(ClientRepository))
            client = await load_client(repo, client_id)
        return ClientDTO.from_entity(client)
