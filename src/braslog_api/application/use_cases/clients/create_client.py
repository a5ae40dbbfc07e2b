# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: create a client.

Purpose:
    Register a client after checking name uniqueness (exact match after
    trimming) and the existence of the referenced cost center.

Layer:
    application/use_cases/clients
"""

from __future__ import annotations

import logging
from typing import Final, cast
from uuid import UUID, uuid4

from braslog_api.application.schemas.dto.clients import ClientDTO, CreateClientRequest
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.cost_centers.get_cost_center import load_cost_center
from braslog_api.domain.entities.client import Client
from braslog_api.domain.exceptions.common import EntityConflict, InvalidRequest
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.cost_center_repository import (
    CostCenterRepository,
)

logger = logging.getLogger(__name__)

DUPLICATE_CLIENT_NAME: Final[str] = "Já existe um cliente com este nome"
INVALID_CLIENT: Final[str] = "Dados do cliente inválidos"


async def ensure_unique_client_name(
    repo: ClientRepository, name: str, *, exclude_id: UUID | None = None
) -> None:
    """Raise ``EntityConflict`` when another client already uses ``name``."""
    if await repo.find_by_name(name, exclude_id=exclude_id) is not None:
        raise EntityConflict(DUPLICATE_CLIENT_NAME, details={"name": name})


class CreateClientUseCase:
    """Create a client.

    Args:
        uow: Application UnitOfWork used for repository resolution and transaction scope.

    Raises:
        InvalidRequest: When the name or a budget target violates entity rules.
        EntityConflict: When the name is already taken.
        EntityNotFound: When ``cost_center_id`` is unknown.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: CreateClientRequest) -> ClientDTO:
        try:
            client = Client(
                id=uuid4(),
                name=req.name.strip(),
                status=req.status,
                cost_center_id=req.cost_center_id,
                is_key_account=req.is_key_account,
                budget_revenue=req.budget_revenue,
                budget_on_time=req.budget_on_time,
                budget_occupancy=req.budget_occupancy,
                budget_third_party=req.budget_third_party,
            )
        except ValueError as exc:
            raise InvalidRequest(INVALID_CLIENT, details={"reason": str(exc)}) from exc

        async with self._uow as tx:
            clients = cast(ClientRepository, tx.get_repository(ClientRepository))
            centers = cast(CostCenterRepository, tx.get_repository(CostCenterRepository))

            await ensure_unique_client_name(clients, client.name)
            if client.cost_center_id is not None:
                await load_cost_center(centers, client.cost_center_id)

            created = await clients.add(client)
            await tx.commit()

        logger.info(
            "clients.create.success",
            extra={"client_id": str(created.id), "cost_center_id": str(created.cost_center_id)},
        )
        return ClientDTO.from_entity(created)
