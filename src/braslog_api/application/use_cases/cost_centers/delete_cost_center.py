# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: delete a cost center that no client references."""

from __future__ import annotations

import logging
from typing import Final, cast
from uuid import UUID

from braslog_api.application.schemas.dto.base import DeletedDTO
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.cost_centers.get_cost_center import load_cost_center
from braslog_api.domain.exceptions.common import EntityConflict
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.cost_center_repository import (
    CostCenterRepository,
)

logger = logging.getLogger(__name__)

COST_CENTER_HAS_CLIENTS: Final[str] = (
    "Não é possível excluir um Centro de Custo que possui clientes vinculados"
)
COST_CENTER_DELETED: Final[str] = "Centro de custo excluído com sucesso"


class DeleteCostCenterUseCase:
    """Delete a cost center.

    Raises:
        EntityNotFound: When the cost center does not exist.
        EntityConflict: When any client references the cost center.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, cost_center_id: UUID) -> DeletedDTO:
        async with self._uow as tx:
            centers = cast(CostCenterRepository, tx.get_repository(CostCenterRepository))
            clients = cast(ClientRepository, tx.get_repository(ClientRepository))

            cost_center = await load_cost_center(centers, cost_center_id)
            members = await clients.count_for_cost_center(cost_center.id)
            if members:
                raise EntityConflict(
                    COST_CENTER_HAS_CLIENTS,
                    details={"cost_center_id": str(cost_center.id), "clients": members},
                )

            await centers.delete(cost_center.id)
            await tx.commit()

        logger.info("cost_centers.delete.success", extra={"cost_center_id": str(cost_center_id)})
        return DeletedDTO(id=cost_center_id, message=COST_CENTER_DELETED)
