# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: create a cost center."""

from __future__ import annotations

import logging
from typing import Final, cast
from uuid import UUID, uuid4

from braslog_api.application.schemas.dto.clients import CostCenterDTO, CreateCostCenterRequest
from braslog_api.application.uow import UnitOfWork
from braslog_api.domain.entities.cost_center import CostCenter
from braslog_api.domain.exceptions.common import EntityConflict, InvalidRequest
from braslog_api.domain.interfaces.repositories.cost_center_repository import (
    CostCenterRepository,
)

logger = logging.getLogger(__name__)

DUPLICATE_COST_CENTER_NAME: Final[str] = "Já existe um centro de custo com este nome"
INVALID_COST_CENTER: Final[str] = "Dados do centro de custo inválidos"


async def ensure_unique_cost_center_name(
    repo: CostCenterRepository, name: str, *, exclude_id: UUID | None = None
) -> None:
    """Raise ``EntityConflict`` when another cost center already uses ``name``."""
    if await repo.find_by_name(name, exclude_id=exclude_id) is not None:
        raise EntityConflict(DUPLICATE_COST_CENTER_NAME, details={"name": name})


class CreateCostCenterUseCase:
    """Create a cost center.

    Raises:
        InvalidRequest: When the name is blank or too long.
        EntityConflict: When the name is already taken.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: CreateCostCenterRequest) -> CostCenterDTO:
        try:
            cost_center = CostCenter(id=uuid4(), name=req.name.strip(), status=req.status)
        except ValueError as exc:
            raise InvalidRequest(INVALID_COST_CENTER, details={"reason": str(exc)}) from exc

        async with self._uow as tx:
            repo = cast(CostCenterRepository, tx.get_repository(CostCenterRepository))
            await ensure_unique_cost_center_name(repo, cost_center.name)
            created = await repo.add(cost_center)
            await tx.commit()

        logger.info("cost_centers.create.success", extra={"cost_center_id": str(created.id)})
        return CostCenterDTO.from_entity(created)
