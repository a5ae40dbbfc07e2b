# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: fetch a single cost center by id."""

from __future__ import annotations

from typing import Final, cast
from uuid import UUID

from braslog_api.application.schemas.dto.clients import CostCenterDTO
from braslog_api.application.uow import UnitOfWork
from braslog_api.domain.entities.cost_center import CostCenter
from braslog_api.domain.exceptions.common import EntityNotFound
from braslog_api.domain.interfaces.repositories.cost_center_repository import (
    CostCenterRepository,
)

COST_CENTER_NOT_FOUND: Final[str] = "Centro de custo não encontrado"


async def load_cost_center(repo: CostCenterRepository, cost_center_id: UUID) -> CostCenter:
    """Return the cost center or raise ``EntityNotFound``."""
    cost_center = await repo.get(cost_center_id)
    if cost_center is None:
        raise EntityNotFound(
            COST_CENTER_NOT_FOUND, details={"cost_center_id": str(cost_center_id)}
        )
    return cost_center


class GetCostCenterUseCase:
    """Return one cost center projection (with its client count)."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, cost_center_id: UUID) -> CostCenterDTO:
        async with self._uow as tx:
            repo = cast(CostCenterRepository, tx.get_repository(CostCenterRepository))
            cost_center = await load_cost_center(repo, cost_center_id)
        return CostCenterDTO.from_entity(cost_center)
