# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use cases: cost center listing and unique-name checks."""

from __future__ import annotations

from typing import cast

from braslog_api.application.schemas.dto.base import NameCheckDTO, PageDTO
from braslog_api.application.schemas.dto.clients import (
    CostCenterDTO,
    ListCostCentersRequest,
    ValidateNameRequest,
)
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.clients.validate_client_name import (
    NAME_AVAILABLE,
    NAME_REQUIRED,
)
from braslog_api.application.use_cases.cost_centers.create_cost_center import (
    DUPLICATE_COST_CENTER_NAME,
)
from braslog_api.domain.interfaces.repositories.cost_center_repository import (
    CostCenterRepository,
)


class ListCostCentersUseCase:
    """List cost centers (with client counts) ordered by status then name."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: ListCostCentersRequest) -> PageDTO[CostCenterDTO]:
        search = (req.search or "").strip() or None
        async with self._uow as tx:
            repo = cast(CostCenterRepository, tx.get_repository(CostCenterRepository))
            rows, total = await repo.list_page(
                status=req.status,
                search=search,
                offset=(req.page - 1) * req.page_size,
                limit=req.page_size,
            )
        return PageDTO[CostCenterDTO](
            items=[CostCenterDTO.from_entity(c) for c in rows],
            total=total,
            page=req.page,
            page_size=req.page_size,
        )


class ValidateCostCenterNameUseCase:
    """Report whether a cost center name is free."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: ValidateNameRequest) -> NameCheckDTO:
        name = req.name.strip()
        if not name:
            return NameCheckDTO(available=False, message=NAME_REQUIRED)
        async with self._uow as tx:
            repo = cast(CostCenterRepository, tx.get_repository(CostCenterRepository))
            taken = await repo.find_by_name(name, exclude_id=req.exclude_id)
        if taken is not None:
            return NameCheckDTO(available=False, message=DUPLICATE_COST_CENTER_NAME)
        return NameCheckDTO(available=True, message=NAME_AVAILABLE)
