# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: partially update a cost center (name and/or status)."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Final, cast

from braslog_api.application.schemas.dto.clients import CostCenterDTO, UpdateCostCenterRequest
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.cost_centers.create_cost_center import (
    INVALID_COST_CENTER,
    ensure_unique_cost_center_name,
)
from braslog_api.application.use_cases.cost_centers.get_cost_center import load_cost_center
from braslog_api.domain.exceptions.common import InvalidRequest
from braslog_api.domain.interfaces.repositories.cost_center_repository import (
    CostCenterRepository,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS: Final[frozenset[str]] = frozenset({"name", "status"})


class UpdateCostCenterUseCase:
    """Update a cost center.

    Raises:
        EntityNotFound: When the cost center does not exist.
        EntityConflict: When the new name belongs to another cost center.
        InvalidRequest: When the resulting cost center violates entity rules.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: UpdateCostCenterRequest) -> CostCenterDTO:
        unknown = set(req.changes) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidRequest(INVALID_COST_CENTER, details={"unknown_fields": sorted(unknown)})
        cleared = sorted(k for k, v in req.changes.items() if v is None)
        if cleared:
            raise InvalidRequest(INVALID_COST_CENTER, details={"required_fields": cleared})

        changes: dict[str, Any] = dict(req.changes)
        if isinstance(changes.get("name"), str):
            changes["name"] = changes["name"].strip()

        async with self._uow as tx:
            repo = cast(CostCenterRepository, tx.get_repository(CostCenterRepository))
            current = await load_cost_center(repo, req.cost_center_id)
            try:
                updated = replace(current, **changes)
            except (TypeError, ValueError) as exc:
                raise InvalidRequest(INVALID_COST_CENTER, details={"reason": str(exc)}) from exc

            if updated.name != current.name:
                await ensure_unique_cost_center_name(repo, updated.name, exclude_id=current.id)

            saved = await repo.update(updated)
            await tx.commit()

        logger.info(
            "cost_centers.update.success",
            extra={"cost_center_id": str(saved.id), "fields": sorted(changes)},
        )
        return CostCenterDTO.from_entity(saved)
