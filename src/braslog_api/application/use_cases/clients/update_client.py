# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: partially update a client.

Purpose:
    Apply the supplied subset of client attributes. A supplied ``None``
    clears nullable attributes (cost center, budget targets).

Layer:
    application/use_cases/clients
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Final, cast

from braslog_api.application.schemas.dto.clients import ClientDTO, UpdateClientRequest
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.clients.create_client import (
    INVALID_CLIENT,
    ensure_unique_client_name,
)
from braslog_api.application.use_cases.clients.get_client import load_client
from braslog_api.application.use_cases.cost_centers.get_cost_center import load_cost_center
from braslog_api.domain.exceptions.common import InvalidRequest
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.cost_center_repository import (
    CostCenterRepository,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "name",
        "status",
        "cost_center_id",
        "is_key_account",
        "budget_revenue",
        "budget_on_time",
        "budget_occupancy",
        "budget_third_party",
    }
)

REQUIRED_FIELDS: Final[frozenset[str]] = frozenset({"name", "status", "is_key_account"})


class UpdateClientUseCase:
    """Update a client.

    Raises:
        EntityNotFound: When the client or the new cost center is unknown.
        EntityConflict: When the new name belongs to another client.
        InvalidRequest: When the resulting client violates entity rules.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: UpdateClientRequest) -> ClientDTO:
        unknown = set(req.changes) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidRequest(INVALID_CLIENT, details={"unknown_fields": sorted(unknown)})
        cleared = sorted(k for k in REQUIRED_FIELDS if k in req.changes and req.changes[k] is None)
        if cleared:
            raise InvalidRequest(INVALID_CLIENT, details={"required_fields": cleared})

        changes: dict[str, Any] = dict(req.changes)
        if isinstance(changes.get("name"), str):
            changes["name"] = changes["name"].strip()

        async with self._uow as tx:
            clients = cast(ClientRepository, tx.get_repository(ClientRepository))
            centers = cast(CostCenterRepository, tx.get_repository(CostCenterRepository))

            current = await load_client(clients, req.client_id)
            try:
                updated = replace(current, **changes)
            except (TypeError, ValueError) as exc:
                raise InvalidRequest(INVALID_CLIENT, details={"reason": str(exc)}) from exc

            if updated.name != current.name:
                await ensure_unique_client_name(clients, updated.name, exclude_id=current.id)
            if updated.cost_center_id is not None and (
                updated.cost_center_id != current.cost_center_id
            ):
                await load_cost_center(centers, updated.cost_center_id)

            saved = await clients.update(updated)
            await tx.commit()

        logger.info(
            "clients.update.success",
            extra={"client_id": str(saved.id), "fields": sorted(changes)},
        )
        return ClientDTO.from_entity(saved)
