# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: partially update a KPI entry.

Notes:
    The value is re-validated against the resulting KPI type, so changing
    only ``kpi_type`` from a percentage to REVENUE (or back) is checked too.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Final, cast

from braslog_api.application.schemas.dto.kpi import KpiEntryDTO, UpdateKpiEntryRequest
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.clients.get_client import load_client
from braslog_api.application.use_cases.kpi.create_kpi_entry import ensure_free_key, validated_value
from braslog_api.application.use_cases.kpi.get_kpi_entry import load_entry
from braslog_api.domain.exceptions.common import InvalidRequest
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import KpiEntryRepository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS: Final[frozenset[str]] = frozenset({"date", "client_id", "kpi_type", "kpi_value"})
INVALID_ENTRY: Final[str] = "Dados da entrada de KPI inválidos"


class UpdateKpiEntryUseCase:
    """Update a KPI entry.

    Raises:
        EntityNotFound: When the entry or the new client does not exist.
        EntityConflict: When the new key belongs to another entry.
        InvalidRequest: When the resulting value is out of range.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: UpdateKpiEntryRequest) -> KpiEntryDTO:
        unknown = set(req.changes) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidRequest(INVALID_ENTRY, details={"unknown_fields": sorted(unknown)})
        if any(req.changes.get(f, ...) is None for f in UPDATABLE_FIELDS):
            raise InvalidRequest(INVALID_ENTRY, details={"reason": "fields cannot be null"})

        changes: dict[str, Any] = dict(req.changes)

        async with self._uow as tx:
            clients = cast(ClientRepository, tx.get_repository(ClientRepository))
            entries = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))

            current = await load_entry(entries, req.entry_id)
            kpi_type = changes.get("kpi_type", current.kpi_type)
            changes["kpi_value"] = validated_value(
                kpi_type, changes.get("kpi_value", current.kpi_value)
            )
            updated = replace(current, **changes)

            if updated.client_id != current.client_id:
                await load_client(clients, updated.client_id)
            if updated.key != current.key or updated.date != current.date:
                await ensure_free_key(
                    entries,
                    updated.date,
                    updated.client_id,
                    updated.kpi_type,
                    exclude_id=current.id,
                )

            saved = await entries.update(updated)
            await tx.commit()

        logger.info(
            "kpi.entry.update.success",
            extra={"entry_id": str(saved.id), "fields": sorted(req.changes)},
        )
        return KpiEntryDTO.from_entity(saved)
