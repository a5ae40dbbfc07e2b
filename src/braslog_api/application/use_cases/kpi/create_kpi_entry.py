# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: create a single KPI entry.

Purpose:
    Insert one (date, client, kpi_type) measurement outside the daily
    snapshot flow.

Layer:
    application/use_cases/kpi
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Final, cast
from uuid import UUID, uuid4

from braslog_api.application.schemas.dto.kpi import CreateKpiEntryRequest, KpiEntryDTO
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.clients.get_client import load_client
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.exceptions.common import EntityConflict, InvalidRequest
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import KpiEntryRepository
from braslog_api.domain.services.kpi_values import check_kpi_value, quantize_value

logger = logging.getLogger(__name__)

DUPLICATE_ENTRY: Final[str] = "Já existe uma entrada para este cliente, data e tipo de KPI"
INVALID_NUMBER: Final[str] = "Valor do KPI deve ser um número válido"


def validated_value(kpi_type: KpiType, raw: Decimal) -> Decimal:
    """Quantize ``raw`` and check it against the range of ``kpi_type``.

    Raises:
        InvalidRequest: When the value is not numeric or out of range.
    """
    try:
        value = quantize_value(raw)
    except ValueError as exc:
        raise InvalidRequest(INVALID_NUMBER, details={"kpi_type": kpi_type.value}) from exc
    problem = check_kpi_value(kpi_type, value)
    if problem is not None:
        raise InvalidRequest(
            problem, details={"kpi_type": kpi_type.value, "kpi_value": str(value)}
        )
    return value


async def ensure_free_key(
    repo: KpiEntryRepository,
    day: date,
    client_id: UUID,
    kpi_type: KpiType,
    *,
    exclude_id: UUID | None = None,
) -> None:
    """Raise ``EntityConflict`` when another entry holds the same triple."""
    existing = await repo.find_by_key(day, client_id, kpi_type)
    if existing is not None and existing.id != exclude_id:
        raise EntityConflict(
            DUPLICATE_ENTRY,
            details={
                "date": day.isoformat(),
                "client_id": str(client_id),
                "kpi_type": kpi_type.value,
            },
        )


class CreateKpiEntryUseCase:
    """Create one KPI entry.

    Raises:
        InvalidRequest: When the value is out of range for its type.
        EntityNotFound: When the client does not exist.
        EntityConflict: When the (date, client, kpi_type) triple already exists.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: CreateKpiEntryRequest) -> KpiEntryDTO:
        value = validated_value(req.kpi_type, req.kpi_value)

        async with self._uow as tx:
            clients = cast(ClientRepository, tx.get_repository(ClientRepository))
            entries = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))

            await load_client(clients, req.client_id)
            await ensure_free_key(entries, req.date, req.client_id, req.kpi_type)

            created = await entries.add(
                KpiEntry(
                    id=uuid4(),
                    date=req.date,
                    client_id=req.client_id,
                    kpi_type=req.kpi_type,
                    kpi_value=value,
                )
            )
            await tx.commit()

        logger.info(
            "kpi.entry.create.success",
            extra={"entry_id": str(created.id), "kpi_type": created.kpi_type.value},
        )
        return KpiEntryDTO.from_entity(created)
