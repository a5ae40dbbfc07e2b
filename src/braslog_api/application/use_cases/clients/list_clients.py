# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use cases: paginated client listing and client counts by status."""

from __future__ import annotations

from typing import cast

from braslog_api.application.schemas.dto.base import PageDTO
from braslog_api.application.schemas.dto.clients import (
    ClientDTO,
    ClientStatsDTO,
    ListClientsRequest,
)
from braslog_api.application.uow import UnitOfWork
from braslog_api.domain.enums.kpi import RecordStatus
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository


class ListClientsUseCase:
    """List clients ordered by status then name.

    ``search`` is matched case-insensitively against the name; blank searches
    are ignored.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: ListClientsRequest) -> PageDTO[ClientDTO]:
        search = (req.search or "").strip() or None
        async with self._uow as tx:
            repo = cast(ClientRepository, tx.get_repository(ClientRepository))
            rows, total = await repo.list_page(
                status=req.status,
                search=search,
                offset=(req.page - 1) * req.page_size,
                limit=req.page_size,
            )
        return PageDTO[ClientDTO](
            items=[ClientDTO.from_entity(c) for c in rows],
            total=total,
            page=req.page,
            page_size=req.page_size,
        )


class GetClientStatsUseCase:
    """Return total / active / inactive client counts."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self) -> ClientStatsDTO:
        async with self._uow as tx:
            repo = cast(ClientRepository, tx.get_repository(ClientRepository))
            counts = await repo.count_by_status()
        active = counts.get(RecordStatus.ACTIVE, 0)
        inactive = counts.get(RecordStatus.INACTIVE, 0)
        return ClientStatsDTO(total=active + inactive, active=active, inactive=inactive)
