# src/braslog_api/adapters/repositories/client_repository.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""SQLAlchemy repository for clients."""

from __future__ import annotations

from collections.abc import Collection
from uuid import UUID

from sqlalchemy import func, select

from braslog_api.adapters.repositories.base_repository import (
    ROW_NOT_FOUND,
    BaseRepository,
    translate_db_errors,
)
from braslog_api.domain.entities.client import Client
from braslog_api.domain.enums.kpi import RecordStatus
from braslog_api.domain.exceptions.common import EntityNotFound
from braslog_api.infrastructure.database.models.kpi import ClientModel


def _to_entity(row: ClientModel) -> Client:
    return Client(
        id=row.id,
        name=row.name,
        status=RecordStatus(row.status),
        cost_center_id=row.cost_center_id,
        is_key_account=row.is_key_account,
        budget_revenue=row.budget_revenue,
        budget_on_time=row.budget_on_time,
        budget_occupancy=row.budget_occupancy,
        budget_third_party=row.budget_third_party,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _apply(row: ClientModel, client: Client) -> None:
    row.name = client.name
    row.status = client.status.value
    row.cost_center_id = client.cost_center_id
    row.is_key_account = client.is_key_account
    row.budget_revenue = client.budget_revenue
    row.budget_on_time = client.budget_on_time
    row.budget_occupancy = client.budget_occupancy
    row.budget_third_party = client.budget_third_party


class SqlAlchemyClientRepository(BaseRepository[ClientModel]):
    """Client persistence backed by the ``clients`` table."""

    async def get(self, client_id: UUID) -> Client | None:
        async with translate_db_errors("clients.get"):
            row = await self._session.get(ClientModel, client_id)
        return _to_entity(row) if row is not None else None

    async def find_by_name(self, name: str, *, exclude_id: UUID | None = None) -> Client | None:
        stmt = select(ClientModel).where(ClientModel.name == name)
        if exclude_id is not None:
            stmt = stmt.where(ClientModel.id != exclude_id)
        async with translate_db_errors("clients.find_by_name"):
            row = await self.fetch_optional(stmt.limit(1))
        return _to_entity(row) if row is not None else None

    async def list_by_ids(self, client_ids: Collection[UUID]) -> list[Client]:
        if not client_ids:
            return []
        stmt = (
            select(ClientModel)
            .where(ClientModel.id.in_(list(client_ids)))
            .order_by(ClientModel.name.asc())
        )
        async with translate_db_errors("clients.list_by_ids"):
            rows = await self.fetch_all(stmt)
        return [_to_entity(r) for r in rows]

    async def list_page(
        self,
        *,
        status: RecordStatus | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[Client], int]:
        stmt = select(ClientModel)
        if status is not None:
            stmt = stmt.where(ClientModel.status == status.value)
        if search:
            stmt = stmt.where(self.name_contains(ClientModel.name, search))

        async with translate_db_errors("clients.list_page"):
            total = await self.fetch_count(stmt)
            rows = await self.fetch_all(
                stmt.order_by(ClientModel.status.asc(), ClientModel.name.asc())
                .offset(offset)
                .limit(limit)
            )
        return [_to_entity(r) for r in rows], total

    async def list_matching(
        self,
        *,
        client_ids: Collection[UUID] | None = None,
        cost_center_ids: Collection[UUID] | None = None,
        status: RecordStatus | None = None,
    ) -> list[Client]:
        stmt = select(ClientModel)
        if client_ids is not None:
            stmt = stmt.where(ClientModel.id.in_(list(client_ids)))
        if cost_center_ids is not None:
            stmt = stmt.where(ClientModel.cost_center_id.in_(list(cost_center_ids)))
        if status is not None:
            stmt = stmt.where(ClientModel.status == status.value)

        async with translate_db_errors("clients.list_matching"):
            rows = await self.fetch_all(stmt.order_by(ClientModel.name.asc()))
        return [_to_entity(r) for r in rows]

    async def add(self, client: Client) -> Client:
        row = ClientModel(id=client.id)
        _apply(row, client)
        async with translate_db_errors("clients.add"):
            self._session.add(row)
            await self._session.flush()
            await self._session.refresh(row)
        return _to_entity(row)

    async def update(self, client: Client) -> Client:
        async with translate_db_errors("clients.update"):
            row = await self._session.get(ClientModel, client.id)
            if row is None:
                raise EntityNotFound(ROW_NOT_FOUND, details={"id": str(client.id)})
            _apply(row, client)
            await self._session.flush()
            await self._session.refresh(row)
        return _to_entity(row)

    async def delete(self, client_id: UUID) -> None:
        async with translate_db_errors("clients.delete"):
            row = await self._session.get(ClientModel, client_id)
            if row is None:
                raise EntityNotFound(ROW_NOT_FOUND, details={"id": str(client_id)})
            await self._session.delete(row)
            await self._session.flush()

    async def count_by_status(self) -> dict[RecordStatus, int]:
        stmt = select(ClientModel.status, func.count()).group_by(ClientModel.status)
        async with translate_db_errors("clients.count_by_status"):
            res = await self._session.execute(stmt)
        counts = {s: 0 for s in RecordStatus}
        for status, n in res.all():
            counts[RecordStatus(status)] = int(n)
        return counts

    async def count_for_cost_center(self, cost_center_id: UUID) -> int:
        stmt = select(ClientModel).where(ClientModel.cost_center_id == cost_center_id)
        async with translate_db_errors("clients.count_for_cost_center"):
            return await self.fetch_count(stmt)
