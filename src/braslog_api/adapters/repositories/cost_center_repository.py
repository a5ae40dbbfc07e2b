# src/braslog_api/adapters/repositories/cost_center_repository.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""SQLAlchemy repository for cost centers.

``client_count`` is derived with a correlated count over ``clients`` on
every read.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, select

from braslog_api.adapters.repositories.base_repository import (
    ROW_NOT_FOUND,
    BaseRepository,
    translate_db_errors,
)
from braslog_api.domain.entities.cost_center import CostCenter
from braslog_api.domain.enums.kpi import RecordStatus
from braslog_api.domain.exceptions.common import EntityNotFound
from braslog_api.infrastructure.database.models.kpi import ClientModel, CostCenterModel

_CLIENT_COUNT = (
    select(func.count(ClientModel.id))
    .where(ClientModel.cost_center_id == CostCenterModel.id)
    .correlate(CostCenterModel)
    .scalar_subquery()
    .label("client_count")
)


def _to_entity(row: CostCenterModel, client_count: int = 0) -> CostCenter:
    return CostCenter(
        id=row.id,
        name=row.name,
        status=RecordStatus(row.status),
        client_count=int(client_count or 0),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlAlchemyCostCenterRepository(BaseRepository[CostCenterModel]):
    """Cost center persistence backed by the ``cost_centers`` table."""

    def _with_counts(self) -> Select[Any]:
        return select(CostCenterModel, _CLIENT_COUNT)

    async def _fetch_with_counts(self, stmt: Select[Any]) -> list[CostCenter]:
        res = await self._session.execute(stmt)
        return [_to_entity(row, count) for row, count in res.all()]

    async def get(self, cost_center_id: UUID) -> CostCenter | None:
        stmt = self._with_counts().where(CostCenterModel.id == cost_center_id)
        async with translate_db_errors("cost_centers.get"):
            found = await self._fetch_with_counts(stmt)
        return found[0] if found else None

    async def find_by_name(
        self, name: str, *, exclude_id: UUID | None = None
    ) -> CostCenter | None:
        stmt = select(CostCenterModel).where(CostCenterModel.name == name)
        if exclude_id is not None:
            stmt = stmt.where(CostCenterModel.id != exclude_id)
        async with translate_db_errors("cost_centers.find_by_name"):
            row = await self.fetch_optional(stmt.limit(1))
        return _to_entity(row) if row is not None else None

    async def list_page(
        self,
        *,
        status: RecordStatus | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[CostCenter], int]:
        base = select(CostCenterModel)
        if status is not None:
            base = base.where(CostCenterModel.status == status.value)
        if search:
            base = base.where(self.name_contains(CostCenterModel.name, search))

        stmt = base.add_columns(_CLIENT_COUNT)
        async with translate_db_errors("cost_centers.list_page"):
            total = await self.fetch_count(base)
            items = await self._fetch_with_counts(
                stmt.order_by(CostCenterModel.status.asc(), CostCenterModel.name.asc())
                .offset(offset)
                .limit(limit)
            )
        return items, total

    async def list_all(self) -> list[CostCenter]:
        stmt = self._with_counts().order_by(CostCenterModel.name.asc())
        async with translate_db_errors("cost_centers.list_all"):
            return await self._fetch_with_counts(stmt)

    async def add(self, cost_center: CostCenter) -> CostCenter:
        row = CostCenterModel(
            id=cost_center.id, name=cost_center.name, status=cost_center.status.value
        )
        async with translate_db_errors("cost_centers.add"):
            self._session.add(row)
            await self._session.flush()
            await self._session.refresh(row)
        return _to_entity(row)

    async def update(self, cost_center: CostCenter) -> CostCenter:
        async with translate_db_errors("cost_centers.update"):
            row = await self._session.get(CostCenterModel, cost_center.id)
            if row is None:
                raise EntityNotFound(ROW_NOT_FOUND, details={"id": str(cost_center.id)})
            row.name = cost_center.name
            row.status = cost_center.status.value
            await self._session.flush()
            await self._session.refresh(row)
        return _to_entity(row, cost_center.client_count)

    async def delete(self, cost_center_id: UUID) -> None:
        async with translate_db_errors("cost_centers.delete"):
            row = await self._session.get(CostCenterModel, cost_center_id)
            if row is None:
                raise EntityNotFound(ROW_NOT_FOUND, details={"id": str(cost_center_id)})
            await self._session.delete(row)
            await self._session.flush()
