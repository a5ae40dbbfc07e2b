# src/braslog_api/adapters/repositories/kpi_entry_repository.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
SQLAlchemy repository for KPI entries.

Purpose:
    Read and write rows of ``kpi_entries``, including the set-based batch
    operations used by daily snapshot reconciliation.

Layer: adapters / repositories

Notes:
    * Batch writes use one statement per batch for inserts and deletes; value
      updates run one UPDATE per changed row.
    * The (date, client_id, kpi_type) unique constraint is the last line of
      defence against duplicate triples; violations surface as
      ``EntityConflict`` through ``translate_db_errors``.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import Select, delete, func, select, update

from braslog_api.adapters.repositories.base_repository import (
    ROW_NOT_FOUND,
    BaseRepository,
    translate_db_errors,
)
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.exceptions.common import EntityNotFound
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import KpiEntryFilter
from braslog_api.infrastructure.database.models.base import now_utc
from braslog_api.infrastructure.database.models.kpi import ClientModel, KpiEntryModel


def _to_entity(row: KpiEntryModel) -> KpiEntry:
    return KpiEntry(
        id=row.id,
        date=row.date,
        client_id=row.client_id,
        kpi_type=KpiType(row.kpi_type),
        kpi_value=Decimal(row.kpi_value),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_row(entry: KpiEntry) -> KpiEntryModel:
    return KpiEntryModel(
        id=entry.id,
        date=entry.date,
        client_id=entry.client_id,
        kpi_type=entry.kpi_type.value,
        kpi_value=entry.kpi_value,
    )


def _filtered(stmt: Select[Any], flt: KpiEntryFilter | None) -> Select[Any]:
    if flt is None:
        return stmt
    if flt.start is not None:
        stmt = stmt.where(KpiEntryModel.date >= flt.start)
    if flt.end is not None:
        stmt = stmt.where(KpiEntryModel.date <= flt.end)
    if flt.client_ids is not None:
        stmt = stmt.where(KpiEntryModel.client_id.in_(list(flt.client_ids)))
    if flt.cost_center_ids is not None:
        members = select(ClientModel.id).where(
            ClientModel.cost_center_id.in_(list(flt.cost_center_ids))
        )
        stmt = stmt.where(KpiEntryModel.client_id.in_(members))
    if flt.kpi_type is not None:
        stmt = stmt.where(KpiEntryModel.kpi_type == flt.kpi_type.value)
    return stmt


class SqlAlchemyKpiEntryRepository(BaseRepository[KpiEntryModel]):
    """KPI entry persistence backed by the ``kpi_entries`` table."""

    async def get(self, entry_id: UUID) -> KpiEntry | None:
        async with translate_db_errors("kpi_entries.get"):
            row = await self._session.get(KpiEntryModel, entry_id)
        return _to_entity(row) if row is not None else None

    async def find_by_key(self, day: date, client_id: UUID, kpi_type: KpiType) -> KpiEntry | None:
        stmt = select(KpiEntryModel).where(
            KpiEntryModel.date == day,
            KpiEntryModel.client_id == client_id,
            KpiEntryModel.kpi_type == kpi_type.value,
        )
        async with translate_db_errors("kpi_entries.find_by_key"):
            row = await self.fetch_optional(stmt)
        return _to_entity(row) if row is not None else None

    async def list_for_date(
        self,
        day: date,
        *,
        client_ids: Collection[UUID] | None = None,
        kpi_type: KpiType | None = None,
    ) -> list[KpiEntry]:
        stmt = _filtered(
            select(KpiEntryModel),
            KpiEntryFilter(start=day, end=day, client_ids=client_ids, kpi_type=kpi_type),
        ).order_by(KpiEntryModel.client_id.asc(), KpiEntryModel.kpi_type.asc())
        async with translate_db_errors("kpi_entries.list_for_date"):
            rows = await self.fetch_all(stmt)
        return [_to_entity(r) for r in rows]

    async def list_matching(self, flt: KpiEntryFilter) -> list[KpiEntry]:
        stmt = _filtered(select(KpiEntryModel), flt).order_by(
            KpiEntryModel.date.asc(),
            KpiEntryModel.client_id.asc(),
            KpiEntryModel.kpi_type.asc(),
        )
        async with translate_db_errors("kpi_entries.list_matching"):
            rows = await self.fetch_all(stmt)
        return [_to_entity(r) for r in rows]

    async def list_page(
        self, flt: KpiEntryFilter, *, offset: int, limit: int
    ) -> tuple[list[KpiEntry], int]:
        stmt = _filtered(select(KpiEntryModel), flt)
        async with translate_db_errors("kpi_entries.list_page"):
            total = await self.fetch_count(stmt)
            rows = await self.fetch_all(
                stmt.order_by(
                    KpiEntryModel.date.desc(),
                    KpiEntryModel.client_id.asc(),
                    KpiEntryModel.kpi_type.asc(),
                )
                .offset(offset)
                .limit(limit)
            )
        return [_to_entity(r) for r in rows], total

    async def add(self, entry: KpiEntry) -> KpiEntry:
        row = _to_row(entry)
        async with translate_db_errors("kpi_entries.add"):
            self._session.add(row)
            await self._session.flush()
            await self._session.refresh(row)
        return _to_entity(row)

    async def add_many(self, entries: Sequence[KpiEntry]) -> int:
        if not entries:
            return 0
        async with translate_db_errors("kpi_entries.add_many"):
            self._session.add_all([_to_row(e) for e in entries])
            await self._session.flush()
        return len(entries)

    async def update(self, entry: KpiEntry) -> KpiEntry:
        async with translate_db_errors("kpi_entries.update"):
            row = await self._session.get(KpiEntryModel, entry.id)
            if row is None:
                raise EntityNotFound(ROW_NOT_FOUND, details={"id": str(entry.id)})
            row.date = entry.date
            row.client_id = entry.client_id
            row.kpi_type = entry.kpi_type.value
            row.kpi_value = entry.kpi_value
            await self._session.flush()
            await self._session.refresh(row)
        return _to_entity(row)

    async def update_values(self, changes: Sequence[tuple[UUID, Decimal]]) -> int:
        updated = 0
        stamp = now_utc()
        async with translate_db_errors("kpi_entries.update_values"):
            for entry_id, value in changes:
                res = await self._session.execute(
                    update(KpiEntryModel)
                    .where(KpiEntryModel.id == entry_id)
                    .values(kpi_value=value, updated_at=stamp)
                    .execution_options(synchronize_session=False)
                )
                updated += res.rowcount or 0
        return updated

    async def delete(self, entry_id: UUID) -> None:
        async with translate_db_errors("kpi_entries.delete"):
            row = await self._session.get(KpiEntryModel, entry_id)
            if row is None:
                raise EntityNotFound(ROW_NOT_FOUND, details={"id": str(entry_id)})
            await self._session.delete(row)
            await self._session.flush()

    async def delete_many(self, entry_ids: Collection[UUID]) -> int:
        if not entry_ids:
            return 0
        async with translate_db_errors("kpi_entries.delete_many"):
            res = await self._session.execute(
                delete(KpiEntryModel)
                .where(KpiEntryModel.id.in_(list(entry_ids)))
                .execution_options(synchronize_session=False)
            )
        return res.rowcount or 0

    async def count(self, flt: KpiEntryFilter | None = None) -> int:
        async with translate_db_errors("kpi_entries.count"):
            return await self.fetch_count(_filtered(select(KpiEntryModel.id), flt))

    async def count_by_type(self) -> dict[KpiType, int]:
        stmt = select(KpiEntryModel.kpi_type, func.count()).group_by(KpiEntryModel.kpi_type)
        async with translate_db_errors("kpi_entries.count_by_type"):
            res = await self._session.execute(stmt)
        counts = {t: 0 for t in KpiType}
        for kpi_type, n in res.all():
            counts[KpiType(kpi_type)] = int(n)
        return counts
