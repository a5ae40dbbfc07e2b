# src/braslog_api/domain/interfaces/repositories/kpi_entry_repository.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for KPI entry repositories.

This module defines:

* KpiEntryFilter: query filter shared by range reads and pagination.
* KpiEntryRepository: protocol describing the capabilities required from a
  KPI entry repository implementation.

Notes:
    * Filters combine with logical AND.
    * ``cost_center_ids`` restricts entries to clients whose cost center is in
      the set.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType


@dataclass(frozen=True)
class KpiEntryFilter:
    """Read filter for KPI entries.

    Attributes:
        start: Inclusive lower date bound.
        end: Inclusive upper date bound.
        client_ids: Restrict to these clients.
        cost_center_ids: Restrict to clients of these cost centers.
        kpi_type: Restrict to one KPI type.
    """

    start: date | None = None
    end: date | None = None
    client_ids: Collection[UUID] | None = None
    cost_center_ids: Collection[UUID] | None = None
    kpi_type: KpiType | None = None


class KpiEntryRepository(Protocol):
    """Domain-level contract for KPI entry persistence."""

    async def get(self, entry_id: UUID) -> KpiEntry | None:
        """Return the entry with ``entry_id`` or None."""
        raise NotImplementedError

    async def find_by_key(
        self, day: date, client_id: UUID, kpi_type: KpiType
    ) -> KpiEntry | None:
        """Return the entry of the (date, client, kpi_type) triple, if any."""
        raise NotImplementedError

    async def list_for_date(
        self,
        day: date,
        *,
        client_ids: Collection[UUID] | None = None,
        kpi_type: KpiType | None = None,
    ) -> list[KpiEntry]:
        """Return entries dated ``day`` ordered by client then KPI type."""
        raise NotImplementedError

    async def list_matching(self, flt: KpiEntryFilter) -> list[KpiEntry]:
        """Return every entry matching ``flt`` ordered by date, client, KPI type."""
        raise NotImplementedError

    async def list_page(
        self, flt: KpiEntryFilter, *, offset: int, limit: int
    ) -> tuple[list[KpiEntry], int]:
        """Return a page ordered by date desc, client, KPI type, plus the total."""
        raise NotImplementedError

    async def add(self, entry: KpiEntry) -> KpiEntry:
        """Persist a single new entry."""
        raise NotImplementedError

    async def add_many(self, entries: Sequence[KpiEntry]) -> int:
        """Insert a batch of new entries; return the number inserted."""
        raise NotImplementedError

    async def update(self, entry: KpiEntry) -> KpiEntry:
        """Persist the full state of an existing entry."""
        raise NotImplementedError

    async def update_values(self, changes: Sequence[tuple[UUID, Decimal]]) -> int:
        """Set new values for entries by id; return the number updated."""
        raise NotImplementedError

    async def delete(self, entry_id: UUID) -> None:
        """Delete one entry."""
        raise NotImplementedError

    async def delete_many(self, entry_ids: Collection[UUID]) -> int:
        """Delete entries by id; return the number deleted."""
        raise NotImplementedError

    async def count(self, flt: KpiEntryFilter | None = None) -> int:
        """Return the number of entries matching ``flt`` (all when None)."""
        raise NotImplementedError

    async def count_by_type(self) -> dict[KpiType, int]:
        """Return the number of entries per KPI type."""
        raise NotImplementedError
