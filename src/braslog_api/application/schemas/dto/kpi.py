# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Application DTOs for KPI entry flows.

Purpose:
    Request/response DTOs for the daily snapshot reconciliation, the monthly
    pivot, the dashboard summary, and plain KPI entry CRUD. Presenters map
    these to HTTP schemas.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any
from uuid import UUID

from braslog_api.application.schemas.dto.base import BaseDTO
from braslog_api.domain.entities.client import Client
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.services.kpi_calendar import YearMonth
from braslog_api.domain.services.kpi_values import ClientDailyValues, FormProjection
from braslog_api.domain.services.monthly_pivot import MonthlyPivot

# --------------------------------------------------------------------------- #
# Shared projections
# --------------------------------------------------------------------------- #


class KpiEntryDTO(BaseDTO):
    """Application projection of a persisted KPI entry."""

    id: UUID
    date: dt.date
    client_id: UUID
    kpi_type: KpiType
    kpi_value: Decimal
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @classmethod
    def from_entity(cls, entry: KpiEntry) -> KpiEntryDTO:
        return cls(
            id=entry.id,
            date=entry.date,
            client_id=entry.client_id,
            kpi_type=entry.kpi_type,
            kpi_value=entry.kpi_value,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class ClientDailyValuesDTO(BaseDTO):
    """One client's values for a day, in entry-form shape."""

    client_id: UUID
    revenue: Decimal | None = None
    on_time: Decimal | None = None
    occupancy: Decimal | None = None
    third_party: Decimal | None = None
    availability: Decimal | None = None


class FormProjectionDTO(BaseDTO):
    """Client-keyed projection of one day's entries."""

    date: dt.date
    entries: list[ClientDailyValuesDTO]

    @classmethod
    def from_projection(cls, projection: FormProjection) -> FormProjectionDTO:
        return cls(
            date=projection.date,
            entries=[
                ClientDailyValuesDTO(
                    client_id=row.client_id,
                    revenue=row.revenue,
                    on_time=row.on_time,
                    occupancy=row.occupancy,
                    third_party=row.third_party,
                    availability=row.availability,
                )
                for row in projection.entries
            ],
        )


# --------------------------------------------------------------------------- #
# Daily snapshot
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UpsertDailySnapshotRequest:
    """Full snapshot of one day for the referenced clients."""

    date: dt.date
    entries: Sequence[ClientDailyValues]


class ReconciliationStatsDTO(BaseDTO):
    """Rows touched by a reconciliation."""

    inserted: int = 0
    updated: int = 0
    deleted: int = 0


class UpsertDailySnapshotResultDTO(BaseDTO):
    """Result of a daily snapshot reconciliation."""

    success: bool
    message: str
    date: dt.date
    entries: list[KpiEntryDTO]
    form_projection: FormProjectionDTO
    stats: ReconciliationStatsDTO


@dataclass(frozen=True, slots=True)
class GetDailySnapshotRequest:
    """Read one day's entries, optionally narrowed by client and type."""

    date: dt.date
    client_id: UUID | None = None
    kpi_type: KpiType | None = None


class DailySnapshotDTO(BaseDTO):
    """One day's entries in raw and form shapes."""

    date: dt.date
    entries: list[KpiEntryDTO]
    form_projection: FormProjectionDTO


# --------------------------------------------------------------------------- #
# Monthly pivot / dashboard
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class BuildMonthlyPivotRequest:
    """Request DTO for the monthly pivot."""

    month: YearMonth
    client_id: UUID | None = None


@dataclass(frozen=True, slots=True)
class MonthlyPivotResult:
    """Raw month entries plus the computed pivot tables."""

    entries: tuple[KpiEntry, ...]
    clients: tuple[Client, ...]
    pivot: MonthlyPivot


@dataclass(frozen=True, slots=True)
class ComputeDashboardSummaryRequest:
    """Request DTO for the dashboard summary.

    Attributes:
        date: Reference date.
        client_ids: Optional client filter.
        cost_center_ids: Optional cost center filter (intersected with
            ``client_ids`` when both are given).
        day_of_month: Optional day override; clamped to the month length.
    """

    date: dt.date
    client_ids: tuple[UUID, ...] = ()
    cost_center_ids: tuple[UUID, ...] = ()
    day_of_month: int | None = None


# --------------------------------------------------------------------------- #
# Entry CRUD
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class CreateKpiEntryRequest:
    """Request DTO for creating a single KPI entry."""

    date: dt.date
    client_id: UUID
    kpi_type: KpiType
    kpi_value: Decimal


@dataclass(frozen=True, slots=True)
class UpdateKpiEntryRequest:
    """Request DTO for a partial KPI entry update."""

    entry_id: UUID
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ListKpiEntriesRequest:
    """Request DTO for paginated KPI entry listing."""

    start_date: dt.date | None = None
    end_date: dt.date | None = None
    client_id: UUID | None = None
    kpi_type: KpiType | None = None
    page: int = 1
    page_size: int = 50


class KpiEntryStatsDTO(BaseDTO):
    """Entry counts over fixed windows."""

    total: int
    today: int
    last_7_days: int
    this_month: int
    by_type: dict[KpiType, int]
