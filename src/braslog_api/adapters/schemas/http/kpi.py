# src/braslog_api/adapters/schemas/http/kpi.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""HTTP schemas for KPI entries, daily snapshots, monthly pivots and the dashboard."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from braslog_api.adapters.schemas.http.base import BaseHTTPSchema
from braslog_api.domain.enums.kpi import KpiType

__all__ = [
    "ClientDailyValuesBody",
    "ClientDailyValuesHTTP",
    "DailySnapshotBody",
    "DailySnapshotHTTP",
    "DailySnapshotResultHTTP",
    "DashboardSummaryHTTP",
    "FormProjectionHTTP",
    "KpiEntryCreateBody",
    "KpiEntryHTTP",
    "KpiEntryStatsHTTP",
    "KpiEntryUpdateBody",
    "MetricSummaryHTTP",
    "MonthlyPivotHTTP",
    "PivotRowHTTP",
    "PivotTableHTTP",
    "ReconciliationStatsHTTP",
]


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


class KpiEntryHTTP(BaseHTTPSchema):
    """One persisted KPI value."""

    id: UUID
    date: dt.date
    client_id: UUID
    kpi_type: KpiType
    kpi_value: float
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class KpiEntryCreateBody(BaseHTTPSchema):
    """Payload for ``POST /v1/kpi-entries``."""

    date: dt.date
    client_id: UUID
    kpi_type: KpiType
    kpi_value: Decimal = Field(..., examples=["1500.00"])


class KpiEntryUpdateBody(BaseHTTPSchema):
    """Payload for ``PATCH /v1/kpi-entries/{id}``; only supplied fields change."""

    date: dt.date | None = None
    client_id: UUID | None = None
    kpi_type: KpiType | None = None
    kpi_value: Decimal | None = None


class KpiEntryStatsHTTP(BaseHTTPSchema):
    """Entry counts over fixed windows and per KPI type."""

    total: int
    today: int
    last_7_days: int
    this_month: int
    by_type: dict[KpiType, int]


# ---------------------------------------------------------------------------
# Daily snapshot
# ---------------------------------------------------------------------------


class ClientDailyValuesBody(BaseHTTPSchema):
    """One client's values for the day; omitted fields mean "no value"."""

    client_id: UUID
    revenue: Decimal | None = None
    on_time: Decimal | None = None
    occupancy: Decimal | None = None
    third_party: Decimal | None = None
    availability: Decimal | None = None


class DailySnapshotBody(BaseHTTPSchema):
    """Payload for ``PUT /v1/kpi-entries/daily/{date}``."""

    entries: list[ClientDailyValuesBody] = Field(default_factory=list)


class ClientDailyValuesHTTP(BaseHTTPSchema):
    """Form-shaped values of one client."""

    client_id: UUID
    revenue: float | None = None
    on_time: float | None = None
    occupancy: float | None = None
    third_party: float | None = None
    availability: float | None = None


class FormProjectionHTTP(BaseHTTPSchema):
    """Entries of a date regrouped per client for form pre-fill."""

    date: dt.date
    entries: list[ClientDailyValuesHTTP]


class ReconciliationStatsHTTP(BaseHTTPSchema):
    """Rows touched by a snapshot reconciliation."""

    inserted: int
    updated: int
    deleted: int


class DailySnapshotResultHTTP(BaseHTTPSchema):
    """Outcome of a daily snapshot upsert."""

    success: bool
    message: str
    date: dt.date
    entries: list[KpiEntryHTTP]
    form_projection: FormProjectionHTTP
    stats: ReconciliationStatsHTTP


class DailySnapshotHTTP(BaseHTTPSchema):
    """Entries of a date plus their form projection."""

    date: dt.date
    entries: list[KpiEntryHTTP]
    form_projection: FormProjectionHTTP


# ---------------------------------------------------------------------------
# Monthly pivot
# ---------------------------------------------------------------------------


class PivotRowHTTP(BaseHTTPSchema):
    """One pivot row: numeric cells plus their display strings."""

    kind: str = Field(..., examples=["cost_center", "unassigned", "key_account", "total"])
    label: str
    key: UUID | None = None
    cells: list[float | None]
    display: list[str]
    total: float | None = None
    total_display: str


class PivotTableHTTP(BaseHTTPSchema):
    """Pivot of one KPI type."""

    kpi_type: KpiType
    title: str
    rows: list[PivotRowHTTP]
    footer: list[PivotRowHTTP]


class MonthlyPivotHTTP(BaseHTTPSchema):
    """Monthly pivot response: raw entries and one table per KPI type."""

    month: str = Field(..., examples=["2025-01"])
    prior_month: str
    days_in_month: int
    prior_month_cutoff: int
    days: list[int]
    entries: list[KpiEntryHTTP]
    tables: list[PivotTableHTTP]


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


class MetricSummaryHTTP(BaseHTTPSchema):
    """Actual / budget / prior-month figures for one KPI type."""

    actual: float
    budget: float
    prior_month: float


class DashboardSummaryHTTP(BaseHTTPSchema):
    """Month-to-date dashboard summary keyed by form field name."""

    date: dt.date
    day_of_month: int
    days_in_month: int
    revenue: MetricSummaryHTTP
    on_time: MetricSummaryHTTP
    occupancy: MetricSummaryHTTP
    third_party: MetricSummaryHTTP
    availability: MetricSummaryHTTP
