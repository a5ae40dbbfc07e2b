# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""KPI presenters.

Purpose:
    Map KPI DTOs and domain engine results (monthly pivot, dashboard summary)
    onto HTTP schemas. Pivot cells are emitted twice: as numbers (``null`` for
    "no data") and as display strings rendered by ``format_pivot_value``.

Layer:
    adapters/presenters
"""

from __future__ import annotations

from braslog_api.adapters.presenters.base_presenter import as_float
from braslog_api.adapters.schemas.http.kpi import (
    ClientDailyValuesHTTP,
    DailySnapshotHTTP,
    DailySnapshotResultHTTP,
    DashboardSummaryHTTP,
    FormProjectionHTTP,
    KpiEntryHTTP,
    KpiEntryStatsHTTP,
    MetricSummaryHTTP,
    MonthlyPivotHTTP,
    PivotRowHTTP,
    PivotTableHTTP,
    ReconciliationStatsHTTP,
)
from braslog_api.application.schemas.dto.kpi import (
    DailySnapshotDTO,
    FormProjectionDTO,
    KpiEntryDTO,
    KpiEntryStatsDTO,
    MonthlyPivotResult,
    UpsertDailySnapshotResultDTO,
)
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.services.dashboard_summary import DashboardSummary, MetricSummary
from braslog_api.domain.services.kpi_values import FORM_FIELDS
from braslog_api.domain.services.monthly_pivot import PivotRow, PivotTable, format_pivot_value


def present_kpi_entry(dto: KpiEntryDTO) -> KpiEntryHTTP:
    return KpiEntryHTTP(
        id=dto.id,
        date=dto.date,
        client_id=dto.client_id,
        kpi_type=dto.kpi_type,
        kpi_value=float(dto.kpi_value),
        created_at=dto.created_at,
        updated_at=dto.updated_at,
    )


def present_form_projection(dto: FormProjectionDTO) -> FormProjectionHTTP:
    return FormProjectionHTTP(
        date=dto.date,
        entries=[
            ClientDailyValuesHTTP(
                client_id=row.client_id,
                revenue=as_float(row.revenue),
                on_time=as_float(row.on_time),
                occupancy=as_float(row.occupancy),
                third_party=as_float(row.third_party),
                availability=as_float(row.availability),
            )
            for row in dto.entries
        ],
    )


def present_snapshot_result(dto: UpsertDailySnapshotResultDTO) -> DailySnapshotResultHTTP:
    return DailySnapshotResultHTTP(
        success=dto.success,
        message=dto.message,
        date=dto.date,
        entries=[present_kpi_entry(e) for e in dto.entries],
        form_projection=present_form_projection(dto.form_projection),
        stats=ReconciliationStatsHTTP(
            inserted=dto.stats.inserted, updated=dto.stats.updated, deleted=dto.stats.deleted
        ),
    )


def present_daily_snapshot(dto: DailySnapshotDTO) -> DailySnapshotHTTP:
    return DailySnapshotHTTP(
        date=dto.date,
        entries=[present_kpi_entry(e) for e in dto.entries],
        form_projection=present_form_projection(dto.form_projection),
    )


def present_kpi_stats(dto: KpiEntryStatsDTO) -> KpiEntryStatsHTTP:
    return KpiEntryStatsHTTP(
        total=dto.total,
        today=dto.today,
        last_7_days=dto.last_7_days,
        this_month=dto.this_month,
        by_type=dict(dto.by_type),
    )


# --------------------------------------------------------------------------- #
# Monthly pivot                                                               #
# --------------------------------------------------------------------------- #


def _present_row(kpi_type: KpiType, row: PivotRow) -> PivotRowHTTP:
    return PivotRowHTTP(
        kind=row.kind.value,
        label=row.label,
        key=row.key,
        cells=[as_float(c) for c in row.cells],
        display=[format_pivot_value(kpi_type, c) for c in row.cells],
        total=as_float(row.total),
        total_display=format_pivot_value(kpi_type, row.total),
    )


def _present_table(table: PivotTable) -> PivotTableHTTP:
    return PivotTableHTTP(
        kpi_type=table.kpi_type,
        title=table.kpi_type.title,
        rows=[_present_row(table.kpi_type, r) for r in table.rows],
        footer=[_present_row(table.kpi_type, r) for r in table.footer],
    )


def _entry_http(entry: KpiEntry) -> KpiEntryHTTP:
    return present_kpi_entry(KpiEntryDTO.from_entity(entry))


def present_monthly_pivot(result: MonthlyPivotResult) -> MonthlyPivotHTTP:
    pivot = result.pivot
    return MonthlyPivotHTTP(
        month=str(pivot.month),
        prior_month=str(pivot.prior_month),
        days_in_month=pivot.days_in_month,
        prior_month_cutoff=pivot.prior_month_cutoff,
        days=list(range(1, pivot.days_in_month + 1)),
        entries=[_entry_http(e) for e in result.entries],
        tables=[_present_table(t) for t in pivot.tables],
    )


# --------------------------------------------------------------------------- #
# Dashboard                                                                   #
# --------------------------------------------------------------------------- #


def _metric(summary: MetricSummary) -> MetricSummaryHTTP:
    return MetricSummaryHTTP(
        actual=float(summary.actual),
        budget=float(summary.budget),
        prior_month=float(summary.prior_month),
    )


def present_dashboard_summary(summary: DashboardSummary) -> DashboardSummaryHTTP:
    metrics = {FORM_FIELDS[k]: _metric(m) for k, m in summary.metrics.items()}
    return DashboardSummaryHTTP(
        date=summary.reference_date,
        day_of_month=summary.day_of_month,
        days_in_month=summary.days_in_month,
        **metrics,
    )
