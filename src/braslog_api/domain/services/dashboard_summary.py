# src/braslog_api/domain/services/dashboard_summary.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Dashboard summary engine.

Purpose:
    Month-to-date actual, budget and prior-month-to-date figures for the five
    KPI types, relative to a reference date.

Layer:
    domain/services

Notes:
    - Resolved day = min(reference day, days in month).
    - MTD window: [1st, resolved day]; prior window: [1st of previous month,
      min(resolved day, days in previous month)].
    - Revenue budget is pro-rated by resolved day / days in month; percentage
      budgets are the plain mean of the clients' targets. AVAILABILITY has no
      stored target, so its budget is 0.
    - Empty windows yield 0, never None.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from braslog_api.domain.entities.client import Client
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.services.kpi_calendar import YearMonth
from braslog_api.domain.services.monthly_pivot import aggregate

_CENTS: Final[Decimal] = Decimal("0.01")
_ZERO: Final[Decimal] = Decimal("0.00")


@dataclass(frozen=True, slots=True)
class SummaryWindows:
    """Date windows for a reference date."""

    day_of_month: int
    days_in_month: int
    mtd_start: date
    mtd_end: date
    prior_start: date
    prior_end: date


@dataclass(frozen=True, slots=True)
class MetricSummary:
    """Actual / budget / prior-month triple for one KPI type."""

    actual: Decimal
    budget: Decimal
    prior_month: Decimal


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    """Five metric triples plus the resolved calendar position."""

    reference_date: date
    day_of_month: int
    days_in_month: int
    metrics: Mapping[KpiType, MetricSummary]


def resolve_windows(reference: date, requested_day: int | None = None) -> SummaryWindows:
    """Resolve MTD and prior-month windows.

    Args:
        reference: Any date within the month of interest.
        requested_day: Optional day-of-month override; defaults to
            ``reference.day``. Values beyond the month length are clamped.

    Returns:
        SummaryWindows for the month of ``reference``.
    """
    month = YearMonth.of(reference)
    prior = month.previous()
    dim = month.days
    day = max(1, min(requested_day if requested_day is not None else reference.day, dim))
    return SummaryWindows(
        day_of_month=day,
        days_in_month=dim,
        mtd_start=month.first_day,
        mtd_end=month.day(day),
        prior_start=prior.first_day,
        prior_end=prior.day(min(day, prior.days)),
    )


def _q(value: Decimal | None) -> Decimal:
    if value is None:
        return _ZERO
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def _budget(kpi_type: KpiType, clients: Sequence[Client], windows: SummaryWindows) -> Decimal:
    targets = [c.budget_for(kpi_type) for c in clients]
    if kpi_type.is_currency:
        monthly = aggregate(kpi_type, targets)
        if monthly is None:
            return _ZERO
        return _q(monthly * windows.day_of_month / windows.days_in_month)
    return _q(aggregate(kpi_type, targets))


def compute_dashboard_summary(
    reference: date,
    *,
    mtd_entries: Iterable[KpiEntry],
    prior_entries: Iterable[KpiEntry],
    budget_clients: Sequence[Client],
    requested_day: int | None = None,
) -> DashboardSummary:
    """Compute the dashboard summary.

    Args:
        reference: Reference date.
        mtd_entries: Entries matching the filters (window filtering is applied
            here, so a superset is acceptable).
        prior_entries: Entries of the previous month matching the filters.
        budget_clients: Clients whose targets make up the budget.
        requested_day: Optional day-of-month override (clamped).

    Returns:
        DashboardSummary with one triple per KPI type.
    """
    windows = resolve_windows(reference, requested_day)

    mtd: dict[KpiType, list[Decimal]] = {k: [] for k in KpiType}
    for entry in mtd_entries:
        if windows.mtd_start <= entry.date <= windows.mtd_end:
            mtd[entry.kpi_type].append(entry.kpi_value)

    prior: dict[KpiType, list[Decimal]] = {k: [] for k in KpiType}
    for entry in prior_entries:
        if windows.prior_start <= entry.date <= windows.prior_end:
            prior[entry.kpi_type].append(entry.kpi_value)

    metrics = {
        kpi_type: MetricSummary(
            actual=_q(aggregate(kpi_type, mtd[kpi_type])),
            budget=_budget(kpi_type, budget_clients, windows),
            prior_month=_q(aggregate(kpi_type, prior[kpi_type])),
        )
        for kpi_type in KpiType
    }
    return DashboardSummary(
        reference_date=reference,
        day_of_month=windows.day_of_month,
        days_in_month=windows.days_in_month,
        metrics=metrics,
    )
