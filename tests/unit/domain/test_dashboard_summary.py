# tests/unit/domain/test_dashboard_summary.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from braslog_api.domain.entities.client import Client
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.services.dashboard_summary import (
    compute_dashboard_summary,
    resolve_windows,
)


def _entry(on: date, client_id: UUID, kpi_type: KpiType, value: str) -> KpiEntry:
    return KpiEntry(
        id=uuid4(), date=on, client_id=client_id, kpi_type=kpi_type, kpi_value=Decimal(value)
    )


def test_windows_clamp_prior_month_to_its_length() -> None:
    windows = resolve_windows(date(2025, 3, 31))
    assert windows.day_of_month == 31
    assert windows.days_in_month == 31
    assert windows.mtd_start == date(2025, 3, 1)
    assert windows.mtd_end == date(2025, 3, 31)
    assert windows.prior_start == date(2025, 2, 1)
    assert windows.prior_end == date(2025, 2, 28)


@pytest.mark.parametrize(("requested", "expected"), [(40, 30), (0, 1), (10, 10), (None, 15)])
def test_requested_day_is_clamped(requested: int | None, expected: int) -> None:
    assert resolve_windows(date(2025, 6, 15), requested).day_of_month == expected


def test_revenue_budget_is_prorated_by_day() -> None:
    client = Client(id=uuid4(), name="Alfa", budget_revenue=Decimal("3000"))
    summary = compute_dashboard_summary(
        date(2025, 6, 15), mtd_entries=[], prior_entries=[], budget_clients=[client]
    )
    assert summary.metrics[KpiType.REVENUE].budget == Decimal("1500.00")
    assert summary.day_of_month == 15
    assert summary.days_in_month == 30


def test_revenue_budget_scales_linearly_with_day() -> None:
    client = Client(id=uuid4(), name="Alfa", budget_revenue=Decimal("3000"))
    budgets = [
        compute_dashboard_summary(
            date(2025, 6, 1),
            mtd_entries=[],
            prior_entries=[],
            budget_clients=[client],
            requested_day=day,
        )
        .metrics[KpiType.REVENUE]
        .budget
        for day in (10, 20, 30)
    ]
    assert budgets == [Decimal("1000.00"), Decimal("2000.00"), Decimal("3000.00")]


def test_percentage_budgets_are_means_and_not_prorated() -> None:
    clients = [
        Client(id=uuid4(), name="Alfa", budget_on_time=Decimal("90")),
        Client(id=uuid4(), name="Beta", budget_on_time=Decimal("95")),
        Client(id=uuid4(), name="Gama"),
    ]
    summary = compute_dashboard_summary(
        date(2025, 6, 3), mtd_entries=[], prior_entries=[], budget_clients=clients
    )
    assert summary.metrics[KpiType.ON_TIME].budget == Decimal("92.50")
    assert summary.metrics[KpiType.AVAILABILITY].budget == Decimal("0.00")
    assert summary.metrics[KpiType.OCCUPANCY].budget == Decimal("0.00")


def test_actuals_and_prior_month_respect_windows() -> None:
    a = uuid4()
    mtd = [
        _entry(date(2025, 6, 1), a, KpiType.REVENUE, "100"),
        _entry(date(2025, 6, 10), a, KpiType.REVENUE, "250.50"),
        _entry(date(2025, 6, 11), a, KpiType.REVENUE, "999"),
        _entry(date(2025, 6, 2), a, KpiType.ON_TIME, "90"),
        _entry(date(2025, 6, 3), a, KpiType.ON_TIME, "95"),
    ]
    prior = [
        _entry(date(2025, 5, 10), a, KpiType.REVENUE, "80"),
        _entry(date(2025, 5, 11), a, KpiType.REVENUE, "70"),
        _entry(date(2025, 5, 4), a, KpiType.ON_TIME, "88"),
    ]
    summary = compute_dashboard_summary(
        date(2025, 6, 10), mtd_entries=mtd, prior_entries=prior, budget_clients=[]
    )

    revenue = summary.metrics[KpiType.REVENUE]
    assert revenue.actual == Decimal("350.50")
    assert revenue.prior_month == Decimal("80.00")
    assert revenue.budget == Decimal("0.00")

    on_time = summary.metrics[KpiType.ON_TIME]
    assert on_time.actual == Decimal("92.50")
    assert on_time.prior_month == Decimal("88.00")


def test_empty_windows_yield_zero_for_every_type() -> None:
    summary = compute_dashboard_summary(
        date(2025, 2, 28), mtd_entries=[], prior_entries=[], budget_clients=[]
    )
    assert list(summary.metrics) == list(KpiType)
    for metric in summary.metrics.values():
        assert (metric.actual, metric.budget, metric.prior_month) == (
            Decimal("0.00"),
            Decimal("0.00"),
            Decimal("0.00"),
        )
