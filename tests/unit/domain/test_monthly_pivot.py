# tests/unit/domain/test_monthly_pivot.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from braslog_api.domain.entities.client import Client
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.services.kpi_calendar import YearMonth
from braslog_api.domain.services.monthly_pivot import (
    NO_DATA,
    UNASSIGNED_LABEL,
    RowKind,
    aggregate,
    build_display_groups,
    build_monthly_pivot,
    format_pivot_value,
    prior_month_cutoff,
)

JAN = YearMonth(2025, 1)


def _entry(on: date, client_id: UUID, kpi_type: KpiType, value: str) -> KpiEntry:
    return KpiEntry(
        id=uuid4(), date=on, client_id=client_id, kpi_type=kpi_type, kpi_value=Decimal(value)
    )


@dataclass(frozen=True)
class Layout:
    """Two clients in "Sul", one without a cost center, one key account."""

    a: Client
    b: Client
    c: Client
    k: Client
    names: dict[UUID, str]

    @property
    def clients(self) -> list[Client]:
        return [self.a, self.b, self.c, self.k]


@pytest.fixture
def layout() -> Layout:
    sul, norte = uuid4(), uuid4()
    a = Client(
        id=uuid4(),
        name="Alfa",
        cost_center_id=sul,
        budget_revenue=Decimal("3100"),
        budget_on_time=Decimal("90"),
    )
    b = Client(
        id=uuid4(),
        name="Beta",
        cost_center_id=sul,
        budget_revenue=Decimal("6200"),
        budget_on_time=Decimal("96"),
    )
    c = Client(id=uuid4(), name="Gama")
    k = Client(id=uuid4(), name="Zeta", cost_center_id=norte, is_key_account=True)
    return Layout(a=a, b=b, c=c, k=k, names={sul: "Sul", norte: "Norte"})


# --------------------------------------------------------------------------- #
# Primitives
# --------------------------------------------------------------------------- #


def test_aggregate_sums_revenue_and_averages_percentages() -> None:
    values = [Decimal("10"), None, Decimal("20")]
    assert aggregate(KpiType.REVENUE, values) == Decimal("30")
    assert aggregate(KpiType.ON_TIME, values) == Decimal("15")
    assert aggregate(KpiType.ON_TIME, [None, None]) is None
    assert aggregate(KpiType.REVENUE, []) is None


@pytest.mark.parametrize(
    ("kpi_type", "value", "expected"),
    [
        (KpiType.REVENUE, Decimal("1500"), "1.500"),
        (KpiType.REVENUE, Decimal("1234567.50"), "1.234.568"),
        (KpiType.REVENUE, Decimal("0"), "0"),
        (KpiType.ON_TIME, Decimal("95"), "95%"),
        (KpiType.ON_TIME, Decimal("94.5"), "95%"),
        (KpiType.OCCUPANCY, Decimal("94.49"), "94%"),
        (KpiType.AVAILABILITY, None, NO_DATA),
    ],
)
def test_format_pivot_value(kpi_type: KpiType, value: Decimal | None, expected: str) -> None:
    assert format_pivot_value(kpi_type, value) == expected


def test_display_groups_order_and_membership(layout: Layout) -> None:
    groups = build_display_groups(layout.clients, layout.names)

    assert [(g.kind, g.label) for g in groups] == [
        (RowKind.COST_CENTER, "Sul"),
        (RowKind.UNASSIGNED, UNASSIGNED_LABEL),
        (RowKind.KEY_ACCOUNT, "Zeta"),
    ]
    a, b = layout.a, layout.b
    assert groups[0].client_ids == (a.id, b.id)


def test_display_groups_skip_empty_unassigned_row() -> None:
    cc = uuid4()
    only = Client(id=uuid4(), name="Alfa", cost_center_id=cc)
    groups = build_display_groups([only], {cc: "Sul"})
    assert [g.kind for g in groups] == [RowKind.COST_CENTER]


# --------------------------------------------------------------------------- #
# Tables
# --------------------------------------------------------------------------- #


def test_revenue_rows_sum_members_and_totals(layout: Layout) -> None:
    a, b, c = layout.a, layout.b, layout.c
    entries = [
        _entry(date(2025, 1, 1), a.id, KpiType.REVENUE, "1000"),
        _entry(date(2025, 1, 1), b.id, KpiType.REVENUE, "500"),
        _entry(date(2025, 1, 2), a.id, KpiType.REVENUE, "200"),
        _entry(date(2025, 1, 2), c.id, KpiType.REVENUE, "50"),
    ]
    pivot = build_monthly_pivot(
        JAN,
        clients=layout.clients,
        cost_center_names=layout.names,
        entries=entries,
        prior_entries=[],
        today=date(2025, 3, 1),
    )
    table = pivot.table(KpiType.REVENUE)
    sul, unassigned, key_account = table.rows

    assert len(sul.cells) == 31
    assert sul.cells[0] == Decimal("1500")
    assert sul.cells[1] == Decimal("200")
    assert sul.cells[2] is None
    assert sul.total == sum(c for c in sul.cells if c is not None) == Decimal("1700")
    assert unassigned.total == Decimal("50")
    assert key_account.total is None

    assert table.total_row.cells[0] == Decimal("1500")
    assert table.total_row.cells[1] == Decimal("250")
    assert table.total_row.total == Decimal("1750")
    assert format_pivot_value(KpiType.REVENUE, sul.cells[0]) == "1.500"


def test_percentage_rows_average_present_cells(layout: Layout) -> None:
    a, b, c = layout.a, layout.b, layout.c
    entries = [
        _entry(date(2025, 1, 1), a.id, KpiType.ON_TIME, "90"),
        _entry(date(2025, 1, 1), b.id, KpiType.ON_TIME, "96"),
        _entry(date(2025, 1, 2), a.id, KpiType.ON_TIME, "100"),
        _entry(date(2025, 1, 1), c.id, KpiType.ON_TIME, "80"),
    ]
    pivot = build_monthly_pivot(
        JAN,
        clients=layout.clients,
        cost_center_names=layout.names,
        entries=entries,
        prior_entries=[],
        today=date(2025, 3, 1),
    )
    table = pivot.table(KpiType.ON_TIME)
    sul, unassigned, _ = table.rows

    assert sul.cells[0] == Decimal("93")
    assert sul.cells[1] == Decimal("100")
    assert sul.total == Decimal("96.5")
    assert format_pivot_value(KpiType.ON_TIME, sul.total) == "97%"
    assert unassigned.cells[0] == Decimal("80")
    assert table.total_row.cells[0] == Decimal("86.5")
    assert format_pivot_value(KpiType.ON_TIME, table.total_row.cells[0]) == "87%"


def test_daily_target_row(layout: Layout) -> None:
    pivot = build_monthly_pivot(
        JAN,
        clients=layout.clients,
        cost_center_names=layout.names,
        entries=[],
        prior_entries=[],
        today=date(2025, 3, 1),
    )
    revenue = pivot.table(KpiType.REVENUE).daily_target_row
    assert set(revenue.cells) == {Decimal("300")}
    assert revenue.total == Decimal("9300")

    on_time = pivot.table(KpiType.ON_TIME).daily_target_row
    assert set(on_time.cells) == {Decimal("93")}
    assert on_time.total == Decimal("93")

    availability = pivot.table(KpiType.AVAILABILITY).daily_target_row
    assert set(availability.cells) == {None}
    assert availability.total is None


def test_prior_month_row_truncates_to_today_in_current_month(layout: Layout) -> None:
    a = layout.a
    prior = [
        _entry(date(2024, 12, 5), a.id, KpiType.REVENUE, "400"),
        _entry(date(2024, 12, 20), a.id, KpiType.REVENUE, "999"),
    ]

    current = build_monthly_pivot(
        JAN,
        clients=layout.clients,
        cost_center_names=layout.names,
        entries=[],
        prior_entries=prior,
        today=date(2025, 1, 10),
    )
    row = current.table(KpiType.REVENUE).prior_month_row
    assert current.prior_month_cutoff == 10
    assert row.cells[4] == Decimal("400")
    assert row.cells[19] is None
    assert row.total == Decimal("400")

    past = build_monthly_pivot(
        JAN,
        clients=layout.clients,
        cost_center_names=layout.names,
        entries=[],
        prior_entries=prior,
        today=date(2025, 3, 1),
    )
    row = past.table(KpiType.REVENUE).prior_month_row
    assert past.prior_month_cutoff == 31
    assert row.cells[19] == Decimal("999")
    assert row.total == Decimal("1399")


def test_prior_month_total_includes_days_beyond_shorter_month() -> None:
    client = Client(id=uuid4(), name="Alfa")
    pivot = build_monthly_pivot(
        YearMonth(2025, 2),
        clients=[client],
        cost_center_names={},
        entries=[],
        prior_entries=[_entry(date(2025, 1, 30), client.id, KpiType.REVENUE, "700")],
        today=date(2025, 6, 1),
    )
    row = pivot.table(KpiType.REVENUE).prior_month_row
    assert len(row.cells) == 28
    assert set(row.cells) == {None}
    assert row.total == Decimal("700")


def test_prior_month_cutoff_clamps_to_previous_month_length() -> None:
    assert prior_month_cutoff(YearMonth(2025, 3), date(2025, 3, 30)) == 28
    assert prior_month_cutoff(YearMonth(2025, 3), date(2025, 4, 2)) == 28
    assert prior_month_cutoff(YearMonth(2025, 1), date(2025, 1, 8)) == 8


def test_empty_month_renders_no_data_everywhere() -> None:
    pivot = build_monthly_pivot(
        YearMonth(2025, 2),
        clients=[],
        cost_center_names={},
        entries=[],
        prior_entries=[],
        today=date(2025, 6, 1),
    )
    assert pivot.days_in_month == 28
    assert [t.kpi_type for t in pivot.tables] == list(KpiType)
    for table in pivot.tables:
        assert table.rows == ()
        for row in table.footer:
            assert len(row.cells) == 28
            assert {format_pivot_value(table.kpi_type, c) for c in row.cells} == {NO_DATA}
            assert format_pivot_value(table.kpi_type, row.total) == NO_DATA


def test_entries_of_clients_outside_the_set_are_ignored() -> None:
    shown = Client(id=uuid4(), name="Alfa")
    pivot = build_monthly_pivot(
        JAN,
        clients=[shown],
        cost_center_names={},
        entries=[_entry(date(2025, 1, 3), uuid4(), KpiType.REVENUE, "10")],
        prior_entries=[],
        today=date(2025, 3, 1),
    )
    assert pivot.table(KpiType.REVENUE).total_row.total is None
