# src/braslog_api/domain/services/monthly_pivot.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Monthly KPI pivot engine.

Purpose:
    Build one day-by-day pivot table per KPI type for a month:

        * Body rows: one per cost center (non-key-account members), one
          "Sem centro de custo" row for non-key-account clients without a
          cost center, and one row per key-account client.
        * Footer rows: "Total/Média", "Meta diária", "Mês anterior".

    Every cell, row total, column total and footer is computed by a single
    aggregation primitive (:func:`aggregate`): REVENUE sums, percentage types
    average the cells that carry a value. Missing cells are never zero.

Layer:
    domain/services

Notes:
    - The (kpi_type, client_id, day) map is built once per month.
    - "Mês anterior" is truncated to today's day-of-month when the requested
      month is the current month; otherwise the full previous month is used.
    - Percentage daily targets are the plain mean of the clients' targets;
      only the revenue target is spread across the days of the month.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Final
from uuid import UUID

from braslog_api.domain.entities.client import Client
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.services.kpi_calendar import YearMonth

NO_DATA: Final[str] = "-"
UNASSIGNED_LABEL: Final[str] = "Sem centro de custo"
TOTAL_LABEL: Final[str] = "Total/Média"
DAILY_TARGET_LABEL: Final[str] = "Meta diária"
PRIOR_MONTH_LABEL: Final[str] = "Mês anterior"

CellMap = dict[tuple[KpiType, UUID, int], Decimal]


class RowKind(str, Enum):
    """Kind of a pivot row."""

    COST_CENTER = "cost_center"
    UNASSIGNED = "unassigned"
    KEY_ACCOUNT = "key_account"
    TOTAL = "total"
    DAILY_TARGET = "daily_target"
    PRIOR_MONTH = "prior_month"


@dataclass(frozen=True, slots=True)
class DisplayGroup:
    """A body row definition: a label and the clients folded into it."""

    kind: RowKind
    label: str
    key: UUID | None
    client_ids: tuple[UUID, ...]


@dataclass(frozen=True, slots=True)
class PivotRow:
    """One rendered pivot row.

    ``cells[d - 1]`` holds the value of day ``d``; None means "no data".
    """

    kind: RowKind
    label: str
    key: UUID | None
    cells: tuple[Decimal | None, ...]
    total: Decimal | None


@dataclass(frozen=True, slots=True)
class PivotTable:
    """Pivot table of one KPI type."""

    kpi_type: KpiType
    rows: tuple[PivotRow, ...]
    total_row: PivotRow
    daily_target_row: PivotRow
    prior_month_row: PivotRow

    @property
    def footer(self) -> tuple[PivotRow, PivotRow, PivotRow]:
        return (self.total_row, self.daily_target_row, self.prior_month_row)


@dataclass(frozen=True, slots=True)
class MonthlyPivot:
    """All pivot tables of a month."""

    month: YearMonth
    prior_month: YearMonth
    prior_month_cutoff: int
    tables: tuple[PivotTable, ...]

    @property
    def days_in_month(self) -> int:
        return self.month.days

    def table(self, kpi_type: KpiType) -> PivotTable:
        """Return the table of ``kpi_type``."""
        for table in self.tables:
            if table.kpi_type is kpi_type:
                return table
        raise KeyError(kpi_type)


# --------------------------------------------------------------------------- #
# Aggregation primitive                                                       #
# --------------------------------------------------------------------------- #


def aggregate(kpi_type: KpiType, values: Iterable[Decimal | None]) -> Decimal | None:
    """Aggregate values of one KPI type.

    REVENUE sums; every other type takes the arithmetic mean of the values
    that are present. Returns None when no value is present.
    """
    present = [v for v in values if v is not None]
    if not present:
        return None
    total = sum(present, Decimal(0))
    if kpi_type.is_currency:
        return total
    return total / len(present)


def build_cell_map(entries: Iterable[KpiEntry]) -> CellMap:
    """Index entries by (kpi_type, client_id, day_of_month)."""
    return {(e.kpi_type, e.client_id, e.date.day): e.kpi_value for e in entries}


# --------------------------------------------------------------------------- #
# Display grouping                                                            #
# --------------------------------------------------------------------------- #


def build_display_groups(
    clients: Sequence[Client],
    cost_center_names: Mapping[UUID, str],
) -> list[DisplayGroup]:
    """Partition clients into body rows.

    Order: cost centers by name, then the unassigned row, then key accounts
    by name. Cost centers without members in ``clients`` produce no row, and
    the unassigned row only appears when it has members.
    """
    by_center: dict[UUID, list[Client]] = {}
    unassigned: list[Client] = []
    key_accounts: list[Client] = []

    for client in clients:
        if client.is_key_account:
            key_accounts.append(client)
        elif client.cost_center_id is None:
            unassigned.append(client)
        else:
            by_center.setdefault(client.cost_center_id, []).append(client)

    groups: list[DisplayGroup] = []
    for center_id, members in sorted(
        by_center.items(),
        key=lambda item: (cost_center_names.get(item[0], str(item[0])).casefold(), str(item[0])),
    ):
        groups.append(
            DisplayGroup(
                kind=RowKind.COST_CENTER,
                label=cost_center_names.get(center_id, str(center_id)),
                key=center_id,
                client_ids=tuple(c.id for c in members),
            )
        )
    if unassigned:
        groups.append(
            DisplayGroup(
                kind=RowKind.UNASSIGNED,
                label=UNASSIGNED_LABEL,
                key=None,
                client_ids=tuple(c.id for c in unassigned),
            )
        )
    for client in sorted(key_accounts, key=lambda c: (c.name.casefold(), str(c.id))):
        groups.append(
            DisplayGroup(
                kind=RowKind.KEY_ACCOUNT,
                label=client.name,
                key=client.id,
                client_ids=(client.id,),
            )
        )
    return groups


# --------------------------------------------------------------------------- #
# Row builders                                                                #
# --------------------------------------------------------------------------- #


def _group_cells(
    kpi_type: KpiType,
    group: DisplayGroup,
    cells: CellMap,
    days: int,
) -> list[Decimal | None]:
    return [
        aggregate(kpi_type, (cells.get((kpi_type, cid, day)) for cid in group.client_ids))
        for day in range(1, days + 1)
    ]


def _column_aggregate(
    kpi_type: KpiType,
    rows: Sequence[Sequence[Decimal | None]],
    days: int,
) -> list[Decimal | None]:
    return [aggregate(kpi_type, (row[day - 1] for row in rows)) for day in range(1, days + 1)]


def _daily_target_row(kpi_type: KpiType, clients: Sequence[Client], days: int) -> PivotRow:
    targets = [c.budget_for(kpi_type) for c in clients]
    present = [t for t in targets if t is not None]
    if not present:
        return PivotRow(
            kind=RowKind.DAILY_TARGET,
            label=DAILY_TARGET_LABEL,
            key=None,
            cells=(None,) * days,
            total=None,
        )
    if kpi_type.is_currency:
        monthly = sum(present, Decimal(0))
        daily = monthly / days
        return PivotRow(
            kind=RowKind.DAILY_TARGET,
            label=DAILY_TARGET_LABEL,
            key=None,
            cells=(daily,) * days,
            total=monthly,
        )
    mean = sum(present, Decimal(0)) / len(present)
    return PivotRow(
        kind=RowKind.DAILY_TARGET,
        label=DAILY_TARGET_LABEL,
        key=None,
        cells=(mean,) * days,
        total=mean,
    )


def _prior_month_row(
    kpi_type: KpiType,
    groups: Sequence[DisplayGroup],
    prior_cells: CellMap,
    prior_days: int,
    cutoff: int,
    days: int,
) -> PivotRow:
    populated = min(cutoff, prior_days)
    group_rows = [_group_cells(kpi_type, g, prior_cells, prior_days) for g in groups]
    by_day = _column_aggregate(kpi_type, group_rows, prior_days) if group_rows else []
    window = [by_day[d - 1] if by_day else None for d in range(1, populated + 1)]
    cells = tuple(window[d - 1] if d <= populated else None for d in range(1, days + 1))
    return PivotRow(
        kind=RowKind.PRIOR_MONTH,
        label=PRIOR_MONTH_LABEL,
        key=None,
        cells=cells,
        total=aggregate(kpi_type, window),
    )


def build_pivot_table(
    kpi_type: KpiType,
    *,
    month: YearMonth,
    groups: Sequence[DisplayGroup],
    clients: Sequence[Client],
    cells: CellMap,
    prior_cells: CellMap,
    prior_days: int,
    prior_cutoff: int,
) -> PivotTable:
    """Build the pivot table of a single KPI type."""
    days = month.days
    body: list[PivotRow] = []
    for group in groups:
        row_cells = _group_cells(kpi_type, group, cells, days)
        body.append(
            PivotRow(
                kind=group.kind,
                label=group.label,
                key=group.key,
                cells=tuple(row_cells),
                total=aggregate(kpi_type, row_cells),
            )
        )

    footer_cells = _column_aggregate(kpi_type, [r.cells for r in body], days)
    total_row = PivotRow(
        kind=RowKind.TOTAL,
        label=TOTAL_LABEL,
        key=None,
        cells=tuple(footer_cells),
        total=aggregate(kpi_type, footer_cells),
    )

    return PivotTable(
        kpi_type=kpi_type,
        rows=tuple(body),
        total_row=total_row,
        daily_target_row=_daily_target_row(kpi_type, clients, days),
        prior_month_row=_prior_month_row(
            kpi_type, groups, prior_cells, prior_days, prior_cutoff, days
        ),
    )


def prior_month_cutoff(month: YearMonth, today: date) -> int:
    """Return the last populated day of the prior-month comparison row.

    When ``month`` is the current month only days up to today's day-of-month
    are compared; otherwise the whole previous month is.
    """
    prior = month.previous()
    if YearMonth.of(today) == month:
        return min(today.day, prior.days)
    return prior.days


def build_monthly_pivot(
    month: YearMonth,
    *,
    clients: Sequence[Client],
    cost_center_names: Mapping[UUID, str],
    entries: Iterable[KpiEntry],
    prior_entries: Iterable[KpiEntry],
    today: date,
) -> MonthlyPivot:
    """Build every KPI pivot table of ``month``.

    Args:
        month: Requested month.
        clients: The client set shown in the pivot.
        cost_center_names: Cost center id -> display name.
        entries: Entries dated within ``month`` (already client-filtered).
        prior_entries: Entries dated within the previous month.
        today: Current date in the business timezone.

    Returns:
        MonthlyPivot with one table per KPI type, in KpiType order.
    """
    client_ids = {c.id for c in clients}
    cells = build_cell_map(e for e in entries if e.client_id in client_ids)
    prior_cells = build_cell_map(e for e in prior_entries if e.client_id in client_ids)
    groups = build_display_groups(clients, cost_center_names)
    prior = month.previous()
    cutoff = prior_month_cutoff(month, today)

    tables = tuple(
        build_pivot_table(
            kpi_type,
            month=month,
            groups=groups,
            clients=clients,
            cells=cells,
            prior_cells=prior_cells,
            prior_days=prior.days,
            prior_cutoff=cutoff,
        )
        for kpi_type in KpiType
    )
    return MonthlyPivot(month=month, prior_month=prior, prior_month_cutoff=cutoff, tables=tables)


# --------------------------------------------------------------------------- #
# Display formatting                                                          #
# --------------------------------------------------------------------------- #


def format_pivot_value(kpi_type: KpiType, value: Decimal | None) -> str:
    """Render a pivot value.

    REVENUE renders as a pt-BR integer with ``.`` thousands separators;
    percentages as a whole percent. Both round half-up. None renders as the
    "no data" marker.
    """
    if value is None:
        return NO_DATA
    whole = int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    if kpi_type.is_currency:
        return f"{whole:,}".replace(",", ".")
    return f"{whole}%"
