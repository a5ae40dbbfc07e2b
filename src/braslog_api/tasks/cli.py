# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Braslog CLI: operational commands (db, report).

Commands:
    db create-tables    Create the KPI tables from the ORM metadata (dev/test only).
    report pivot        Print the monthly pivot tables for a month.
    report summary      Print the dashboard summary for a date.

Environment:
    DATABASE_URL        Async SQLAlchemy URL.
    BUSINESS_TIMEZONE   IANA timezone defining "today" (pivot truncation).
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from uuid import UUID

import typer

from braslog_api.adapters.uow import SqlAlchemyUnitOfWork
from braslog_api.application.schemas.dto.kpi import (
    BuildMonthlyPivotRequest,
    ComputeDashboardSummaryRequest,
)
from braslog_api.application.use_cases.kpi.build_monthly_pivot import BuildMonthlyPivotUseCase
from braslog_api.application.use_cases.kpi.compute_dashboard_summary import (
    ComputeDashboardSummaryUseCase,
)
from braslog_api.config.settings import get_settings
from braslog_api.domain.exceptions.base import DomainError
from braslog_api.domain.services.dashboard_summary import DashboardSummary
from braslog_api.domain.services.kpi_calendar import YearMonth
from braslog_api.domain.services.monthly_pivot import MonthlyPivot, format_pivot_value
from braslog_api.infrastructure.database.models.base import metadata
from braslog_api.infrastructure.database.models.kpi import (  # noqa: F401
    ClientModel,
    CostCenterModel,
    KpiEntryModel,
)
from braslog_api.infrastructure.database.session import (
    dispose_engine,
    get_engine,
    get_sessionmaker,
)
from braslog_api.infrastructure.logging.logger import configure_root_logging, get_json_logger

configure_root_logging()
log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)
db_app = typer.Typer(no_args_is_help=True)
report_app = typer.Typer(no_args_is_help=True)
app.add_typer(db_app, name="db")
app.add_typer(report_app, name="report")


def _uow() -> SqlAlchemyUnitOfWork:
    get_engine()
    return SqlAlchemyUnitOfWork(session_factory=get_sessionmaker())


def render_pivot(pivot: MonthlyPivot) -> list[str]:
    """Render every pivot table as tab-separated text lines."""
    days = [str(d) for d in range(1, pivot.days_in_month + 1)]
    lines: list[str] = []
    for table in pivot.tables:
        lines.append(f"== {table.kpi_type.title} ({pivot.month}) ==")
        lines.append("\t".join(["", *days, "Total"]))
        for row in (*table.rows, *table.footer):
            cells = [format_pivot_value(table.kpi_type, v) for v in row.cells]
            total = format_pivot_value(table.kpi_type, row.total)
            lines.append("\t".join([row.label, *cells, total]))
        lines.append("")
    return lines


def render_summary(summary: DashboardSummary) -> list[str]:
    """Render the dashboard summary as aligned text lines."""
    lines = [
        f"Data: {summary.reference_date.isoformat()} "
        f"(dia {summary.day_of_month}/{summary.days_in_month})",
        f"{'KPI':<16}{'Realizado':>14}{'Orçado':>14}{'Mês anterior':>14}",
    ]
    for kpi_type, metric in summary.metrics.items():
        lines.append(
            f"{kpi_type.title:<16}"
            f"{format_pivot_value(kpi_type, metric.actual):>14}"
            f"{format_pivot_value(kpi_type, metric.budget):>14}"
            f"{format_pivot_value(kpi_type, metric.prior_month):>14}"
        )
    return lines


@db_app.command("create-tables")
def create_tables() -> None:
    """Create the KPI tables (use Alembic migrations in deployed environments)."""

    async def _run() -> None:
        engine = get_engine()
        try:
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        finally:
            await dispose_engine()
        log.info("db.create_tables.done", extra={"tables": sorted(metadata.tables)})

    asyncio.run(_run())
    typer.echo("Tabelas criadas.")


@report_app.command("pivot")
def report_pivot(
    month: str = typer.Option(..., help="Month as YYYY-MM."),  # noqa: B008
    client_id: UUID | None = typer.Option(None, help="Restrict to one client."),  # noqa: B008
) -> None:
    """Print the monthly pivot tables."""
    try:
        ym = YearMonth.parse(month)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--month") from exc

    async def _run() -> MonthlyPivot:
        try:
            use_case = BuildMonthlyPivotUseCase(uow=_uow(), clock=get_settings().business_today)
            result = await use_case.execute(BuildMonthlyPivotRequest(month=ym, client_id=client_id))
            return result.pivot
        finally:
            await dispose_engine()

    try:
        pivot = asyncio.run(_run())
    except DomainError as exc:
        log.error("report.pivot.failed", extra={"code": exc.code, "details": exc.details})
        typer.echo(exc.message, err=True)
        raise typer.Exit(code=1) from exc

    for line in render_pivot(pivot):
        typer.echo(line)


@report_app.command("summary")
def report_summary(
    on: datetime = typer.Option(  # noqa: B008
        ..., "--date", formats=["%Y-%m-%d"], help="Reference date."
    ),
) -> None:
    """Print the month-to-date dashboard summary."""
    reference: date = on.date()

    async def _run() -> DashboardSummary:
        try:
            use_case = ComputeDashboardSummaryUseCase(uow=_uow())
            return await use_case.execute(ComputeDashboardSummaryRequest(date=reference))
        finally:
            await dispose_engine()

    try:
        summary = asyncio.run(_run())
    except DomainError as exc:
        log.error("report.summary.failed", extra={"code": exc.code, "details": exc.details})
        typer.echo(exc.message, err=True)
        raise typer.Exit(code=1) from exc

    for line in render_summary(summary):
        typer.echo(line)


if __name__ == "__main__":
    app()
