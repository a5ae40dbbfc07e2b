# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""KPI entries HTTP router (v1).

Purpose:
    Expose the daily entry form, the monthly pivot and plain entry CRUD:

        * PUT    /v1/kpi-entries/daily/{date}
        * GET    /v1/kpi-entries/daily/{date}
        * GET    /v1/kpi-entries/monthly/{month}
        * GET    /v1/kpi-entries/stats
        * GET    /v1/kpi-entries
        * POST   /v1/kpi-entries
        * GET    /v1/kpi-entries/{entry_id}
        * PATCH  /v1/kpi-entries/{entry_id}
        * DELETE /v1/kpi-entries/{entry_id}

Layer:
    adapters/routers

Notes:
    - The daily PUT is a full snapshot for the clients it references: values
      omitted for a referenced client are deleted.
    - "Today" for the pivot's prior-month truncation comes from the business
      clock dependency so tests can pin it.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable
from typing import Annotated, Any, Final
from uuid import UUID

from fastapi import Depends, Path, Query, Request, Response, status

from braslog_api.adapters.dependencies.uow import get_business_clock, get_uow
from braslog_api.adapters.presenters.base_presenter import BasePresenter
from braslog_api.adapters.presenters.clients_presenter import present_deleted
from braslog_api.adapters.presenters.kpi_presenter import (
    present_daily_snapshot,
    present_kpi_entry,
    present_kpi_stats,
    present_monthly_pivot,
    present_snapshot_result,
)
from braslog_api.adapters.routers.base_router import BaseRouter, PageParams, request_trace_id
from braslog_api.adapters.schemas.http.clients import DeletedHTTP
from braslog_api.adapters.schemas.http.envelopes import PaginatedEnvelope, SuccessEnvelope
from braslog_api.adapters.schemas.http.kpi import (
    DailySnapshotBody,
    DailySnapshotHTTP,
    DailySnapshotResultHTTP,
    KpiEntryCreateBody,
    KpiEntryHTTP,
    KpiEntryStatsHTTP,
    KpiEntryUpdateBody,
    MonthlyPivotHTTP,
)
from braslog_api.application.schemas.dto.kpi import (
    BuildMonthlyPivotRequest,
    CreateKpiEntryRequest,
    GetDailySnapshotRequest,
    ListKpiEntriesRequest,
    UpdateKpiEntryRequest,
    UpsertDailySnapshotRequest,
)
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.kpi.build_monthly_pivot import BuildMonthlyPivotUseCase
from braslog_api.application.use_cases.kpi.create_kpi_entry import CreateKpiEntryUseCase
from braslog_api.application.use_cases.kpi.delete_kpi_entry import DeleteKpiEntryUseCase
from braslog_api.application.use_cases.kpi.get_daily_snapshot import GetDailySnapshotUseCase
from braslog_api.application.use_cases.kpi.get_kpi_entry import GetKpiEntryUseCase
from braslog_api.application.use_cases.kpi.list_kpi_entries import (
    GetKpiEntryStatsUseCase,
    ListKpiEntriesUseCase,
)
from braslog_api.application.use_cases.kpi.update_kpi_entry import UpdateKpiEntryUseCase
from braslog_api.application.use_cases.kpi.upsert_daily_snapshot import (
    UpsertDailySnapshotUseCase,
)
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.exceptions.common import InvalidRequest
from braslog_api.domain.services.kpi_calendar import YearMonth
from braslog_api.domain.services.kpi_values import ClientDailyValues
from braslog_api.infrastructure.auth.jwt_dependency import auth_required
from braslog_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

router = BaseRouter(
    version="v1",
    resource="kpi-entries",
    tags=["KPI Entries"],
    dependencies=[Depends(auth_required())],
)

UowDep = Annotated[UnitOfWork, Depends(get_uow)]
ClockDep = Annotated[Callable[[], dt.date], Depends(get_business_clock)]

INVALID_MONTH: Final[str] = "Mês inválido; use o formato AAAA-MM"
INVALID_RANGE: Final[str] = "Data inicial deve ser anterior ou igual à data final"


def _parse_month(raw: str) -> YearMonth:
    try:
        return YearMonth.parse(raw)
    except ValueError as exc:
        raise InvalidRequest(INVALID_MONTH, details={"month": raw}) from exc


# --------------------------------------------------------------------------- #
# Daily snapshot                                                              #
# --------------------------------------------------------------------------- #


@router.put(
    "/daily/{date}",
    summary="Save the daily KPI snapshot",
    description=(
        "Reconcile the persisted entries of `date` with the submitted per-client "
        "values: new values are inserted, changed values updated, and values "
        "omitted for a submitted client deleted. Clients absent from the body "
        "are left untouched."
    ),
    response_model=SuccessEnvelope[DailySnapshotResultHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def upsert_daily_snapshot(
    request: Request,
    response: Response,
    uow: UowDep,
    date: Annotated[dt.date, Path(description="Business date (YYYY-MM-DD).")],
    body: DailySnapshotBody,
) -> Any:
    trace_id = request_trace_id(request)
    logger.info(
        "kpi.api.daily_snapshot.put.start",
        extra={"date": date.isoformat(), "clients": len(body.entries), "trace_id": trace_id},
    )
    dto = await UpsertDailySnapshotUseCase(uow=uow).execute(
        UpsertDailySnapshotRequest(
            date=date,
            entries=[
                ClientDailyValues(
                    client_id=row.client_id,
                    revenue=row.revenue,
                    on_time=row.on_time,
                    occupancy=row.occupancy,
                    third_party=row.third_party,
                    availability=row.availability,
                )
                for row in body.entries
            ],
        )
    )
    result = BasePresenter.present_success(data=present_snapshot_result(dto), trace_id=trace_id)
    return BaseRouter.send(response, result)


@router.get(
    "/daily/{date}",
    summary="Read the KPI entries of a date",
    response_model=SuccessEnvelope[DailySnapshotHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def get_daily_snapshot(
    request: Request,
    response: Response,
    uow: UowDep,
    date: Annotated[dt.date, Path(description="Business date (YYYY-MM-DD).")],
    client_id: Annotated[UUID | None, Query()] = None,
    kpi_type: Annotated[KpiType | None, Query()] = None,
) -> Any:
    dto = await GetDailySnapshotUseCase(uow=uow).execute(
        GetDailySnapshotRequest(date=date, client_id=client_id, kpi_type=kpi_type)
    )
    result = BasePresenter.present_success(
        data=present_daily_snapshot(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)


# --------------------------------------------------------------------------- #
# Monthly pivot                                                               #
# --------------------------------------------------------------------------- #


@router.get(
    "/monthly/{month}",
    summary="Monthly KPI pivot",
    description=(
        "Return the month's raw entries and one pivot table per KPI type with "
        "cost-center, unassigned and key-account rows, daily totals, the daily "
        "target and the prior-month comparison."
    ),
    response_model=SuccessEnvelope[MonthlyPivotHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def get_monthly_pivot(
    request: Request,
    response: Response,
    uow: UowDep,
    clock: ClockDep,
    month: Annotated[str, Path(description="Month (YYYY-MM).", examples=["2025-01"])],
    client_id: Annotated[UUID | None, Query(description="Restrict to one client.")] = None,
) -> Any:
    ym = _parse_month(month)
    pivot = await BuildMonthlyPivotUseCase(uow=uow, clock=clock).execute(
        BuildMonthlyPivotRequest(month=ym, client_id=client_id)
    )
    result = BasePresenter.present_success(
        data=present_monthly_pivot(pivot), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)


# --------------------------------------------------------------------------- #
# Entry CRUD                                                                  #
# --------------------------------------------------------------------------- #


@router.get(
    "/stats",
    summary="KPI entry counts",
    response_model=SuccessEnvelope[KpiEntryStatsHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def kpi_entry_stats(
    request: Request, response: Response, uow: UowDep, clock: ClockDep
) -> Any:
    dto = await GetKpiEntryStatsUseCase(uow=uow, clock=clock).execute()
    result = BasePresenter.present_success(
        data=present_kpi_stats(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)


@router.get(
    "",
    summary="List KPI entries",
    response_model=PaginatedEnvelope[KpiEntryHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def list_kpi_entries(
    request: Request,
    response: Response,
    uow: UowDep,
    paging: Annotated[PageParams, Depends(BaseRouter.page_params)],
    start_date: Annotated[dt.date | None, Query()] = None,
    end_date: Annotated[dt.date | None, Query()] = None,
    client_id: Annotated[UUID | None, Query()] = None,
    kpi_type: Annotated[KpiType | None, Query()] = None,
) -> Any:
    if start_date and end_date and start_date > end_date:
        raise InvalidRequest(
            INVALID_RANGE,
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
    page = await ListKpiEntriesUseCase(uow=uow).execute(
        ListKpiEntriesRequest(
            start_date=start_date,
            end_date=end_date,
            client_id=client_id,
            kpi_type=kpi_type,
            page=paging.page,
            page_size=paging.page_size,
        )
    )
    result = BasePresenter.present_paginated(
        items=[present_kpi_entry(e) for e in page.items],
        page=page.page,
        page_size=page.page_size,
        total=page.total,
        trace_id=request_trace_id(request),
    )
    return BaseRouter.send(response, result)


@router.post(
    "",
    summary="Create a KPI entry",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessEnvelope[KpiEntryHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def create_kpi_entry(
    request: Request, response: Response, uow: UowDep, body: KpiEntryCreateBody
) -> Any:
    dto = await CreateKpiEntryUseCase(uow=uow).execute(
        CreateKpiEntryRequest(
            date=body.date,
            client_id=body.client_id,
            kpi_type=body.kpi_type,
            kpi_value=body.kpi_value,
        )
    )
    result = BasePresenter.present_success(
        data=present_kpi_entry(dto),
        trace_id=request_trace_id(request),
        status_code=status.HTTP_201_CREATED,
    )
    return BaseRouter.send(response, result)


@router.get(
    "/{entry_id}",
    summary="Get a KPI entry",
    response_model=SuccessEnvelope[KpiEntryHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def get_kpi_entry(
    request: Request, response: Response, uow: UowDep, entry_id: UUID
) -> Any:
    dto = await GetKpiEntryUseCase(uow=uow).execute(entry_id)
    result = BasePresenter.present_success(
        data=present_kpi_entry(dto), trace_id=request_trace_id(request), etag=True
    )
    return BaseRouter.send(response, result)


@router.patch(
    "/{entry_id}",
    summary="Update a KPI entry",
    response_model=SuccessEnvelope[KpiEntryHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def update_kpi_entry(
    request: Request,
    response: Response,
    uow: UowDep,
    entry_id: UUID,
    body: KpiEntryUpdateBody,
) -> Any:
    dto = await UpdateKpiEntryUseCase(uow=uow).execute(
        UpdateKpiEntryRequest(entry_id=entry_id, changes=body.model_dump(exclude_unset=True))
    )
    result = BasePresenter.present_success(
        data=present_kpi_entry(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)


@router.delete(
    "/{entry_id}",
    summary="Delete a KPI entry",
    response_model=SuccessEnvelope[DeletedHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def delete_kpi_entry(
    request: Request, response: Response, uow: UowDep, entry_id: UUID
) -> Any:
    dto = await DeleteKpiEntryUseCase(uow=uow).execute(entry_id)
    result = BasePresenter.present_success(
        data=present_deleted(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)
