# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Dashboard HTTP router (v1).

Routes:
    * GET /v1/dashboard/summary

Month-to-date actuals, pro-rated budgets and prior-month figures per KPI type,
optionally narrowed to a set of clients and/or cost centers.
"""

from __future__ import annotations

import datetime as dt
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Query, Request, Response

from braslog_api.adapters.dependencies.uow import get_uow
from braslog_api.adapters.presenters.base_presenter import BasePresenter
from braslog_api.adapters.presenters.kpi_presenter import present_dashboard_summary
from braslog_api.adapters.routers.base_router import BaseRouter, request_trace_id
from braslog_api.adapters.schemas.http.envelopes import SuccessEnvelope
from braslog_api.adapters.schemas.http.kpi import DashboardSummaryHTTP
from braslog_api.application.schemas.dto.kpi import ComputeDashboardSummaryRequest
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.kpi.compute_dashboard_summary import (
    ComputeDashboardSummaryUseCase,
)
from braslog_api.infrastructure.auth.jwt_dependency import auth_required

router = BaseRouter(
    version="v1",
    resource="dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(auth_required())],
)


@router.get(
    "/summary",
    summary="Dashboard summary",
    description=(
        "Month-to-date summary up to `date`. Revenue budgets are pro-rated by "
        "`day_of_month / days_in_month`; percentage budgets are averaged as-is. "
        "Repeat `client_ids` / `cost_center_ids` to filter."
    ),
    response_model=SuccessEnvelope[DashboardSummaryHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def dashboard_summary(
    request: Request,
    response: Response,
    uow: Annotated[UnitOfWork, Depends(get_uow)],
    date: Annotated[dt.date, Query(description="Reference date (YYYY-MM-DD).")],
    client_ids: Annotated[list[UUID] | None, Query()] = None,
    cost_center_ids: Annotated[list[UUID] | None, Query()] = None,
    day_of_month: Annotated[
        int | None, Query(ge=1, le=31, description="Override the reference day.")
    ] = None,
) -> Any:
    summary = await ComputeDashboardSummaryUseCase(uow=uow).execute(
        ComputeDashboardSummaryRequest(
            date=date,
            client_ids=tuple(client_ids or ()),
            cost_center_ids=tuple(cost_center_ids or ()),
            day_of_month=day_of_month,
        )
    )
    result = BasePresenter.present_success(
        data=present_dashboard_summary(summary), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)
