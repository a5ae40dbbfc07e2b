# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Cost centers HTTP router (v1).

Routes:
    * GET    /v1/cost-centers
    * POST   /v1/cost-centers
    * GET    /v1/cost-centers/validate-name
    * GET    /v1/cost-centers/{cost_center_id}
    * PATCH  /v1/cost-centers/{cost_center_id}
    * DELETE /v1/cost-centers/{cost_center_id}
"""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Query, Request, Response, status

from braslog_api.adapters.dependencies.uow import get_uow
from braslog_api.adapters.presenters.base_presenter import BasePresenter
from braslog_api.adapters.presenters.clients_presenter import (
    present_cost_center,
    present_deleted,
    present_name_check,
)
from braslog_api.adapters.routers.base_router import BaseRouter, PageParams, request_trace_id
from braslog_api.adapters.schemas.http.clients import (
    CostCenterCreateBody,
    CostCenterHTTP,
    CostCenterUpdateBody,
    DeletedHTTP,
    NameCheckHTTP,
)
from braslog_api.adapters.schemas.http.envelopes import PaginatedEnvelope, SuccessEnvelope
from braslog_api.application.schemas.dto.clients import (
    CreateCostCenterRequest,
    ListCostCentersRequest,
    UpdateCostCenterRequest,
    ValidateNameRequest,
)
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.cost_centers.create_cost_center import (
    CreateCostCenterUseCase,
)
from braslog_api.application.use_cases.cost_centers.delete_cost_center import (
    DeleteCostCenterUseCase,
)
from braslog_api.application.use_cases.cost_centers.get_cost_center import GetCostCenterUseCase
from braslog_api.application.use_cases.cost_centers.list_cost_centers import (
    ListCostCentersUseCase,
    ValidateCostCenterNameUseCase,
)
from braslog_api.application.use_cases.cost_centers.update_cost_center import (
    UpdateCostCenterUseCase,
)
from braslog_api.domain.enums.kpi import RecordStatus
from braslog_api.infrastructure.auth.jwt_dependency import auth_required

router = BaseRouter(
    version="v1",
    resource="cost-centers",
    tags=["Cost Centers"],
    dependencies=[Depends(auth_required())],
)

UowDep = Annotated[UnitOfWork, Depends(get_uow)]


@router.get(
    "",
    summary="List cost centers",
    response_model=PaginatedEnvelope[CostCenterHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def list_cost_centers(
    request: Request,
    response: Response,
    uow: UowDep,
    paging: Annotated[PageParams, Depends(BaseRouter.page_params)],
    status_filter: Annotated[RecordStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> Any:
    page = await ListCostCentersUseCase(uow=uow).execute(
        ListCostCentersRequest(
            status=status_filter,
            search=search,
            page=paging.page,
            page_size=paging.page_size,
        )
    )
    result = BasePresenter.present_paginated(
        items=[present_cost_center(c) for c in page.items],
        page=page.page,
        page_size=page.page_size,
        total=page.total,
        trace_id=request_trace_id(request),
    )
    return BaseRouter.send(response, result)


@router.post(
    "",
    summary="Create a cost center",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessEnvelope[CostCenterHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def create_cost_center(
    request: Request, response: Response, uow: UowDep, body: CostCenterCreateBody
) -> Any:
    dto = await CreateCostCenterUseCase(uow=uow).execute(
        CreateCostCenterRequest(name=body.name, status=body.status)
    )
    result = BasePresenter.present_success(
        data=present_cost_center(dto),
        trace_id=request_trace_id(request),
        status_code=status.HTTP_201_CREATED,
    )
    return BaseRouter.send(response, result)


@router.get(
    "/validate-name",
    summary="Check whether a cost center name is available",
    response_model=SuccessEnvelope[NameCheckHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def validate_cost_center_name(
    request: Request,
    response: Response,
    uow: UowDep,
    name: Annotated[str, Query(min_length=1, max_length=100)],
    exclude_id: Annotated[UUID | None, Query()] = None,
) -> Any:
    dto = await ValidateCostCenterNameUseCase(uow=uow).execute(
        ValidateNameRequest(name=name, exclude_id=exclude_id)
    )
    result = BasePresenter.present_success(
        data=present_name_check(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)


@router.get(
    "/{cost_center_id}",
    summary="Get a cost center",
    response_model=SuccessEnvelope[CostCenterHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def get_cost_center(
    request: Request, response: Response, uow: UowDep, cost_center_id: UUID
) -> Any:
    dto = await GetCostCenterUseCase(uow=uow).execute(cost_center_id)
    result = BasePresenter.present_success(
        data=present_cost_center(dto), trace_id=request_trace_id(request), etag=True
    )
    return BaseRouter.send(response, result)


@router.patch(
    "/{cost_center_id}",
    summary="Update a cost center",
    response_model=SuccessEnvelope[CostCenterHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def update_cost_center(
    request: Request,
    response: Response,
    uow: UowDep,
    cost_center_id: UUID,
    body: CostCenterUpdateBody,
) -> Any:
    dto = await UpdateCostCenterUseCase(uow=uow).execute(
        UpdateCostCenterRequest(
            cost_center_id=cost_center_id, changes=body.model_dump(exclude_unset=True)
        )
    )
    result = BasePresenter.present_success(
        data=present_cost_center(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)


@router.delete(
    "/{cost_center_id}",
    summary="Delete a cost center",
    response_model=SuccessEnvelope[DeletedHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def delete_cost_center(
    request: Request, response: Response, uow: UowDep, cost_center_id: UUID
) -> Any:
    dto = await DeleteCostCenterUseCase(uow=uow).execute(cost_center_id)
    result = BasePresenter.present_success(
        data=present_deleted(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)
