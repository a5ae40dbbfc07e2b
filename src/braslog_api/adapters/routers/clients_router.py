# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Clients HTTP router (v1).

Purpose:
    CRUD over clients plus the unique-name check and status counts:

        * GET    /v1/clients
        * POST   /v1/clients
        * GET    /v1/clients/stats
        * GET    /v1/clients/validate-name
        * GET    /v1/clients/{client_id}
        * PATCH  /v1/clients/{client_id}
        * DELETE /v1/clients/{client_id}

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Query, Request, Response, status

from braslog_api.adapters.dependencies.uow import get_uow
from braslog_api.adapters.presenters.base_presenter import BasePresenter
from braslog_api.adapters.presenters.clients_presenter import (
    present_client,
    present_client_stats,
    present_deleted,
    present_name_check,
)
from braslog_api.adapters.routers.base_router import BaseRouter, PageParams, request_trace_id
from braslog_api.adapters.schemas.http.clients import (
    ClientCreateBody,
    ClientHTTP,
    ClientStatsHTTP,
    ClientUpdateBody,
    DeletedHTTP,
    NameCheckHTTP,
)
from braslog_api.adapters.schemas.http.envelopes import PaginatedEnvelope, SuccessEnvelope
from braslog_api.application.schemas.dto.clients import (
    CreateClientRequest,
    ListClientsRequest,
    UpdateClientRequest,
    ValidateNameRequest,
)
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.clients.create_client import CreateClientUseCase
from braslog_api.application.use_cases.clients.delete_client import DeleteClientUseCase
from braslog_api.application.use_cases.clients.get_client import GetClientUseCase
from braslog_api.application.use_cases.clients.list_clients import (
    GetClientStatsUseCase,
    ListClientsUseCase,
)
from braslog_api.application.use_cases.clients.update_client import UpdateClientUseCase
from braslog_api.application.use_cases.clients.validate_client_name import (
    ValidateClientNameUseCase,
)
from braslog_api.domain.enums.kpi import RecordStatus
from braslog_api.infrastructure.auth.jwt_dependency import auth_required

router = BaseRouter(
    version="v1",
    resource="clients",
    tags=["Clients"],
    dependencies=[Depends(auth_required())],
)

UowDep = Annotated[UnitOfWork, Depends(get_uow)]


@router.get(
    "",
    summary="List clients",
    response_model=PaginatedEnvelope[ClientHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def list_clients(
    request: Request,
    response: Response,
    uow: UowDep,
    paging: Annotated[PageParams, Depends(BaseRouter.page_params)],
    status_filter: Annotated[RecordStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> Any:
    page = await ListClientsUseCase(uow=uow).execute(
        ListClientsRequest(
            status=status_filter,
            search=search,
            page=paging.page,
            page_size=paging.page_size,
        )
    )
    result = BasePresenter.present_paginated(
        items=[present_client(c) for c in page.items],
        page=page.page,
        page_size=page.page_size,
        total=page.total,
        trace_id=request_trace_id(request),
    )
    return BaseRouter.send(response, result)


@router.post(
    "",
    summary="Create a client",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessEnvelope[ClientHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def create_client(
    request: Request,
    response: Response,
    uow: UowDep,
    body: ClientCreateBody,
) -> Any:
    dto = await CreateClientUseCase(uow=uow).execute(
        CreateClientRequest(
            name=body.name,
            status=body.status,
            cost_center_id=body.cost_center_id,
            is_key_account=body.is_key_account,
            budget_revenue=body.budget_revenue,
            budget_on_time=body.budget_on_time,
            budget_occupancy=body.budget_occupancy,
            budget_third_party=body.budget_third_party,
        )
    )
    result = BasePresenter.present_success(
        data=present_client(dto),
        trace_id=request_trace_id(request),
        status_code=status.HTTP_201_CREATED,
    )
    return BaseRouter.send(response, result)


@router.get(
    "/stats",
    summary="Client counts by status",
    response_model=SuccessEnvelope[ClientStatsHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def client_stats(request: Request, response: Response, uow: UowDep) -> Any:
    dto = await GetClientStatsUseCase(uow=uow).execute()
    result = BasePresenter.present_success(
        data=present_client_stats(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)


@router.get(
    "/validate-name",
    summary="Check whether a client name is available",
    response_model=SuccessEnvelope[NameCheckHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def validate_client_name(
    request: Request,
    response: Response,
    uow: UowDep,
    name: Annotated[str, Query(min_length=1, max_length=100)],
    exclude_id: Annotated[UUID | None, Query(description="Client being edited.")] = None,
) -> Any:
    dto = await ValidateClientNameUseCase(uow=uow).execute(
        ValidateNameRequest(name=name, exclude_id=exclude_id)
    )
    result = BasePresenter.present_success(
        data=present_name_check(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)


@router.get(
    "/{client_id}",
    summary="Get a client",
    response_model=SuccessEnvelope[ClientHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def get_client(
    request: Request, response: Response, uow: UowDep, client_id: UUID
) -> Any:
    dto = await GetClientUseCase(uow=uow).execute(client_id)
    result = BasePresenter.present_success(
        data=present_client(dto), trace_id=request_trace_id(request), etag=True
    )
    return BaseRouter.send(response, result)


@router.patch(
    "/{client_id}",
    summary="Update a client",
    response_model=SuccessEnvelope[ClientHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def update_client(
    request: Request,
    response: Response,
    uow: UowDep,
    client_id: UUID,
    body: ClientUpdateBody,
) -> Any:
    dto = await UpdateClientUseCase(uow=uow).execute(
        UpdateClientRequest(client_id=client_id, changes=body.model_dump(exclude_unset=True))
    )
    result = BasePresenter.present_success(
        data=present_client(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)


@router.delete(
    "/{client_id}",
    summary="Delete a client",
    response_model=SuccessEnvelope[DeletedHTTP],
    responses=BaseRouter.std_error_responses(),
)
async def delete_client(
    request: Request, response: Response, uow: UowDep, client_id: UUID
) -> Any:
    dto = await DeleteClientUseCase(uow=uow).execute(client_id)
    result = BasePresenter.present_success(
        data=present_deleted(dto), trace_id=request_trace_id(request)
    )
    return BaseRouter.send(response, result)
