# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Presenters for clients and cost centers (DTO -> HTTP schema)."""

from __future__ import annotations

from braslog_api.adapters.presenters.base_presenter import as_float
from braslog_api.adapters.schemas.http.clients import (
    ClientHTTP,
    ClientStatsHTTP,
    CostCenterHTTP,
    DeletedHTTP,
    NameCheckHTTP,
)
from braslog_api.application.schemas.dto.base import DeletedDTO, NameCheckDTO
from braslog_api.application.schemas.dto.clients import ClientDTO, ClientStatsDTO, CostCenterDTO


def present_client(dto: ClientDTO) -> ClientHTTP:
    return ClientHTTP(
        id=dto.id,
        name=dto.name,
        status=dto.status,
        cost_center_id=dto.cost_center_id,
        is_key_account=dto.is_key_account,
        budget_revenue=as_float(dto.budget_revenue),
        budget_on_time=as_float(dto.budget_on_time),
        budget_occupancy=as_float(dto.budget_occupancy),
        budget_third_party=as_float(dto.budget_third_party),
        created_at=dto.created_at,
        updated_at=dto.updated_at,
    )


def present_client_stats(dto: ClientStatsDTO) -> ClientStatsHTTP:
    return ClientStatsHTTP(total=dto.total, active=dto.active, inactive=dto.inactive)


def present_cost_center(dto: CostCenterDTO) -> CostCenterHTTP:
    return CostCenterHTTP(
        id=dto.id,
        name=dto.name,
        status=dto.status,
        client_count=dto.client_count,
        created_at=dto.created_at,
        updated_at=dto.updated_at,
    )


def present_name_check(dto: NameCheckDTO) -> NameCheckHTTP:
    return NameCheckHTTP(available=dto.available, message=dto.message)


def present_deleted(dto: DeletedDTO) -> DeletedHTTP:
    return DeletedHTTP(id=dto.id, message=dto.message)
