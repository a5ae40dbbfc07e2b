# src/braslog_api/adapters/schemas/http/clients.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""HTTP schemas for clients and cost centers.

Request bodies keep monetary/percentage inputs as ``Decimal`` so range checks
happen on exact values; responses expose them as JSON numbers.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from braslog_api.adapters.schemas.http.base import BaseHTTPSchema
from braslog_api.domain.enums.kpi import RecordStatus

__all__ = [
    "ClientCreateBody",
    "ClientHTTP",
    "ClientStatsHTTP",
    "ClientUpdateBody",
    "CostCenterCreateBody",
    "CostCenterHTTP",
    "CostCenterUpdateBody",
    "DeletedHTTP",
    "NameCheckHTTP",
]


class ClientCreateBody(BaseHTTPSchema):
    """Payload for ``POST /v1/clients``."""

    name: str = Field(..., examples=["Transportes Andrade"])
    status: RecordStatus = RecordStatus.ACTIVE
    cost_center_id: UUID | None = None
    is_key_account: bool = False
    budget_revenue: Decimal | None = Field(default=None, examples=["150000.00"])
    budget_on_time: Decimal | None = Field(default=None, examples=["95"])
    budget_occupancy: Decimal | None = None
    budget_third_party: Decimal | None = None


class ClientUpdateBody(BaseHTTPSchema):
    """Payload for ``PATCH /v1/clients/{id}``; only supplied fields change."""

    name: str | None = None
    status: RecordStatus | None = None
    cost_center_id: UUID | None = None
    is_key_account: bool | None = None
    budget_revenue: Decimal | None = None
    budget_on_time: Decimal | None = None
    budget_occupancy: Decimal | None = None
    budget_third_party: Decimal | None = None


class ClientHTTP(BaseHTTPSchema):
    """Client resource."""

    id: UUID
    name: str
    status: RecordStatus
    cost_center_id: UUID | None = None
    is_key_account: bool = False
    budget_revenue: float | None = None
    budget_on_time: float | None = None
    budget_occupancy: float | None = None
    budget_third_party: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ClientStatsHTTP(BaseHTTPSchema):
    """Client counts by status."""

    total: int
    active: int
    inactive: int


class CostCenterCreateBody(BaseHTTPSchema):
    """Payload for ``POST /v1/cost-centers``."""

    name: str = Field(..., examples=["Operação Sul"])
    status: RecordStatus = RecordStatus.ACTIVE


class CostCenterUpdateBody(BaseHTTPSchema):
    """Payload for ``PATCH /v1/cost-centers/{id}``."""

    name: str | None = None
    status: RecordStatus | None = None


class CostCenterHTTP(BaseHTTPSchema):
    """Cost center resource with its derived client count."""

    id: UUID
    name: str
    status: RecordStatus
    client_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NameCheckHTTP(BaseHTTPSchema):
    """Unique-name availability."""

    available: bool
    message: str


class DeletedHTTP(BaseHTTPSchema):
    """Deletion receipt."""

    id: UUID
    message: str
