# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Application DTOs for client and cost center management.

Purpose:
    Request DTOs (frozen dataclasses) consumed by the client / cost center
    use cases and response DTOs (pydantic) mapped to HTTP by presenters.

Layer:
    application/schemas/dto

Notes:
    Update requests carry only the fields the caller supplied in
    ``changes``; an explicit ``None`` clears a nullable attribute.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from braslog_api.application.schemas.dto.base import BaseDTO
from braslog_api.domain.entities.client import Client
from braslog_api.domain.entities.cost_center import CostCenter
from braslog_api.domain.enums.kpi import RecordStatus

# --------------------------------------------------------------------------- #
# Clients
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class CreateClientRequest:
    """Request DTO for creating a client."""

    name: str
    status: RecordStatus = RecordStatus.ACTIVE
    cost_center_id: UUID | None = None
    is_key_account: bool = False
    budget_revenue: Decimal | None = None
    budget_on_time: Decimal | None = None
    budget_occupancy: Decimal | None = None
    budget_third_party: Decimal | None = None


@dataclass(frozen=True, slots=True)
class UpdateClientRequest:
    """Request DTO for a partial client update."""

    client_id: UUID
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ListClientsRequest:
    """Request DTO for paginated client listing."""

    status: RecordStatus | None = None
    search: str | None = None
    page: int = 1
    page_size: int = 50


@dataclass(frozen=True, slots=True)
class ValidateNameRequest:
    """Request DTO for unique-name checks (clients and cost centers)."""

    name: str
    exclude_id: UUID | None = None


class ClientDTO(BaseDTO):
    """Application projection of a client."""

    id: UUID
    name: str
    status: RecordStatus
    cost_center_id: UUID | None = None
    is_key_account: bool = False
    budget_revenue: Decimal | None = None
    budget_on_time: Decimal | None = None
    budget_occupancy: Decimal | None = None
    budget_third_party: Decimal | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, client: Client) -> ClientDTO:
        return cls(
            id=client.id,
            name=client.name,
            status=client.status,
            cost_center_id=client.cost_center_id,
            is_key_account=client.is_key_account,
            budget_revenue=client.budget_revenue,
            budget_on_time=client.budget_on_time,
            budget_occupancy=client.budget_occupancy,
            budget_third_party=client.budget_third_party,
            created_at=client.created_at,
            updated_at=client.updated_at,
        )


class ClientStatsDTO(BaseDTO):
    """Client counts by status."""

    total: int
    active: int
    inactive: int


# --------------------------------------------------------------------------- #
# Cost centers
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class CreateCostCenterRequest:
    """Request DTO for creating a cost center."""

    name: str
    status: RecordStatus = RecordStatus.ACTIVE


@dataclass(frozen=True, slots=True)
class UpdateCostCenterRequest:
    """Request DTO for a partial cost center update."""

    cost_center_id: UUID
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ListCostCentersRequest:
    """Request DTO for paginated cost center listing."""

    status: RecordStatus | None = None
    search: str | None = None
    page: int = 1
    page_size: int = 50


class CostCenterDTO(BaseDTO):
    """Application projection of a cost center."""

    id: UUID
    name: str
    status: RecordStatus
    client_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, cost_center: CostCenter) -> CostCenterDTO:
        return cls(
            id=cost_center.id,
            name=cost_center.name,
            status=cost_center.status,
            client_count=cost_center.client_count,
            created_at=cost_center.created_at,
            updated_at=cost_center.updated_at,
        )
