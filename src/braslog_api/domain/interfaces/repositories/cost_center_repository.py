# src/braslog_api/domain/interfaces/repositories/cost_center_repository.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for cost center repositories."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from braslog_api.domain.entities.cost_center import CostCenter
from braslog_api.domain.enums.kpi import RecordStatus


class CostCenterRepository(Protocol):
    """Domain-level contract for cost center persistence."""

    async def get(self, cost_center_id: UUID) -> CostCenter | None:
        """Return the cost center (with its client count) or None."""
        raise NotImplementedError

    async def find_by_name(
        self, name: str, *, exclude_id: UUID | None = None
    ) -> CostCenter | None:
        """Return a cost center named exactly ``name`` other than ``exclude_id``."""
        raise NotImplementedError

    async def list_page(
        self,
        *,
        status: RecordStatus | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[CostCenter], int]:
        """Return a page ordered by status then name (with client counts) and the total."""
        raise NotImplementedError

    async def list_all(self) -> list[CostCenter]:
        """Return every cost center ordered by name."""
        raise NotImplementedError

    async def add(self, cost_center: CostCenter) -> CostCenter:
        """Persist a new cost center."""
        raise NotImplementedError

    async def update(self, cost_center: CostCenter) -> CostCenter:
        """Persist the full state of an existing cost center."""
        raise NotImplementedError

    async def delete(self, cost_center_id: UUID) -> None:
        """Delete a cost center."""
        raise NotImplementedError
