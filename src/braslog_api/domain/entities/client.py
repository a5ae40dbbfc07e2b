# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
Client Entity

Purpose:
    Immutable domain representation of a logistics client, including its
    optional cost-center membership, key-account flag, and the monthly budget
    targets used by the pivot and dashboard engines.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from braslog_api.domain.enums.kpi import PERCENT_MAX, REVENUE_MAX, KpiType, RecordStatus

from .base import BaseEntity, check_display_name


@dataclass(frozen=True, slots=True)
class Client(BaseEntity):
    """Client entity.

    Args:
        id: Opaque identity.
        name: Unique, trimmed, non-blank display name (<= 100 chars).
        status: ACTIVE or INACTIVE.
        cost_center_id: Optional owning cost center.
        is_key_account: When True the client gets its own row in aggregated
            views instead of being folded into its cost center.
        budget_revenue: Monthly revenue budget (BRL), optional.
        budget_on_time: On-time target percentage, optional.
        budget_occupancy: Occupancy target percentage, optional.
        budget_third_party: Third-party usage target percentage, optional.
        created_at: Creation timestamp (None until persisted).
        updated_at: Last update timestamp (None until persisted).

    Raises:
        ValueError: If invariants are violated.
    """

    id: UUID
    name: str
    status: RecordStatus = RecordStatus.ACTIVE
    cost_center_id: UUID | None = None
    is_key_account: bool = False
    budget_revenue: Decimal | None = None
    budget_on_time: Decimal | None = None
    budget_occupancy: Decimal | None = None
    budget_third_party: Decimal | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        check_display_name(self.name)
        if self.budget_revenue is not None and not (0 <= self.budget_revenue <= REVENUE_MAX):
            raise ValueError("budget_revenue must be within [0, 999999999.99]")
        for label, target in (
            ("budget_on_time", self.budget_on_time),
            ("budget_occupancy", self.budget_occupancy),
            ("budget_third_party", self.budget_third_party),
        ):
            if target is not None and not (0 <= target <= PERCENT_MAX):
                raise ValueError(f"{label} must be within [0, 100]")

    @property
    def is_active(self) -> bool:
        """Return True when the client is ACTIVE."""
        return self.status is RecordStatus.ACTIVE

    def budget_for(self, kpi_type: KpiType) -> Decimal | None:
        """Return the stored monthly target for a KPI type.

        AVAILABILITY has no stored target and always yields None.
        """
        if kpi_type is KpiType.REVENUE:
            return self.budget_revenue
        if kpi_type is KpiType.ON_TIME:
            return self.budget_on_time
        if kpi_type is KpiType.OCCUPANCY:
            return self.budget_occupancy
        if kpi_type is KpiType.THIRD_PARTY:
            return self.budget_third_party
        return None
