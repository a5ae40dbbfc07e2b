# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
KPI Entry Entity

Purpose:
    Immutable domain representation of one measured KPI value for a client
    on a calendar day. At most one entry exists per (date, client, kpi_type).

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from braslog_api.domain.enums.kpi import KpiType

from .base import BaseEntity

KpiKey = tuple[UUID, KpiType]


@dataclass(frozen=True, slots=True)
class KpiEntry(BaseEntity):
    """KPI entry entity.

    Args:
        id: Opaque identity.
        date: Calendar date (no time component).
        client_id: Owning client.
        kpi_type: KPI type of the measurement.
        kpi_value: Measured value; REVENUE in [0, 999999999.99], others in [0, 100].
        created_at: Creation timestamp (None until persisted).
        updated_at: Last update timestamp (None until persisted).

    Raises:
        ValueError: If the value is outside the range of its type.
    """

    id: UUID
    date: date
    client_id: UUID
    kpi_type: KpiType
    kpi_value: Decimal
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if isinstance(self.date, datetime):
            object.__setattr__(self, "date", self.date.date())
        if not (0 <= self.kpi_value <= self.kpi_type.upper_bound):
            raise ValueError(
                f"kpi_value for {self.kpi_type.value} must be within "
                f"[0, {self.kpi_type.upper_bound}]"
            )

    @property
    def key(self) -> KpiKey:
        """Return the (client_id, kpi_type) key used within a single day."""
        return (self.client_id, self.kpi_type)
