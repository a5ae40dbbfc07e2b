# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
Cost Center Entity

Purpose:
    Immutable domain representation of a cost center: a named grouping of
    clients that the monthly pivot folds into a single aggregated row.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from braslog_api.domain.enums.kpi import RecordStatus

from .base import BaseEntity, check_display_name


@dataclass(frozen=True, slots=True)
class CostCenter(BaseEntity):
    """Cost center entity.

    Args:
        id: Opaque identity.
        name: Unique, trimmed, non-blank display name (<= 100 chars).
        status: ACTIVE or INACTIVE.
        client_count: Derived number of clients referencing this center.
        created_at: Creation timestamp (None until persisted).
        updated_at: Last update timestamp (None until persisted).

    Raises:
        ValueError: If invariants are violated.
    """

    id: UUID
    name: str
    status: RecordStatus = RecordStatus.ACTIVE
    client_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        check_display_name(self.name)
        if self.client_count < 0:
            raise ValueError("client_count must be >= 0")
