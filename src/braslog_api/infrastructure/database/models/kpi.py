# src/braslog_api/infrastructure/database/models/kpi.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""KPI persistence models: cost centers, clients and daily KPI entries."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from braslog_api.infrastructure.database.models.base import BaseEntity

__all__ = ["ClientModel", "CostCenterModel", "KpiEntryModel"]


class CostCenterModel(BaseEntity):
    """Named grouping of clients."""

    __tablename__ = "cost_centers"
    __table_args__ = (UniqueConstraint("name"),)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="ATIVO")


class ClientModel(BaseEntity):
    """Logistics client with optional cost center and monthly budget targets."""

    __tablename__ = "clients"
    __table_args__ = (
        UniqueConstraint("name"),
        Index("ix_clients_cost_center_id", "cost_center_id"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="ATIVO")
    cost_center_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("cost_centers.id", ondelete="RESTRICT"),
        nullable=True,
    )
    is_key_account: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    budget_revenue: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    budget_on_time: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    budget_occupancy: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    budget_third_party: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)


class KpiEntryModel(BaseEntity):
    """One KPI value for a client on a calendar day.

    Unique on (date, client_id, kpi_type).
    """

    __tablename__ = "kpi_entries"
    __table_args__ = (
        UniqueConstraint("date", "client_id", "kpi_type", name="uq_kpi_entries_date_client_type"),
        CheckConstraint("kpi_value >= 0", name="kpi_value_non_negative"),
        Index("ix_kpi_entries_date", "date"),
        Index("ix_kpi_entries_client_id", "client_id"),
    )

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    client_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
    )
    kpi_type: Mapped[str] = mapped_column(String(32), nullable=False)
    kpi_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
