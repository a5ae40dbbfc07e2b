# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Create cost centers, clients and KPI entries.

Revision ID: 20250101_0001
Revises:
Create Date: 2025-01-01

This migration:
  * Creates cost_centers (unique name).
  * Creates clients (unique name, optional cost center, budget targets).
  * Creates kpi_entries, unique on (date, client_id, kpi_type), with indexes
    on date and client_id.

Notes:
  - Honors DB_SCHEMA when set; tables land in the connection's search_path otherwise.
"""

from __future__ import annotations

import os
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20250101_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

SCHEMA = os.getenv("DB_SCHEMA") or None


def _fk_target(table: str) -> str:
    return f"{SCHEMA}.{table}.id" if SCHEMA else f"{table}.id"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Apply the migration."""
    if SCHEMA:
        op.get_bind().exec_driver_sql(f'CREATE SCHEMA IF NOT EXISTS "{SCHEMA}"')

    op.create_table(
        "cost_centers",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="ATIVO"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_cost_centers"),
        sa.UniqueConstraint("name", name="uq_cost_centers_name"),
        schema=SCHEMA,
    )

    op.create_table(
        "clients",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="ATIVO"),
        sa.Column("cost_center_id", sa.Uuid(as_uuid=True), nullable=True),
        sa.Column("is_key_account", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("budget_revenue", sa.Numeric(14, 2), nullable=True),
        sa.Column("budget_on_time", sa.Numeric(5, 2), nullable=True),
        sa.Column("budget_occupancy", sa.Numeric(5, 2), nullable=True),
        sa.Column("budget_third_party", sa.Numeric(5, 2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_clients"),
        sa.UniqueConstraint("name", name="uq_clients_name"),
        sa.ForeignKeyConstraint(
            ["cost_center_id"],
            [_fk_target("cost_centers")],
            name="fk_clients_cost_center_id_cost_centers",
            ondelete="RESTRICT",
        ),
        schema=SCHEMA,
    )
    op.create_index("ix_clients_cost_center_id", "clients", ["cost_center_id"], schema=SCHEMA)

    op.create_table(
        "kpi_entries",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("client_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("kpi_type", sa.String(32), nullable=False),
        sa.Column("kpi_value", sa.Numeric(14, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_kpi_entries"),
        sa.UniqueConstraint(
            "date", "client_id", "kpi_type", name="uq_kpi_entries_date_client_type"
        ),
        sa.CheckConstraint(
            "kpi_value >= 0", name="ck_kpi_entries_kpi_value_non_negative"
        ),
        sa.ForeignKeyConstraint(
            ["client_id"],
            [_fk_target("clients")],
            name="fk_kpi_entries_client_id_clients",
            ondelete="RESTRICT",
        ),
        schema=SCHEMA,
    )
    op.create_index("ix_kpi_entries_date", "kpi_entries", ["date"], schema=SCHEMA)
    op.create_index("ix_kpi_entries_client_id", "kpi_entries", ["client_id"], schema=SCHEMA)


def downgrade() -> None:
    """Revert the migration."""
    op.drop_index("ix_kpi_entries_client_id", table_name="kpi_entries", schema=SCHEMA)
    op.drop_index("ix_kpi_entries_date", table_name="kpi_entries", schema=SCHEMA)
    op.drop_table("kpi_entries", schema=SCHEMA)
    op.drop_index("ix_clients_cost_center_id", table_name="clients", schema=SCHEMA)
    op.drop_table("clients", schema=SCHEMA)
    op.drop_table("cost_centers", schema=SCHEMA)
