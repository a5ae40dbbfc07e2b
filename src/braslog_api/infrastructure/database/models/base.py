# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Declarative base shared by the cost center, client and KPI entry tables.

Every table gets a UUID4 ``id`` plus timezone-aware ``created_at`` and
``updated_at`` columns. Constraint names follow fixed conventions so the
names written in migrations (``uq_clients_name``, ``fk_clients_...``)
match what autogenerate produces. Models carry no domain behavior.
"""

from __future__ import annotations

import os
import uuid
from datetime import UTC, datetime

from sqlalchemy import MetaData, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

__all__ = [
    "metadata",
    "Base",
    "BaseEntity",
    "IdentityMixin",
    "TimestampMixin",
    "DEFAULT_DB_SCHEMA",
    "now_utc",
]

#: Optional schema for all tables, read from the same env var as ``Settings.db_schema``.
DEFAULT_DB_SCHEMA: str | None = os.getenv("DB_SCHEMA") or None

#: Deterministic naming conventions for Alembic-friendly diffs.
#: Ref: https://alembic.sqlalchemy.org/en/latest/naming.html
NAMING_CONVENTIONS: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTIONS, schema=DEFAULT_DB_SCHEMA)


def now_utc() -> datetime:
    """Return the current UTC time with timezone info."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative Base for all ORM models."""

    metadata = metadata


class IdentityMixin:
    """Mixin providing a UUIDv4 primary key ``id`` column."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


class TimestampMixin:
    """Mixin providing ``created_at`` and ``updated_at`` timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
        server_default=func.now(),
    )


class BaseEntity(IdentityMixin, TimestampMixin, Base):
    """Concrete base class for the KPI tables."""

    __abstract__ = True
