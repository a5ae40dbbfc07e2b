# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""UnitOfWork and business-clock dependency wiring.

Purpose:
    Provide a SQLAlchemy-backed UnitOfWork per request, plus the callable the
    KPI views use to resolve "today" in the business timezone.

Layer:
    adapters/dependencies
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from braslog_api.adapters.uow import SqlAlchemyUnitOfWork
from braslog_api.application.uow import UnitOfWork
from braslog_api.config.settings import get_settings
from braslog_api.infrastructure.database.session import (
    get_engine,
    get_sessionmaker,
)


def get_uow() -> UnitOfWork:
    """Construct a fresh UnitOfWork bound to the global sessionmaker."""
    get_engine()
    session_factory: async_sessionmaker[AsyncSession] = get_sessionmaker()
    return SqlAlchemyUnitOfWork(session_factory=session_factory)


def get_business_clock() -> Callable[[], date]:
    """Return a callable yielding today's date in the business timezone."""
    return get_settings().business_today
