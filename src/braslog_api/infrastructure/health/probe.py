# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Readiness probe for Postgres (with Prometheus histogram).

Design:
    * Always observe latency, whether the probe succeeds or fails.
    * Small public surface: `DbProbe.db()` returning `(success, detail)`.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from braslog_api.infrastructure.observability.metrics import get_readyz_db_latency_seconds

if TYPE_CHECKING:
    from prometheus_client import Histogram

__all__ = ["DbProbe"]


class DbProbe:
    """Readiness probe for the KPI database."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._db_hist: Histogram = get_readyz_db_latency_seconds()

    async def db(self) -> tuple[bool, str | None]:
        """Probe the database using a trivial ``SELECT 1``."""
        start = time.perf_counter()
        ok = True
        detail: str | None = None
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            ok = False
            detail = type(exc).__name__
        finally:
            self._db_hist.observe(time.perf_counter() - start)
        return ok, detail
