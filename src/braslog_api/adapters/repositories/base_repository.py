# src/braslog_api/adapters/repositories/base_repository.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
BaseRepository: shared foundation for the SQLAlchemy repositories.

Purpose:
    Shared mechanics for all repositories:
      * Safe fetch helpers (optional, all, scalar count).
      * Translation of SQLAlchemy errors into domain errors.
      * Case-insensitive substring filter used by name searches.

Layer: adapters / repositories

Notes:
    * No business logic, no domain decisions.
    * Repositories never commit; use cases own transactions.
    * Raw driver messages are logged, never surfaced to callers.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Final, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from braslog_api.domain.exceptions.common import EntityConflict, StorageFailure

TModel = TypeVar("TModel")

logger = logging.getLogger(__name__)

CONSTRAINT_VIOLATION: Final[str] = "Registro duplicado ou referência inválida"
STORAGE_UNAVAILABLE: Final[str] = "Falha ao acessar o banco de dados"
ROW_NOT_FOUND: Final[str] = "Registro não encontrado"


@asynccontextmanager
async def translate_db_errors(operation: str) -> AsyncIterator[None]:
    """Map SQLAlchemy failures raised inside the block to domain errors.

    Args:
        operation: Short event-style label used in the log record.

    Raises:
        EntityConflict: On unique/foreign-key violations.
        StorageFailure: On any other SQLAlchemy error.
    """
    try:
        yield
    except IntegrityError as exc:
        logger.warning(
            "repository.integrity_error",
            extra={"operation": operation, "error": str(exc.orig or exc)},
        )
        raise EntityConflict(CONSTRAINT_VIOLATION, details={"operation": operation}) from exc
    except SQLAlchemyError as exc:
        logger.error(
            "repository.storage_error",
            extra={"operation": operation, "error": str(exc)},
        )
        raise StorageFailure(STORAGE_UNAVAILABLE, details={"operation": operation}) from exc


class BaseRepository(Generic[TModel]):  # noqa: UP046
    """Abstract base class for all repositories."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        self._session: AsyncSession = session

    @staticmethod
    def name_contains(column: Any, search: str) -> ColumnElement[bool]:
        """Return a case-insensitive, wildcard-escaped substring predicate."""
        return func.lower(column).contains(search.lower(), autoescape=True)

    # ------------------------------------------------------------------
    # Fetch helpers
    # ------------------------------------------------------------------

    async def fetch_optional(self, stmt: Select[Any]) -> TModel | None:
        """Execute a statement and return zero or one row."""
        res = await self._session.execute(stmt)
        return res.scalars().first()

    async def fetch_all(self, stmt: Select[Any]) -> list[TModel]:
        """Execute a statement and return all rows as a list."""
        res = await self._session.execute(stmt)
        return list(res.scalars().all())

    async def fetch_count(self, stmt: Select[Any]) -> int:
        """Return ``COUNT(*)`` over the rows selected by ``stmt``."""
        res = await self._session.execute(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        )
        return int(res.scalar_one())
