# src/braslog_api/adapters/uow/sqlalchemy_uow.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""SQLAlchemy-backed Unit of Work implementation.

Purpose:
    Provide a concrete implementation of the application-layer UnitOfWork
    protocol using SQLAlchemy's AsyncSession. This UoW coordinates the
    client, cost center and KPI entry repositories within one session.

Layer:
    adapters/uow

Notes:
    ``commit()`` may run several times inside one scope; each call commits
    the work done since the previous one. On error, only uncommitted work is
    rolled back.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from braslog_api.adapters.repositories.base_repository import translate_db_errors
from braslog_api.adapters.repositories.client_repository import SqlAlchemyClientRepository
from braslog_api.adapters.repositories.cost_center_repository import (
    SqlAlchemyCostCenterRepository,
)
from braslog_api.adapters.repositories.kpi_entry_repository import SqlAlchemyKpiEntryRepository
from braslog_api.application.uow import UnitOfWork
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.cost_center_repository import (
    CostCenterRepository,
)
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import KpiEntryRepository


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy-based UnitOfWork implementation.

    Intended to be used via:

        async with SqlAlchemyUnitOfWork(session_factory=...) as uow:
            repo = uow.get_repository(ClientRepository)
            ...
            await uow.commit()
    """

    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        repo_factories: Mapping[type[Any], Callable[[AsyncSession], Any]] | None = None,
    ) -> None:
        """Initialize the UnitOfWork.

        Args:
            session_factory:
                Factory for creating new AsyncSession instances.
            repo_factories:
                Optional mapping from repository protocol to a factory taking
                an AsyncSession and returning a repository instance. Overrides
                the default wiring.
        """
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

        default_factories: dict[type[Any], Callable[[AsyncSession], Any]] = {
            ClientRepository: lambda s: SqlAlchemyClientRepository(session=s),
            CostCenterRepository: lambda s: SqlAlchemyCostCenterRepository(session=s),
            KpiEntryRepository: lambda s: SqlAlchemyKpiEntryRepository(session=s),
        }
        self._repo_factories: dict[type[Any], Callable[[AsyncSession], Any]] = {
            **default_factories,
            **(dict(repo_factories) if repo_factories is not None else {}),
        }
        self._repos: dict[type[Any], Any] = {}

    # ------------------------------------------------------------------
    # Async context manager
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        """Enter the UnitOfWork context and open a new AsyncSession.

        Raises:
            RuntimeError: If a session is already active (nested usage).
        """
        if self._session is not None:
            raise RuntimeError("UnitOfWork is already active; nested usage is not supported.")

        self._session = self._session_factory()
        self._repos.clear()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        """Roll back uncommitted work on error, then close the session."""
        try:
            if exc_type is not None:
                await self.rollback()
        finally:
            if self._session is not None:
                await self._session.close()
                self._session = None
            self._repos.clear()
        return None

    # ------------------------------------------------------------------
    # Transaction control
    # ------------------------------------------------------------------

    async def commit(self) -> None:
        """Commit work done since the previous commit.

        Raises:
            RuntimeError: If called without an active session.
            EntityConflict: If a constraint fails while flushing.
            StorageFailure: If the commit fails for any other reason.
        """
        if self._session is None:
            raise RuntimeError("Cannot commit: UnitOfWork has no active session.")
        async with translate_db_errors("uow.commit"):
            await self._session.commit()

    async def rollback(self) -> None:
        """Roll back uncommitted work; no-op without an active session."""
        if self._session is None:
            return
        await self._session.rollback()

    # ------------------------------------------------------------------
    # Repository resolution
    # ------------------------------------------------------------------

    def get_repository(self, repo_type: type[Any]) -> Any:
        """Return a repository instance for the given type.

        The instance is created via a configured factory on first request
        and cached for subsequent calls within the same UnitOfWork context.

        Raises:
            RuntimeError: If called outside of an active UnitOfWork context.
            KeyError: If no factory is registered for the given repo_type.
        """
        if self._session is None:
            raise RuntimeError(
                "get_repository() called outside of an active UnitOfWork scope. "
                "Use 'async with uow:' before requesting repositories.",
            )

        if repo_type in self._repos:
            return self._repos[repo_type]

        try:
            factory = self._repo_factories[repo_type]
        except KeyError as exc:
            raise KeyError(
                f"No repository factory registered for type {repo_type!r}.",
            ) from exc

        repo = factory(self._session)
        self._repos[repo_type] = repo
        return repo
