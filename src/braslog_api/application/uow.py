# src/braslog_api/application/uow.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Unit of Work (Application Layer).

Use cases open one ``UnitOfWork`` scope per operation and fetch the client,
cost center and KPI entry repositories from it by protocol type::

    async with self._uow as tx:
        clients = tx.get_repository(ClientRepository)
        ...
        await tx.commit()

``commit()`` may run several times in one scope; the daily snapshot
reconciliation commits after each batch. Leaving the scope with an error
rolls back whatever was not committed yet. Implementations live under
``adapters/uow`` (SQLAlchemy) and ``tests/fixtures`` (in memory).
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from types import TracebackType
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class UnitOfWork(Protocol, AbstractAsyncContextManager["UnitOfWork"]):
    """Transactional scope shared by the repositories of one operation."""

    async def __aenter__(self) -> UnitOfWork:
        raise NotImplementedError

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        raise NotImplementedError

    async def commit(self) -> None:
        """Make everything done since the last commit durable."""
        raise NotImplementedError

    async def rollback(self) -> None:
        """Discard everything done since the last commit."""
        raise NotImplementedError

    def get_repository(self, repo_type: type[Any]) -> Any:
        """Return the repository registered for a protocol such as ``KpiEntryRepository``."""
        raise NotImplementedError
