# src/braslog_api/domain/interfaces/repositories/client_repository.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for client repositories.

Notes:
    * Persistence-agnostic; the SQLAlchemy adapter in
      ``adapters/repositories/client_repository.py`` satisfies this protocol.
    * Implementations never commit; use cases own transactions.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Protocol
from uuid import UUID

from braslog_api.domain.entities.client import Client
from braslog_api.domain.enums.kpi import RecordStatus


class ClientRepository(Protocol):
    """Domain-level contract for client persistence."""

    async def get(self, client_id: UUID) -> Client | None:
        """Return the client with ``client_id`` or None."""
        raise NotImplementedError

    async def find_by_name(self, name: str, *, exclude_id: UUID | None = None) -> Client | None:
        """Return a client named exactly ``name`` other than ``exclude_id``."""
        raise NotImplementedError

    async def list_by_ids(self, client_ids: Collection[UUID]) -> list[Client]:
        """Return the clients among ``client_ids`` that exist."""
        raise NotImplementedError

    async def list_page(
        self,
        *,
        status: RecordStatus | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[Client], int]:
        """Return a page ordered by status then name, plus the total count.

        Args:
            status: Optional status filter.
            search: Optional case-insensitive substring matched on the name.
            offset: Zero-based row offset.
            limit: Page size.
        """
        raise NotImplementedError

    async def list_matching(
        self,
        *,
        client_ids: Collection[UUID] | None = None,
        cost_center_ids: Collection[UUID] | None = None,
        status: RecordStatus | None = None,
    ) -> list[Client]:
        """Return clients satisfying every supplied filter, ordered by name."""
        raise NotImplementedError

    async def add(self, client: Client) -> Client:
        """Persist a new client and return it with timestamps."""
        raise NotImplementedError

    async def update(self, client: Client) -> Client:
        """Persist the full state of an existing client."""
        raise NotImplementedError

    async def delete(self, client_id: UUID) -> None:
        """Delete a client."""
        raise NotImplementedError

    async def count_by_status(self) -> dict[RecordStatus, int]:
        """Return the number of clients per status."""
        raise NotImplementedError

    async def count_for_cost_center(self, cost_center_id: UUID) -> int:
        """Return how many clients reference ``cost_center_id``."""
        raise NotImplementedError


__all__: Sequence[str] = ["ClientRepository"]
