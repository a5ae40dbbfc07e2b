# tests/fixtures/in_memory.py
"""
In-memory repositories and Unit of Work (test fixtures)

Purpose:
    Dict-backed implementations of the client, cost center and KPI entry
    repository protocols plus a Unit of Work with snapshot/restore
    transaction semantics.

Behavior:
    * Unique names, unique (date, client, kpi_type) triples and foreign keys
      are enforced the way the database constraints do, surfacing as
      ``EntityConflict``.
    * ``commit()`` checkpoints the store; leaving the scope discards any work
      done after the last checkpoint (errors and plain exits alike).

Layer: tests/fixtures
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from decimal import Decimal
from types import TracebackType
from typing import Any
from uuid import UUID, uuid4

from braslog_api.domain.entities.client import Client
from braslog_api.domain.entities.cost_center import CostCenter
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType, RecordStatus
from braslog_api.domain.exceptions.common import EntityConflict, EntityNotFound
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.cost_center_repository import (
    CostCenterRepository,
)
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import (
    KpiEntryFilter,
    KpiEntryRepository,
)

FIXED_NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


@dataclass
class InMemoryStore:
    """Shared tables for the in-memory repositories."""

    cost_centers: dict[UUID, CostCenter] = field(default_factory=dict)
    clients: dict[UUID, Client] = field(default_factory=dict)
    entries: dict[UUID, KpiEntry] = field(default_factory=dict)

    def snapshot(self) -> tuple[dict[UUID, CostCenter], dict[UUID, Client], dict[UUID, KpiEntry]]:
        return dict(self.cost_centers), dict(self.clients), dict(self.entries)

    def restore(
        self,
        snap: tuple[dict[UUID, CostCenter], dict[UUID, Client], dict[UUID, KpiEntry]],
    ) -> None:
        self.cost_centers, self.clients, self.entries = (dict(s) for s in snap)

    # ------------------------------------------------------------------
    # Seeding helpers
    # ------------------------------------------------------------------

    def add_cost_center(self, name: str, **kwargs: Any) -> CostCenter:
        cc = CostCenter(id=kwargs.pop("id", uuid4()), name=name, **kwargs)
        self.cost_centers[cc.id] = cc
        return cc

    def add_client(self, name: str, **kwargs: Any) -> Client:
        client = Client(id=kwargs.pop("id", uuid4()), name=name, **kwargs)
        self.clients[client.id] = client
        return client

    def add_entry(
        self, day: date, client_id: UUID, kpi_type: KpiType, value: str | Decimal
    ) -> KpiEntry:
        entry = KpiEntry(
            id=uuid4(),
            date=day,
            client_id=client_id,
            kpi_type=kpi_type,
            kpi_value=Decimal(value),
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        self.entries[entry.id] = entry
        return entry


def _stamp[T](item: T, *, created: bool) -> T:
    if created:
        return replace(item, created_at=FIXED_NOW, updated_at=FIXED_NOW)  # type: ignore[type-var]
    return replace(item, updated_at=FIXED_NOW)  # type: ignore[type-var]


def _page[T](rows: list[T], offset: int, limit: int) -> tuple[list[T], int]:
    return rows[offset : offset + limit], len(rows)


def _status_name_key(item: Client | CostCenter) -> tuple[str, str]:
    return (item.status.value, item.name)


# --------------------------------------------------------------------------- #
# Repositories                                                                #
# --------------------------------------------------------------------------- #


class InMemoryCostCenterRepository(CostCenterRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def _with_count(self, cc: CostCenter) -> CostCenter:
        count = sum(1 for c in self._store.clients.values() if c.cost_center_id == cc.id)
        return replace(cc, client_count=count)

    async def get(self, cost_center_id: UUID) -> CostCenter | None:
        cc = self._store.cost_centers.get(cost_center_id)
        return self._with_count(cc) if cc is not None else None

    async def find_by_name(
        self, name: str, *, exclude_id: UUID | None = None
    ) -> CostCenter | None:
        for cc in self._store.cost_centers.values():
            if cc.name == name and cc.id != exclude_id:
                return cc
        return None

    async def list_page(
        self,
        *,
        status: RecordStatus | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[CostCenter], int]:
        rows = [
            self._with_count(cc)
            for cc in self._store.cost_centers.values()
            if (status is None or cc.status is status)
            and (not search or search.lower() in cc.name.lower())
        ]
        return _page(sorted(rows, key=_status_name_key), offset, limit)

    async def list_all(self) -> list[CostCenter]:
        rows = [self._with_count(cc) for cc in self._store.cost_centers.values()]
        return sorted(rows, key=lambda cc: cc.name)

    async def add(self, cost_center: CostCenter) -> CostCenter:
        if await self.find_by_name(cost_center.name) is not None:
            raise EntityConflict("unique violation: cost_centers.name")
        saved = _stamp(replace(cost_center, client_count=0), created=True)
        self._store.cost_centers[saved.id] = saved
        return saved

    async def update(self, cost_center: CostCenter) -> CostCenter:
        if cost_center.id not in self._store.cost_centers:
            raise EntityNotFound("row not found")
        if await self.find_by_name(cost_center.name, exclude_id=cost_center.id) is not None:
            raise EntityConflict("unique violation: cost_centers.name")
        saved = _stamp(cost_center, created=False)
        self._store.cost_centers[saved.id] = saved
        return self._with_count(saved)

    async def delete(self, cost_center_id: UUID) -> None:
        if cost_center_id not in self._store.cost_centers:
            raise EntityNotFound("row not found")
        if any(c.cost_center_id == cost_center_id for c in self._store.clients.values()):
            raise EntityConflict("foreign key violation: clients.cost_center_id")
        del self._store.cost_centers[cost_center_id]


class InMemoryClientRepository(ClientRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def _check_constraints(self, client: Client) -> None:
        for other in self._store.clients.values():
            if other.name == client.name and other.id != client.id:
                raise EntityConflict("unique violation: clients.name")
        if client.cost_center_id is not None and (
            client.cost_center_id not in self._store.cost_centers
        ):
            raise EntityConflict("foreign key violation: clients.cost_center_id")

    async def get(self, client_id: UUID) -> Client | None:
        return self._store.clients.get(client_id)

    async def find_by_name(self, name: str, *, exclude_id: UUID | None = None) -> Client | None:
        for client in self._store.clients.values():
            if client.name == name and client.id != exclude_id:
                return client
        return None

    async def list_by_ids(self, client_ids: Collection[UUID]) -> list[Client]:
        wanted = set(client_ids)
        rows = [c for c in self._store.clients.values() if c.id in wanted]
        return sorted(rows, key=lambda c: c.name)

    async def list_page(
        self,
        *,
        status: RecordStatus | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[Client], int]:
        rows = [
            c
            for c in self._store.clients.values()
            if (status is None or c.status is status)
            and (not search or search.lower() in c.name.lower())
        ]
        return _page(sorted(rows, key=_status_name_key), offset, limit)

    async def list_matching(
        self,
        *,
        client_ids: Collection[UUID] | None = None,
        cost_center_ids: Collection[UUID] | None = None,
        status: RecordStatus | None = None,
    ) -> list[Client]:
        rows = [
            c
            for c in self._store.clients.values()
            if (client_ids is None or c.id in set(client_ids))
            and (cost_center_ids is None or c.cost_center_id in set(cost_center_ids))
            and (status is None or c.status is status)
        ]
        return sorted(rows, key=lambda c: c.name)

    async def add(self, client: Client) -> Client:
        self._check_constraints(client)
        saved = _stamp(client, created=True)
        self._store.clients[saved.id] = saved
        return saved

    async def update(self, client: Client) -> Client:
        if client.id not in self._store.clients:
            raise EntityNotFound("row not found")
        self._check_constraints(client)
        saved = _stamp(client, created=False)
        self._store.clients[saved.id] = saved
        return saved

    async def delete(self, client_id: UUID) -> None:
        if client_id not in self._store.clients:
            raise EntityNotFound("row not found")
        if any(e.client_id == client_id for e in self._store.entries.values()):
            raise EntityConflict("foreign key violation: kpi_entries.client_id")
        del self._store.clients[client_id]

    async def count_by_status(self) -> dict[RecordStatus, int]:
        counts = {s: 0 for s in RecordStatus}
        for client in self._store.clients.values():
            counts[client.status] += 1
        return counts

    async def count_for_cost_center(self, cost_center_id: UUID) -> int:
        return sum(1 for c in self._store.clients.values() if c.cost_center_id == cost_center_id)


class InMemoryKpiEntryRepository(KpiEntryRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def _matches(self, entry: KpiEntry, flt: KpiEntryFilter | None) -> bool:
        if flt is None:
            return True
        if flt.start is not None and entry.date < flt.start:
            return False
        if flt.end is not None and entry.date > flt.end:
            return False
        if flt.client_ids is not None and entry.client_id not in set(flt.client_ids):
            return False
        if flt.cost_center_ids is not None:
            client = self._store.clients.get(entry.client_id)
            if client is None or client.cost_center_id not in set(flt.cost_center_ids):
                return False
        return flt.kpi_type is None or entry.kpi_type is flt.kpi_type

    def _check_constraints(self, entry: KpiEntry) -> None:
        if entry.client_id not in self._store.clients:
            raise EntityConflict("foreign key violation: kpi_entries.client_id")
        for other in self._store.entries.values():
            if other.id != entry.id and (other.date, other.key) == (entry.date, entry.key):
                raise EntityConflict("unique violation: kpi_entries(date, client_id, kpi_type)")

    @staticmethod
    def _natural_key(entry: KpiEntry) -> tuple[str, str]:
        return (str(entry.client_id), entry.kpi_type.value)

    async def get(self, entry_id: UUID) -> KpiEntry | None:
        return self._store.entries.get(entry_id)

    async def find_by_key(self, day: date, client_id: UUID, kpi_type: KpiType) -> KpiEntry | None:
        for entry in self._store.entries.values():
            if entry.date == day and entry.key == (client_id, kpi_type):
                return entry
        return None

    async def list_for_date(
        self,
        day: date,
        *,
        client_ids: Collection[UUID] | None = None,
        kpi_type: KpiType | None = None,
    ) -> list[KpiEntry]:
        flt = KpiEntryFilter(start=day, end=day, client_ids=client_ids, kpi_type=kpi_type)
        rows = [e for e in self._store.entries.values() if self._matches(e, flt)]
        return sorted(rows, key=self._natural_key)

    async def list_matching(self, flt: KpiEntryFilter) -> list[KpiEntry]:
        rows = [e for e in self._store.entries.values() if self._matches(e, flt)]
        return sorted(rows, key=lambda e: (e.date, *self._natural_key(e)))

    async def list_page(
        self, flt: KpiEntryFilter, *, offset: int, limit: int
    ) -> tuple[list[KpiEntry], int]:
        rows = sorted(
            (e for e in self._store.entries.values() if self._matches(e, flt)),
            key=self._natural_key,
        )
        rows.sort(key=lambda e: e.date, reverse=True)
        return _page(rows, offset, limit)

    async def add(self, entry: KpiEntry) -> KpiEntry:
        self._check_constraints(entry)
        saved = _stamp(entry, created=True)
        self._store.entries[saved.id] = saved
        return saved

    async def add_many(self, entries: Sequence[KpiEntry]) -> int:
        for entry in entries:
            await self.add(entry)
        return len(entries)

    async def update(self, entry: KpiEntry) -> KpiEntry:
        if entry.id not in self._store.entries:
            raise EntityNotFound("row not found")
        self._check_constraints(entry)
        saved = _stamp(entry, created=False)
        self._store.entries[saved.id] = saved
        return saved

    async def update_values(self, changes: Sequence[tuple[UUID, Decimal]]) -> int:
        updated = 0
        for entry_id, value in changes:
            current = self._store.entries.get(entry_id)
            if current is None:
                continue
            self._store.entries[entry_id] = _stamp(replace(current, kpi_value=value), created=False)
            updated += 1
        return updated

    async def delete(self, entry_id: UUID) -> None:
        if entry_id not in self._store.entries:
            raise EntityNotFound("row not found")
        del self._store.entries[entry_id]

    async def delete_many(self, entry_ids: Collection[UUID]) -> int:
        deleted = 0
        for entry_id in entry_ids:
            if self._store.entries.pop(entry_id, None) is not None:
                deleted += 1
        return deleted

    async def count(self, flt: KpiEntryFilter | None = None) -> int:
        return sum(1 for e in self._store.entries.values() if self._matches(e, flt))

    async def count_by_type(self) -> dict[KpiType, int]:
        counts = {t: 0 for t in KpiType}
        for entry in self._store.entries.values():
            counts[entry.kpi_type] += 1
        return counts


# --------------------------------------------------------------------------- #
# Unit of Work                                                                #
# --------------------------------------------------------------------------- #

RepoFactory = Callable[[InMemoryStore], Any]


class InMemoryUnitOfWork:
    """Unit of Work over an :class:`InMemoryStore`.

    Attributes:
        commits: Number of successful ``commit()`` calls.
        rollbacks: Number of ``rollback()`` calls (explicit or on error).
    """

    def __init__(
        self,
        store: InMemoryStore,
        *,
        repo_factories: Mapping[type[Any], RepoFactory] | None = None,
    ) -> None:
        self.store = store
        self.commits = 0
        self.rollbacks = 0
        self._checkpoint: Any = None
        self._factories: dict[type[Any], RepoFactory] = {
            ClientRepository: InMemoryClientRepository,
            CostCenterRepository: InMemoryCostCenterRepository,
            KpiEntryRepository: InMemoryKpiEntryRepository,
            **(dict(repo_factories) if repo_factories else {}),
        }
        self._repos: dict[type[Any], Any] = {}

    async def __aenter__(self) -> InMemoryUnitOfWork:
        if self._checkpoint is not None:
            raise RuntimeError("UnitOfWork is already active; nested usage is not supported.")
        self._checkpoint = self.store.snapshot()
        self._repos.clear()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        if exc_type is not None:
            await self.rollback()
        else:
            self.store.restore(self._checkpoint)
        self._checkpoint = None
        self._repos.clear()
        return None

    async def commit(self) -> None:
        if self._checkpoint is None:
            raise RuntimeError("Cannot commit: UnitOfWork has no active scope.")
        self.commits += 1
        self._checkpoint = self.store.snapshot()

    async def rollback(self) -> None:
        self.rollbacks += 1
        if self._checkpoint is not None:
            self.store.restore(self._checkpoint)

    def get_repository(self, repo_type: type[Any]) -> Any:
        if self._checkpoint is None:
            raise RuntimeError("get_repository() called outside of an active UnitOfWork scope.")
        if repo_type not in self._repos:
            self._repos[repo_type] = self._factories[repo_type](self.store)
        return self._repos[repo_type]
