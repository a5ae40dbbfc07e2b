# src/braslog_api/domain/services/kpi_reconciliation.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Daily KPI snapshot reconciliation planner.

Purpose:
    Pure diff between the entries persisted for a date and a new full
    snapshot for the same date. The result is three disjoint batches:

        * to_insert: incoming keys with no persisted row.
        * to_update: persisted keys whose value changed.
        * to_delete: persisted keys absent from the snapshot (full replace).

    Keys whose value is unchanged appear in no batch, which makes repeated
    submissions of the same snapshot a no-op.

Layer:
    domain/services

Notes:
    No I/O. The application layer loads ``existing`` for the referenced
    clients only, then executes the three batches.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from braslog_api.domain.entities.kpi_entry import KpiEntry, KpiKey
from braslog_api.domain.services.kpi_values import KpiTriple


@dataclass(frozen=True, slots=True)
class EntryUpdate:
    """A persisted entry whose value must change."""

    entry_id: UUID
    key: KpiKey
    old_value: Decimal
    new_value: Decimal


@dataclass(frozen=True, slots=True)
class ReconciliationPlan:
    """Disjoint insert/update/delete batches for one snapshot."""

    to_insert: tuple[KpiTriple, ...]
    to_update: tuple[EntryUpdate, ...]
    to_delete: tuple[KpiEntry, ...]

    @property
    def is_noop(self) -> bool:
        return not (self.to_insert or self.to_update or self.to_delete)


def index_by_key(entries: Iterable[KpiEntry]) -> dict[KpiKey, KpiEntry]:
    """Index one day's entries by (client_id, kpi_type)."""
    return {entry.key: entry for entry in entries}


def plan_reconciliation(
    existing: Mapping[KpiKey, KpiEntry],
    incoming: Iterable[KpiTriple],
) -> ReconciliationPlan:
    """Compute the batches that turn ``existing`` into ``incoming``.

    Args:
        existing: Persisted entries of the snapshot date, keyed by
            (client_id, kpi_type), restricted to the referenced clients.
        incoming: Flattened snapshot triples. Duplicate keys resolve to the
            last occurrence.

    Returns:
        ReconciliationPlan whose batches are pairwise disjoint by key.
    """
    latest: dict[KpiKey, KpiTriple] = {}
    for triple in incoming:
        latest[triple.key] = triple

    to_insert: list[KpiTriple] = []
    to_update: list[EntryUpdate] = []
    for key, triple in latest.items():
        current = existing.get(key)
        if current is None:
            to_insert.append(triple)
        elif current.kpi_value != triple.value:
            to_update.append(
                EntryUpdate(
                    entry_id=current.id,
                    key=key,
                    old_value=current.kpi_value,
                    new_value=triple.value,
                )
            )

    to_delete = [entry for key, entry in existing.items() if key not in latest]

    return ReconciliationPlan(
        to_insert=tuple(to_insert),
        to_update=tuple(to_update),
        to_delete=tuple(to_delete),
    )
