# src/braslog_api/application/use_cases/kpi/upsert_daily_snapshot.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: reconcile a full daily KPI snapshot.

Purpose:
    Replace the KPI entries of one date for the referenced clients with the
    submitted snapshot. The diff itself is computed by the pure planner in
    ``domain/services/kpi_reconciliation.py``; this use case validates input,
    loads state, and applies the three batches.

Layer:
    application/use_cases/kpi

Notes:
    - A client record with every field absent clears that client's entries
      for the date.
    - All validation (non-empty entry list, value ranges, client existence) happens
      before any mutation.
    - Batches are applied in the order delete -> insert -> update and each is
      committed as soon as it completes. A storage failure aborts the
      remaining batches; batches already committed stay applied.
    - Re-submitting an identical snapshot produces an empty plan and touches
      no rows.
"""

from __future__ import annotations

import logging
from typing import Final, cast
from uuid import uuid4

from braslog_api.application.schemas.dto.kpi import (
    FormProjectionDTO,
    KpiEntryDTO,
    ReconciliationStatsDTO,
    UpsertDailySnapshotRequest,
    UpsertDailySnapshotResultDTO,
)
from braslog_api.application.uow import UnitOfWork
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.exceptions.common import EntityNotFound, InvalidRequest
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import KpiEntryRepository
from braslog_api.domain.services.kpi_reconciliation import index_by_key, plan_reconciliation
from braslog_api.domain.services.kpi_values import (
    FORM_FIELDS,
    build_form_projection,
    check_kpi_value,
    flatten_snapshot,
)
from braslog_api.infrastructure.observability.metrics import (
    get_kpi_reconciled_rows_total,
    get_kpi_snapshot_writes_total,
)

logger = logging.getLogger(__name__)

EMPTY_SNAPSHOT: Final[str] = "Pelo menos uma entrada é obrigatória"
INVALID_VALUE: Final[str] = "Valor de KPI inválido"
UNKNOWN_CLIENTS: Final[str] = "Um ou mais clientes não foram encontrados"
SNAPSHOT_SAVED: Final[str] = "Dados de KPI salvos com sucesso"


class UpsertDailySnapshotUseCase:
    """Reconcile one day's KPI entries against a submitted snapshot.

    Args:
        uow: Application UnitOfWork used for repository resolution and transaction scope.

    Raises:
        InvalidRequest: When the snapshot carries no client records or a value is out of range.
        EntityNotFound: When a referenced client does not exist.
        StorageFailure: When the store fails while applying a batch.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: UpsertDailySnapshotRequest) -> UpsertDailySnapshotResultDTO:
        if not req.entries:
            raise InvalidRequest(EMPTY_SNAPSHOT, details={"date": req.date.isoformat()})
        try:
            triples = flatten_snapshot(req.entries)
        except ValueError as exc:
            raise InvalidRequest(INVALID_VALUE, details={"reason": str(exc)}) from exc

        violations: list[dict[str, str]] = []
        for triple in triples:
            problem = check_kpi_value(triple.kpi_type, triple.value)
            if problem is not None:
                violations.append(
                    {
                        "client_id": str(triple.client_id),
                        "field": FORM_FIELDS[triple.kpi_type],
                        "message": problem,
                    }
                )
        if violations:
            raise InvalidRequest(violations[0]["message"], details={"errors": violations})

        # Records without values still reference their client.
        client_ids = list(dict.fromkeys(r.client_id for r in req.entries))

        logger.info(
            "kpi.upsert_daily_snapshot.start",
            extra={
                "date": req.date.isoformat(),
                "clients": len(client_ids),
                "values": len(triples),
            },
        )

        async with self._uow as tx:
            clients = cast(ClientRepository, tx.get_repository(ClientRepository))
            entries = cast(KpiEntryRepository, tx.get_repository(KpiEntryRepository))

            found = {c.id for c in await clients.list_by_ids(client_ids)}
            missing = [str(cid) for cid in client_ids if cid not in found]
            if missing:
                raise EntityNotFound(UNKNOWN_CLIENTS, details={"client_ids": missing})

            existing = index_by_key(await entries.list_for_date(req.date, client_ids=client_ids))
            plan = plan_reconciliation(existing, triples)

            deleted = inserted = updated = 0
            if plan.to_delete:
                deleted = await entries.delete_many([e.id for e in plan.to_delete])
                await tx.commit()
            if plan.to_insert:
                inserted = await entries.add_many(
                    [
                        KpiEntry(
                            id=uuid4(),
                            date=req.date,
                            client_id=t.client_id,
                            kpi_type=t.kpi_type,
                            kpi_value=t.value,
                        )
                        for t in plan.to_insert
                    ]
                )
                await tx.commit()
            if plan.to_update:
                updated = await entries.update_values(
                    [(u.entry_id, u.new_value) for u in plan.to_update]
                )
                await tx.commit()

            current = await entries.list_for_date(req.date, client_ids=client_ids)

        counter = get_kpi_reconciled_rows_total()
        for operation, count in (("insert", inserted), ("update", updated), ("delete", deleted)):
            if count:
                counter.labels(operation=operation).inc(count)
        get_kpi_snapshot_writes_total().labels(result="noop" if plan.is_noop else "applied").inc()

        logger.info(
            "kpi.upsert_daily_snapshot.applied",
            extra={
                "date": req.date.isoformat(),
                "inserted": inserted,
                "updated": updated,
                "deleted": deleted,
                "noop": plan.is_noop,
            },
        )

        return UpsertDailySnapshotResultDTO(
            success=True,
            message=SNAPSHOT_SAVED,
            date=req.date,
            entries=[KpiEntryDTO.from_entity(e) for e in current],
            form_projection=FormProjectionDTO.from_projection(
                build_form_projection(req.date, current)
            ),
            stats=ReconciliationStatsDTO(inserted=inserted, updated=updated, deleted=deleted),
        )
