# tests/unit/application/test_upsert_daily_snapshot.py
from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from braslog_api.application.schemas.dto.kpi import (
    UpsertDailySnapshotRequest,
    UpsertDailySnapshotResultDTO,
)
from braslog_api.application.use_cases.kpi.upsert_daily_snapshot import (
    EMPTY_SNAPSHOT,
    SNAPSHOT_SAVED,
    UNKNOWN_CLIENTS,
    UpsertDailySnapshotUseCase,
)
from braslog_api.domain.enums.kpi import KpiType
from braslog_api.domain.exceptions.common import EntityNotFound, InvalidRequest, StorageFailure
from braslog_api.domain.interfaces.repositories.kpi_entry_repository import KpiEntryRepository
from braslog_api.domain.services.kpi_values import ClientDailyValues
from tests.fixtures.in_memory import InMemoryKpiEntryRepository, InMemoryStore, InMemoryUnitOfWork

DAY = date(2025, 1, 8)


def _values(store: InMemoryStore, day: date = DAY) -> dict[tuple[UUID, KpiType], Decimal]:
    return {e.key: e.kpi_value for e in store.entries.values() if e.date == day}


async def _submit(
    uow: InMemoryUnitOfWork, *rows: ClientDailyValues, day: date = DAY
) -> UpsertDailySnapshotResultDTO:
    return await UpsertDailySnapshotUseCase(uow=uow).execute(
        UpsertDailySnapshotRequest(date=day, entries=list(rows))
    )


@pytest.mark.asyncio
async def test_insert_noop_update_delete_sequence(
    store: InMemoryStore, uow: InMemoryUnitOfWork
) -> None:
    a = store.add_client("Alfa").id

    first = await _submit(
        uow, ClientDailyValues(client_id=a, revenue=Decimal("1000"), on_time=Decimal("95"))
    )
    assert first.success is True
    assert first.message == SNAPSHOT_SAVED
    assert (first.stats.inserted, first.stats.updated, first.stats.deleted) == (2, 0, 0)
    assert _values(store) == {
        (a, KpiType.REVENUE): Decimal("1000.00"),
        (a, KpiType.ON_TIME): Decimal("95.00"),
    }

    commits_before = uow.commits
    again = await _submit(
        uow, ClientDailyValues(client_id=a, revenue=Decimal("1000"), on_time=Decimal("95"))
    )
    assert (again.stats.inserted, again.stats.updated, again.stats.deleted) == (0, 0, 0)
    assert uow.commits == commits_before
    assert len(again.entries) == 2

    changed = await _submit(
        uow, ClientDailyValues(client_id=a, revenue=Decimal("1000"), on_time=Decimal("97"))
    )
    assert (changed.stats.inserted, changed.stats.updated, changed.stats.deleted) == (0, 1, 0)
    assert _values(store)[(a, KpiType.ON_TIME)] == Decimal("97.00")

    trimmed = await _submit(uow, ClientDailyValues(client_id=a, on_time=Decimal("97")))
    assert (trimmed.stats.inserted, trimmed.stats.updated, trimmed.stats.deleted) == (0, 0, 1)
    assert _values(store) == {(a, KpiType.ON_TIME): Decimal("97.00")}
    assert [e.kpi_type for e in trimmed.entries] == [KpiType.ON_TIME]
    (row,) = trimmed.form_projection.entries
    assert row.client_id == a
    assert row.on_time == Decimal("97.00")
    assert row.revenue is None


@pytest.mark.asyncio
async def test_values_are_quantized_before_comparison(
    store: InMemoryStore, uow: InMemoryUnitOfWork
) -> None:
    a = store.add_client("Alfa").id
    store.add_entry(DAY, a, KpiType.OCCUPANCY, "80.00")

    result = await _submit(uow, ClientDailyValues(client_id=a, occupancy=Decimal("80.004")))

    assert (result.stats.inserted, result.stats.updated, result.stats.deleted) == (0, 0, 0)


@pytest.mark.asyncio
async def test_other_clients_and_dates_are_left_alone(
    store: InMemoryStore, uow: InMemoryUnitOfWork
) -> None:
    a = store.add_client("Alfa").id
    b = store.add_client("Beta").id
    store.add_entry(DAY, b, KpiType.REVENUE, "10")
    store.add_entry(date(2025, 1, 7), a, KpiType.REVENUE, "20")

    await _submit(uow, ClientDailyValues(client_id=a, availability=Decimal("99")))

    assert _values(store) == {
        (a, KpiType.AVAILABILITY): Decimal("99.00"),
        (b, KpiType.REVENUE): Decimal("10"),
    }
    assert _values(store, date(2025, 1, 7)) == {(a, KpiType.REVENUE): Decimal("20")}


@pytest.mark.asyncio
async def test_revenue_only_sequence_ends_with_delete(
    store: InMemoryStore, uow: InMemoryUnitOfWork
) -> None:
    a = store.add_client("Alfa").id

    steps = [
        (Decimal("1500"), (1, 0, 0)),
        (Decimal("1500"), (0, 0, 0)),
        (Decimal("1800"), (0, 1, 0)),
        (None, (0, 0, 1)),
    ]
    for revenue, expected in steps:
        result = await _submit(uow, ClientDailyValues(client_id=a, revenue=revenue))
        assert (result.stats.inserted, result.stats.updated, result.stats.deleted) == expected

    assert _values(store) == {}
    assert result.entries == []
    assert result.form_projection.entries == []


@pytest.mark.asyncio
async def test_record_without_values_clears_only_that_client(
    store: InMemoryStore, uow: InMemoryUnitOfWork
) -> None:
    a = store.add_client("Alfa").id
    b = store.add_client("Beta").id
    store.add_entry(DAY, a, KpiType.REVENUE, "1000.00")
    store.add_entry(DAY, a, KpiType.ON_TIME, "95.00")
    store.add_entry(DAY, b, KpiType.REVENUE, "10.00")

    result = await _submit(
        uow,
        ClientDailyValues(client_id=a),
        ClientDailyValues(client_id=b, revenue=Decimal("10")),
    )

    assert (result.stats.inserted, result.stats.updated, result.stats.deleted) == (0, 0, 2)
    assert _values(store) == {(b, KpiType.REVENUE): Decimal("10.00")}


@pytest.mark.asyncio
async def test_empty_entry_list_is_rejected(store: InMemoryStore, uow: InMemoryUnitOfWork) -> None:
    a = store.add_client("Alfa").id
    store.add_entry(DAY, a, KpiType.REVENUE, "1000.00")

    with pytest.raises(InvalidRequest) as exc_info:
        await _submit(uow)

    assert exc_info.value.message == EMPTY_SNAPSHOT
    assert exc_info.value.details == {"date": "2025-01-08"}
    assert len(store.entries) == 1


@pytest.mark.asyncio
async def test_record_without_values_for_unknown_client_is_not_found(
    store: InMemoryStore, uow: InMemoryUnitOfWork
) -> None:
    ghost = uuid4()

    with pytest.raises(EntityNotFound) as exc_info:
        await _submit(uow, ClientDailyValues(client_id=ghost))

    assert exc_info.value.details == {"client_ids": [str(ghost)]}


@pytest.mark.asyncio
async def test_out_of_range_value_applies_nothing(
    store: InMemoryStore, uow: InMemoryUnitOfWork
) -> None:
    a = store.add_client("Alfa").id

    with pytest.raises(InvalidRequest) as exc_info:
        await _submit(
            uow,
            ClientDailyValues(client_id=a, revenue=Decimal("500"), on_time=Decimal("101")),
        )

    assert exc_info.value.message == "Percentual deve ser entre 0 e 100"
    (error,) = exc_info.value.details["errors"]
    assert error["field"] == "on_time"
    assert store.entries == {}


@pytest.mark.asyncio
async def test_negative_revenue_is_rejected(store: InMemoryStore, uow: InMemoryUnitOfWork) -> None:
    a = store.add_client("Alfa").id

    with pytest.raises(InvalidRequest) as exc_info:
        await _submit(uow, ClientDailyValues(client_id=a, revenue=Decimal("-1")))

    assert exc_info.value.message == "Receita deve ser um valor positivo"


@pytest.mark.asyncio
async def test_unknown_client_applies_nothing(
    store: InMemoryStore, uow: InMemoryUnitOfWork
) -> None:
    a = store.add_client("Alfa").id
    ghost = uuid4()

    with pytest.raises(EntityNotFound) as exc_info:
        await _submit(
            uow,
            ClientDailyValues(client_id=a, revenue=Decimal("1")),
            ClientDailyValues(client_id=ghost, revenue=Decimal("2")),
        )

    assert exc_info.value.message == UNKNOWN_CLIENTS
    assert exc_info.value.details == {"client_ids": [str(ghost)]}
    assert store.entries == {}


class _FailingUpdates(InMemoryKpiEntryRepository):
    async def update_values(self, changes: Sequence[tuple[UUID, Decimal]]) -> int:
        raise StorageFailure("Falha ao acessar o banco de dados")


@pytest.mark.asyncio
async def test_storage_failure_keeps_already_committed_batches(store: InMemoryStore) -> None:
    a = store.add_client("Alfa").id
    store.add_entry(DAY, a, KpiType.REVENUE, "1000.00")
    store.add_entry(DAY, a, KpiType.ON_TIME, "95.00")
    uow = InMemoryUnitOfWork(store, repo_factories={KpiEntryRepository: _FailingUpdates})

    with pytest.raises(StorageFailure):
        await _submit(
            uow,
            ClientDailyValues(client_id=a, on_time=Decimal("97"), occupancy=Decimal("80")),
        )

    assert _values(store) == {
        (a, KpiType.ON_TIME): Decimal("95.00"),
        (a, KpiType.OCCUPANCY): Decimal("80.00"),
    }
    assert uow.commits == 2
    assert uow.rollbacks == 1
