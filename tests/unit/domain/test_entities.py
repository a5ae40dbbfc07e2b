# tests/unit/domain/test_entities.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from braslog_api.domain.entities.client import Client
from braslog_api.domain.entities.cost_center import CostCenter
from braslog_api.domain.entities.kpi_entry import KpiEntry
from braslog_api.domain.enums.kpi import KpiType, RecordStatus


@pytest.mark.parametrize("name", ["", "   ", " Acme", "Acme ", "x" * 101])
def test_client_rejects_invalid_names(name: str) -> None:
    with pytest.raises(ValueError):
        Client(id=uuid4(), name=name)


def test_client_defaults() -> None:
    client = Client(id=uuid4(), name="Acme")
    assert client.status is RecordStatus.ACTIVE
    assert client.is_active
    assert client.cost_center_id is None
    assert client.is_key_account is False


def test_client_budget_ranges() -> None:
    Client(id=uuid4(), name="Acme", budget_revenue=Decimal("999999999.99"), budget_on_time=100)
    with pytest.raises(ValueError):
        Client(id=uuid4(), name="Acme", budget_revenue=Decimal("-1"))
    with pytest.raises(ValueError):
        Client(id=uuid4(), name="Acme", budget_occupancy=Decimal("100.01"))


def test_client_budget_for_each_type() -> None:
    client = Client(
        id=uuid4(),
        name="Acme",
        budget_revenue=Decimal("3000"),
        budget_on_time=Decimal("95"),
        budget_occupancy=Decimal("80"),
        budget_third_party=Decimal("10"),
    )
    assert client.budget_for(KpiType.REVENUE) == Decimal("3000")
    assert client.budget_for(KpiType.ON_TIME) == Decimal("95")
    assert client.budget_for(KpiType.OCCUPANCY) == Decimal("80")
    assert client.budget_for(KpiType.THIRD_PARTY) == Decimal("10")
    assert client.budget_for(KpiType.AVAILABILITY) is None


def test_cost_center_rejects_negative_client_count() -> None:
    with pytest.raises(ValueError):
        CostCenter(id=uuid4(), name="Sul", client_count=-1)
    assert CostCenter(id=uuid4(), name="Sul", status=RecordStatus.INACTIVE).client_count == 0


@pytest.mark.parametrize(
    ("kpi_type", "value", "ok"),
    [
        (KpiType.REVENUE, "0", True),
        (KpiType.REVENUE, "999999999.99", True),
        (KpiType.REVENUE, "1000000000", False),
        (KpiType.ON_TIME, "100", True),
        (KpiType.ON_TIME, "100.01", False),
        (KpiType.AVAILABILITY, "-0.01", False),
    ],
)
def test_kpi_entry_value_ranges(kpi_type: KpiType, value: str, ok: bool) -> None:
    def build() -> KpiEntry:
        return KpiEntry(
            id=uuid4(),
            date=date(2025, 1, 8),
            client_id=uuid4(),
            kpi_type=kpi_type,
            kpi_value=Decimal(value),
        )

    if ok:
        assert build().kpi_value == Decimal(value)
    else:
        with pytest.raises(ValueError):
            build()


def test_kpi_entry_drops_time_component_and_exposes_key() -> None:
    client_id = uuid4()
    entry = KpiEntry(
        id=uuid4(),
        date=datetime(2025, 1, 8, 23, 59),  # type: ignore[arg-type]
        client_id=client_id,
        kpi_type=KpiType.ON_TIME,
        kpi_value=Decimal("95"),
    )
    assert type(entry.date) is date
    assert entry.date == date(2025, 1, 8)
    assert entry.key == (client_id, KpiType.ON_TIME)


def test_kpi_type_traits() -> None:
    assert KpiType.REVENUE.is_currency
    assert not KpiType.OCCUPANCY.is_currency
    assert KpiType.OCCUPANCY.upper_bound == Decimal("100")
    assert KpiType.REVENUE.title == "Receita"
    assert KpiType.REVENUE.value == "RECEITA"
