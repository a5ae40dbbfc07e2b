# tests/integration/routers/test_kpi_entries_router.py
from __future__ import annotations

from datetime import date
from uuid import uuid4

import httpx
import pytest

from braslog_api.domain.enums.kpi import KpiType
from tests.fixtures.in_memory import InMemoryStore

# --------------------------------------------------------------------------- #
# Daily snapshot
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio
async def test_put_daily_snapshot_reconciles(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    alfa = store.add_client("Alfa")
    url = "/v1/kpi-entries/daily/2025-01-08"

    r = await app_client.put(
        url, json={"entries": [{"client_id": str(alfa.id), "revenue": 1000, "on_time": 95}]}
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["success"] is True
    assert data["message"] == "Dados de KPI salvos com sucesso"
    assert data["stats"] == {"inserted": 2, "updated": 0, "deleted": 0}
    assert data["form_projection"]["entries"] == [
        {
            "client_id": str(alfa.id),
            "revenue": 1000.0,
            "on_time": 95.0,
            "occupancy": None,
            "third_party": None,
            "availability": None,
        }
    ]

    r = await app_client.put(url, json={"entries": [{"client_id": str(alfa.id), "on_time": 97}]})
    assert r.json()["data"]["stats"] == {"inserted": 0, "updated": 1, "deleted": 1}

    r = await app_client.get(url)
    assert r.status_code == 200
    entries = r.json()["data"]["entries"]
    assert [(e["kpi_type"], e["kpi_value"]) for e in entries] == [("ON_TIME", 97.0)]


@pytest.mark.asyncio
async def test_put_daily_snapshot_revenue_sequence(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    alfa = store.add_client("Alfa")
    url = "/v1/kpi-entries/daily/2025-01-08"

    steps = [
        ({"revenue": 1500}, {"inserted": 1, "updated": 0, "deleted": 0}),
        ({"revenue": 1500}, {"inserted": 0, "updated": 0, "deleted": 0}),
        ({"revenue": 1800}, {"inserted": 0, "updated": 1, "deleted": 0}),
        ({}, {"inserted": 0, "updated": 0, "deleted": 1}),
    ]
    for fields, stats in steps:
        r = await app_client.put(url, json={"entries": [{"client_id": str(alfa.id), **fields}]})
        assert r.status_code == 200
        assert r.json()["data"]["stats"] == stats

    r = await app_client.get(url)
    assert r.json()["data"]["entries"] == []
    assert store.entries == {}


@pytest.mark.asyncio
async def test_put_daily_snapshot_errors(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    alfa = store.add_client("Alfa")
    url = "/v1/kpi-entries/daily/2025-01-08"

    r = await app_client.put(url, json={"entries": []})
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Pelo menos uma entrada é obrigatória"

    r = await app_client.put(url, json={"entries": [{"client_id": str(alfa.id), "occupancy": 120}]})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["message"] == "Percentual deve ser entre 0 e 100"
    assert err["details"]["errors"][0]["field"] == "occupancy"

    r = await app_client.put(url, json={"entries": [{"client_id": str(uuid4()), "revenue": 1}]})
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Um ou mais clientes não foram encontrados"

    r = await app_client.put("/v1/kpi-entries/daily/2025-13-01", json={"entries": []})
    assert r.status_code == 422

    assert store.entries == {}


# --------------------------------------------------------------------------- #
# Monthly pivot
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio
async def test_monthly_pivot_shape_and_display(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    sul = store.add_cost_center("Sul")
    alfa = store.add_client("Alfa", cost_center_id=sul.id)
    beta = store.add_client("Beta", cost_center_id=sul.id)
    store.add_entry(date(2025, 1, 1), alfa.id, KpiType.REVENUE, "1000")
    store.add_entry(date(2025, 1, 1), beta.id, KpiType.REVENUE, "500")
    store.add_entry(date(2025, 1, 1), alfa.id, KpiType.ON_TIME, "95")

    r = await app_client.get("/v1/kpi-entries/monthly/2025-01")

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["month"] == "2025-01"
    assert data["prior_month"] == "2024-12"
    assert data["days_in_month"] == 31
    assert data["prior_month_cutoff"] == 15
    assert data["days"][0] == 1 and data["days"][-1] == 31
    assert len(data["entries"]) == 3
    assert [t["kpi_type"] for t in data["tables"]] == [t.value for t in KpiType]

    revenue, on_time = data["tables"][0], data["tables"][1]
    assert revenue["title"] == "Receita"
    (row,) = revenue["rows"]
    assert (row["kind"], row["label"], row["key"]) == ("cost_center", "Sul", str(sul.id))
    assert row["cells"][0] == 1500.0
    assert row["cells"][1] is None
    assert row["display"][0] == "1.500"
    assert row["display"][1] == "-"
    assert row["total_display"] == "1.500"
    assert [f["label"] for f in revenue["footer"]] == [
        "Total/Média",
        "Meta diária",
        "Mês anterior",
    ]

    assert on_time["rows"][0]["display"][0] == "95%"


@pytest.mark.asyncio
async def test_monthly_pivot_bad_month_is_400(app_client: httpx.AsyncClient) -> None:
    r = await app_client.get("/v1/kpi-entries/monthly/2025-13")

    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Mês inválido; use o formato AAAA-MM"


@pytest.mark.asyncio
async def test_monthly_pivot_unknown_client_is_404(app_client: httpx.AsyncClient) -> None:
    r = await app_client.get(
        "/v1/kpi-entries/monthly/2025-01", params={"client_id": str(uuid4())}
    )
    assert r.status_code == 404


# --------------------------------------------------------------------------- #
# Entry CRUD
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio
async def test_entry_crud(app_client: httpx.AsyncClient, store: InMemoryStore) -> None:
    alfa = store.add_client("Alfa")
    payload = {
        "date": "2025-01-08",
        "client_id": str(alfa.id),
        "kpi_type": "OCUPACAO",
        "kpi_value": "87.456",
    }

    r = await app_client.post("/v1/kpi-entries", json=payload)
    assert r.status_code == 201
    entry = r.json()["data"]
    assert entry["kpi_value"] == 87.46

    r = await app_client.post("/v1/kpi-entries", json=payload)
    assert r.status_code == 409
    assert r.json()["error"]["message"] == (
        "Já existe uma entrada para este cliente, data e tipo de KPI"
    )

    r = await app_client.patch(f"/v1/kpi-entries/{entry['id']}", json={"kpi_value": 90})
    assert r.status_code == 200
    assert r.json()["data"]["kpi_value"] == 90.0

    r = await app_client.get(f"/v1/kpi-entries/{entry['id']}")
    assert r.status_code == 200
    assert "ETag" in r.headers

    r = await app_client.delete(f"/v1/kpi-entries/{entry['id']}")
    assert r.json()["data"]["message"] == "Entrada de KPI excluída com sucesso"

    r = await app_client.get(f"/v1/kpi-entries/{entry['id']}")
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Entrada de KPI não encontrada"


@pytest.mark.asyncio
async def test_list_and_range_validation(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    alfa = store.add_client("Alfa")
    store.add_entry(date(2025, 1, 1), alfa.id, KpiType.REVENUE, "10")
    store.add_entry(date(2025, 1, 5), alfa.id, KpiType.REVENUE, "20")
    store.add_entry(date(2025, 1, 5), alfa.id, KpiType.ON_TIME, "90")

    r = await app_client.get(
        "/v1/kpi-entries", params={"start_date": "2025-01-02", "kpi_type": "RECEITA"}
    )
    body = r.json()
    assert body["total"] == 1
    assert body["items"][0]["kpi_value"] == 20.0

    r = await app_client.get(
        "/v1/kpi-entries", params={"start_date": "2025-01-05", "end_date": "2025-01-01"}
    )
    assert r.status_code == 400
    assert r.json()["error"]["message"] == (
        "Data inicial deve ser anterior ou igual à data final"
    )


@pytest.mark.asyncio
async def test_stats_use_business_today(
    app_client: httpx.AsyncClient, store: InMemoryStore, today: date
) -> None:
    alfa = store.add_client("Alfa")
    store.add_entry(today, alfa.id, KpiType.REVENUE, "10")
    store.add_entry(date(2024, 12, 1), alfa.id, KpiType.ON_TIME, "90")

    r = await app_client.get("/v1/kpi-entries/stats")

    data = r.json()["data"]
    assert (data["total"], data["today"], data["last_7_days"], data["this_month"]) == (2, 1, 1, 1)
    assert data["by_type"]["RECEITA"] == 1
    assert data["by_type"]["DISPONIBILIDADE"] == 0
