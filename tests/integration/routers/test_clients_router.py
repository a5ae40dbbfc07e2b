# tests/integration/routers/test_clients_router.py
from __future__ import annotations

from datetime import date
from uuid import uuid4

import httpx
import pytest

from braslog_api.domain.enums.kpi import KpiType, RecordStatus
from tests.fixtures.in_memory import InMemoryStore


@pytest.mark.asyncio
async def test_create_then_get_with_etag(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    sul = store.add_cost_center("Sul")

    r = await app_client.post(
        "/v1/clients",
        json={
            "name": "Transportes Alfa",
            "cost_center_id": str(sul.id),
            "budget_revenue": "150000.00",
            "budget_on_time": 95,
        },
    )
    assert r.status_code == 201
    created = r.json()["data"]
    assert created["name"] == "Transportes Alfa"
    assert created["status"] == "ATIVO"
    assert created["budget_revenue"] == 150000.0
    assert created["budget_on_time"] == 95.0
    assert created["budget_occupancy"] is None

    r = await app_client.get(f"/v1/clients/{created['id']}")
    assert r.status_code == 200
    assert r.headers["ETag"].startswith('"')
    assert r.json()["data"]["id"] == created["id"]


@pytest.mark.asyncio
async def test_duplicate_name_is_409(app_client: httpx.AsyncClient, store: InMemoryStore) -> None:
    store.add_client("Alfa")

    r = await app_client.post("/v1/clients", json={"name": "Alfa"})

    assert r.status_code == 409
    err = r.json()["error"]
    assert err["code"] == "CONFLICT"
    assert err["http_status"] == 409
    assert err["message"] == "Já existe um cliente com este nome"


@pytest.mark.asyncio
async def test_unknown_cost_center_is_404(app_client: httpx.AsyncClient) -> None:
    r = await app_client.post(
        "/v1/clients", json={"name": "Alfa", "cost_center_id": str(uuid4())}
    )
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Centro de custo não encontrado"


@pytest.mark.asyncio
async def test_out_of_range_budget_is_400(app_client: httpx.AsyncClient) -> None:
    r = await app_client.post("/v1/clients", json={"name": "Alfa", "budget_on_time": 150})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "BAD_REQUEST"


@pytest.mark.asyncio
async def test_unknown_body_field_is_422(app_client: httpx.AsyncClient) -> None:
    r = await app_client.post("/v1/clients", json={"name": "Alfa", "color": "blue"})
    assert r.status_code == 422
    err = r.json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    assert err["message"] == "Dados da requisição inválidos"
    assert err["details"]["errors"]


@pytest.mark.asyncio
async def test_list_paginates_and_filters(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    store.add_client("Alfa")
    store.add_client("Beta")
    store.add_client("Gama", status=RecordStatus.INACTIVE)

    r = await app_client.get("/v1/clients", params={"page": 1, "page_size": 2})
    assert r.status_code == 200
    body = r.json()
    assert (body["page"], body["page_size"], body["total"]) == (1, 2, 3)
    assert [c["name"] for c in body["items"]] == ["Alfa", "Beta"]

    r = await app_client.get("/v1/clients", params={"status": "INATIVO"})
    assert [c["name"] for c in r.json()["items"]] == ["Gama"]

    r = await app_client.get("/v1/clients", params={"search": "bet"})
    assert [c["name"] for c in r.json()["items"]] == ["Beta"]


@pytest.mark.asyncio
async def test_page_size_is_capped(app_client: httpx.AsyncClient) -> None:
    r = await app_client.get("/v1/clients", params={"page_size": 1000})
    assert r.status_code == 200
    assert r.json()["page_size"] == 200


@pytest.mark.asyncio
async def test_stats_and_validate_name(app_client: httpx.AsyncClient, store: InMemoryStore) -> None:
    alfa = store.add_client("Alfa")
    store.add_client("Beta", status=RecordStatus.INACTIVE)

    r = await app_client.get("/v1/clients/stats")
    assert r.json()["data"] == {"total": 2, "active": 1, "inactive": 1}

    r = await app_client.get("/v1/clients/validate-name", params={"name": "Alfa"})
    assert r.json()["data"] == {
        "available": False,
        "message": "Já existe um cliente com este nome",
    }

    r = await app_client.get(
        "/v1/clients/validate-name", params={"name": "Alfa", "exclude_id": str(alfa.id)}
    )
    assert r.json()["data"] == {"available": True, "message": "Nome disponível"}


@pytest.mark.asyncio
async def test_patch_clears_nullable_and_rejects_null_name(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    sul = store.add_cost_center("Sul")
    client = store.add_client("Alfa", cost_center_id=sul.id)

    r = await app_client.patch(
        f"/v1/clients/{client.id}", json={"cost_center_id": None, "is_key_account": True}
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["cost_center_id"] is None
    assert data["is_key_account"] is True

    r = await app_client.patch(f"/v1/clients/{client.id}", json={"name": None})
    assert r.status_code == 400
    assert r.json()["error"]["details"] == {"required_fields": ["name"]}


@pytest.mark.asyncio
async def test_delete_blocked_then_allowed(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    blocked = store.add_client("Alfa")
    store.add_entry(date(2025, 1, 2), blocked.id, KpiType.REVENUE, "100")
    free = store.add_client("Beta")

    r = await app_client.delete(f"/v1/clients/{blocked.id}")
    assert r.status_code == 409
    assert r.json()["error"]["message"].startswith("Não é possível excluir cliente")

    r = await app_client.delete(f"/v1/clients/{free.id}")
    assert r.status_code == 200
    assert r.json()["data"] == {"id": str(free.id), "message": "Cliente excluído com sucesso"}

    r = await app_client.get(f"/v1/clients/{free.id}")
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Cliente não encontrado"


@pytest.mark.asyncio
async def test_malformed_id_is_422(app_client: httpx.AsyncClient) -> None:
    r = await app_client.get("/v1/clients/not-a-uuid")
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
