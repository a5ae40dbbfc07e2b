# tests/integration/routers/test_cost_centers_router.py
from __future__ import annotations

import httpx
import pytest

from tests.fixtures.in_memory import InMemoryStore


@pytest.mark.asyncio
async def test_crud_roundtrip(app_client: httpx.AsyncClient, store: InMemoryStore) -> None:
    r = await app_client.post("/v1/cost-centers", json={"name": "Sul"})
    assert r.status_code == 201
    cc = r.json()["data"]
    assert (cc["name"], cc["status"], cc["client_count"]) == ("Sul", "ATIVO", 0)

    store.add_client("Alfa", cost_center_id=store.add_cost_center("Norte").id)

    r = await app_client.patch(f"/v1/cost-centers/{cc['id']}", json={"status": "INATIVO"})
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "INATIVO"

    r = await app_client.get("/v1/cost-centers")
    body = r.json()
    assert body["total"] == 2
    assert [(c["name"], c["client_count"]) for c in body["items"]] == [("Norte", 1), ("Sul", 0)]

    r = await app_client.get(f"/v1/cost-centers/{cc['id']}")
    assert "ETag" in r.headers

    r = await app_client.delete(f"/v1/cost-centers/{cc['id']}")
    assert r.status_code == 200
    assert r.json()["data"]["message"] == "Centro de custo excluído com sucesso"


@pytest.mark.asyncio
async def test_delete_with_clients_is_409(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    sul = store.add_cost_center("Sul")
    store.add_client("Alfa", cost_center_id=sul.id)

    r = await app_client.delete(f"/v1/cost-centers/{sul.id}")

    assert r.status_code == 409
    assert r.json()["error"]["message"] == (
        "Não é possível excluir um Centro de Custo que possui clientes vinculados"
    )
    assert r.json()["error"]["details"]["clients"] == 1


@pytest.mark.asyncio
async def test_duplicate_and_name_check(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    store.add_cost_center("Sul")

    r = await app_client.post("/v1/cost-centers", json={"name": " Sul "})
    assert r.status_code == 409
    assert r.json()["error"]["message"] == "Já existe um centro de custo com este nome"

    r = await app_client.get("/v1/cost-centers/validate-name", params={"name": "Leste"})
    assert r.json()["data"] == {"available": True, "message": "Nome disponível"}


@pytest.mark.asyncio
async def test_patch_with_null_name_is_400(
    app_client: httpx.AsyncClient, store: InMemoryStore
) -> None:
    sul = store.add_cost_center("Sul")

    r = await app_client.patch(f"/v1/cost-centers/{sul.id}", json={"name": None})

    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Dados do centro de custo inválidos"
