"""Tests for the base catalogue, config, schema, query and upsert routes."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_bases(client: AsyncClient, add_file):
    add_file("Projects/Board.base", "views: []\n")
    add_file(".obsidian/Hidden.base", "views: []\n")

    response = await client.get("/bases")

    assert response.status_code == 200
    assert response.json() == {
        "bases": [
            {"id": "Projects/Board.base", "name": "Board", "path": "Projects/Board.base"},
            {"id": "Tasks.base", "name": "Tasks", "path": "Tasks.base"},
        ]
    }


@pytest.mark.asyncio
async def test_get_config(client: AsyncClient):
    response = await client.get("/bases/Tasks/config")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "Tasks.base"
    assert data["yaml"].startswith("filters:")
    assert data["json"]["formulas"] == {"label": "if(priority, 'has-priority', 'none')"}


@pytest.mark.asyncio
async def test_put_config(client: AsyncClient, vault_root):
    response = await client.put("/bases/Other.base/config", json={"json": {"views": [{"name": "Main"}]}})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "id": "Other.base", "warnings": []}
    assert "name: Main" in (vault_root / "Other.base").read_text(encoding="utf-8")

    response = await client.put("/bases/Other.base/config", json={"yaml": "views: [", "validateOnly": True})
    data = response.json()
    assert data["ok"] is False
    assert data["warnings"][0].startswith("YAML invalide:")


@pytest.mark.asyncio
async def test_create_base(client: AsyncClient, vault_root):
    response = await client.post("/bases", json={"path": "New/Board", "spec": {"views": []}})

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["id"] == "New/Board.base"
    assert data["created"] is True
    assert (vault_root / "New" / "Board.base").exists()


@pytest.mark.asyncio
async def test_get_schema(client: AsyncClient):
    response = await client.get("/bases/Tasks.base/schema")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "Tasks.base"
    assert [v["name"] for v in data["views"]] == ["All", "ByPriority", "Done"]
    status = next(p for p in data["properties"] if p["key"] == "status")
    assert status["kind"] == "note"
    assert status["displayName"] == "Status"


@pytest.mark.asyncio
async def test_query_without_body(client: AsyncClient):
    response = await client.post("/bases/Tasks.base/query")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 4
    assert data["source"] == "fallback"
    assert [row["file"]["path"] for row in data["rows"]] == ["A.md", "B.md", "Projects/C.md", "Projects/D.md"]


@pytest.mark.asyncio
async def test_query_with_view_and_paging(client: AsyncClient):
    response = await client.post(
        "/bases/Tasks/query", json={"view": "ByPriority", "limit": 2, "page": 2, "evaluate": True}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["page"] == 2
    assert data["evaluate"] is True
    assert [row["file"]["path"] for row in data["rows"]] == ["B.md", "Projects/D.md"]
    assert data["rows"][1]["computed"] == {"label": "none"}


@pytest.mark.asyncio
async def test_query_url_encoded_base_id(client: AsyncClient, add_file):
    add_file("Projects/My Board.base", "views:\n  - name: Main\n")

    response = await client.post("/bases/Projects/My%20Board.base/query", json={})

    assert response.status_code == 200
    assert response.json()["total"] == 4


@pytest.mark.asyncio
async def test_missing_base_is_404(client: AsyncClient):
    response = await client.post("/bases/Nope.base/query", json={})

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"

    response = await client.get("/bases/Nope/schema")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_invalid_request_is_422(client: AsyncClient):
    response = await client.post("/bases/Tasks.base/query", json={"sort": [{"dir": "asc"}]})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_upsert(client: AsyncClient, vault_root):
    response = await client.post(
        "/bases/Tasks.base/upsert",
        json={"operations": [{"file": "B.md", "set": {"status": "done"}, "unset": ["owner"]}]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["results"][0]["file"] == "B.md"
    assert data["results"][0]["changed"] == {"keys": ["status"], "unset": ["owner"]}
    text = (vault_root / "B.md").read_text(encoding="utf-8")
    assert "status: done" in text
    assert "owner" not in text


@pytest.mark.asyncio
async def test_upsert_failures_are_reported_in_results(client: AsyncClient):
    response = await client.post(
        "/bases/Tasks.base/upsert",
        json={"operations": [{"file": "Missing.md", "set": {"a": 1}}]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is False
    assert data["results"][0]["error"]["code"] == "not_found"
