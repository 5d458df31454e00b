"""Tests for the health and live-evaluation engine routes."""

import pytest
from httpx import AsyncClient

from bases_bridge import __version__


@pytest.mark.asyncio
async def test_ping(client: AsyncClient):
    response = await client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {
        "ok": True,
        "id": "bases-bridge",
        "version": __version__,
        "engineEnabled": False,
        "engineReady": False,
        "cacheSize": 0,
    }


@pytest.mark.asyncio
async def test_push_then_query_from_engine(app, client: AsyncClient):
    app.state.engine.set_enabled(True)
    rows = [{"file": {"path": "X.md", "name": "X"}, "props": {"k": 1}, "computed": {"label": "x"}}]

    response = await client.post("/bases/Tasks/engine/push", json={"rows": rows})
    assert response.json() == {"ok": True, "id": "Tasks.base", "total": 1}

    response = await client.get("/debug/engine-keys")
    assert response.json() == {"keys": ["Tasks.base"]}

    response = await client.get("/ping")
    assert response.json()["engineReady"] is True
    assert response.json()["cacheSize"] == 1

    response = await client.post("/bases/Tasks.base/query", json={"evaluate": True})
    data = response.json()
    assert data["source"] == "engine"
    assert data["total"] == 1
    assert data["rows"] == rows


@pytest.mark.asyncio
async def test_engine_disabled_uses_fallback(client: AsyncClient):
    await client.post("/bases/Tasks.base/engine/push", json={"rows": []})

    response = await client.post("/bases/Tasks.base/query", json={"evaluate": True})

    assert response.json()["source"] == "fallback"
    assert response.json()["total"] == 4
