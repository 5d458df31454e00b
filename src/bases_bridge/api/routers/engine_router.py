"""Health and live-evaluation engine routes."""

from fastapi import APIRouter

from bases_bridge import __version__
from bases_bridge.deps import EngineStateDep

router = APIRouter(tags=["engine"])


@router.get("/ping")
async def ping(engine: EngineStateDep) -> dict:
    status = engine.describe()
    status.pop("keys")
    return {"ok": True, "id": "bases-bridge", "version": __version__, **status}


@router.get("/debug/engine-keys")
async def engine_keys(engine: EngineStateDep) -> dict:
    return {"keys": engine.cache.keys()}
