"""API routers."""

from bases_bridge.api.routers.bases_router import router as bases_router
from bases_bridge.api.routers.engine_router import router as engine_router
from bases_bridge.api.routers.search_router import router as search_router

__all__ = ["bases_router", "engine_router", "search_router"]
