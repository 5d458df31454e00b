"""Dependency injection functions for bases-bridge services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from bases_bridge.bases.planner import QueryPlanner
from bases_bridge.bases.snapshot import EngineState
from bases_bridge.bases.store import BaseSpecStore
from bases_bridge.bases.upsert import UpsertService
from bases_bridge.config import BasesBridgeConfig, ConfigManager
from bases_bridge.semantic.search import SemanticSearchService
from bases_bridge.vault import FileVault, NoteProvider

## config


@lru_cache
def get_config_manager() -> ConfigManager:  # pragma: no cover
    return ConfigManager()


def get_app_config() -> BasesBridgeConfig:  # pragma: no cover
    return get_config_manager().config


AppConfigDep = Annotated[BasesBridgeConfig, Depends(get_app_config)]


## vault


async def get_note_provider(app_config: AppConfigDep) -> NoteProvider:
    return FileVault(app_config.vault_root)


NoteProviderDep = Annotated[NoteProvider, Depends(get_note_provider)]


## engine state lives on the app so snapshots survive across requests


async def get_engine_state(request: Request) -> EngineState:
    return request.app.state.engine


EngineStateDep = Annotated[EngineState, Depends(get_engine_state)]


## services


async def get_base_spec_store(notes: NoteProviderDep, app_config: AppConfigDep) -> BaseSpecStore:
    return BaseSpecStore(notes, config_dir=app_config.config_dir)


BaseSpecStoreDep = Annotated[BaseSpecStore, Depends(get_base_spec_store)]


async def get_query_planner(
    notes: NoteProviderDep,
    store: BaseSpecStoreDep,
    engine: EngineStateDep,
    app_config: AppConfigDep,
) -> QueryPlanner:
    return QueryPlanner(notes, store, engine, app_config)


QueryPlannerDep = Annotated[QueryPlanner, Depends(get_query_planner)]


async def get_upsert_service(notes: NoteProviderDep) -> UpsertService:
    return UpsertService(notes)


UpsertServiceDep = Annotated[UpsertService, Depends(get_upsert_service)]


async def get_search_service(request: Request, app_config: AppConfigDep) -> SemanticSearchService:
    service = getattr(request.app.state, "search_service", None)
    if service is None or service.config is not app_config:
        service = SemanticSearchService(app_config)
        request.app.state.search_service = service
    return service


SearchServiceDep = Annotated[SemanticSearchService, Depends(get_search_service)]
