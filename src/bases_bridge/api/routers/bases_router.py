"""Routes for the base catalogue, schema, queries and row upserts.

Base ids are vault-relative paths and may contain slashes, so they are
captured with the `path` converter: `/bases/Projects/Tasks.base/query`.
"""

from typing import Optional

from fastapi import APIRouter, Body
from loguru import logger

from bases_bridge.bases.schema import BaseSchema
from bases_bridge.deps import BaseSpecStoreDep, EngineStateDep, QueryPlannerDep, UpsertServiceDep
from bases_bridge.schemas import (
    BaseConfigResponse,
    BaseConfigUpsertRequest,
    BaseConfigUpsertResponse,
    BaseCreateRequest,
    BaseCreateResponse,
    BaseSchemaResponse,
    BasesListResponse,
    EnginePushRequest,
    QueryRequest,
    QueryResponse,
    SchemaPropertyResponse,
    SchemaViewResponse,
    UpsertRequest,
    UpsertResponse,
)
from bases_bridge.utils import ensure_base_ext, normalize_base_id

router = APIRouter(prefix="/bases", tags=["bases"])


def schema_to_response(schema: BaseSchema) -> BaseSchemaResponse:
    return BaseSchemaResponse(
        id=schema.id,
        path=schema.path,
        name=schema.name,
        properties=[
            SchemaPropertyResponse(
                key=p.key,
                kind=p.kind.value,
                display_name=p.display_name,
                value_type=p.value_type,
            )
            for p in schema.properties
        ],
        formulas=schema.formulas,
        views=[
            SchemaViewResponse(
                name=v.name,
                type=v.type,
                limit=v.limit,
                order=v.order,
                filters=v.filters,
                description=v.description,
            )
            for v in schema.views
        ],
        filters=schema.filters,
    )


@router.get("", response_model=BasesListResponse)
async def list_bases(store: BaseSpecStoreDep) -> BasesListResponse:
    """List every `.base` file of the vault."""
    return BasesListResponse(bases=await store.list_bases())


@router.post("", response_model=BaseCreateResponse)
async def create_base(store: BaseSpecStoreDep, request: BaseCreateRequest) -> BaseCreateResponse:
    """Create a base from a spec object."""
    return await store.create_base(request)


@router.get("/{base_id:path}/config", response_model=BaseConfigResponse)
async def get_base_config(store: BaseSpecStoreDep, base_id: str) -> BaseConfigResponse:
    return await store.get_config(normalize_base_id(base_id))


@router.put("/{base_id:path}/config", response_model=BaseConfigUpsertResponse)
async def put_base_config(
    store: BaseSpecStoreDep, base_id: str, request: BaseConfigUpsertRequest
) -> BaseConfigUpsertResponse:
    """Replace a base spec from YAML text or a JSON object."""
    return await store.upsert_config(normalize_base_id(base_id), request)


@router.get("/{base_id:path}/schema", response_model=BaseSchemaResponse)
async def get_base_schema(store: BaseSpecStoreDep, base_id: str) -> BaseSchemaResponse:
    schema = await store.load_schema(normalize_base_id(base_id))
    return schema_to_response(schema)


@router.post("/{base_id:path}/query", response_model=QueryResponse)
async def query_base(
    planner: QueryPlannerDep,
    base_id: str,
    request: Optional[QueryRequest] = Body(None),
) -> QueryResponse:
    """Query a base: filter, sort and page its notes."""
    return await planner.query(normalize_base_id(base_id), request)


@router.post("/{base_id:path}/upsert", response_model=UpsertResponse)
async def upsert_rows(service: UpsertServiceDep, base_id: str, request: UpsertRequest) -> UpsertResponse:
    """Write frontmatter changes for the notes behind a base's rows."""
    logger.debug(f"Upsert for base {normalize_base_id(base_id)}: {len(request.operations)} operations")
    return await service.apply(request)


@router.post("/{base_id:path}/engine/push")
async def push_snapshot(engine: EngineStateDep, base_id: str, request: EnginePushRequest) -> dict:
    """Replace the snapshot of a base with rows computed by the host."""
    key = ensure_base_ext(normalize_base_id(base_id))
    snapshot = engine.cache.push(key, request.rows)
    return {"ok": True, "id": key, "total": snapshot.total}
