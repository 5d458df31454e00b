"""Pydantic schemas for the bases-bridge API."""

from bases_bridge.schemas.bases import (
    BaseConfigResponse,
    BaseConfigUpsertRequest,
    BaseConfigUpsertResponse,
    BaseCreateRequest,
    BaseCreateResponse,
    BaseSchemaResponse,
    BasesListResponse,
    BaseSummary,
    EnginePushRequest,
    EngineStatusResponse,
    FileRef,
    QueryRequest,
    QueryResponse,
    QueryRow,
    SchemaPropertyResponse,
    SchemaViewResponse,
    SortSpec,
    UpsertChange,
    UpsertErrorDetail,
    UpsertOperation,
    UpsertRequest,
    UpsertResponse,
    UpsertResult,
)
from bases_bridge.schemas.search import SearchRequest, SearchResponse, SearchResult

__all__ = [
    "BaseConfigResponse",
    "BaseConfigUpsertRequest",
    "BaseConfigUpsertResponse",
    "BaseCreateRequest",
    "BaseCreateResponse",
    "BaseSchemaResponse",
    "BasesListResponse",
    "BaseSummary",
    "EnginePushRequest",
    "EngineStatusResponse",
    "FileRef",
    "QueryRequest",
    "QueryResponse",
    "QueryRow",
    "SchemaPropertyResponse",
    "SchemaViewResponse",
    "SearchRequest",
    "SearchResponse",
    "SearchResult",
    "SortSpec",
    "UpsertChange",
    "UpsertErrorDetail",
    "UpsertOperation",
    "UpsertRequest",
    "UpsertResponse",
    "UpsertResult",
]
