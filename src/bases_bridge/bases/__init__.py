"""Query and filter evaluation engine for `.base` specs."""

from bases_bridge.bases.ast import (
    AndFilter,
    FilterNode,
    NotFilter,
    OrFilter,
    StatementFilter,
    UnsupportedFilter,
    combine_filters,
    decode_filter,
)
from bases_bridge.bases.errors import (
    BaseNotFoundError,
    BasesError,
    BaseValidationError,
    ErrorCode,
    FrontmatterWriteError,
    MtimeConflictError,
    NoteNotFoundError,
)
from bases_bridge.bases.filter_eval import FilterEvaluator, FilterResult
from bases_bridge.bases.formula import FormulaEvaluator
from bases_bridge.bases.planner import QueryPlanner
from bases_bridge.bases.resolver import ValueResolver
from bases_bridge.bases.schema import (
    BaseSchema,
    PropertyKind,
    SchemaProperty,
    ViewDefinition,
    extract_schema,
)
from bases_bridge.bases.snapshot import EngineState, Snapshot, SnapshotCache
from bases_bridge.bases.store import BaseSpecStore
from bases_bridge.bases.syntax import is_truthy
from bases_bridge.bases.upsert import UpsertService

__all__ = [
    "AndFilter",
    "BaseNotFoundError",
    "BaseSchema",
    "BaseSpecStore",
    "BaseValidationError",
    "BasesError",
    "EngineState",
    "ErrorCode",
    "FilterEvaluator",
    "FilterNode",
    "FilterResult",
    "FormulaEvaluator",
    "FrontmatterWriteError",
    "MtimeConflictError",
    "NoteNotFoundError",
    "NotFilter",
    "OrFilter",
    "PropertyKind",
    "QueryPlanner",
    "SchemaProperty",
    "Snapshot",
    "SnapshotCache",
    "StatementFilter",
    "UnsupportedFilter",
    "UpsertService",
    "ValueResolver",
    "ViewDefinition",
    "combine_filters",
    "decode_filter",
    "extract_schema",
    "is_truthy",
]
