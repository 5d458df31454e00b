"""
Query planner for bases.

Turns a query request into a page of rows:

1. load the schema and pick the view
2. resolve limit and page
3. AND together the base, view and request filters
4. evaluate the filter on every candidate note, collecting warnings
5. sort (request sort, else view order, else enumeration order)
6. slice the requested page and build row values
7. when evaluation is requested and the live engine is enabled, serve the page
   from the base snapshot instead
"""

from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from bases_bridge.bases.ast import combine_filters
from bases_bridge.bases.filter_eval import FilterEvaluator
from bases_bridge.bases.schema import BaseSchema
from bases_bridge.bases.snapshot import EngineState, Row, Snapshot, now_ms
from bases_bridge.bases.store import BaseSpecStore
from bases_bridge.bases.syntax import compare_values
from bases_bridge.config import BasesBridgeConfig
from bases_bridge.schemas import FileRef, QueryRequest, QueryResponse, QueryRow
from bases_bridge.utils import clamp_int
from bases_bridge.vault.models import Note
from bases_bridge.vault.provider import NoteProvider

TRUNCATED_WARNINGS = "Warnings tronqués (max {limit})."

type SortKey = Tuple[str, str]


class WarningCollector:
    """Deduplicated warnings with an upper bound on distinct entries."""

    def __init__(self, limit: int):
        self.limit = limit
        self._seen: set[str] = set()
        self.truncated = False

    def add(self, warnings: List[str]) -> None:
        for warning in warnings:
            if warning in self._seen:
                continue
            if len(self._seen) >= self.limit:
                self.truncated = True
                return
            self._seen.add(warning)

    def result(self) -> List[str]:
        warnings = sorted(self._seen)
        if self.truncated:
            warnings.append(TRUNCATED_WARNINGS.format(limit=self.limit))
        return warnings


class QueryPlanner:
    """Executes base queries against a NoteProvider."""

    def __init__(
        self,
        notes: NoteProvider,
        store: BaseSpecStore,
        engine: EngineState,
        config: Optional[BasesBridgeConfig] = None,
        evaluator: Optional[FilterEvaluator] = None,
    ):
        self.notes = notes
        self.store = store
        self.engine = engine
        self.config = config or BasesBridgeConfig()
        self.evaluator = evaluator or FilterEvaluator()
        self.resolver = self.evaluator.resolver

    async def query(self, base_id: str, request: Optional[QueryRequest] = None) -> QueryResponse:
        """
        Run a query against a base.

        Args:
            base_id: Base path, with or without the `.base` suffix
            request: View, extra filter, sort, paging and evaluate flag

        Returns:
            QueryResponse with total, page, rows, source and sorted warnings

        Raises:
            BaseNotFoundError: If the base file does not exist
        """
        request = request or QueryRequest()
        schema = await self.store.load_schema(base_id)
        view = schema.get_view(request.view)

        limit_source = request.limit if request.limit is not None else (view.limit if view else None)
        limit = clamp_int(limit_source, self.config.default_limit, 1, self.config.max_limit)
        page = clamp_int(request.page, 1, 1, self.config.max_page)

        combined = combine_filters(schema.filters, view.filters if view else None, request.filter)

        collector = WarningCollector(self.config.max_warnings)
        matches: List[Note] = []
        for note in await self.candidates():
            result = self.evaluator.evaluate_filter(note, combined, schema)
            collector.add(result.warnings)
            if result.ok:
                matches.append(note)

        sort_keys = self.sort_keys(request, view.order if view else None)
        if sort_keys:
            matches = self.sort(matches, sort_keys, schema)

        start = (page - 1) * limit
        evaluate = request.evaluate
        warnings = collector.result()
        logger.debug(
            f"Query base={schema.id} view={view.name if view else None} "
            f"matches={len(matches)} page={page} limit={limit} warnings={len(warnings)}"
        )

        if evaluate and self.engine.enabled:
            snapshot = self.engine.cache.get(schema.id)
            if snapshot is None:
                rows = [self.build_row(note, schema, evaluate=True) for note in matches]
                snapshot = Snapshot(timestamp=now_ms(), rows=rows, total=len(rows))
                self.engine.cache.set(schema.id, snapshot)
                logger.debug(f"Snapshot computed base={schema.id} rows={snapshot.total}")
            return QueryResponse(
                total=snapshot.total,
                page=page,
                rows=snapshot.rows[start : start + limit],
                evaluate=True,
                source="engine",
                warnings=warnings,
            )

        rows = [self.build_row(note, schema, evaluate=evaluate) for note in matches[start : start + limit]]
        return QueryResponse(
            total=len(matches),
            page=page,
            rows=rows,
            evaluate=evaluate,
            source="fallback",
            warnings=warnings,
        )

    async def candidates(self) -> List[Note]:
        """Every note outside the configuration folder, excluding base files."""
        config_prefix = f"{self.config.config_dir.strip('/')}/"
        return [
            note
            for note in await self.notes.list_notes()
            if not note.path.startswith(config_prefix) and note.ext != "base"
        ]

    @staticmethod
    def sort_keys(request: QueryRequest, order: Optional[List[str]]) -> List[SortKey]:
        """Request sort wins over view order; `-prop` in a view order means descending."""
        keys: List[SortKey] = []
        if request.sort:
            for spec in request.sort:
                prop = spec.prop.strip()
                if prop:
                    keys.append((prop, spec.dir))
        elif order:
            for entry in order:
                text = str(entry).strip()
                if text.startswith("-"):
                    keys.append((text[1:].strip(), "desc"))
                elif text:
                    keys.append((text, "asc"))
        return [(prop, direction) for prop, direction in keys if prop]

    def sort(self, notes: List[Note], keys: List[SortKey], schema: BaseSchema) -> List[Note]:
        values: Dict[str, List[Any]] = {
            note.path: [self.resolver.resolve(note, prop, schema) for prop, _ in keys] for note in notes
        }

        def compare(a: Note, b: Note) -> int:
            for i, (_, direction) in enumerate(keys):
                cmp = compare_values(values[a.path][i], values[b.path][i])
                if cmp:
                    return cmp if direction == "asc" else -cmp
            return 0

        # sorted() is stable, so ties keep enumeration order
        return sorted(notes, key=cmp_to_key(compare))

    def build_props(self, note: Note, schema: BaseSchema) -> Dict[str, Any]:
        return {prop.key: self.resolver.resolve(note, prop.ref, schema) for prop in schema.properties}

    def build_computed(self, note: Note, schema: BaseSchema) -> Dict[str, Any]:
        return {key: self.resolver.formulas.evaluate_key(note, key, schema) for key in schema.formula_keys}

    def build_row(self, note: Note, schema: BaseSchema, evaluate: bool = False) -> Row:
        fields: Dict[str, Any] = {
            "file": FileRef(path=note.path, name=note.name),
            "props": self.build_props(note, schema),
        }
        if evaluate:
            fields["computed"] = self.build_computed(note, schema)
        return QueryRow(**fields).model_dump(exclude_unset=True)
