"""Row upserts: frontmatter writes driven by base query results."""

from typing import Any, Dict, List

from loguru import logger

from bases_bridge.bases.errors import (
    BasesError,
    BaseValidationError,
    FrontmatterWriteError,
    MtimeConflictError,
    NoteNotFoundError,
)
from bases_bridge.file_utils import FileError
from bases_bridge.schemas import (
    UpsertChange,
    UpsertErrorDetail,
    UpsertOperation,
    UpsertRequest,
    UpsertResponse,
    UpsertResult,
)
from bases_bridge.utils import normalize_base_id
from bases_bridge.vault.provider import NoteProvider

COMPUTED_PREFIXES = ("file.", "formula.")


class UpsertService:
    """
    Applies batches of frontmatter changes.

    Operations run sequentially. A failing operation is reported with a typed
    error; the batch stops there unless `continue_on_error` is set.
    """

    def __init__(self, notes: NoteProvider):
        self.notes = notes

    async def apply(self, request: UpsertRequest) -> UpsertResponse:
        results: List[UpsertResult] = []
        for operation in request.operations:
            result = await self.apply_operation(operation)
            results.append(result)
            if result.error is not None and not request.continue_on_error:
                logger.info(f"Upsert batch stopped at {result.file or '<missing file>'}: {result.error.code}")
                break

        ok = all(r.error is None for r in results)
        logger.info(f"Upsert batch done ok={ok} results={len(results)} of {len(request.operations)}")
        return UpsertResponse(ok=ok, results=results)

    async def apply_operation(self, operation: UpsertOperation) -> UpsertResult:
        """Apply one operation, converting every failure into a typed error result."""
        path = normalize_base_id(operation.file.strip())
        mtime = 0
        try:
            if not path:
                raise BaseValidationError("Opération sans champ 'file'.")

            note = await self.notes.get_by_path(path)
            if note is None:
                raise NoteNotFoundError(path)
            mtime = note.mtime

            if operation.expected_mtime is not None and operation.expected_mtime != note.mtime:
                raise MtimeConflictError(operation.expected_mtime, note.mtime)

            warnings: List[str] = []
            values: Dict[str, Any] = {}
            for key, value in operation.set.items():
                if key.startswith(COMPUTED_PREFIXES):
                    warnings.append(f"Clé calculée ignorée: {key}")
                    continue
                values[key] = value
            unset = [k for k in operation.unset if isinstance(k, str)]

            def mutate(frontmatter: Dict[str, Any]) -> None:
                frontmatter.update(values)
                for key in unset:
                    frontmatter.pop(key, None)

            try:
                updated = await self.notes.write_frontmatter(note, mutate)
            except (FileError, OSError, ValueError) as e:
                raise FrontmatterWriteError(str(e)) from e

            logger.info(f"Upserted frontmatter of {path} keys={list(values)} unset={unset}")
            return UpsertResult(
                file=path,
                mtime=updated.mtime,
                changed=UpsertChange(keys=list(values), unset=unset or None),
                warnings=warnings or None,
            )
        except BasesError as e:
            logger.debug(f"Upsert of {path or '<missing file>'} failed: {e.code.value} {e.message}")
            return UpsertResult(
                file=path,
                mtime=mtime,
                error=UpsertErrorDetail(code=e.code.value, message=e.message),
            )
