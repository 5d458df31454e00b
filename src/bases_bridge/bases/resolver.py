"""Resolve references like `file.name`, `note.status` or `formula.score` against a note."""

from typing import Any, Callable, Dict, Optional

from bases_bridge.bases.formula import FormulaEvaluator
from bases_bridge.bases.schema import BaseSchema
from bases_bridge.vault.models import Note


class ValueResolver:
    """
    Resolves reference strings to values for a single note.

    Supported references:
    - `file.<field>`: path, name, ext, size, ctime, mtime, folder
    - `note.<key>`: frontmatter value
    - `formula.<key>`: evaluates the schema formula with that key
    - `<key>`: frontmatter value

    Missing values resolve to None. Resolution never raises.
    """

    FILE_FIELDS: Dict[str, Callable[[Note], Any]] = {
        "path": lambda note: note.path,
        "name": lambda note: note.name,
        "ext": lambda note: note.ext,
        "size": lambda note: note.size,
        "ctime": lambda note: note.ctime,
        "mtime": lambda note: note.mtime,
        "folder": lambda note: note.folder,
    }

    def __init__(self) -> None:
        self.formulas = FormulaEvaluator(self)

    def resolve(self, note: Note, ref: str, schema: Optional[BaseSchema] = None) -> Any:
        trimmed = (ref or "").strip()

        if trimmed.startswith("file."):
            getter = self.FILE_FIELDS.get(trimmed[len("file.") :])
            return getter(note) if getter else None

        if trimmed.startswith("note."):
            return note.frontmatter.get(trimmed[len("note.") :])

        if trimmed.startswith("formula."):
            return self.formulas.evaluate_key(note, trimmed[len("formula.") :], schema)

        return note.frontmatter.get(trimmed)
