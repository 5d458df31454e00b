"""
Formula evaluation for base specs.

Formulas use a small, safe subset of the base expression language:

  null                      -> None
  42, -1.5                  -> numbers
  'text', "text"            -> strings (outer quotes removed)
  status, file.name         -> references
  list(tags)                -> value as a list
  join(list(tags))          -> list items joined with ", "
  if(cond, then, else)      -> branch chosen by truthiness of cond

Anything else evaluates to None.
"""

import re
from typing import TYPE_CHECKING, Any, Optional, Set, Tuple

from loguru import logger

from bases_bridge.bases.schema import BaseSchema
from bases_bridge.bases.syntax import (
    NUMBER_LITERAL,
    QUOTES,
    REF_PATTERN,
    as_list,
    is_truthy,
    parse_number_literal,
    split_top_level_commas,
    strip_quotes,
    to_text,
)
from bases_bridge.vault.models import Note

if TYPE_CHECKING:  # pragma: no cover
    from bases_bridge.bases.resolver import ValueResolver

JOIN_LIST = re.compile(r"^join\s*\(\s*list\s*\(\s*([^)]+?)\s*\)\s*\)$", re.DOTALL)
LIST = re.compile(r"^list\s*\(\s*([^)]+?)\s*\)$", re.DOTALL)
IF = re.compile(r"^if\s*\((.*)\)$", re.DOTALL)
REF_PREFIXES = ("file.", "note.", "formula.")


class FormulaEvaluator:
    """Evaluates formula expressions against a note."""

    def __init__(self, resolver: "ValueResolver"):
        self.resolver = resolver
        # (note path, formula key) pairs currently being evaluated
        self._active: Set[Tuple[str, str]] = set()

    def evaluate_key(self, note: Note, key: str, schema: Optional[BaseSchema] = None) -> Any:
        """Evaluate the schema formula named key, None when it is missing or not a string."""
        if schema is None:
            return None
        expression = schema.formulas.get(key)
        if not isinstance(expression, str):
            return None

        marker = (note.path, key)
        if marker in self._active:
            logger.debug(f"Formula cycle on {key} for {note.path}")
            return None
        self._active.add(marker)
        try:
            return self.evaluate(note, expression, schema)
        finally:
            self._active.discard(marker)

    def evaluate(self, note: Note, expression: Any, schema: Optional[BaseSchema] = None) -> Any:
        raw = str(expression if expression is not None else "").strip()
        if not raw:
            return None

        if raw == "null":
            return None
        if NUMBER_LITERAL.match(raw):
            return parse_number_literal(raw)
        if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in QUOTES:
            return strip_quotes(raw)

        if raw.startswith(REF_PREFIXES) or REF_PATTERN.match(raw):
            return self.resolver.resolve(note, raw, schema)

        if match := JOIN_LIST.match(raw):
            values = as_list(self.resolver.resolve(note, match.group(1), schema))
            return ", ".join(to_text(v) for v in values)

        if match := LIST.match(raw):
            return as_list(self.resolver.resolve(note, match.group(1), schema))

        if match := IF.match(raw):
            args = split_top_level_commas(match.group(1))
            if len(args) >= 3:
                condition = self.evaluate(note, args[0], schema)
                if is_truthy(condition):
                    return self.evaluate(note, args[1], schema)
                return self.evaluate(note, ",".join(args[2:]), schema)

        return None
