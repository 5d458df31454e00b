"""
Filter evaluation for base queries.

A statement is tried against these forms, in order, first applicable wins:

1. `a or b`, `a || b`        (split outside quotes)
2. `a and b`, `a && b`       (split outside quotes, stops at first failure)
3. `not a`, `!a`
4. built-in predicates such as `file.hasTag('x')` or `file.inFolder('Projects')`
5. comparisons `==`, `=`, `!=`, `>=`, `<=`, `>`, `<`
6. a bare property name, tested for truthiness
7. anything else passes with a "Filter non reconnu" warning

Unrecognized syntax never hides notes: it passes and is reported as a warning.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from loguru import logger

from bases_bridge.bases.ast import (
    AndFilter,
    FilterNode,
    NotFilter,
    OrFilter,
    StatementFilter,
    UnsupportedFilter,
    decode_filter,
)
from bases_bridge.bases.resolver import ValueResolver
from bases_bridge.bases.schema import BaseSchema
from bases_bridge.bases.syntax import (
    BOOL_LITERAL,
    NUMBER_LITERAL,
    REF_PATTERN,
    REF_TOKEN,
    as_list,
    compare_values,
    is_truthy,
    normalize_linkish,
    parse_number_literal,
    parse_string_list_literal,
    split_outside_quotes,
    strip_quotes,
    to_text,
)
from bases_bridge.vault.models import Note

UNRECOGNIZED_FILTER = "Filter non reconnu: {text}"
UNSUPPORTED_SHAPE = "Filter non supporté (shape inconnu)."

COMPARISON = re.compile(r"^(.*?)\s*(==|=|!=|>=|<=|>|<)\s*(.*?)\s*$")


@dataclass
class FilterResult:
    """Outcome of evaluating a filter against one note."""

    ok: bool
    warnings: List[str] = field(default_factory=list)


type PredicateHandler = Callable[[Note, re.Match[str], Optional[BaseSchema]], bool]


def _strip_hash(tag: str) -> str:
    return tag[1:] if tag.startswith("#") else tag


class FilterEvaluator:
    """Evaluates statements and decoded filter trees against notes."""

    def __init__(self, resolver: Optional[ValueResolver] = None):
        self.resolver = resolver or ValueResolver()
        self.predicates: List[Tuple[re.Pattern[str], PredicateHandler]] = [
            (re.compile(r"^file\.hasTag\((.+)\)$"), self._has_tag),
            (re.compile(r"^file\.inFolder\((.+)\)$"), self._in_folder),
            (re.compile(r"^file\.hasLink\((.+)\)$"), self._has_link),
            (re.compile(r"^\[(.*)\]\.contains\((.*)\)$"), self._list_literal_contains),
            (re.compile(r"^file\.path\.startsWith\((.+)\)$"), self._path_starts_with),
            (re.compile(r"^file\.path\.contains\((.+)\)$"), self._path_contains),
            (re.compile(r"^file\.folder\.startsWith\((.+)\)$"), self._folder_starts_with),
            (re.compile(r"^file\.folder\.contains\((.+)\)$"), self._folder_contains),
            (re.compile(r"^file\.tags\.contains\((.+)\)$"), self._has_tag),
            (re.compile(rf"^list\(({REF_TOKEN})\)\.contains\(link\((.+)\)\)$"), self._prop_contains_link),
            (re.compile(rf"^({REF_TOKEN})\.contains\(link\((.+)\)\)$"), self._prop_contains_link),
            (
                re.compile(r"^file\.(path|name|folder|ext)\.(contains|startsWith)\((.+)\)$"),
                self._file_field_match,
            ),
        ]

    def evaluate_filter(
        self, note: Note, node: FilterNode | Any, schema: Optional[BaseSchema] = None
    ) -> FilterResult:
        """
        Evaluate a filter tree.

        Args:
            note: Candidate note
            node: Decoded FilterNode, or raw filter data which is decoded first
            schema: Schema providing formulas for `formula.*` references

        Returns:
            FilterResult with the pass/fail outcome and collected warnings
        """
        if not isinstance(node, FilterNode):
            node = decode_filter(node)
        if node is None:
            return FilterResult(ok=True)

        if isinstance(node, StatementFilter):
            return self.evaluate_statement(note, node.text, schema)

        if isinstance(node, AndFilter):
            warnings: List[str] = []
            for child in node.children:
                result = self.evaluate_filter(note, child, schema)
                warnings.extend(result.warnings)
                if not result.ok:
                    return FilterResult(ok=False, warnings=warnings)
            return FilterResult(ok=True, warnings=warnings)

        if isinstance(node, OrFilter):
            warnings = []
            for child in node.children:
                result = self.evaluate_filter(note, child, schema)
                warnings.extend(result.warnings)
                if result.ok:
                    return FilterResult(ok=True, warnings=warnings)
            return FilterResult(ok=False, warnings=warnings)

        if isinstance(node, NotFilter):
            result = self.evaluate_filter(note, node.child, schema)
            return FilterResult(ok=not result.ok, warnings=result.warnings)

        if isinstance(node, UnsupportedFilter):
            logger.debug(f"Unsupported filter shape: {node.raw!r}")
        return FilterResult(ok=True, warnings=[UNSUPPORTED_SHAPE])

    def evaluate_statement(self, note: Note, text: Any, schema: Optional[BaseSchema] = None) -> FilterResult:
        raw = str(text if text is not None else "").strip()
        if not raw:
            return FilterResult(ok=True)

        for needle in (" or ", "||"):
            parts = split_outside_quotes(raw, needle)
            if len(parts) > 1:
                results = [self.evaluate_statement(note, part, schema) for part in parts]
                return FilterResult(
                    ok=any(r.ok for r in results),
                    warnings=[w for r in results for w in r.warnings],
                )

        for needle in (" and ", "&&"):
            parts = split_outside_quotes(raw, needle)
            if len(parts) > 1:
                warnings: List[str] = []
                for part in parts:
                    result = self.evaluate_statement(note, part, schema)
                    warnings.extend(result.warnings)
                    if not result.ok:
                        return FilterResult(ok=False, warnings=warnings)
                return FilterResult(ok=True, warnings=warnings)

        if raw.startswith("not "):
            inner = self.evaluate_statement(note, raw[len("not ") :], schema)
            return FilterResult(ok=not inner.ok, warnings=inner.warnings)
        if raw.startswith("!"):
            inner = self.evaluate_statement(note, raw[1:], schema)
            return FilterResult(ok=not inner.ok, warnings=inner.warnings)

        for pattern, handler in self.predicates:
            match = pattern.match(raw)
            if match:
                return FilterResult(ok=handler(note, match, schema))

        match = COMPARISON.match(raw)
        if match:
            return FilterResult(ok=self._compare(note, match, schema))

        if REF_PATTERN.match(raw):
            return FilterResult(ok=is_truthy(self.resolver.resolve(note, raw, schema)))

        logger.debug(f"Unrecognized filter statement: {raw}")
        return FilterResult(ok=True, warnings=[UNRECOGNIZED_FILTER.format(text=raw)])

    # Built-in predicates

    def _has_tag(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        tag = _strip_hash(strip_quotes(match.group(1)))
        return tag in {_strip_hash(t) for t in note.tags}

    def _in_folder(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        folder = strip_quotes(match.group(1)).replace("\\", "/").rstrip("/")
        if not folder:
            return True
        return note.path.startswith(f"{folder}/")

    def _has_link(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        want = normalize_linkish(strip_quotes(match.group(1)))
        return any(normalize_linkish(link) == want for link in note.links)

    def _list_literal_contains(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        items = parse_string_list_literal(match.group(1))
        needle_ref = match.group(2).strip()
        needle = self.resolver.resolve(note, needle_ref, schema)
        if needle is None:
            needle = strip_quotes(needle_ref)
        return to_text(needle) in items

    def _path_starts_with(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        prefix = strip_quotes(match.group(1)).replace("\\", "/")
        return note.path.startswith(prefix)

    def _path_contains(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        needle = strip_quotes(match.group(1)).replace("\\", "/")
        return needle in note.path

    def _folder_starts_with(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        prefix = strip_quotes(match.group(1)).replace("\\", "/").rstrip("/")
        return note.folder.startswith(prefix)

    def _folder_contains(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        needle = strip_quotes(match.group(1)).replace("\\", "/")
        return needle in note.folder

    def _prop_contains_link(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        want = normalize_linkish(strip_quotes(match.group(2)))
        values = as_list(self.resolver.resolve(note, match.group(1), schema))
        return any(normalize_linkish(to_text(v)) == want for v in values)

    def _file_field_match(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        field_name, method, arg = match.group(1), match.group(2), match.group(3)
        haystack = to_text(self.resolver.resolve(note, f"file.{field_name}", schema))
        needle = strip_quotes(arg)
        if method == "startsWith":
            return haystack.startswith(needle)
        return needle in haystack

    def _compare(self, note: Note, match: re.Match[str], schema: Optional[BaseSchema]) -> bool:
        left_ref, op, right_raw = match.group(1).strip(), match.group(2), match.group(3).strip()
        left = self.resolver.resolve(note, left_ref, schema)

        right: Any
        if BOOL_LITERAL.match(right_raw):
            right = right_raw.lower() == "true"
        elif NUMBER_LITERAL.match(right_raw):
            right = parse_number_literal(right_raw)
        else:
            right = strip_quotes(right_raw)

        cmp = compare_values(left, right)
        if op in ("==", "="):
            return cmp == 0
        if op == "!=":
            return cmp != 0
        if op == ">=":
            return cmp >= 0
        if op == "<=":
            return cmp <= 0
        if op == ">":
            return cmp > 0
        return cmp < 0
