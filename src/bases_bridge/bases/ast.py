"""
Filter tree definitions for base specs.

Base files describe filters as loosely shaped YAML: a bare statement string,
or a mapping with an `and`, `or` or `not` key. `decode_filter` turns that raw
data into explicit node types once, so evaluation never re-inspects shapes.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class FilterNode:
    """Base class for decoded filter nodes."""

    pass


@dataclass(frozen=True)
class StatementFilter(FilterNode):
    """A single statement in the expression language (e.g. `status = 'done'`)."""

    text: str


@dataclass(frozen=True)
class AndFilter(FilterNode):
    """All children must pass."""

    children: tuple[Optional[FilterNode], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OrFilter(FilterNode):
    """At least one child must pass."""

    children: tuple[Optional[FilterNode], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NotFilter(FilterNode):
    """Inverts its child."""

    child: Optional[FilterNode]


@dataclass(frozen=True)
class UnsupportedFilter(FilterNode):
    """Any shape the decoder does not understand. Evaluates as passing with a warning."""

    raw: Any


def _is_absent(raw: Any) -> bool:
    # Falsy scalars mean "no filter"; empty containers are still shapes.
    if isinstance(raw, (dict, list, tuple)):
        return False
    return raw is None or raw is False or raw == "" or raw == 0


def decode_filter(raw: Any) -> Optional[FilterNode]:
    """
    Decode a raw filter value from a base spec or request.

    Args:
        raw: A statement string, a mapping with `and`/`or`/`not`, or None

    Returns:
        The decoded node, or None when there is no filter at all
    """
    if isinstance(raw, FilterNode):
        return raw
    if _is_absent(raw):
        return None
    if isinstance(raw, str):
        return StatementFilter(raw)
    if isinstance(raw, dict):
        if isinstance(raw.get("and"), list):
            return AndFilter(tuple(decode_filter(child) for child in raw["and"]))
        if isinstance(raw.get("or"), list):
            return OrFilter(tuple(decode_filter(child) for child in raw["or"]))
        if "not" in raw and not _is_absent(raw["not"]):
            return NotFilter(decode_filter(raw["not"]))
    return UnsupportedFilter(raw)


def combine_filters(*filters: Any) -> AndFilter:
    """AND together every present filter, skipping absent ones."""
    return AndFilter(tuple(decode_filter(f) for f in filters if not _is_absent(f)))
