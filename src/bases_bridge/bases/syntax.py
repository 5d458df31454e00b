"""Lexical helpers shared by the formula and filter evaluators.

The base expression language is matched line by line against ordered
patterns, so everything here works on plain strings: quote-aware splitting,
literal coercion and the string/number views used by comparisons and sorting.
"""

import math
import re
from datetime import date, datetime
from typing import Any, List, Optional

# Reference token: Unicode letters, digits, underscore and hyphen.
REF_TOKEN = r"[\w-]+"
REF_PATTERN = re.compile(rf"^{REF_TOKEN}$")
NUMBER_LITERAL = re.compile(r"^[+-]?[0-9]+(?:\.[0-9]+)?$")
NUMERIC_STRING = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")
BOOL_LITERAL = re.compile(r"^(true|false)$", re.IGNORECASE)

QUOTES = ("'", '"')


def strip_quotes(text: str) -> str:
    """Trim and remove one pair of matching outer quotes."""
    s = (text or "").strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in QUOTES:
        return s[1:-1]
    return s


def split_outside_quotes(text: str, needle: str) -> List[str]:
    """
    Split text on needle wherever it occurs outside a quoted string.

    Parentheses are not tracked. A quote preceded by a backslash does not open
    or close a string. Parts are trimmed and empty parts dropped.

    Examples:
        >>> split_outside_quotes("a = 'x or y' or b", " or ")
        ["a = 'x or y'", 'b']
    """
    parts: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    i = 0
    while i < len(text):
        ch = text[i]
        escaped = i > 0 and text[i - 1] == "\\"
        if ch in QUOTES and not escaped:
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
        if quote is None and text.startswith(needle, i):
            parts.append("".join(current))
            current = []
            i += len(needle)
            continue
        current.append(ch)
        i += 1
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def split_top_level_commas(text: str) -> List[str]:
    """Split function arguments on commas that sit outside parentheses and quotes."""
    parts: List[str] = []
    current: List[str] = []
    depth = 0
    quote: Optional[str] = None
    for i, ch in enumerate(text):
        escaped = i > 0 and text[i - 1] == "\\"
        if ch in QUOTES and not escaped:
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
        elif quote is None:
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth = max(0, depth - 1)
            elif ch == "," and depth == 0:
                parts.append("".join(current).strip())
                current = []
                continue
        current.append(ch)
    parts.append("".join(current).strip())
    return parts


def parse_string_list_literal(inner: str) -> List[str]:
    """Items of a bracketed list literal body such as `'a', "b", c`."""
    return [item for item in (strip_quotes(p) for p in split_outside_quotes(inner, ",")) if item]


def normalize_linkish(value: str) -> str:
    """
    Reduce a link target to its bare note name.

    Strips wiki-link brackets, display text after `|`, heading anchors after
    `#` and a trailing `.md`.

    Examples:
        >>> normalize_linkish("[[Projects/Alpha.md|Alpha]]")
        'Projects/Alpha'
        >>> normalize_linkish("Alpha#Tasks")
        'Alpha'
    """
    s = (value or "").strip()
    if s.startswith("[[") and s.endswith("]]"):
        s = s[2:-2]
    s = s.split("|", 1)[0]
    s = s.split("#", 1)[0]
    s = s.strip()
    if s.lower().endswith(".md"):
        s = s[:-3]
    return s.strip()


def parse_number_literal(text: str) -> int | float:
    return float(text) if "." in text else int(text)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """
    Shared truthiness rule for `if()` conditions and bare identifiers.

    True for `True`, non-blank strings, finite non-zero numbers, non-empty lists
    and non-empty mappings. Dates count as present values.
    """
    if value is True:
        return True
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if is_number(value):
        return math.isfinite(value) and value != 0
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    if isinstance(value, (date, datetime)):
        return True
    return False


def to_number(value: Any) -> Optional[float]:
    """Finite numeric view of a value, or None when it has none."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if is_number(value):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str) and NUMERIC_STRING.match(value.strip()):
        number = float(value.strip())
        return number if math.isfinite(number) else None
    return None


def to_text(value: Any) -> str:
    """String form used for string comparisons, joins and sort keys."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(v) for v in value)
    return str(value)


def as_list(value: Any) -> List[Any]:
    """Coerce a resolved value to a list: None is empty, scalars are wrapped."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, set):
        return sorted(value, key=to_text)
    return [value]


def compare_values(left: Any, right: Any) -> int:
    """Three-way comparison: numeric when both sides are numbers, else on string form."""
    a, b = to_number(left), to_number(right)
    if a is not None and b is not None:
        return (a > b) - (a < b)
    sa, sb = to_text(left), to_text(right)
    return (sa > sb) - (sa < sb)
