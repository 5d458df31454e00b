"""Tests for the lexical helpers of the expression language."""

import math
from datetime import date

import pytest

from bases_bridge.bases.syntax import (
    as_list,
    compare_values,
    is_truthy,
    normalize_linkish,
    parse_string_list_literal,
    split_outside_quotes,
    split_top_level_commas,
    strip_quotes,
    to_number,
    to_text,
)


def test_strip_quotes():
    assert strip_quotes("  'done' ") == "done"
    assert strip_quotes('"done"') == "done"
    assert strip_quotes("'done\"") == "'done\""
    assert strip_quotes("done") == "done"
    assert strip_quotes("'") == "'"


def test_split_outside_quotes_ignores_quoted_needles():
    assert split_outside_quotes("a = 'x or y' or b", " or ") == ["a = 'x or y'", "b"]
    assert split_outside_quotes('title = "a and b"', " and ") == ['title = "a and b"']


def test_split_outside_quotes_escaped_quote():
    parts = split_outside_quotes(r"a = 'it\'s or not' or b", " or ")
    assert parts == [r"a = 'it\'s or not'", "b"]


def test_split_outside_quotes_drops_empty_parts():
    assert split_outside_quotes(" or a or  or b", " or ") == ["a", "b"]


def test_split_top_level_commas():
    assert split_top_level_commas("priority, 'a, b', if(x, 1, 2)") == ["priority", "'a, b'", "if(x, 1, 2)"]


def test_parse_string_list_literal():
    assert parse_string_list_literal("'a', \"b\", c") == ["a", "b", "c"]
    assert parse_string_list_literal("") == []


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("[[Projects/Alpha.md|Alpha]]", "Projects/Alpha"),
        ("Alpha#Tasks", "Alpha"),
        ("  Alpha.MD ", "Alpha"),
        ("[[Alpha]]", "Alpha"),
    ],
)
def test_normalize_linkish(raw, expected):
    assert normalize_linkish(raw) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (True, True),
        (False, False),
        (None, False),
        ("", False),
        ("   ", False),
        ("x", True),
        (0, False),
        (0.0, False),
        (3, True),
        (float("nan"), False),
        (float("inf"), False),
        ([], False),
        (["a"], True),
        ({}, False),
        ({"a": 1}, True),
        (date(2024, 1, 1), True),
    ],
)
def test_is_truthy(value, expected):
    assert is_truthy(value) is expected


def test_to_number():
    assert to_number(True) == 1.0
    assert to_number(False) == 0.0
    assert to_number(3) == 3.0
    assert to_number(" 2.5 ") == 2.5
    assert to_number("1e3") == 1000.0
    assert to_number("") is None
    assert to_number("abc") is None
    assert to_number(None) is None
    assert to_number([1]) is None
    assert to_number(math.inf) is None


def test_to_text():
    assert to_text(None) == ""
    assert to_text(True) == "true"
    assert to_text(3.0) == "3"
    assert to_text(2.5) == "2.5"
    assert to_text(date(2024, 5, 1)) == "2024-05-01"
    assert to_text(["a", 1]) == "a,1"


def test_as_list():
    assert as_list(None) == []
    assert as_list("a") == ["a"]
    assert as_list(("a", "b")) == ["a", "b"]
    assert as_list({"b", "a"}) == ["a", "b"]


def test_compare_values_numeric_and_textual():
    assert compare_values(10, 9) == 1
    assert compare_values("10", 9) == 1
    assert compare_values(2, 2.0) == 0
    # Not both numeric: string comparison
    assert compare_values("10", "9a") == -1
    assert compare_values(None, "a") == -1
    assert compare_values("b", "a") == 1
