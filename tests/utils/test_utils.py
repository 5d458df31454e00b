"""Tests for path and number helpers."""

import pytest

from bases_bridge.utils import (
    clamp_int,
    dirname,
    ensure_base_ext,
    normalize_base_id,
    normalize_path_separators,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("folder//file.md", "folder/file.md"),
        ("path\\to\\file.md", "path/to/file.md"),
        ("./folder/file.md", "folder/file.md"),
        ("folder/", "folder"),
        ("", ""),
    ],
)
def test_normalize_path_separators(raw, expected):
    assert normalize_path_separators(raw) == expected


def test_base_ids():
    assert normalize_base_id("Projects%2FTasks.base") == "Projects/Tasks.base"
    assert normalize_base_id("Projects\\Tasks") == "Projects/Tasks"
    assert normalize_base_id(None) == ""
    assert ensure_base_ext("Tasks") == "Tasks.base"
    assert ensure_base_ext("Tasks.base") == "Tasks.base"


def test_dirname():
    assert dirname("a/b/c.md") == "a/b"
    assert dirname("c.md") == ""


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, 20),
        (True, 20),
        ("abc", 20),
        (float("nan"), 20),
        (float("inf"), 20),
        (0, 1),
        (-5, 1),
        (7.9, 7),
        ("42", 42),
        (10_000, 500),
    ],
)
def test_clamp_int(value, expected):
    assert clamp_int(value, 20, 1, 500) == expected
