"""Tests for filter tree decoding."""

from bases_bridge.bases.ast import (
    AndFilter,
    NotFilter,
    OrFilter,
    StatementFilter,
    UnsupportedFilter,
    combine_filters,
    decode_filter,
)


def test_absent_filters_decode_to_none():
    for raw in (None, "", False, 0):
        assert decode_filter(raw) is None


def test_statement():
    assert decode_filter("status == 'done'") == StatementFilter("status == 'done'")


def test_nested_tree():
    node = decode_filter({"and": ["a", {"or": ["b", {"not": "c"}]}]})
    assert node == AndFilter(
        (
            StatementFilter("a"),
            OrFilter((StatementFilter("b"), NotFilter(StatementFilter("c")))),
        )
    )


def test_empty_containers_are_shapes():
    assert decode_filter({"and": []}) == AndFilter(())
    assert isinstance(decode_filter({}), UnsupportedFilter)
    assert isinstance(decode_filter([]), UnsupportedFilter)


def test_unknown_shapes():
    assert decode_filter({"xor": ["a"]}) == UnsupportedFilter({"xor": ["a"]})
    assert decode_filter({"and": "a"}) == UnsupportedFilter({"and": "a"})
    assert isinstance(decode_filter(42), UnsupportedFilter)
    assert isinstance(decode_filter({"not": None}), UnsupportedFilter)


def test_decode_passes_nodes_through():
    node = StatementFilter("x")
    assert decode_filter(node) is node


def test_combine_filters_skips_absent():
    combined = combine_filters(None, "a", "", {"or": ["b"]})
    assert combined == AndFilter((StatementFilter("a"), OrFilter((StatementFilter("b"),))))
    assert combine_filters() == AndFilter(())
