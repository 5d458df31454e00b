"""Tests for schema extraction from base specs."""

from bases_bridge.bases.schema import PropertyKind, extract_schema


def test_extract_full_spec():
    spec = {
        "name": "Tasks",
        "filters": {"and": ["file.ext == 'md'"]},
        "properties": {
            "status": {"name": "Status", "type": "text"},
            "file.mtime": {"displayName": "ignored", "label": "Modified"},
            "priority": None,
        },
        "formulas": {"score": "if(priority, priority, 0)", "badge": {"name": "Badge"}},
        "views": [
            {"name": "Open", "type": "cards", "limit": 10, "order": ["-priority", "file.name"], "description": "d"},
            {"name": "Sorted", "sort": [{"property": "priority", "direction": "DESC"}, {"property": "status"}]},
            {"limit": "5", "order": "priority"},
            "not a view",
        ],
    }
    schema = extract_schema("Folder\\Tasks.base", spec)

    assert schema.id == "Folder/Tasks.base"
    assert schema.path == "Folder/Tasks.base"
    assert schema.name == "Tasks"
    assert schema.filters == {"and": ["file.ext == 'md'"]}

    keys = [(p.key, p.kind) for p in schema.properties]
    assert keys == [
        ("status", PropertyKind.NOTE),
        ("file.mtime", PropertyKind.FILE),
        ("priority", PropertyKind.NOTE),
        ("score", PropertyKind.FORMULA),
        ("badge", PropertyKind.FORMULA),
    ]
    status, mtime, priority, score, badge = schema.properties
    assert (status.display_name, status.value_type) == ("Status", "text")
    assert mtime.display_name == "Modified"
    assert priority.display_name is None
    assert score.value_type == "formula"
    assert score.ref == "formula.score"
    assert status.ref == "status"
    assert badge.display_name == "Badge"

    assert schema.formulas == {"score": "if(priority, priority, 0)", "badge": {"name": "Badge"}}
    assert schema.formula_keys == ["score", "badge"]

    assert [v.name for v in schema.views] == ["Open", "Sorted", ""]
    open_view, sorted_view, unnamed = schema.views
    assert open_view.type == "cards"
    assert open_view.limit == 10
    assert open_view.order == ["-priority", "file.name"]
    assert open_view.description == "d"
    assert sorted_view.type == "table"
    assert sorted_view.order == ["-priority", "status"]
    assert unnamed.limit is None
    assert unnamed.order is None


def test_get_view():
    schema = extract_schema("T.base", {"views": [{"name": "A"}, {"name": "B"}]})
    assert schema.get_view(None).name == "A"
    assert schema.get_view("B").name == "B"
    assert schema.get_view("missing") is None
    assert extract_schema("T.base", {}).get_view(None) is None


def test_malformed_sections_degrade_to_empty():
    schema = extract_schema("T.base", {"properties": ["a"], "formulas": "x", "views": {"name": "A"}})
    assert schema.properties == []
    assert schema.formulas == {}
    assert schema.views == []
    assert schema.filters is None


def test_non_mapping_spec():
    schema = extract_schema("T.base", ["not", "a", "mapping"])
    assert schema.id == "T.base"
    assert schema.properties == []
    assert schema.views == []


def test_non_string_property_keys_are_unknown():
    schema = extract_schema("T.base", {"properties": {1: {}}})
    assert schema.properties[0].key == "1"
    assert schema.properties[0].kind == PropertyKind.UNKNOWN
