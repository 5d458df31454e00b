"""Schema extraction for `.base` specs.

A base spec is the YAML mapping stored in a `.base` file:

  filters: <filter>                 # base-wide filter
  properties:
    status: {name: Status, type: text}
    file.mtime: {}
  formulas:
    score: "if(priority, priority, 0)"
  views:
    - name: Open
      type: table
      limit: 50
      order: [-priority, file.name]
      filters: "status != 'done'"

`extract_schema` turns that loosely shaped data into typed dataclasses. Missing
or malformed sections become empty collections; extraction never raises.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from bases_bridge.utils import normalize_base_id


class PropertyKind(str, Enum):
    """Where a schema property's value comes from."""

    NOTE = "note"
    FILE = "file"
    FORMULA = "formula"
    UNKNOWN = "unknown"


@dataclass
class SchemaProperty:
    """One column of a base."""

    key: str
    kind: PropertyKind
    display_name: Optional[str] = None
    value_type: Optional[str] = None

    @property
    def ref(self) -> str:
        """Reference used to resolve the property's value for a note."""
        if self.kind == PropertyKind.FORMULA:
            return f"formula.{self.key}"
        return self.key


@dataclass
class ViewDefinition:
    """A named presentation of a base: filter, sort order and row limit."""

    name: str
    type: str = "table"
    limit: Optional[int | float] = None
    order: Optional[List[str]] = None
    filters: Any = None
    description: Optional[str] = None


@dataclass
class BaseSchema:
    """Parsed view of a base spec."""

    id: str
    path: str
    name: Optional[str] = None
    properties: List[SchemaProperty] = field(default_factory=list)
    formulas: Dict[str, Any] = field(default_factory=dict)
    views: List[ViewDefinition] = field(default_factory=list)
    filters: Any = None

    def get_view(self, name: Optional[str]) -> Optional[ViewDefinition]:
        """Named view, the first view when no name is given, None for unknown names."""
        if not name:
            return self.views[0] if self.views else None
        for view in self.views:
            if view.name == name:
                return view
        return None

    @property
    def formula_keys(self) -> List[str]:
        return list(self.formulas.keys())


def _metadata(value: Any, *keys: str) -> Optional[Any]:
    """First present entry among keys of a nested metadata mapping."""
    if not isinstance(value, dict):
        return None
    for key in keys:
        if value.get(key) is not None:
            return value[key]
    return None


def _order_entry(entry: Any) -> str:
    # `sort` entries may be {property, direction} mappings; descending becomes a `-` prefix.
    if isinstance(entry, dict) and "property" in entry:
        prop = str(entry["property"])
        direction = str(entry.get("direction", "ASC")).lower()
        return f"-{prop}" if direction == "desc" else prop
    return str(entry)


def _parse_view(raw: Dict[str, Any]) -> ViewDefinition:
    limit = raw.get("limit")
    if isinstance(limit, bool) or not isinstance(limit, (int, float)):
        limit = None

    order: Optional[List[str]] = None
    if isinstance(raw.get("order"), list):
        order = [_order_entry(v) for v in raw["order"]]
    elif isinstance(raw.get("sort"), list):
        order = [_order_entry(v) for v in raw["sort"]]

    description = raw.get("description")
    return ViewDefinition(
        name=str(raw.get("name") if raw.get("name") is not None else ""),
        type=str(raw.get("type") if raw.get("type") is not None else "table"),
        limit=limit,
        order=order,
        filters=raw.get("filters"),
        description=description if isinstance(description, str) else None,
    )


def extract_schema(base_path: str, spec: Any) -> BaseSchema:
    """
    Build a BaseSchema from a decoded base spec.

    Args:
        base_path: Vault-relative path of the `.base` file, used as id and path
        spec: Mapping decoded from the base YAML

    Returns:
        The schema. Non-mapping specs yield an empty schema.
    """
    base_id = normalize_base_id(base_path)
    if not isinstance(spec, dict):
        return BaseSchema(id=base_id, path=base_id)

    properties: List[SchemaProperty] = []
    raw_properties = spec.get("properties")
    if isinstance(raw_properties, dict):
        for key, value in raw_properties.items():
            if not isinstance(key, str):
                kind = PropertyKind.UNKNOWN
            elif key.startswith("file."):
                kind = PropertyKind.FILE
            else:
                kind = PropertyKind.NOTE
            display_name = _metadata(value, "name", "label")
            value_type = _metadata(value, "type", "valueType")
            properties.append(
                SchemaProperty(
                    key=str(key),
                    kind=kind,
                    display_name=str(display_name) if display_name is not None else None,
                    value_type=str(value_type) if value_type is not None else None,
                )
            )

    formulas: Dict[str, Any] = {}
    raw_formulas = spec.get("formulas")
    if isinstance(raw_formulas, dict):
        for key, value in raw_formulas.items():
            formulas[str(key)] = value
            display_name = _metadata(value, "name", "label")
            properties.append(
                SchemaProperty(
                    key=str(key),
                    kind=PropertyKind.FORMULA,
                    display_name=str(display_name) if display_name is not None else None,
                    value_type="formula",
                )
            )

    views: List[ViewDefinition] = []
    raw_views = spec.get("views")
    if isinstance(raw_views, list):
        views = [_parse_view(v) for v in raw_views if isinstance(v, dict)]

    name = spec.get("name")
    return BaseSchema(
        id=base_id,
        path=base_id,
        name=str(name) if name else None,
        properties=properties,
        formulas=formulas,
        views=views,
        filters=spec.get("filters"),
    )
