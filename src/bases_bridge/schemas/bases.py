"""Request and response schemas for base catalogue, query and upsert operations."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BaseSummary(BaseModel):
    """A `.base` file in the vault."""

    id: str = Field(..., description="Vault-relative path of the base")
    name: str = Field(..., description="File name without the .base extension")
    path: str = Field(..., description="Vault-relative path of the base")


class BasesListResponse(BaseModel):
    bases: List[BaseSummary] = Field(default_factory=list)


class BaseConfigResponse(BaseModel):
    """Raw and decoded content of a base spec."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    yaml: str = Field(..., description="Raw YAML text of the base file")
    spec: Optional[Dict[str, Any]] = Field(
        None, alias="json", description="Decoded spec, absent when the YAML is not a mapping"
    )


class BaseConfigUpsertRequest(BaseModel):
    """Replace a base spec from YAML text or a JSON object."""

    model_config = ConfigDict(populate_by_name=True)

    yaml: Optional[str] = Field(None, description="YAML text of the base")
    spec: Optional[Dict[str, Any]] = Field(None, alias="json", description="Spec as a JSON object")
    validate_only: bool = Field(False, alias="validateOnly", description="Check the payload without writing")


class BaseConfigUpsertResponse(BaseModel):
    ok: bool
    id: str
    warnings: List[str] = Field(default_factory=list)


class BaseCreateRequest(BaseModel):
    """Create a new `.base` file from a spec object."""

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(..., description="Target path, `.base` is appended when missing")
    spec: Any = Field(default_factory=dict, description="Spec mapping to serialize as YAML")
    overwrite: bool = Field(True, description="Replace an existing file")
    validate_only: bool = Field(False, alias="validateOnly")


class BaseCreateResponse(BaseModel):
    ok: bool
    id: str
    warnings: List[str] = Field(default_factory=list)
    created: bool = False
    overwritten: bool = False


class SchemaPropertyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    kind: Literal["note", "file", "formula", "unknown"]
    display_name: Optional[str] = Field(None, alias="displayName")
    value_type: Optional[str] = Field(None, alias="valueType")


class SchemaViewResponse(BaseModel):
    name: str
    type: str = "table"
    limit: Optional[float] = None
    order: Optional[List[str]] = None
    filters: Any = None
    description: Optional[str] = None


class BaseSchemaResponse(BaseModel):
    """Parsed schema of a base: properties, formulas, views and base filter."""

    id: str
    path: str
    name: Optional[str] = None
    properties: List[SchemaPropertyResponse] = Field(default_factory=list)
    formulas: Dict[str, Any] = Field(default_factory=dict)
    views: List[SchemaViewResponse] = Field(default_factory=list)
    filters: Any = None


class SortSpec(BaseModel):
    """One sort key of a query."""

    prop: str = Field(..., description="Reference to sort on, e.g. `priority` or `file.mtime`")
    dir: Literal["asc", "desc"] = Field("asc", description="Sort direction")

    @field_validator("dir", mode="before")
    @classmethod
    def normalize_dir(cls, value: Any) -> str:
        return "desc" if str(value or "asc").strip().lower() == "desc" else "asc"


class QueryRequest(BaseModel):
    """Query a base, optionally through one of its views."""

    view: Optional[str] = Field(None, description="View name; the first view is used when omitted")
    filter: Any = Field(None, description="Extra filter ANDed with the base and view filters")
    sort: Optional[List[SortSpec]] = Field(None, description="Sort keys, overriding the view order")
    limit: Optional[float] = Field(None, description="Rows per page, clamped to [1, 500]")
    page: Optional[float] = Field(None, description="1-based page number")
    evaluate: bool = Field(False, description="Include computed formula values")


class FileRef(BaseModel):
    path: str
    name: str


class QueryRow(BaseModel):
    """One note of a query result."""

    file: FileRef
    props: Dict[str, Any] = Field(default_factory=dict)
    computed: Optional[Dict[str, Any]] = None


class QueryResponse(BaseModel):
    total: int = Field(..., description="Number of matching notes")
    page: int
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    evaluate: bool = False
    source: Literal["engine", "fallback"] = "fallback"
    warnings: List[str] = Field(default_factory=list)


class UpsertOperation(BaseModel):
    """Frontmatter changes for one note."""

    file: str = Field("", description="Vault-relative note path")
    set: Dict[str, Any] = Field(default_factory=dict, description="Keys to assign")
    unset: List[str] = Field(default_factory=list, description="Keys to remove")
    expected_mtime: Optional[int] = Field(None, description="Reject the write unless the note has this mtime")


class UpsertRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    operations: List[UpsertOperation] = Field(default_factory=list)
    continue_on_error: bool = Field(False, alias="continueOnError")


class UpsertChange(BaseModel):
    keys: List[str] = Field(default_factory=list)
    unset: Optional[List[str]] = None


class UpsertErrorDetail(BaseModel):
    code: str
    message: str


class UpsertResult(BaseModel):
    file: str
    mtime: int = 0
    changed: Optional[UpsertChange] = None
    warnings: Optional[List[str]] = None
    error: Optional[UpsertErrorDetail] = None


class UpsertResponse(BaseModel):
    ok: bool
    results: List[UpsertResult] = Field(default_factory=list)


class EnginePushRequest(BaseModel):
    """Rows computed by the host for a base, replacing its snapshot."""

    rows: List[Dict[str, Any]] = Field(default_factory=list)


class EngineStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    engine_enabled: bool = Field(..., alias="engineEnabled")
    engine_ready: bool = Field(..., alias="engineReady")
    cache_size: int = Field(..., alias="cacheSize")
    keys: List[str] = Field(default_factory=list)
