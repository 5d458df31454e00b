"""
Loading of precomputed note embeddings.

Embedding files written by note-taking plugins are JSON, NDJSON, or loose
`.ajson` fragments such as:

  "smart_sources:Notes/Alpha.md": {"path": "Notes/Alpha.md", "embeddings": {"TaylorAI/bge-micro-v2": {"vec": [...]}}},

Every document carrying a vector and a note path becomes a VectorRecord.
Unparseable files are skipped with a warning.
"""

import asyncio
import json
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import json5
from loguru import logger

from bases_bridge.semantic.semantic_errors import NoEmbeddingsFoundError
from bases_bridge.utils import FilePath

SUBDIRS = ("", "multi", "vectors", "cache")
EXTENSIONS = (".ajson", ".json", ".jsonl", ".ndjson")
RECORD_LIST_KEYS = ("items", "records", "vectors", "data")
VECTOR_KEYS = ("embedding", "vector", "vec", "emb", "values")
PATH_KEYS = ("path", "notePath", "filePath", "file", "fullPath")
SOURCE_KEY = "__source_key"


@dataclass
class VectorRecord:
    """One embedded note."""

    id: str
    note_path: str
    vec: List[float]
    title: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    model: Optional[str] = None


def _is_number_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(v, (int, float)) and not isinstance(v, bool) for v in value
    )


def to_number_list(value: Any) -> Optional[List[float]]:
    """A vector from a number list or a `"[0.1, 0.2]"`-style string."""
    if _is_number_list(value):
        return [float(v) for v in value]
    if isinstance(value, str):
        numbers: List[float] = []
        for token in re.split(r"[\s,]+", value.strip().replace("[", "").replace("]", "")):
            try:
                number = float(token)
            except ValueError:
                continue
            if number == number and number not in (float("inf"), float("-inf")):
                numbers.append(number)
        return numbers or None
    return None


def coerce_records(obj: Any) -> List[Any]:
    """Find the list of documents inside a decoded JSON value."""
    if isinstance(obj, list):
        return obj
    if not isinstance(obj, dict) or not obj:
        return []

    for key in RECORD_LIST_KEYS:
        if isinstance(obj.get(key), list):
            return obj[key]

    if any(isinstance(obj.get(k), str) for k in PATH_KEYS) or any(
        _is_number_list(obj.get(k)) for k in ("vec", "vector", "embedding", "values")
    ):
        return [obj]

    nested = [{SOURCE_KEY: key, **value} for key, value in obj.items() if isinstance(value, dict) and value]
    return nested or [obj]


def _loosen(content: str) -> str:
    content = re.sub(r"//.*$", "", content, flags=re.MULTILINE)
    content = re.sub(r"/\*[\s\S]*?\*/", "", content)
    content = re.sub(r",\s*([}\]])", r"\1", content)
    content = re.sub(
        r"'((?:[^'\\]|\\.)*)'",
        lambda m: '"' + m.group(1).replace('"', '\\"') + '"',
        content,
    )
    content = re.sub(r"(^|[{,\s])([A-Za-z_][A-Za-z0-9_]*)\s*:", r'\1"\2":', content)
    trimmed = content.strip()
    if not trimmed.startswith(("{", "[")) and re.search(r"[\"'][^\"']+[\"']\s*:", trimmed):
        trimmed = "{" + re.sub(r",\s*$", "", trimmed) + "}"
    return trimmed


def parse_loose_json(raw: str) -> Optional[List[Any]]:
    """
    Parse JSON, NDJSON, JSON5 or a loose JSON fragment into a list of documents.

    Returns:
        The documents, or None when nothing could be parsed
    """
    content = raw.lstrip("\ufeff")
    try:
        return coerce_records(json.loads(content))
    except ValueError:
        pass

    lines = [line.strip() for line in content.splitlines() if line.strip()]
    if len(lines) > 1:
        records: List[Any] = []
        for line in lines:
            try:
                records.append(json.loads(line))
            except ValueError:
                continue
        if records:
            return records

    try:
        return coerce_records(json5.loads(content))
    except ValueError:
        pass

    try:
        return coerce_records(json.loads(_loosen(content)))
    except ValueError:
        return None


def _first(doc: Dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if doc.get(key) is not None:
            return doc[key]
    return None


def map_document(doc: Any, fallback_id: str) -> Optional[VectorRecord]:
    """Build a VectorRecord from one document, None when it lacks a vector or a path."""
    if not isinstance(doc, dict):
        return None

    vec = to_number_list(_first(doc, VECTOR_KEYS))
    derived_model: Optional[str] = None
    if vec is None and isinstance(doc.get("embeddings"), dict):
        for key, nested in doc["embeddings"].items():
            if not isinstance(nested, dict):
                continue
            nested_vec = to_number_list(_first(nested, ("vec", "embedding", "vector", "values")))
            if nested_vec:
                vec = nested_vec
                derived_model = nested["model"] if isinstance(nested.get("model"), str) else str(key)
                break

    note_path = _first(doc, PATH_KEYS)
    if not vec or not isinstance(note_path, str):
        return None

    title = next((doc[k] for k in ("title", "name") if isinstance(doc.get(k), str)), None)

    raw_tags = doc.get("tags")
    tags: List[str] = []
    if isinstance(raw_tags, list):
        tags = [t for t in raw_tags if isinstance(t, str)]
    elif isinstance(raw_tags, str):
        tags = [t for t in re.split(r"[,\s]+", raw_tags) if t]

    model = next((doc[k] for k in ("model", "encoder", "embedding_model") if isinstance(doc.get(k), str)), None)

    source_key = doc.get(SOURCE_KEY)
    record_id = doc.get("id") if isinstance(doc.get("id"), str) and doc.get("id") else None
    return VectorRecord(
        id=record_id or (source_key if isinstance(source_key, str) else fallback_id),
        note_path=note_path,
        vec=vec,
        title=title,
        tags=tags,
        model=model or derived_model,
    )


def load_vector_records(base_dir: FilePath) -> List[VectorRecord]:
    """
    Read every embedding file under base_dir and its known subfolders.

    Raises:
        NoEmbeddingsFoundError: If no file yields a usable record
    """
    base = Path(base_dir).expanduser()
    collected: List[VectorRecord] = []

    for subdir in SUBDIRS:
        directory = base / subdir if subdir else base
        if not directory.is_dir():
            continue
        for path in sorted(directory.iterdir()):
            if not path.is_file() or not path.name.lower().endswith(EXTENSIONS):
                continue
            try:
                raw = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable embeddings file {path}: {e}")
                continue
            documents = parse_loose_json(raw)
            if documents is None:
                logger.warning(f"Skipping unparseable embeddings file {path}")
                continue
            fallback_id = re.sub(r"\.(a)?json(l)?$", "", path.name, flags=re.IGNORECASE)
            collected.extend(r for r in (map_document(d, fallback_id) for d in documents) if r)

    if not collected:
        raise NoEmbeddingsFoundError(f"No embeddings found in {base}")
    logger.debug(f"Loaded {len(collected)} vector records from {base}")
    return collected


class VectorCache:
    """Caches vector records, reloading after a TTL or when `smart_env.json` changes."""

    def __init__(self, directory: FilePath, ttl_ms: int = 60_000):
        self.directory = Path(directory).expanduser()
        self.ttl_ms = max(ttl_ms, 0)
        self._records: Optional[List[VectorRecord]] = None
        self._loaded_at = 0.0
        self._marker_mtime: Optional[float] = None

    def _marker(self) -> Optional[float]:
        try:
            return (self.directory / "smart_env.json").stat().st_mtime
        except OSError:
            return None

    def is_stale(self) -> bool:
        if not self._records:
            return True
        if (time.monotonic() - self._loaded_at) * 1000 > self.ttl_ms:
            return True
        marker = self._marker()
        return marker is not None and marker != self._marker_mtime

    async def get_records(self) -> List[VectorRecord]:
        if self.is_stale():
            self._records = await asyncio.to_thread(load_vector_records, self.directory)
            self._loaded_at = time.monotonic()
            self._marker_mtime = self._marker()
        assert self._records is not None
        return self._records

    def clear(self) -> None:
        self._records = None
        self._loaded_at = 0.0


def _wrap_loose_object(raw: str) -> str:
    trimmed = raw.strip()
    if not trimmed:
        return "{}"
    return "{" + re.sub(r",\s*$", "", trimmed) + "}"


def detect_ollama_base_url(smart_env_dir: FilePath, preferred_model: Optional[str] = None) -> Optional[str]:
    """Ollama host recorded by the embedding plugin, for the default model or preferred_model."""
    base = Path(smart_env_dir).expanduser()
    models_path = base / "embedding_models" / "embedding_models.ajson"
    try:
        models = json.loads(_wrap_loose_object(models_path.read_text(encoding="utf-8")))
    except (OSError, ValueError):
        return None
    if not isinstance(models, dict):
        return None

    try:
        smart_env = json.loads((base / "smart_env.json").read_text(encoding="utf-8"))
        default_key = smart_env.get("embedding_models", {}).get("default_model_key")
    except (OSError, ValueError, AttributeError):
        default_key = None

    if default_key:
        record = models.get(f"embedding_models:{default_key}")
        if isinstance(record, dict) and isinstance(record.get("host"), str) and record["host"].strip():
            return record["host"].strip()

    if preferred_model:
        for record in models.values():
            if (
                isinstance(record, dict)
                and record.get("model_key") == preferred_model
                and isinstance(record.get("host"), str)
                and record["host"].strip()
            ):
                return record["host"].strip()
    return None
