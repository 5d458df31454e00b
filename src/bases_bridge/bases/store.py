"""Persistence of `.base` specs in the vault."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import yaml
from loguru import logger

from bases_bridge.bases.errors import BaseNotFoundError, BaseValidationError
from bases_bridge.bases.schema import BaseSchema, extract_schema
from bases_bridge.schemas import (
    BaseConfigResponse,
    BaseConfigUpsertRequest,
    BaseConfigUpsertResponse,
    BaseCreateRequest,
    BaseCreateResponse,
    BaseSummary,
)
from bases_bridge.utils import ensure_base_ext, normalize_base_id
from bases_bridge.vault.provider import NoteProvider

YAML_ROOT_NOT_MAPPING = "YAML invalide: root doit être un objet."
PAYLOAD_REQUIRED = "Payload requis: yaml ou json."
PATH_REQUIRED = "path requis."
SPEC_NOT_MAPPING = "spec doit être un objet."
ALREADY_EXISTS = "Le fichier existe déjà (overwrite=false)."


def decode_spec(text: str) -> Any:
    """Parse base YAML. Raises yaml.YAMLError on invalid syntax."""
    return yaml.safe_load(text) if text and text.strip() else None


def encode_spec(spec: Dict[str, Any]) -> str:
    """Serialize a spec mapping to block-style YAML, keeping key order."""
    return yaml.dump(
        spec,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        Dumper=yaml.SafeDumper,
    )


@dataclass
class BaseConfig:
    """Raw text and decoded mapping of one base file."""

    id: str
    yaml: str
    spec: Dict[str, Any] = field(default_factory=dict)


class BaseSpecStore:
    """Reads, writes and lists `.base` files through a NoteProvider."""

    def __init__(self, notes: NoteProvider, config_dir: str = ".obsidian"):
        self.notes = notes
        self.config_dir = config_dir.strip("/")

    def _in_config_dir(self, path: str) -> bool:
        return bool(self.config_dir) and path.startswith(f"{self.config_dir}/")

    async def read_spec(self, base_id: str) -> str:
        path = ensure_base_ext(base_id)
        if not await self.notes.exists(path):
            raise BaseNotFoundError(path)
        return await self.notes.read_text(path)

    async def write_spec(self, base_id: str, text: str) -> None:
        path = ensure_base_ext(base_id)
        await self.ensure_folders(path)
        await self.notes.write_text(path, text)
        logger.info(f"Wrote base spec {path}")

    async def ensure_folders(self, path: str) -> None:
        await self.notes.ensure_folders(path)

    async def list_bases(self) -> List[BaseSummary]:
        """Every `.base` file outside the configuration folder, sorted by path."""
        bases = [
            BaseSummary(id=path, path=path, name=path.rsplit("/", 1)[-1][: -len(".base")])
            for path in await self.notes.list_paths()
            if path.endswith(".base") and not self._in_config_dir(path)
        ]
        return sorted(bases, key=lambda b: b.path)

    async def read_config(self, base_id: str) -> BaseConfig:
        path = ensure_base_ext(base_id)
        text = await self.read_spec(path)
        try:
            decoded = decode_spec(text)
        except yaml.YAMLError as e:
            raise BaseValidationError(f"YAML invalide: {e}") from e
        return BaseConfig(id=path, yaml=text, spec=decoded if isinstance(decoded, dict) else {})

    async def get_config(self, base_id: str) -> BaseConfigResponse:
        config = await self.read_config(base_id)
        return BaseConfigResponse(id=config.id, yaml=config.yaml, spec=config.spec)

    async def load_schema(self, base_id: str) -> BaseSchema:
        """Parse the base into a schema; rebuilt on every call."""
        config = await self.read_config(base_id)
        return extract_schema(config.id, config.spec)

    async def upsert_config(self, base_id: str, request: BaseConfigUpsertRequest) -> BaseConfigUpsertResponse:
        """
        Replace a base spec from YAML text or a JSON object.

        YAML wins when both are given. Invalid payloads are reported as warnings
        with ok=False; nothing is written in that case or when validate_only is set.
        """
        path = ensure_base_ext(normalize_base_id(base_id))

        if request.yaml is not None and request.yaml.strip():
            try:
                parsed = decode_spec(request.yaml)
            except yaml.YAMLError as e:
                return BaseConfigUpsertResponse(ok=False, id=path, warnings=[f"YAML invalide: {e}"])
            if not isinstance(parsed, dict):
                return BaseConfigUpsertResponse(ok=False, id=path, warnings=[YAML_ROOT_NOT_MAPPING])
            next_yaml = request.yaml
        elif isinstance(request.spec, dict):
            next_yaml = encode_spec(request.spec)
        else:
            return BaseConfigUpsertResponse(ok=False, id=path, warnings=[PAYLOAD_REQUIRED])

        if request.validate_only:
            return BaseConfigUpsertResponse(ok=True, id=path)

        await self.write_spec(path, next_yaml)
        return BaseConfigUpsertResponse(ok=True, id=path)

    async def create_base(self, request: BaseCreateRequest) -> BaseCreateResponse:
        """Create a base file from a spec mapping."""
        path = ensure_base_ext(request.path.strip()) if request.path.strip() else ""
        if not path or path == ".base":
            return BaseCreateResponse(ok=False, id=path, warnings=[PATH_REQUIRED])
        if not isinstance(request.spec, dict):
            return BaseCreateResponse(ok=False, id=path, warnings=[SPEC_NOT_MAPPING])

        try:
            text = encode_spec(request.spec)
        except yaml.YAMLError as e:
            return BaseCreateResponse(ok=False, id=path, warnings=[f"spec non sérialisable: {e}"])

        exists = await self.notes.exists(path)
        if exists and not request.overwrite:
            return BaseCreateResponse(ok=True, id=path, warnings=[ALREADY_EXISTS])

        if request.validate_only:
            return BaseCreateResponse(ok=True, id=path)

        await self.write_spec(path, text)
        return BaseCreateResponse(ok=True, id=path, created=not exists, overwritten=exists)
