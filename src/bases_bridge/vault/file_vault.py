"""Filesystem-backed vault.

Reads notes and `.base` files from a folder tree, extracts frontmatter, tags and
links on demand, and writes frontmatter atomically. Blocking directory scans run
in a worker thread so the event loop keeps serving other requests.
"""

import asyncio
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from bases_bridge.file_utils import (
    FileWriteError,
    ParseError,
    dump_frontmatter,
    parse_frontmatter,
    read_file,
    write_file_atomic,
)
from bases_bridge.utils import FilePath, dirname, normalize_path_separators
from bases_bridge.vault.metadata import extract_links, extract_tags
from bases_bridge.vault.models import Note
from bases_bridge.vault.provider import FrontmatterMutator

MARKDOWN_EXTENSIONS = {".md", ".markdown"}


def _ms(ns: int) -> int:
    return ns // 1_000_000


class FileVault:
    """NoteProvider implementation over a local directory."""

    def __init__(self, root: FilePath, ignored_dirs: tuple[str, ...] = (".git", ".trash")):
        self.root = Path(root).expanduser()
        self.ignored_dirs = set(ignored_dirs)

    def _abs(self, path: str) -> Path:
        relative = normalize_path_separators(path)
        resolved = (self.root / relative).resolve()
        if resolved != self.root.resolve() and self.root.resolve() not in resolved.parents:
            raise ValueError(f"Path escapes the vault: {path}")
        return resolved

    def _scan(self) -> List[str]:
        paths: List[str] = []
        for current, dirs, files in os.walk(self.root):
            dirs[:] = sorted(d for d in dirs if d not in self.ignored_dirs)
            rel_dir = Path(current).relative_to(self.root).as_posix()
            for name in sorted(files):
                if name.startswith(".") and name.endswith(".tmp"):
                    continue
                paths.append(name if rel_dir == "." else f"{rel_dir}/{name}")
        return paths

    async def list_paths(self) -> List[str]:
        if not self.root.exists():
            return []
        return await asyncio.to_thread(self._scan)

    async def _load(self, path: str) -> Note:
        abs_path = self._abs(path)
        stat = await asyncio.to_thread(abs_path.stat)
        ctime_ns = getattr(stat, "st_birthtime_ns", None) or stat.st_ctime_ns
        note = Note(
            path=path,
            mtime=_ms(stat.st_mtime_ns),
            ctime=_ms(ctime_ns),
            size=stat.st_size,
        )
        if abs_path.suffix.lower() not in MARKDOWN_EXTENSIONS:
            return note

        try:
            content = await read_file(abs_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read note {path}: {e}")
            return note

        try:
            metadata, body = parse_frontmatter(content)
        except ParseError as e:
            logger.warning(f"Ignoring invalid frontmatter in {path}: {e}")
            metadata, body = {}, content

        note.frontmatter = metadata
        note.tags = extract_tags(metadata, body)
        note.links = extract_links(body)
        return note

    async def list_notes(self) -> List[Note]:
        notes: List[Note] = []
        for path in await self.list_paths():
            try:
                notes.append(await self._load(path))
            except OSError as e:
                # Deleted between the scan and the stat
                logger.debug(f"Skipping vanished file {path}: {e}")
            except ValueError as e:
                # Symlink resolving outside the vault
                logger.debug(f"Skipping {path}: {e}")
        return notes

    async def get_by_path(self, path: str) -> Optional[Note]:
        relative = normalize_path_separators(path)
        if not relative:
            return None
        try:
            abs_path = self._abs(relative)
        except ValueError:
            return None
        if not abs_path.is_file():
            return None
        return await self._load(relative)

    async def read_raw(self, note: Note) -> str:
        return await read_file(self._abs(note.path))

    async def write_frontmatter(self, note: Note, mutator: FrontmatterMutator) -> Note:
        """Apply mutator to the note's current frontmatter and rewrite the file."""
        abs_path = self._abs(note.path)
        try:
            content = await read_file(abs_path)
            metadata, body = parse_frontmatter(content)
        except (OSError, ParseError) as e:
            raise FileWriteError(f"Cannot update frontmatter of {note.path}: {e}") from e

        updated: Dict[str, Any] = dict(metadata)
        mutator(updated)
        await write_file_atomic(abs_path, dump_frontmatter(updated, body))

        refreshed = await self.get_by_path(note.path)
        if refreshed is None:  # pragma: no cover
            raise FileWriteError(f"Note disappeared after write: {note.path}")
        return refreshed

    async def exists(self, path: str) -> bool:
        try:
            return self._abs(path).exists()
        except ValueError:
            return False

    async def read_text(self, path: str) -> str:
        return await read_file(self._abs(path))

    async def write_text(self, path: str, content: str) -> None:
        await write_file_atomic(self._abs(path), content)

    async def ensure_folders(self, path: str) -> None:
        folder = dirname(normalize_path_separators(path))
        if folder:
            self._abs(folder).mkdir(parents=True, exist_ok=True)
