"""Storage/metadata provider contract consumed by the query engine."""

from collections.abc import Callable
from typing import Any, Dict, List, Optional, Protocol

from bases_bridge.vault.models import Note

# Mutates the frontmatter mapping in place.
type FrontmatterMutator = Callable[[Dict[str, Any]], None]


class NoteProvider(Protocol):
    """Read-only note listing plus per-note frontmatter writes and raw file access."""

    async def list_notes(self) -> List[Note]:
        """Every file of the vault, in enumeration order."""
        ...

    async def get_by_path(self, path: str) -> Optional[Note]:
        """Note at a vault-relative path, or None."""
        ...

    async def read_raw(self, note: Note) -> str:
        """Full text of a note."""
        ...

    async def write_frontmatter(self, note: Note, mutator: FrontmatterMutator) -> Note:
        """Atomic read-modify-write of a note's frontmatter; returns the refreshed note."""
        ...

    async def list_paths(self) -> List[str]:
        """Vault-relative paths of every file."""
        ...

    async def exists(self, path: str) -> bool: ...

    async def read_text(self, path: str) -> str: ...

    async def write_text(self, path: str, content: str) -> None: ...

    async def ensure_folders(self, path: str) -> None:
        """Create the parent folders of a vault-relative file path."""
        ...
