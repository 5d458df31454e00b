"""Note model shared by the vault and the query engine."""

from dataclasses import dataclass, field
from typing import Any, Dict, Set

from bases_bridge.utils import dirname


@dataclass
class Note:
    """A file of the vault as seen by the query engine.

    Timestamps are integer milliseconds since the epoch, which is also the unit
    of `expected_mtime` in upsert operations.
    """

    path: str
    mtime: int = 0
    ctime: int = 0
    size: int = 0
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    tags: Set[str] = field(default_factory=set)
    links: Set[str] = field(default_factory=set)

    @property
    def filename(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def name(self) -> str:
        """Basename without extension."""
        stem, dot, _ = self.filename.rpartition(".")
        return stem if dot and stem else self.filename

    @property
    def ext(self) -> str:
        stem, dot, ext = self.filename.rpartition(".")
        return ext if dot and stem else ""

    @property
    def folder(self) -> str:
        return dirname(self.path)
