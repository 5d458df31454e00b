"""Snapshot cache for evaluated base rows.

Snapshots hold every matching row of a base, either pushed by an external
live-evaluation feed or computed lazily by the planner. Entries never expire:
the last writer wins.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from loguru import logger

from bases_bridge.utils import ensure_base_ext

type Row = Dict[str, Any]


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Snapshot:
    """Evaluated rows of one base at a point in time."""

    timestamp: int
    rows: List[Row] = field(default_factory=list)
    total: int = 0


class SnapshotCache:
    """In-memory snapshots keyed by canonical `.base` path."""

    def __init__(self) -> None:
        self._entries: Dict[str, Snapshot] = {}

    @staticmethod
    def key(base_id: str) -> str:
        return ensure_base_ext(base_id)

    def get(self, base_id: str) -> Optional[Snapshot]:
        return self._entries.get(self.key(base_id))

    def set(self, base_id: str, snapshot: Snapshot) -> None:
        self._entries[self.key(base_id)] = snapshot

    def push(self, base_id: str, rows: List[Row]) -> Snapshot:
        """Replace the snapshot of a base with rows from the live feed."""
        snapshot = Snapshot(timestamp=now_ms(), rows=list(rows), total=len(rows))
        self.set(base_id, snapshot)
        logger.debug(f"Snapshot pushed base={self.key(base_id)} rows={snapshot.total}")
        return snapshot

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def __contains__(self, base_id: object) -> bool:
        return isinstance(base_id, str) and self.key(base_id) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


class EngineState:
    """Live-evaluation mode flag plus the snapshot cache it serves from."""

    def __init__(self, cache: Optional[SnapshotCache] = None, enabled: bool = False):
        self.cache = cache if cache is not None else SnapshotCache()
        self.enabled = enabled

    def set_enabled(self, enabled: bool) -> None:
        if enabled != self.enabled:
            logger.info(f"Live evaluation engine {'enabled' if enabled else 'disabled'}")
        self.enabled = enabled

    @property
    def ready(self) -> bool:
        return self.enabled and len(self.cache) > 0

    def describe(self) -> Dict[str, Any]:
        return {
            "engineEnabled": self.enabled,
            "engineReady": self.ready,
            "cacheSize": len(self.cache),
            "keys": self.cache.keys(),
        }
