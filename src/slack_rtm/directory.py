"""Identifier -> entity directory built once from the ``rtm.start`` snapshot."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from .models import SNAPSHOT_SEQUENCES, Entity, RTMStartResponse

logger = logging.getLogger(__name__)

Snapshot = Union[RTMStartResponse, Mapping[str, Any]]


def _sequence(snapshot: Snapshot, key: str):
    if isinstance(snapshot, RTMStartResponse):
        return getattr(snapshot, key)
    return snapshot.get(key)


class Directory:
    """Read-only mapping from Slack id to the full entity record.

    Users, channels, groups, mpims and ims share one id space. When the
    same id shows up in more than one sequence, the later sequence wins.
    """

    def __init__(self, entries: Optional[Dict[str, Entity]] = None) -> None:
        self._entries: Dict[str, Entity] = dict(entries or {})

    @classmethod
    def build(cls, snapshot: Snapshot) -> "Directory":
        entries: Dict[str, Entity] = {}
        skipped = 0
        for key in SNAPSHOT_SEQUENCES:
            for obj in _sequence(snapshot, key) or []:
                if not isinstance(obj, Mapping):
                    skipped += 1
                    continue
                obj_id = obj.get("id")
                if not isinstance(obj_id, str):
                    skipped += 1
                    continue
                # stored by reference; nothing downstream mutates entities
                entries[obj_id] = obj
        logger.debug("Directory built with %d entries (%d skipped)", len(entries), skipped)
        return cls(entries)

    def lookup(self, obj_id: str) -> Optional[Entity]:
        return self._entries.get(obj_id)

    def get(self, obj_id: str, default: Optional[Entity] = None) -> Optional[Entity]:
        return self._entries.get(obj_id, default)

    def __contains__(self, obj_id: object) -> bool:
        return obj_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"Directory({len(self._entries)} entries)"
