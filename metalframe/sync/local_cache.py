"""Durable local post cache used while the API is unreachable.

The cache file mirrors browser local storage: a JSON object of named slots,
each holding a JSON-serialized string. Posts live in a single slot.
"""

import json
from pathlib import Path
from typing import List

from ..fileio import atomic_write_text
from ..logging_config import sync_logger
from ..schemas.posts import Post, parse_posts

DEFAULT_SLOT = "mfs_posts"


class LocalCache:
    """Reads defensively: a missing or corrupt slot reads as an empty list,
    and entries that fail validation are skipped."""

    def __init__(self, path: str, slot: str = DEFAULT_SLOT):
        self.path = Path(path)
        self.slot = slot

    def _read_slots(self) -> dict:
        try:
            slots = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return slots if isinstance(slots, dict) else {}

    def _write_slots(self, slots: dict):
        atomic_write_text(self.path, json.dumps(slots, ensure_ascii=False))

    def load(self) -> List[Post]:
        raw = self._read_slots().get(self.slot)
        if not raw:
            return []
        try:
            posts, skipped = parse_posts(json.loads(raw))
        except (TypeError, ValueError) as e:
            sync_logger.warning("Local cache unreadable, treating as empty", slot=self.slot, error_message=str(e))
            return []
        if skipped:
            sync_logger.warning("Skipped invalid cached posts", slot=self.slot, skipped=skipped)
        return posts

    def save(self, posts: List[Post]):
        slots = self._read_slots()
        slots[self.slot] = json.dumps([p.to_response() for p in posts], ensure_ascii=False)
        self._write_slots(slots)

    def clear(self):
        slots = self._read_slots()
        if slots.pop(self.slot, None) is not None:
            self._write_slots(slots)
