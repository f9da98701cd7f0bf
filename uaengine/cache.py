"""In-process parse cache.

Maps a raw UA string to its frozen ``ParsedUA``. There is no TTL and no
eviction: entries live until ``clear()``. Hit/miss accounting lives in
``Engine.get_stats()``.
"""

import threading
from typing import Dict, Optional

from .types import ParsedUA


class ParseCache:
    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[str, ParsedUA] = {}

    def get(self, key: str) -> Optional[ParsedUA]:
        with self._lock:
            return self._entries.get(key)

    def setdefault(self, key: str, value: ParsedUA) -> ParsedUA:
        """Store ``value`` unless another thread got there first; return the stored entry."""
        with self._lock:
            return self._entries.setdefault(key, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)
