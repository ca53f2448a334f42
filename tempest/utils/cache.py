import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at: float


class WeatherCache:
    """
    In-process TTL cache for upstream documents.

    Entries are replaced wholesale on every put and never mutated.
    An entry is visible only while ``clock() < expires_at``; expired
    entries are ignored on read and reclaimed by ``sweep``.
    """

    def __init__(self, default_ttl: float = 600, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the cached document for key, or None if absent or expired"""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() >= entry.expires_at:
            logger.debug(f"Cache expired for {key}")
            return None

        return entry.value

    def put(self, key: str, value: Any, ttl: Optional[float] = None):
        if ttl is None:
            ttl = self.default_ttl
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)
        logger.debug(f"Cached {key} for {ttl}s")

    def sweep(self) -> int:
        """
        Drop expired entries.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        deleted = 0

        for key, entry in list(self._entries.items()):
            if now >= entry.expires_at:
                # only remove the entry we judged expired; a concurrent put wins
                if self._entries.get(key) is entry:
                    self._entries.pop(key, None)
                    deleted += 1

        if deleted:
            logger.info(f"Cleaned {deleted} expired cache entries")
        return deleted

    def live_count(self) -> int:
        """Number of entries that have not expired yet"""
        now = self._clock()
        return sum(1 for entry in list(self._entries.values()) if now < entry.expires_at)

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
