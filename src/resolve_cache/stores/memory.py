"""
In-memory resolve cache store implementation
"""
import logging
from typing import Callable, Optional

from ..entry import ResolveCacheEntry
from ..types import ResolveCacheStore, ResolveStatus

logger = logging.getLogger(__name__)


class MemoryStore(ResolveCacheStore):
    """
    In-memory entry registry with LRU eviction

    Entries that are mid-resolution are only evicted when every entry is.
    `on_evict` is called with the key and entry of each capacity eviction.

    Example:
        store = MemoryStore(max_entries=1000)
        store.set("example.com:4", ResolveCacheEntry(4))
        entry = store.get("example.com:4")
    """

    def __init__(
        self,
        max_entries: int = 1000,
        on_evict: Optional[Callable[[str, ResolveCacheEntry], None]] = None,
    ) -> None:
        self._entries: dict[str, ResolveCacheEntry] = {}
        self._max_entries = max_entries
        self._lru_order: dict[str, int] = {}
        self._on_evict = on_evict
        self._access_counter = 0

    def get(self, key: str) -> Optional[ResolveCacheEntry]:
        """Get an entry"""
        entry = self._entries.get(key)
        if entry is not None:
            self._touch(key)
        return entry

    def set(self, key: str, entry: ResolveCacheEntry) -> None:
        """Store an entry, evicting the least recently used one at capacity"""
        if key not in self._entries and len(self._entries) >= self._max_entries:
            self._evict_lru()

        self._entries[key] = entry
        self._touch(key)

    def delete(self, key: str) -> bool:
        """Delete an entry"""
        self._lru_order.pop(key, None)
        return self._entries.pop(key, None) is not None

    def has(self, key: str) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        return list(self._entries.keys())

    def size(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Remove all entries"""
        self._entries.clear()
        self._lru_order.clear()
        self._access_counter = 0

    def close(self) -> None:
        self.clear()

    def entries(self) -> list[ResolveCacheEntry]:
        """Get all entries (for debugging/stats)"""
        return list(self._entries.values())

    def _touch(self, key: str) -> None:
        self._access_counter += 1
        self._lru_order[key] = self._access_counter

    def _evict_lru(self) -> None:
        if not self._lru_order:
            return

        idle = [
            key for key in self._lru_order
            if self._entries[key].get_status() != ResolveStatus.RESOLVING
        ]
        candidates = idle or list(self._lru_order)
        oldest_key = min(candidates, key=self._lru_order.__getitem__)
        entry = self._entries[oldest_key]
        logger.debug(f"_evict_lru: Evicting '{oldest_key}' (max_entries={self._max_entries})")
        self.delete(oldest_key)
        if self._on_evict is not None:
            self._on_evict(oldest_key, entry)


def create_memory_store(
    max_entries: int = 1000,
    on_evict: Optional[Callable[[str, ResolveCacheEntry], None]] = None,
) -> MemoryStore:
    """Create a memory store instance"""
    return MemoryStore(max_entries, on_evict)
