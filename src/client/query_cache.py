import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass
class CacheEntry:
    value: Any
    fetched_at: float
    ttl: float
    stale: bool = False


class QueryCache:
    """
    Read-through cache of API responses keyed by request path.

    An entry is refetched once it is older than its time-to-live or after it was
    invalidated. `ttl=0` keeps the entry until it is invalidated.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def _is_fresh(self, entry: CacheEntry) -> bool:
        if entry.stale:
            return False
        return entry.ttl <= 0 or self._clock() - entry.fetched_at < entry.ttl

    def fetch(self, key: str, loader: Callable[[], Any], ttl: float = 0) -> Any:
        entry = self._entries.get(key)
        if entry and self._is_fresh(entry):
            return entry.value
        value = loader()
        self._entries[key] = CacheEntry(value=value, fetched_at=self._clock(), ttl=ttl)
        return value

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        return entry.value if entry else None

    def is_stale(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is None or not self._is_fresh(entry)

    def invalidate(self, prefix: str) -> int:
        """Mark every entry under `prefix` stale; returns how many were marked"""
        count = 0
        for key, entry in self._entries.items():
            if key == prefix or key.startswith(f"{prefix}/") or key.startswith(f"{prefix}?"):
                entry.stale = True
                count += 1
        return count

    def clear(self):
        self._entries.clear()
