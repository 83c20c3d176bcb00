"""
Time-expiring result cache for single-event calculations.
"""
import threading
import time
from typing import Callable, Hashable, Optional

from .models import CalculationResult


class ResultCache:
    """
    Maps a resolved CalculationInput to its result.

    Entries older than `ttl_seconds` count as misses. A lock covers every
    read and write so the cache can be shared between threads.
    """

    def __init__(self, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[CalculationResult, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[CalculationResult]:
        """Return a fresh cached result, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            result, computed_at = entry
            if self._clock() - computed_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return result

    def put(self, key: Hashable, result: CalculationResult):
        with self._lock:
            self._entries[key] = (result, self._clock())

    def purge_expired(self) -> int:
        """Drop expired entries, returning how many were removed."""
        with self._lock:
            now = self._clock()
            stale = [k for k, (_, at) in self._entries.items() if now - at >= self.ttl_seconds]
            for k in stale:
                del self._entries[k]
            return len(stale)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
