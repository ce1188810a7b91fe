import threading
import time
from typing import Any, Callable, Dict, Hashable, Tuple


class _Miss:
    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS: Any = _Miss()


class ExpiringCache:
    """In-process key/value store whose entries expire ``ttl_seconds`` after being set."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Any:
        """Return the cached value, or ``MISS`` when absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISS
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                return MISS
            return value

    def peek_stale(self, key: Hashable) -> Any:
        """Return the last stored value regardless of age, or ``MISS``."""
        with self._lock:
            entry = self._entries.get(key)
            return MISS if entry is None else entry[1]

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
