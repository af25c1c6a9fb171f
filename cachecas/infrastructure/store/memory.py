# ==============================================================================
# In-Memory Store Adapter
# ==============================================================================
"""
In-memory implementation of the StoreAdapter interface.

Thread-safe and versioned, with the same CAS semantics as the Valkey adapter:
the mutator runs outside the lock against a snapshot, and the write is
committed only if the entry's version did not move in the meantime. This
makes it suitable for unit tests and for embedding in a single process.
"""

import copy
import threading
import time
from typing import Any

from cachecas.base.errors import StoreError
from cachecas.base.store import Mutator, StoreAdapter, StoreOutcome


def _copy(key: str, value: Any, operation: str) -> Any:
    """Deep-copy a value, reporting uncopyable values as a StoreError."""
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error, RecursionError) as e:
        raise StoreError(f"Cannot copy value: {e}", operation, key) from e


class InMemoryStore(StoreAdapter):
    """In-memory versioned store.

    Values are deep-copied on the way in and out so callers never share
    state with the store, mirroring what serialization does for a remote
    store.
    """

    def __init__(self):
        """Initialize empty store with thread safety."""
        self._data: dict[str, Any] = {}
        self._versions: dict[str, int] = {}
        self._expires: dict[str, float] = {}
        self._version_counter = 0
        self._lock = threading.Lock()

    # Must be called with the lock held
    def _purge_if_expired(self, key: str) -> None:
        deadline = self._expires.get(key)
        if deadline is not None and time.monotonic() >= deadline:
            self._drop(key)

    def _drop(self, key: str) -> None:
        self._data.pop(key, None)
        self._versions.pop(key, None)
        self._expires.pop(key, None)

    def _write(self, key: str, value: Any, ttl_seconds: int | None, operation: str) -> None:
        stored = _copy(key, value, operation)
        self._version_counter += 1
        self._data[key] = stored
        self._versions[key] = self._version_counter
        if ttl_seconds is not None:
            self._expires[key] = time.monotonic() + ttl_seconds
        else:
            self._expires.pop(key, None)

    def get(self, key: str) -> Any | None:
        with self._lock:
            self._purge_if_expired(key)
            if key not in self._data:
                return None
            return _copy(key, self._data[key], "get")

    def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> StoreOutcome:
        with self._lock:
            self._write(key, value, ttl_seconds, "set")
            return StoreOutcome.STORED

    def add(self, key: str, value: Any, ttl_seconds: int | None = None) -> StoreOutcome:
        with self._lock:
            self._purge_if_expired(key)
            if key in self._data:
                return StoreOutcome.NOT_STORED
            self._write(key, value, ttl_seconds, "add")
            return StoreOutcome.STORED

    def delete(self, key: str) -> StoreOutcome:
        with self._lock:
            self._purge_if_expired(key)
            if key not in self._data:
                return StoreOutcome.NOT_FOUND
            self._drop(key)
            return StoreOutcome.DELETED

    def cas(self, key: str, mutator: Mutator) -> StoreOutcome:
        """Update if the version observed at read time is still current."""
        with self._lock:
            self._purge_if_expired(key)
            if key not in self._data:
                return StoreOutcome.NOT_FOUND
            snapshot = _copy(key, self._data[key], "cas")
            version = self._versions[key]

        new_value = _copy(key, mutator(snapshot), "cas")

        with self._lock:
            self._purge_if_expired(key)
            if self._versions.get(key) != version:
                return StoreOutcome.CONFLICT
            # Keep the remaining TTL, like SET KEEPTTL
            deadline = self._expires.get(key)
            self._version_counter += 1
            self._data[key] = new_value
            self._versions[key] = self._version_counter
            if deadline is not None:
                self._expires[key] = deadline
            return StoreOutcome.STORED

    def forward(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        """Dispatch to one of the extra methods below (keys, exists, flush)."""
        if operation not in {"keys", "exists", "flush"}:
            raise AttributeError(f"InMemoryStore has no operation {operation!r}")
        return getattr(self, operation)(*args, **kwargs)

    # ==========================================================================
    # Additional Methods (beyond ABC)
    # ==========================================================================

    def keys(self, prefix: str = "") -> list[str]:
        """List live keys with prefix."""
        with self._lock:
            for key in list(self._data):
                self._purge_if_expired(key)
            return [key for key in self._data if key.startswith(prefix)]

    def exists(self, key: str) -> bool:
        with self._lock:
            self._purge_if_expired(key)
            return key in self._data

    def flush(self) -> int:
        """Clear all data (useful for tests)."""
        with self._lock:
            count = len(self._data)
            self._data.clear()
            self._versions.clear()
            self._expires.clear()
            return count
