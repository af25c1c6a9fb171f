# ==============================================================================
# Store Adapter Abstract Base Class
# ==============================================================================
"""
Abstract interface for the remote key-value store behind the cache client.

The adapter owns connection handling and serialization. It reports logical
results as StoreOutcome members and raises StoreError for transport failures.

Implementations: Valkey/Redis, in-memory.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Any

Mutator = Callable[[Any], Any]


class StoreOutcome(str, Enum):
    """Logical result of a write, delete or CAS attempt."""

    STORED = "stored"
    DELETED = "deleted"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    NOT_STORED = "not_stored"


class StoreAdapter(ABC):
    """
    Key-value store with single-key atomic compare-and-swap.

    Values are arbitrary JSON-serializable objects. Implementations handle
    serialization internally.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """
        Get a stored value.

        Args:
            key: Cache key

        Returns:
            Stored value, or None if the key does not exist

        Raises:
            StoreError: On transport failure
        """
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> StoreOutcome:
        """
        Store a value unconditionally.

        Args:
            key: Cache key
            value: Value to store
            ttl_seconds: Optional time-to-live in seconds

        Returns:
            STORED, or NOT_STORED if the store refused the write

        Raises:
            StoreError: On transport failure
        """
        ...

    @abstractmethod
    def add(self, key: str, value: Any, ttl_seconds: int | None = None) -> StoreOutcome:
        """
        Store a value only if the key does not exist yet.

        Returns:
            STORED, or NOT_STORED if the key already exists

        Raises:
            StoreError: On transport failure
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> StoreOutcome:
        """
        Delete a key.

        Returns:
            DELETED, or NOT_FOUND if the key did not exist

        Raises:
            StoreError: On transport failure
        """
        ...

    @abstractmethod
    def cas(self, key: str, mutator: Mutator) -> StoreOutcome:
        """
        Atomically read, mutate and write back the value at key.

        The store reads the current value, passes it to mutator and writes the
        returned value only if no other writer stored in between. The key's TTL
        is preserved.

        Args:
            key: Cache key
            mutator: Function from the current value to the new value

        Returns:
            STORED on success, CONFLICT if the value changed concurrently,
            NOT_FOUND if the key does not exist (mutator is not called)

        Raises:
            StoreError: On transport failure. Exceptions raised by mutator
                propagate unchanged.
        """
        ...

    @abstractmethod
    def forward(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke a store-native operation not modelled by this interface.

        Raises:
            StoreError: On transport failure
            AttributeError: If the store has no such operation
        """
        ...

    def ping(self) -> bool:
        """Check whether the store is reachable."""
        return True

    def close(self) -> None:
        """Release connections held by the adapter."""
