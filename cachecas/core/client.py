# ==============================================================================
# Cache Client
# ==============================================================================
"""
Client-side façade over a StoreAdapter with optimistic-concurrency updates.

Provides:
- Basic operations (get, set, add, delete) that never raise
- cas(): blind-replace compare-and-swap with conditional create and an
  optional conflict-resolution callback
- update(): content-derived compare-and-swap
- apply_mutation(): read-modify-write on list-valued entries returning the
  mutation's side result (pop, shift, push, unshift)
- forward(): passthrough to store-native operations

Every failure is converted to False/None and reported through the EventBus.
Conflicts are retried under a ConflictRetryPolicy.
"""

import copy
import logging
from collections.abc import Callable
from typing import Any

from cachecas.base.errors import ConflictError, MutationError, StoreError
from cachecas.base.store import Mutator, StoreAdapter, StoreOutcome
from cachecas.core import operations
from cachecas.core.events import CacheEvent, EventBus
from cachecas.utils.config import get_settings
from cachecas.utils.retry import ConflictRetryPolicy

logger = logging.getLogger(__name__)

Operation = str | Callable[..., Any]


def _replace_with(value: Any) -> Mutator:
    """Mutator that ignores the stored value and substitutes value."""

    def _mutator(_current: Any) -> Any:
        return value

    return _mutator


def _operation_name(operation: Operation) -> str:
    if isinstance(operation, str):
        return operation
    return getattr(operation, "__name__", repr(operation))


class CacheClient:
    """
    Cache client with CAS update semantics over any StoreAdapter.

    The client is stateless between calls: it holds only its store, event bus,
    retry policy and defaults.
    """

    def __init__(
        self,
        store: StoreAdapter | None = None,
        events: EventBus | None = None,
        retry_policy: ConflictRetryPolicy | None = None,
        source: str | None = None,
        default_ttl_seconds: int | None = None,
    ):
        """
        Initialize the cache client.

        Args:
            store: Store adapter. If None, a ValkeyStore is built from settings.
            events: Event bus for notifications. If None, a new one is created.
            retry_policy: Conflict retry policy. If None, built from settings.
            source: Event source prefix (default: from settings, "Cache")
            default_ttl_seconds: TTL used by set/add when none is given
                (default: from settings)
        """
        settings = get_settings().client

        if store is None:
            from cachecas.infrastructure.store import ValkeyStore

            store = ValkeyStore()

        self._store = store
        self._events = events or EventBus()
        self._retry_policy = retry_policy or ConflictRetryPolicy.from_settings()
        self._source = source or settings.event_source
        if default_ttl_seconds is None:
            default_ttl_seconds = settings.default_ttl_seconds
        self._default_ttl = default_ttl_seconds

    @property
    def store(self) -> StoreAdapter:
        """Get the underlying store adapter."""
        return self._store

    @property
    def events(self) -> EventBus:
        """Event bus that receives every notification from this client."""
        return self._events

    @property
    def retry_policy(self) -> ConflictRetryPolicy:
        return self._retry_policy

    # ==========================================================================
    # Notifications
    # ==========================================================================

    def log(
        self,
        message: str,
        level: int = logging.INFO,
        operation: str | None = None,
        key: Any = None,
        error: Exception | None = None,
    ) -> None:
        """
        Publish a notification tagged with this client's source.

        Args:
            message: Event message
            level: stdlib logging level
            operation: Client operation producing the event
            key: Cache key involved
            error: Exception behind a failure, if any
        """
        self._events.publish(
            CacheEvent(
                source=self._source,
                message=message,
                level=level,
                operation=operation,
                key=None if key is None else str(key),
                error=None if error is None else repr(error),
            )
        )

    def _ttl(self, ttl_seconds: int | None) -> int | None:
        return ttl_seconds if ttl_seconds is not None else self._default_ttl

    def _retrying(self):
        return self._retry_policy.build_retrying(logger)

    def _log_gave_up(self, operation: str, key: str) -> None:
        self.log(
            f"Gave up on {key} after {self._retry_policy.max_attempts} conflicting attempts.",
            logging.WARNING,
            operation,
            key,
        )

    # ==========================================================================
    # Basic Operations
    # ==========================================================================

    def get(self, key: str) -> Any | None:
        """
        Get a cached value.

        Args:
            key: Cache key

        Returns:
            Cached value, or None if not found or the store failed
        """
        try:
            return self._store.get(key)
        except StoreError as e:
            self.log(
                f"There has been an error getting the key {key}:\n{e}",
                logging.ERROR,
                "get",
                key,
                e,
            )
            return None

    def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        """
        Set a cached value.

        Args:
            key: Cache key
            value: Value to store
            ttl_seconds: Optional time-to-live in seconds

        Returns:
            True if the store reported STORED
        """
        try:
            outcome = self._store.set(key, value, self._ttl(ttl_seconds))
        except StoreError as e:
            self.log(
                f"There has been an error setting the key {key} to {value!r}:\n{e}",
                logging.ERROR,
                "set",
                key,
                e,
            )
            return False

        if outcome is StoreOutcome.STORED:
            self.log(f"{key} has been successfully set.", operation="set", key=key)
            return True

        self.log(
            f"Setting the key {key} to {value!r} expected to return "
            f"'{StoreOutcome.STORED.value}', got '{outcome.value}'",
            logging.WARNING,
            "set",
            key,
        )
        return False

    def add(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        """
        Set a value only if the key does not exist yet.

        Returns:
            True if the value was created, False if the key already existed
            or the store failed
        """
        try:
            outcome = self._store.add(key, value, self._ttl(ttl_seconds))
        except StoreError as e:
            self.log(
                f"There has been an error adding the key {key}:\n{e}",
                logging.ERROR,
                "add",
                key,
                e,
            )
            return False

        if outcome is StoreOutcome.STORED:
            self.log(f"{key} has been successfully added.", operation="add", key=key)
            return True
        self.log(f"{key} already exists and has not been added.", logging.DEBUG, "add", key)
        return False

    def delete(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if the store reported DELETED
        """
        try:
            outcome = self._store.delete(key)
        except StoreError as e:
            self.log(
                f"There has been an error deleting the key {key}:\n{e}",
                logging.ERROR,
                "delete",
                key,
                e,
            )
            return False

        if outcome is StoreOutcome.DELETED:
            return True
        self.log(f"{key} could not be deleted: {outcome.value}", logging.DEBUG, "delete", key)
        return False

    # ==========================================================================
    # Optimistic Update Engine
    # ==========================================================================

    def cas(
        self,
        key: str,
        value: Any,
        on_conflict: Callable[[Any], Any] | None = None,
    ) -> bool:
        """
        Make sure value is stored at key.

        The write replaces whatever is stored. If another writer changed the
        key between the store's read and write, the update is abandoned unless
        on_conflict is given, in which case it is called with the value now
        stored and its return value is written in a fresh CAS cycle. A missing
        key is created with set().

        Args:
            key: Cache key
            value: Value to store
            on_conflict: Optional callback computing a new value from the
                current one after a conflict

        Returns:
            True if the value (or a resolved value) was stored
        """
        try:
            for attempt in self._retrying():
                with attempt:
                    outcome = self._store.cas(key, _replace_with(value))
                    if outcome is StoreOutcome.CONFLICT:
                        self.log(
                            f"{key} has been changed since the last fetch.",
                            logging.DEBUG,
                            "cas",
                            key,
                        )
                        if on_conflict is None:
                            self.log(
                                f"{key} has been changed since last time and has not been updated.",
                                logging.WARNING,
                                "cas",
                                key,
                            )
                            return False
                        if self._retry_policy.is_last_attempt(attempt.retry_state.attempt_number):
                            raise ConflictError(key)
                        self.log("Retrying", logging.DEBUG, "cas", key)
                        value = self._resolve_conflict(key, on_conflict)
                        raise ConflictError(key)
        except ConflictError:
            self._log_gave_up("cas", key)
            return False
        except MutationError as e:
            self.log(str(e), logging.ERROR, "cas", key, e.cause)
            return False
        except StoreError as e:
            self.log(
                f"There has been an error Checking and Setting {key}:\n{e!r}",
                logging.ERROR,
                "cas",
                key,
                e,
            )
            return False

        if outcome is StoreOutcome.NOT_FOUND:
            self.log(
                f"{key} does not exist. Creating and storing the given value.",
                operation="cas",
                key=key,
            )
            return self.set(key, value)

        if outcome is not StoreOutcome.STORED:
            self.log(
                f"Checking and Setting {key} returned unexpected '{outcome.value}'",
                logging.WARNING,
                "cas",
                key,
            )
            return False

        self.log(f"{key} has been successfully set.", operation="cas", key=key)
        return True

    def _resolve_conflict(self, key: str, on_conflict: Callable[[Any], Any]) -> Any:
        current = self._store.get(key)
        try:
            return on_conflict(current)
        except Exception as e:
            raise MutationError(key, "on_conflict", e) from e

    def update(
        self,
        key: str,
        func: Callable[[Any], Any],
        default: Any = None,
        ttl_seconds: int | None = None,
    ) -> bool:
        """
        Replace the value at key with func(current value).

        Unlike cas(), the new value is computed from what the store actually
        holds at write time, so a concurrent change is never overwritten: the
        cycle is simply rerun. A missing key is created from func(default).

        Args:
            key: Cache key
            func: Function from the current value to the new value
            default: Value passed to func when the key does not exist
            ttl_seconds: TTL for a newly created key

        Returns:
            True once the computed value has been stored
        """

        def mutator(current: Any) -> Any:
            try:
                return func(current)
            except Exception as e:
                raise MutationError(key, "update", e) from e

        try:
            for attempt in self._retrying():
                with attempt:
                    outcome = self._store.cas(key, mutator)
                    if outcome is StoreOutcome.NOT_FOUND:
                        seeded = mutator(copy.deepcopy(default))
                        outcome = self._store.add(key, seeded, self._ttl(ttl_seconds))
                    if outcome is not StoreOutcome.STORED:
                        self.log(
                            f"{key} has been changed since the last fetch.",
                            logging.DEBUG,
                            "update",
                            key,
                        )
                        raise ConflictError(key)
        except ConflictError:
            self._log_gave_up("update", key)
            return False
        except MutationError as e:
            self.log(str(e), logging.ERROR, "update", key, e.cause)
            return False
        except StoreError as e:
            self.log(
                f"There has been an error updating {key}:\n{e!r}",
                logging.ERROR,
                "update",
                key,
                e,
            )
            return False

        self.log(f"{key} has been successfully updated.", operation="update", key=key)
        return True

    # ==========================================================================
    # Collection Mutation Engine
    # ==========================================================================

    def apply_mutation(self, key: str, operation: Operation, *args: Any) -> Any | None:
        """
        Apply an operation to the collection stored at key and persist it.

        The operation is either a callable ``(collection, *args) -> result``
        that mutates the collection in place, or the name of a method on the
        collection (e.g. ``"pop"``). A missing key is treated as an empty list.
        Conflicting writes rerun the operation against the fresh value, so the
        returned result always comes from the attempt that was stored.

        Args:
            key: Cache key
            operation: Callable or method name
            *args: Extra arguments for the operation

        Returns:
            The operation's result, or None on failure
        """
        name = _operation_name(operation)
        result = None

        def mutator(current: Any) -> Any:
            nonlocal result
            collection = [] if current is None else current
            try:
                if isinstance(operation, str):
                    result = getattr(collection, operation)(*args)
                else:
                    result = operation(collection, *args)
            except Exception as e:
                raise MutationError(key, name, e) from e
            return collection

        try:
            for attempt in self._retrying():
                with attempt:
                    self.log(
                        f"Attempting to call {name} on the value of {key}",
                        logging.DEBUG,
                        "apply_mutation",
                        key,
                    )
                    outcome = self._store.cas(key, mutator)
                    if outcome is StoreOutcome.NOT_FOUND:
                        seeded = mutator(self._store.get(key))
                        outcome = self._store.add(key, seeded, self._default_ttl)
                    if outcome is not StoreOutcome.STORED:
                        raise ConflictError(key)
        except ConflictError:
            self._log_gave_up("apply_mutation", key)
            return None
        except MutationError as e:
            self.log(str(e), logging.ERROR, "apply_mutation", key, e.cause)
            return None
        except StoreError as e:
            self.log(
                f"There has been an error calling {name} on {key}\n{e!r}",
                logging.ERROR,
                "apply_mutation",
                key,
                e,
            )
            return None

        self.log(f"Called {name} on the value of {key}", operation="apply_mutation", key=key)
        return result

    def pop(self, key: str) -> Any | None:
        """Remove and return the last element of the list at key."""
        return self.apply_mutation(key, operations.remove_last)

    def shift(self, key: str) -> Any | None:
        """Remove and return the first element of the list at key."""
        return self.apply_mutation(key, operations.remove_first)

    def push(self, key: str, value: Any) -> int | None:
        """Append value to the list at key. Returns the new length."""
        return self.apply_mutation(key, operations.append, value)

    def unshift(self, key: str, value: Any) -> int | None:
        """Insert value at the front of the list at key. Returns the new length."""
        return self.apply_mutation(key, operations.prepend, value)

    # ==========================================================================
    # Passthrough
    # ==========================================================================

    def forward(self, operation: str, *args: Any, **kwargs: Any) -> Any | None:
        """
        Call a store-native operation that the client does not model.

        Errors are logged and swallowed: the caller gets None and can only
        tell what happened from the published events.

        Args:
            operation: Store operation name
            *args: Positional arguments
            **kwargs: Keyword arguments

        Returns:
            The store's result, or None on failure
        """
        try:
            return self._store.forward(operation, *args, **kwargs)
        except StoreError as e:
            self.log(
                f"There has been a store error calling a method '{operation}' "
                f"on '{self._store!r}':\n{e}",
                logging.ERROR,
                "forward",
                error=e,
            )
        except Exception as e:
            self.log(
                f"Exception caught while calling a method '{operation}' "
                f"on '{self._store!r}':\n{e!r}",
                logging.ERROR,
                "forward",
                error=e,
            )
        return None

    def ping(self) -> bool:
        """Check whether the store is reachable."""
        try:
            return self._store.ping()
        except StoreError:
            return False

    def close(self) -> None:
        """Close the underlying store."""
        self._store.close()


# ==============================================================================
# Module-level convenience functions
# ==============================================================================

_default_client: CacheClient | None = None


def get_cache_client() -> CacheClient:
    """Get or create the default CacheClient backed by Valkey."""
    global _default_client
    if _default_client is None:
        _default_client = CacheClient()
    return _default_client
