# ==============================================================================
# Valkey Store Adapter
# ==============================================================================
"""
Valkey/Redis implementation of the StoreAdapter interface.

Provides:
- Plain get/set/add/delete with optional TTL
- Single-key compare-and-swap built on WATCH/MULTI/EXEC
- Passthrough to a fixed set of other redis-py commands

Uses JSON serialization for stored values.
"""

import json
import logging
from typing import Any

import redis
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, WatchError
from redis.exceptions import TimeoutError as RedisTimeoutError
from redis.retry import Retry

from cachecas.base.errors import StoreError
from cachecas.base.store import Mutator, StoreAdapter, StoreOutcome
from cachecas.utils.config import get_settings

logger = logging.getLogger(__name__)

# Single-key and read-only commands that forward() may call
FORWARDABLE_COMMANDS = frozenset(
    {
        "decr",
        "decrby",
        "exists",
        "expire",
        "incr",
        "incrby",
        "keys",
        "persist",
        "pexpire",
        "pttl",
        "scan",
        "strlen",
        "ttl",
        "type",
    }
)


class ValkeyStore(StoreAdapter):
    """
    Valkey/Redis implementation of the StoreAdapter interface.

    Configured with:
    - Socket timeouts for fast failure detection
    - Automatic retries with exponential backoff for transient failures
    - Health check interval to keep connections alive

    CAS watches the key, reads it, applies the mutator and writes inside a
    MULTI block. EXEC aborts with WatchError if any other client touched the
    key after the WATCH, which is reported as CONFLICT.
    """

    def __init__(
        self,
        url: str | None = None,
        socket_timeout: int | None = None,
        retries: int | None = None,
        health_check_interval: int | None = None,
        client: redis.Redis | None = None,
    ):
        """
        Initialize the Valkey store.

        Args:
            url: Valkey/Redis connection URL. If None, uses settings.
            socket_timeout: Socket timeout in seconds (default: from settings)
            retries: Transport retries for transient failures (default: from settings)
            health_check_interval: Health check interval in seconds (default: from settings)
            client: Pre-built redis client; when given, the other arguments are ignored
        """
        if client is not None:
            self._client = client
            self._url = url or "<injected>"
            return

        valkey = get_settings().valkey
        url = url or valkey.url
        socket_timeout = socket_timeout if socket_timeout is not None else valkey.socket_timeout
        retry_count = retries if retries is not None else valkey.retries
        if health_check_interval is None:
            health_check_interval = valkey.health_check_interval

        retry_strategy = Retry(ExponentialBackoff(cap=32, base=1), retries=retry_count)

        self._client = redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            retry=retry_strategy,
            retry_on_error=[RedisTimeoutError, RedisConnectionError],
            health_check_interval=health_check_interval,
        )
        self._url = url

    @property
    def client(self) -> redis.Redis:
        """Get the underlying Redis client for advanced operations."""
        return self._client

    def __repr__(self) -> str:
        return f"ValkeyStore({self._url!r})"

    # ==========================================================================
    # Serialization
    # ==========================================================================

    def _encode(self, key: str, value: Any) -> str:
        try:
            return json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StoreError(
                f"Value for {key} is not JSON-serializable: {e}", "encode", key
            ) from e

    def _decode(self, key: str, raw: str) -> Any:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreError(f"Failed to decode JSON for key {key}: {e}", "decode", key) from e

    # ==========================================================================
    # StoreAdapter Interface Implementation
    # ==========================================================================

    def get(self, key: str) -> Any | None:
        """
        Get a stored value.

        Args:
            key: Cache key

        Returns:
            Decoded value, or None if not found
        """
        try:
            raw = self._client.get(key)
        except RedisError as e:
            raise StoreError(str(e), "get", key) from e
        if raw is None:
            return None
        return self._decode(key, raw)

    def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> StoreOutcome:
        """
        Set a value with optional TTL.

        Args:
            key: Cache key
            value: Value to store (must be JSON-serializable)
            ttl_seconds: Optional time-to-live in seconds
        """
        payload = self._encode(key, value)
        try:
            stored = self._client.set(key, payload, ex=ttl_seconds)
        except RedisError as e:
            raise StoreError(str(e), "set", key) from e
        return StoreOutcome.STORED if stored else StoreOutcome.NOT_STORED

    def add(self, key: str, value: Any, ttl_seconds: int | None = None) -> StoreOutcome:
        """
        Set a value only if the key does not exist (SET NX).

        Args:
            key: Cache key
            value: Value to store (must be JSON-serializable)
            ttl_seconds: Optional time-to-live in seconds
        """
        payload = self._encode(key, value)
        try:
            stored = self._client.set(key, payload, ex=ttl_seconds, nx=True)
        except RedisError as e:
            raise StoreError(str(e), "add", key) from e
        return StoreOutcome.STORED if stored else StoreOutcome.NOT_STORED

    def delete(self, key: str) -> StoreOutcome:
        """
        Delete a key.

        Args:
            key: Cache key to delete
        """
        try:
            removed = self._client.delete(key)
        except RedisError as e:
            raise StoreError(str(e), "delete", key) from e
        return StoreOutcome.DELETED if removed > 0 else StoreOutcome.NOT_FOUND

    def cas(self, key: str, mutator: Mutator) -> StoreOutcome:
        """
        Compare-and-swap the value at key using optimistic locking.

        Args:
            key: Cache key
            mutator: Function from the current value to the new value

        Returns:
            STORED, CONFLICT or NOT_FOUND
        """
        try:
            with self._client.pipeline() as pipe:
                pipe.watch(key)
                raw = pipe.get(key)
                if raw is None:
                    return StoreOutcome.NOT_FOUND

                new_value = mutator(self._decode(key, raw))
                payload = self._encode(key, new_value)

                pipe.multi()
                pipe.set(key, payload, keepttl=True)
                pipe.execute()
        except WatchError:
            logger.debug("WATCH on %s aborted the transaction", key)
            return StoreOutcome.CONFLICT
        except RedisError as e:
            raise StoreError(str(e), "cas", key) from e
        return StoreOutcome.STORED

    def forward(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        """
        Call one of FORWARDABLE_COMMANDS by its redis-py method name.

        Args:
            operation: redis-py method name (e.g., "ttl", "incrby")
            *args: Positional arguments for the command
            **kwargs: Keyword arguments for the command

        Returns:
            The raw redis-py result (not JSON-decoded)

        Raises:
            AttributeError: If the command is not forwardable
        """
        if operation not in FORWARDABLE_COMMANDS:
            raise AttributeError(f"ValkeyStore does not forward {operation!r}")
        method = getattr(self._client, operation)
        try:
            return method(*args, **kwargs)
        except RedisError as e:
            raise StoreError(str(e), operation) from e

    def ping(self) -> bool:
        """
        Check if the store is reachable.

        Returns:
            True if ping succeeds, False otherwise
        """
        try:
            return bool(self._client.ping())
        except RedisError:
            return False

    def close(self) -> None:
        """Close the connection."""
        self._client.close()
