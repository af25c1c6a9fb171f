# ==============================================================================
# Cache Exceptions
# ==============================================================================
"""
Exception hierarchy shared by store adapters and the cache client.

None of these cross the public CacheClient interface; the client converts
them into False/None results and reports them through the event bus.
"""


class CacheError(Exception):
    """Base class for all cachecas errors."""


class StoreError(CacheError):
    """
    Transport or protocol failure raised by a store adapter.

    Distinct from the logical outcomes in StoreOutcome: a StoreError means the
    store could not be asked, not that it answered "no".

    Attributes:
        operation: Adapter operation that failed (e.g., "cas")
        key: Key involved, if any
    """

    def __init__(self, message: str, operation: str, key: str | None = None):
        super().__init__(message)
        self.operation = operation
        self.key = key


class ConflictError(CacheError):
    """Raised inside the update engines when a CAS attempt lost a race."""

    def __init__(self, key: str):
        super().__init__(f"{key} has been changed since the last fetch")
        self.key = key


class MutationError(CacheError):
    """Wraps an exception raised by a caller-supplied operation or callback."""

    def __init__(self, key: str, operation: str, cause: Exception):
        super().__init__(f"{operation} failed on the value of {key}: {cause!r}")
        self.key = key
        self.operation = operation
        self.cause = cause
