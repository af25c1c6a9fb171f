# ==============================================================================
# Conflict Retry Policy
# ==============================================================================
"""
Retry policy for the optimistic update engines.

Conflicts are retried by re-running the CAS cycle. The policy decides how many
cycles are allowed and how long to wait between them. By default there is no
ceiling and no delay: a conflict means another writer just succeeded, so the
next attempt is expected to win.

Transport errors are never retried here; redis-py already retries those at the
connection level (see ValkeyStore).
"""

import logging
from dataclasses import dataclass

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_never,
    wait_exponential,
    wait_none,
)

from cachecas.base.errors import ConflictError


def log_conflict_retry(logger: logging.Logger, max_attempts: int | None):
    """
    Create a callback that logs conflict retries.

    Args:
        logger: Logger instance to use for logging
        max_attempts: Attempt ceiling shown in the message (None = unbounded)

    Returns:
        Callback function for tenacity's before_sleep parameter
    """
    limit = "unbounded" if max_attempts is None else str(max_attempts)

    def _log_retry(retry_state: RetryCallState) -> None:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        logger.debug(
            "Conflict retry %d/%s: %s",
            retry_state.attempt_number,
            limit,
            exception,
        )

    return _log_retry


@dataclass(frozen=True)
class ConflictRetryPolicy:
    """
    How many CAS cycles an update may run and how long to wait between them.

    Attributes:
        max_attempts: Total attempts allowed, or None to retry until stored
        wait_min: Lower bound for the exponential delay in seconds
        wait_max: Upper bound for the exponential delay in seconds (0 = no delay)
    """

    max_attempts: int | None = None
    wait_min: float = 0.0
    wait_max: float = 0.0

    def __post_init__(self):
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.wait_min < 0 or self.wait_max < 0:
            raise ValueError("wait bounds must not be negative")

    @classmethod
    def from_settings(cls) -> "ConflictRetryPolicy":
        """Build the policy from the CACHE_CONFLICT_* settings."""
        from cachecas.utils.config import get_settings

        client = get_settings().client
        return cls(
            max_attempts=client.conflict_max_attempts,
            wait_min=client.conflict_wait_min,
            wait_max=client.conflict_wait_max,
        )

    @property
    def is_bounded(self) -> bool:
        return self.max_attempts is not None

    def is_last_attempt(self, attempt_number: int) -> bool:
        """True if a conflict on this (1-based) attempt ends the retry loop."""
        return self.is_bounded and attempt_number >= self.max_attempts

    def build_retrying(self, logger: logging.Logger) -> Retrying:
        """
        Create a tenacity controller that retries on ConflictError only.

        The last ConflictError is re-raised once the policy gives up. Any other
        exception ends the loop immediately.

        Example:
            for attempt in policy.build_retrying(logger):
                with attempt:
                    if store.cas(key, mutator) is StoreOutcome.CONFLICT:
                        raise ConflictError(key)
        """
        if self.max_attempts is None:
            stop = stop_never
        else:
            stop = stop_after_attempt(self.max_attempts)

        if self.wait_max > 0:
            wait = wait_exponential(
                multiplier=self.wait_min or 0.01, min=self.wait_min, max=self.wait_max
            )
        else:
            wait = wait_none()

        return Retrying(
            stop=stop,
            wait=wait,
            retry=retry_if_exception_type(ConflictError),
            before_sleep=log_conflict_retry(logger, self.max_attempts),
            reraise=True,
        )
