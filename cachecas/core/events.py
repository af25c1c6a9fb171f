# ==============================================================================
# Cache Events
# ==============================================================================
"""
Structured notifications emitted by the cache client.

Every event is written to the stdlib logger and then handed to each
subscribed observer. Observers are plain callables taking a CacheEvent.
Observer failures are logged and never reach the operation that emitted the
event.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

Observer = Callable[["CacheEvent"], None]


class CacheEvent(BaseModel):
    """
    A single notification from the cache client.

    Attributes:
        source: Fixed source tag, rendered as the message prefix
        message: Human-readable description
        level: stdlib logging level
        operation: Client operation that produced the event (e.g., "cas")
        key: Cache key involved, if any
        error: repr() of the exception behind a failure event, if any
        timestamp: UTC time the event was created
    """

    source: str = Field(default="Cache", description="Source tag")
    message: str = Field(..., description="Event message")
    level: int = Field(default=logging.INFO, description="Logging level")
    operation: str | None = Field(default=None, description="Client operation")
    key: str | None = Field(default=None, description="Cache key")
    error: str | None = Field(default=None, description="Underlying exception")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    @property
    def formatted(self) -> str:
        """Message with its source prefix, e.g. "[Cache] foo has been set."."""
        return f"[{self.source}] {self.message}"


class EventBus:
    """Publish/subscribe sink for CacheEvents."""

    def __init__(self, log: logging.Logger | None = None):
        self._observers: list[Observer] = []
        self._lock = threading.Lock()
        self._logger = log or logger

    @property
    def observers(self) -> list[Observer]:
        with self._lock:
            return list(self._observers)

    def subscribe(self, observer: Observer) -> Observer:
        """
        Attach an observer.

        Returns the observer so this can be used as a decorator.
        """
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: Observer) -> None:
        """Detach an observer. Unknown observers are ignored."""
        with self._lock:
            try:
                self._observers.remove(observer)
            except ValueError:
                pass

    def publish(self, event: CacheEvent) -> None:
        """
        Log the event and deliver it to every observer.

        Args:
            event: Event to publish
        """
        self._logger.log(event.level, event.formatted)

        for observer in self.observers:
            try:
                observer(event)
            except Exception:
                self._logger.exception("Observer %r failed to handle event", observer)
