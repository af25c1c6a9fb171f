"""
cachecas: optimistic-concurrency client for key-value caches.

Adds compare-and-swap updates with conflict retry and atomic list mutations
(pop, shift, push, unshift) on top of a Valkey/Redis store.
"""

from cachecas.base import StoreAdapter, StoreError, StoreOutcome
from cachecas.core import CacheClient, CacheEvent, EventBus
from cachecas.utils.retry import ConflictRetryPolicy

__version__ = "0.1.0"

__all__ = [
    "CacheClient",
    "CacheEvent",
    "ConflictRetryPolicy",
    "EventBus",
    "StoreAdapter",
    "StoreError",
    "StoreOutcome",
]
