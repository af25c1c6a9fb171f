# ==============================================================================
# Store Infrastructure
# ==============================================================================
"""
StoreAdapter implementations for the ports-and-adapters architecture.

Available implementations:
- ValkeyStore: Valkey/Redis-based store with JSON serialization
- InMemoryStore: thread-safe versioned dict, same CAS semantics
"""

from cachecas.infrastructure.store.memory import InMemoryStore
from cachecas.infrastructure.store.valkey import ValkeyStore

__all__ = [
    "InMemoryStore",
    "ValkeyStore",
]
