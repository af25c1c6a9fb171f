# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Adapters for external services (ports-and-adapters architecture).

This module contains concrete implementations of the contracts in
cachecas.base:
- store/ - StoreAdapter implementations (Valkey/Redis, in-memory)
"""

from cachecas.infrastructure.store import InMemoryStore, ValkeyStore

__all__ = [
    # Store
    "InMemoryStore",
    "ValkeyStore",
]
