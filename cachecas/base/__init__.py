# ==============================================================================
# Base Abstract Classes
# ==============================================================================
"""
Contracts shared by the cache client and its store adapters.

The client depends only on these; concrete adapters live in
cachecas.infrastructure.
"""

from cachecas.base.errors import CacheError, ConflictError, MutationError, StoreError
from cachecas.base.store import Mutator, StoreAdapter, StoreOutcome

__all__ = [
    "CacheError",
    "ConflictError",
    "MutationError",
    "Mutator",
    "StoreAdapter",
    "StoreError",
    "StoreOutcome",
]
