# ==============================================================================
# Core Domain Layer
# ==============================================================================
"""
The cache client, its update engines, notifications and collection operations.

Depends only on cachecas.base contracts; store adapters are injected.
"""

from cachecas.core.client import CacheClient, get_cache_client
from cachecas.core.events import CacheEvent, EventBus
from cachecas.core.operations import append, prepend, remove_first, remove_last

__all__ = [
    "CacheClient",
    "CacheEvent",
    "EventBus",
    "append",
    "get_cache_client",
    "prepend",
    "remove_first",
    "remove_last",
]
