# ==============================================================================
# cachecas Utilities
# ==============================================================================
"""
Shared utilities: configuration, conflict retry policy and version lookup.
"""

from cachecas.utils.config import (
    ClientSettings,
    Settings,
    ValkeySettings,
    get_settings,
)
from cachecas.utils.retry import ConflictRetryPolicy, log_conflict_retry
from cachecas.utils.versions import get_cachecas_version, get_stack_versions

__all__ = [
    # Config
    "ClientSettings",
    "Settings",
    "ValkeySettings",
    "get_settings",
    # Retry
    "ConflictRetryPolicy",
    "log_conflict_retry",
    # Versions
    "get_cachecas_version",
    "get_stack_versions",
]
