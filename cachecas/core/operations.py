# ==============================================================================
# Collection Operations
# ==============================================================================
"""
Standard mutations for list-valued cache entries.

Each operation mutates the list in place and returns its side result, which
is what CacheClient.apply_mutation hands back to the caller. Removing from an
empty list yields None rather than raising.
"""

from typing import Any


def remove_last(collection: list) -> Any | None:
    """Pop the last element, or None if the list is empty."""
    if not collection:
        return None
    return collection.pop()


def remove_first(collection: list) -> Any | None:
    """Pop the first element, or None if the list is empty."""
    if not collection:
        return None
    return collection.pop(0)


def append(collection: list, value: Any) -> int:
    """Add value at the end. Returns the new length."""
    collection.append(value)
    return len(collection)


def prepend(collection: list, value: Any) -> int:
    """Add value at the front. Returns the new length."""
    collection.insert(0, value)
    return len(collection)
