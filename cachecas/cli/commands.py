# ==============================================================================
# Cache Commands
# ==============================================================================
"""
Key-level commands for the cachecas CLI.

Each command talks to the configured Valkey store through the default
CacheClient. Values are parsed as JSON when possible. Commands exit with
code 1 when the client reports failure.
"""

from typing import Annotated, Optional

import typer

from cachecas.cli.shared import failure, format_value, parse_value, success
from cachecas.core.client import get_cache_client


def cache_get(
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Print the value stored at KEY."""
    value = get_cache_client().get(key)
    if value is None:
        failure(f"{key} not found")
        raise typer.Exit(1)
    print(format_value(value))


def cache_set(
    key: Annotated[str, typer.Argument(help="Cache key")],
    value: Annotated[str, typer.Argument(help="Value (JSON or plain string)")],
    ttl: Annotated[
        Optional[int], typer.Option("--ttl", "-t", help="Time-to-live in seconds")
    ] = None,
) -> None:
    """Store VALUE at KEY unconditionally."""
    if not get_cache_client().set(key, parse_value(value), ttl_seconds=ttl):
        failure(f"Could not set {key}")
        raise typer.Exit(1)
    success(f"{key} set")


def cache_delete(
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Delete KEY."""
    if not get_cache_client().delete(key):
        failure(f"Could not delete {key}")
        raise typer.Exit(1)
    success(f"{key} deleted")


def cache_cas(
    key: Annotated[str, typer.Argument(help="Cache key")],
    value: Annotated[str, typer.Argument(help="Value (JSON or plain string)")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="On conflict, retry with the same value"),
    ] = False,
) -> None:
    """Compare-and-swap VALUE into KEY, creating it if missing."""
    parsed = parse_value(value)
    on_conflict = (lambda _current: parsed) if force else None
    if not get_cache_client().cas(key, parsed, on_conflict=on_conflict):
        failure(f"{key} was changed concurrently and has not been updated")
        raise typer.Exit(1)
    success(f"{key} set")


def cache_pop(
    key: Annotated[str, typer.Argument(help="Cache key holding a list")],
) -> None:
    """Remove and print the last element of the list at KEY."""
    print(format_value(get_cache_client().pop(key)))


def cache_shift(
    key: Annotated[str, typer.Argument(help="Cache key holding a list")],
) -> None:
    """Remove and print the first element of the list at KEY."""
    print(format_value(get_cache_client().shift(key)))


def cache_push(
    key: Annotated[str, typer.Argument(help="Cache key holding a list")],
    value: Annotated[str, typer.Argument(help="Value (JSON or plain string)")],
) -> None:
    """Append VALUE to the list at KEY and print the new length."""
    length = get_cache_client().push(key, parse_value(value))
    if length is None:
        failure(f"Could not push to {key}")
        raise typer.Exit(1)
    print(length)
