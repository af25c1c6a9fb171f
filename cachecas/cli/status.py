# ==============================================================================
# Status Command
# ==============================================================================
"""
Status command for the cachecas CLI.

Reports store reachability, the active conflict retry policy and package
versions, either as a table or as JSON.

Includes light retry logic (3 attempts) when pinging the store.
"""

import json as json_module
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table
from tenacity import RetryError, retry, retry_if_result, stop_after_attempt, wait_exponential

from cachecas.cli.shared import C, I
from cachecas.core.client import get_cache_client
from cachecas.utils.config import get_settings
from cachecas.utils.retry import ConflictRetryPolicy
from cachecas.utils.versions import get_stack_versions

PING_ATTEMPTS = 3


@retry(
    stop=stop_after_attempt(PING_ATTEMPTS),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
    retry=retry_if_result(lambda reachable: not reachable),
)
def _ping_with_retry() -> bool:
    return get_cache_client().ping()


def _collect_status() -> dict[str, Any]:
    """Collect store and client status data."""
    settings = get_settings()
    policy = ConflictRetryPolicy.from_settings()

    try:
        reachable = _ping_with_retry()
    except RetryError:
        reachable = False

    return {
        "store": {
            "host": settings.valkey.host,
            "port": settings.valkey.port,
            "db": settings.valkey.db,
            "ssl": settings.valkey.ssl,
            "reachable": reachable,
        },
        "conflict_retry": {
            "max_attempts": policy.max_attempts,
            "wait_min": policy.wait_min,
            "wait_max": policy.wait_max,
        },
        "versions": get_stack_versions(),
    }


def show_status(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output status as JSON")
    ] = False,
) -> None:
    """Show store reachability and client configuration."""
    data = _collect_status()

    if json_output:
        print(json_module.dumps(data, indent=2))
    else:
        store = data["store"]
        retry_info = data["conflict_retry"]
        reachable = (
            f"{C.BRIGHT_GREEN}{I.CHECK} reachable{C.RESET}"
            if store["reachable"]
            else f"{C.BRIGHT_RED}{I.CROSS} unreachable{C.RESET}"
        )
        print(f"Valkey {store['host']}:{store['port']}/{store['db']}  {reachable}")

        table = Table(title="Client")
        table.add_column("Setting")
        table.add_column("Value")
        max_attempts = retry_info["max_attempts"]
        attempts_label = "unbounded" if max_attempts is None else str(max_attempts)
        table.add_row("Conflict attempts", attempts_label)
        table.add_row("Conflict wait", f"{retry_info['wait_min']}s - {retry_info['wait_max']}s")
        for package, package_version in data["versions"].items():
            table.add_row(package, package_version)
        Console().print(table)

    if not data["store"]["reachable"]:
        raise typer.Exit(1)
