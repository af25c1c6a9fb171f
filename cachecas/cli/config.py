# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the cachecas CLI.
"""

import json
from typing import Annotated

import typer

from cachecas.cli.shared import C
from cachecas.utils.config import get_settings


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display current configuration (includes secrets in JSON mode)."""
    settings = get_settings()

    if json_output:
        config = {
            "valkey": {
                "host": settings.valkey.host,
                "port": settings.valkey.port,
                "db": settings.valkey.db,
                "ssl_enabled": settings.valkey.ssl,
                "password": settings.valkey.password,
                "socket_timeout": settings.valkey.socket_timeout,
                "retries": settings.valkey.retries,
            },
            "client": {
                "event_source": settings.client.event_source,
                "default_ttl_seconds": settings.client.default_ttl_seconds,
                "conflict_max_attempts": settings.client.conflict_max_attempts,
                "conflict_wait_min": settings.client.conflict_wait_min,
                "conflict_wait_max": settings.client.conflict_wait_max,
            },
            "log_level": settings.log_level,
        }
        print(json.dumps(config, indent=2))
        return

    # Human-readable output
    print()
    print(f"{C.BOLD}Configuration{C.RESET}")
    print()

    print(f"{C.CYAN}Valkey{C.RESET}")
    print(f"  Host:       {C.WHITE}{settings.valkey.host}{C.RESET}")
    print(f"  Port:       {C.WHITE}{settings.valkey.port}{C.RESET}")
    print(f"  Database:   {C.WHITE}{settings.valkey.db}{C.RESET}")
    valkey_ssl = "enabled" if settings.valkey.ssl else "disabled"
    print(f"  SSL:        {C.WHITE}{valkey_ssl}{C.RESET}")
    print()

    max_attempts = settings.client.conflict_max_attempts
    print(f"{C.CYAN}Client{C.RESET}")
    print(f"  Source:     {C.WHITE}{settings.client.event_source}{C.RESET}")
    ttl = settings.client.default_ttl_seconds
    print(f"  TTL:        {C.WHITE}{'none' if ttl is None else f'{ttl}s'}{C.RESET}")
    attempts = "unbounded" if max_attempts is None else str(max_attempts)
    print(f"  Attempts:   {C.WHITE}{attempts}{C.RESET}")
    print()
