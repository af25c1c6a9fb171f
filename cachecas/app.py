# ==============================================================================
# cachecas CLI
# ==============================================================================
"""
Command-line interface for the cachecas client.

Usage:
    cachecas --help
    cachecas status
    cachecas config show
    cachecas get KEY
    cachecas set KEY VALUE --ttl 60
    cachecas cas KEY VALUE
    cachecas push KEY VALUE
    cachecas pop KEY
"""

import os
from typing import Annotated

import typer

from cachecas.cli.shared import configure_logging

# Set consistent terminal width for help output formatting
if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="cachecas",
    help="Optimistic-concurrency cache client CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log every cache event at DEBUG level")
    ] = False,
) -> None:
    """Optimistic-concurrency cache client CLI"""
    configure_logging(verbose)


# Register key commands from cli.commands module
from cachecas.cli.commands import (
    cache_cas,
    cache_delete,
    cache_get,
    cache_pop,
    cache_push,
    cache_set,
    cache_shift,
)

app.command("get")(cache_get)
app.command("set")(cache_set)
app.command("delete")(cache_delete)
app.command("cas")(cache_cas)
app.command("pop")(cache_pop)
app.command("shift")(cache_shift)
app.command("push")(cache_push)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

# Register config commands from cli.config module
from cachecas.cli.config import config_show

config_app.command("show")(config_show)

# Status command is imported from cachecas.cli.status
from cachecas.cli.status import show_status

app.command("status")(show_status)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
