# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for cachecas.

Commands are organized into separate modules for maintainability:
- shared.py: Colors, value parsing and logging setup
- commands.py: Key-level cache commands
- config.py: Configuration display
- status.py: Store reachability and client status
"""

from cachecas.cli.shared import (
    C,
    Colors,
    I,
    Icons,
    configure_logging,
    format_value,
    parse_value,
)

__all__ = [
    "C",
    "Colors",
    "I",
    "Icons",
    "configure_logging",
    "format_value",
    "parse_value",
]
