# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Shared utilities, constants, and helper functions used across CLI command modules.

This module provides:
- ANSI color codes and status icons
- Command-line value parsing
- Logging setup for CLI runs
"""

import json
import logging
from typing import Any

from cachecas.utils.config import get_settings


# ==============================================================================
# ANSI Colors and Icons
# ==============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Colors
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    # Bright colors
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"


class Icons:
    """Status icons using Unicode symbols."""

    CHECK = "✓"
    CROSS = "✗"
    WARN = "!"
    ARROW = "→"


# Aliases
C = Colors
I = Icons


# ==============================================================================
# Helpers
# ==============================================================================


def parse_value(raw: str) -> Any:
    """Parse a command-line value as JSON, falling back to the plain string.

    Examples:
        '[1, 2]' -> [1, 2]
        '42'     -> 42
        'hello'  -> 'hello'
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def format_value(value: Any) -> str:
    """Render a stored value for terminal output."""
    return json.dumps(value)


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging from settings (DEBUG when verbose or in debug mode)."""
    settings = get_settings()
    level = logging.DEBUG if verbose or settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def success(message: str) -> None:
    print(f"{C.BRIGHT_GREEN}{I.CHECK}{C.RESET} {message}")


def failure(message: str) -> None:
    print(f"{C.BRIGHT_RED}{I.CROSS}{C.RESET} {message}")
