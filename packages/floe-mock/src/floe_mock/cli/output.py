"""Rich console output for the floe-mock CLI.

Status messages go to stderr so the generated JSON on stdout can be piped
as-is; tables (listings requested by the user) go to stdout. Colour is off
when NO_COLOR is set or --no-color is given.
"""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

_env_no_color = os.environ.get("NO_COLOR") is not None
_no_color = False


def create_console(no_color: bool = False, *, stderr: bool = True) -> Console:
    """Build a Console honoring --no-color and NO_COLOR.

    Args:
        no_color: Disable colour regardless of the terminal.
        stderr: Write to stderr (status messages) rather than stdout.
    """
    plain = no_color or _env_no_color
    return Console(force_terminal=False if plain else None, no_color=plain, stderr=stderr)


console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a status line with a green check mark.

    Example:
        >>> success("Instance written to pet.json")
        ✓ Instance written to pet.json
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error line with a red cross.

    Markup in the message itself is not interpreted, so schema text such as
    `[0-9]` is shown verbatim.
    """
    console.print(Text.assemble(("✗", "red"), " ", message), **kwargs)


def print_table(table: Table) -> None:
    """Render a table on stdout."""
    create_console(no_color=_no_color, stderr=False).print(table)


def set_no_color(no_color: bool) -> None:
    """Switch the shared console to plain output."""
    global console, _no_color
    _no_color = no_color
    console = create_console(no_color=no_color)
