"""CLI command modules.

This package contains the implementation of all floe-mock subcommands.
"""

from __future__ import annotations

__all__: list[str] = []
