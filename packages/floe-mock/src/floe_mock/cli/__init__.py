"""Command line interface for floe-mock.

Entry point: ``floe-mock`` (floe_mock.cli.main:cli).
"""

from __future__ import annotations
