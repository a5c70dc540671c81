"""CLI entry point for floe-mock.

Defines the main CLI group using the LazyGroup pattern: command modules
are only imported when their command is invoked.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from floe_mock import __version__
from floe_mock.cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True

LAZY_COMMANDS = {
    "generate": "floe_mock.cli.commands.generate:generate_cmd",
    "formats": "floe_mock.cli.commands.formats:formats",
}


class LazyGroup(rclick.RichGroup):
    """Rich-click group whose subcommands are imported on first lookup.

    Attributes:
        lazy_subcommands: Command name to "module:attribute" import target.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted({*super().list_commands(ctx), *self.lazy_subcommands})

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Return a registered command, importing and registering lazy ones."""
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is None and cmd_name in self.lazy_subcommands:
            cmd = self._import_command(cmd_name)
            self.add_command(cmd, cmd_name)
        return cmd

    def _import_command(self, cmd_name: str) -> click.Command:
        module_name, _, attr_name = self.lazy_subcommands[cmd_name].partition(":")
        cmd = getattr(importlib.import_module(module_name), attr_name)
        if not isinstance(cmd, click.Command):
            msg = f"Lazy command {cmd_name!r} does not resolve to a click command"
            raise TypeError(msg)
        return cmd


def _enable_verbose(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if value:
        from floe_mock.observability import configure_logging

        configure_logging(log_level="DEBUG", json_format=False)


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="floe-mock")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log generation events to stderr.",
    expose_value=False,
    callback=_enable_verbose,
)
def cli() -> None:
    """Floe Mock - example instances from JSON Schema.

    Generate mock response bodies from JSON Schema and OpenAPI schema
    fragments, honoring `format`, `x-faker` directives and `writeOnly`.

    **Getting Started:**

    - `floe-mock generate schema.json` - Print an example instance
    - `floe-mock generate openapi.yaml --pointer /components/schemas/Pet`
    - `floe-mock formats` - List supported formats and directive paths
    """


if __name__ == "__main__":
    cli()
