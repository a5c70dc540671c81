"""floe-mock formats command - List supported formats and directive paths."""

from __future__ import annotations

import click
from rich.table import Table

from floe_mock.cli import output


@click.command()
def formats() -> None:
    """List string formats and `x-faker` directive paths.

    Any other directive path resolves to the Faker method named by its
    last segment, e.g. `internet.userName` -> `user_name`.
    """
    from floe_mock.directives import CAPABILITIES
    from floe_mock.formats import list_formats

    format_table = Table(title="Formats")
    format_table.add_column("format")
    for name in list_formats():
        format_table.add_row(name)

    directive_table = Table(title="Directive paths")
    directive_table.add_column("x-faker path")
    directive_table.add_column("Faker method")
    for path in sorted(CAPABILITIES):
        directive_table.add_row(path, CAPABILITIES[path].method)

    output.print_table(format_table)
    output.print_table(directive_table)
