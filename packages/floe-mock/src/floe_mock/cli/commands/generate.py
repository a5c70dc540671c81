"""floe-mock generate command - Print an example instance for a schema file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import ValidationError as PydanticValidationError

from floe_mock.cli.errors import (
    CLIError,
    handle_file_not_found,
    handle_generation_failure,
    handle_options_error,
    handle_parse_error,
    handle_permission_error,
)
from floe_mock.cli.output import success
from floe_mock.config import DEFAULT_LOCALE, GenerationOptions
from floe_mock.generator import generate

JSON_SUFFIXES = frozenset({".json"})


def load_document(path: Path) -> Any:
    """Load a JSON or YAML document.

    Files ending in .json are parsed as JSON, anything else as YAML.

    Args:
        path: Path to the schema or OpenAPI document.

    Returns:
        Parsed document.

    Raises:
        json.JSONDecodeError: If a .json file is malformed.
        yaml.YAMLError: If a YAML file is malformed.
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in JSON_SUFFIXES:
        return json.loads(text)

    return yaml.safe_load(text)


def resolve_pointer(document: Any, pointer: str) -> Any:
    """Select a sub-document by RFC 6901 JSON pointer.

    Args:
        document: Parsed document.
        pointer: JSON pointer ("" selects the whole document).

    Returns:
        The referenced value.

    Raises:
        CLIError: If the pointer is malformed or does not resolve.

    Example:
        >>> resolve_pointer({"a": {"b~c": [1, 2]}}, "/a/b~0c/1")
        2
    """
    if pointer in ("", "#"):
        return document
    pointer = pointer.removeprefix("#")
    if not pointer.startswith("/"):
        raise CLIError(f"Invalid JSON pointer: {pointer}")

    current = document
    for raw in pointer[1:].split("/"):
        token = raw.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and token in current:
            current = current[token]
        elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            raise CLIError(f"JSON pointer does not resolve: {pointer}")
    return current


@click.command("generate")
@click.argument("schema_file", type=click.Path(dir_okay=False))
@click.option("--seed", type=int, default=None, help="Random seed for reproducible output.")
@click.option(
    "--locale",
    default=DEFAULT_LOCALE,
    show_default=True,
    help="Faker locale for generated values.",
)
@click.option(
    "--required-only",
    is_flag=True,
    default=False,
    help="Only populate required object properties.",
)
@click.option(
    "-p",
    "--pointer",
    default="",
    help="JSON pointer to the schema inside the file (e.g. /components/schemas/Pet).",
)
@click.option("--compact", is_flag=True, default=False, help="Print JSON on a single line.")
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the instance to a file instead of stdout.",
)
def generate_cmd(
    schema_file: str,
    seed: int | None,
    locale: str,
    required_only: bool,
    pointer: str,
    compact: bool,
    output_path: str | None,
) -> None:
    """Generate an example instance for a JSON Schema.

    The schema must already be dereferenced: a remaining `$ref` is
    reported as an error rather than followed.

    Examples:

        floe-mock generate pet.schema.json --seed 42

        floe-mock generate openapi.yaml -p /components/schemas/Pet --required-only
    """
    path = Path(schema_file)
    if not path.exists():
        handle_file_not_found(schema_file)

    try:
        document = load_document(path)
    except PermissionError:
        handle_permission_error(schema_file)
    except (json.JSONDecodeError, UnicodeDecodeError, yaml.YAMLError) as e:
        handle_parse_error(e, schema_file)

    schema = resolve_pointer(document, pointer)
    if not isinstance(schema, dict):
        raise CLIError(f"Schema at '{pointer or '/'}' is not a JSON object")

    try:
        options = GenerationOptions(seed=seed, locale=locale, fill_properties=not required_only)
    except PydanticValidationError as e:
        handle_options_error(e)

    outcome = generate(options, schema)
    if outcome.is_failure:
        handle_generation_failure(outcome.error)

    rendered = json.dumps(outcome.value, indent=None if compact else 2, ensure_ascii=False, default=str)
    if output_path is None:
        click.echo(rendered)
        return

    try:
        Path(output_path).write_text(rendered + "\n", encoding="utf-8")
    except PermissionError:
        handle_permission_error(output_path, "write")
    success(f"Instance written to {output_path}")
