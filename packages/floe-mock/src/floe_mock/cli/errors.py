"""Error reporting for the floe-mock CLI.

Every failure a command can hit ends up as a CLIError, which Click prints
through the rich console and turns into the process exit code:

- 0: instance generated
- 1: bad input (unparsable file, bad pointer, bad options) or generation failure
- 2: the filesystem got in the way (missing file, permissions)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
from pydantic import ValidationError as PydanticValidationError

from floe_mock.cli.output import error
from floe_mock.errors import GenerationError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2


class CLIError(click.ClickException):
    """Click exception carrying a floe-mock exit code.

    Attributes:
        message: Text shown to the user.
        exit_code: Process exit code (default: EXIT_USER_ERROR).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Print the message with the rich error marker (file is ignored)."""
        error(self.format_message())


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Render a pydantic ValidationError as one bullet per invalid field.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - locale: Value error, Unsupported locale: xx"
    """
    details: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]
    lines.extend(f"  - {'.'.join(str(part) for part in d['loc'])}: {d['msg']}" for d in details)
    return "\n".join(lines)


def handle_parse_error(err: Exception, file_path: str) -> NoReturn:
    """Report a schema file that is not valid JSON or YAML.

    The line and column are taken from yaml's `problem_mark` or from
    json.JSONDecodeError's `lineno`/`colno`, whichever the error carries.

    Args:
        err: json.JSONDecodeError, yaml.YAMLError or UnicodeDecodeError.
        file_path: Path of the schema file.

    Raises:
        CLIError: Always.
    """
    where = str(err)
    mark = getattr(err, "problem_mark", None)
    if mark is not None:
        where = f"syntax error at line {mark.line + 1}, column {mark.column + 1}: {err.problem}"  # type: ignore[attr-defined]
    elif hasattr(err, "lineno") and hasattr(err, "colno"):
        where = f"syntax error at line {err.lineno}, column {err.colno}: {err.msg}"  # type: ignore[attr-defined]

    raise CLIError(f"Invalid schema file {file_path}: {where}")


def handle_options_error(err: PydanticValidationError) -> NoReturn:
    """Report --seed/--locale values GenerationOptions rejected.

    Raises:
        CLIError: Always.
    """
    raise CLIError(f"Invalid generation options:\n{format_pydantic_error(err)}")


def handle_generation_failure(err: GenerationError) -> NoReturn:
    """Report the error carried by a Failure outcome.

    Raises:
        CLIError: Always, naming the error kind and the failing pointer.
    """
    raise CLIError(f"Generation failed: {type(err).__name__}: {err}")


def handle_file_not_found(file_path: str) -> NoReturn:
    """Report a missing schema file.

    Raises:
        CLIError: Always, with EXIT_SYSTEM_ERROR.
    """
    raise CLIError(f"File not found: {file_path}", exit_code=EXIT_SYSTEM_ERROR)


def handle_permission_error(path: str, operation: str = "read") -> NoReturn:
    """Report a file the CLI may not read or write.

    Args:
        path: Offending path.
        operation: "read" for schema files, "write" for --output.

    Raises:
        CLIError: Always, with EXIT_SYSTEM_ERROR.
    """
    raise CLIError(f"Permission denied: Cannot {operation} {path}", exit_code=EXIT_SYSTEM_ERROR)
