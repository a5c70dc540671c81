"""Shared pytest fixtures for floe-mock tests.

Provides structlog configuration, CliRunner fixtures and common schemas.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Generator
from typing import Any

import pytest
import structlog
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Render log events as plain text on stdout, info level and above.

    Tests that assert on debug events lower the level themselves.
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click runner for invoking floe-mock commands in-process."""
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Click runner inside a temporary working directory.

    Yields:
        CliRunner whose cwd is an empty temp directory (for --output files).
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def pet_schema() -> dict[str, Any]:
    """Return an object schema touching every generator path.

    Returns:
        Dictionary representing a Pet JSON Schema.
    """
    return {
        "type": "object",
        "properties": {
            "id": {"type": "string", "format": "uuid"},
            "name": {"type": "string", "minLength": 1, "maxLength": 12},
            "age": {"type": "integer", "minimum": 0, "maximum": 30},
            "weight": {"type": "number", "minimum": 0.5, "maximum": 80},
            "status": {"type": "string", "enum": ["available", "pending", "sold"]},
            "vaccinated": {"type": "boolean"},
            "tags": {
                "type": "array",
                "minItems": 1,
                "maxItems": 3,
                "items": {"type": "string", "x-faker": "lorem.word"},
            },
            "owner": {
                "type": "object",
                "properties": {
                    "email": {"type": "string", "format": "email"},
                    "password": {"type": "string", "writeOnly": True},
                },
                "required": ["email", "password"],
            },
        },
        "required": ["id", "name", "status"],
    }
