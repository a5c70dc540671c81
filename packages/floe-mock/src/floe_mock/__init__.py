"""JSON Schema example instance generation for floe-runtime mocks.

This package turns a JSON Schema fragment into a concrete example value,
used to synthesize mock HTTP responses.

Key Components:
- generator: Dispatcher, builders and the generate() entry point
- schema: Immutable SchemaNode model
- formats: Format registry (email, uuid, ip, date, date-time, ...)
- directives: `x-faker` directive resolution
- provider: Faker-backed random value provider
- outcome: Success/Failure result type

Example:
    >>> from floe_mock import generate
    >>>
    >>> outcome = generate({"seed": 42}, {
    ...     "type": "object",
    ...     "properties": {
    ...         "id": {"type": "string", "format": "uuid"},
    ...         "password": {"type": "string", "writeOnly": True},
    ...     },
    ...     "required": ["id", "password"],
    ... })
    >>> sorted(outcome.unwrap())
    ['id']
"""

from __future__ import annotations

from floe_mock.config import GenerationOptions
from floe_mock.errors import (
    DirectiveError,
    GenerationError,
    ResolutionError,
    UnsupportedSchemaError,
)
from floe_mock.generator import InstanceGenerator, generate
from floe_mock.outcome import Failure, Outcome, Success
from floe_mock.provider import ValueProvider
from floe_mock.schema import SchemaNode

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "generate",
    "InstanceGenerator",
    "GenerationOptions",
    "SchemaNode",
    "ValueProvider",
    # Outcome
    "Outcome",
    "Success",
    "Failure",
    # Errors
    "GenerationError",
    "ResolutionError",
    "UnsupportedSchemaError",
    "DirectiveError",
]
