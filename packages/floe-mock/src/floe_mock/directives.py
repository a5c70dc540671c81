"""`x-faker` directive parsing and resolution.

A directive names a value provider capability and, optionally, its arguments:

    x-faker: internet.ip                         # no arguments
    x-faker: {random.number: {min: 1, max: 9}}   # named arguments
    x-faker: {helpers.slugify: [two words]}      # positional arguments

Capability paths follow the dotted faker.js naming that OpenAPI documents
commonly carry. Paths needing a different Faker method, renamed keyword
arguments, or positional binding are listed in CAPABILITIES; any other path
resolves to the Faker method named by its last segment in snake_case.
"""

from __future__ import annotations

import base64
import re
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from types import MappingProxyType
from typing import Any

import structlog

from floe_mock.errors import DirectiveError
from floe_mock.provider import ValueProvider

logger = structlog.get_logger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class NoArguments:
    """Directive given as a bare capability path."""


@dataclass(frozen=True)
class PositionalArguments:
    """Directive arguments given as an ordered list."""

    values: tuple[Any, ...]


@dataclass(frozen=True)
class NamedArguments:
    """Directive arguments given as a name-to-value mapping."""

    values: Mapping[str, Any]


DirectiveArguments = NoArguments | PositionalArguments | NamedArguments


@dataclass(frozen=True)
class Directive:
    """A parsed `x-faker` directive.

    Attributes:
        path: Dotted capability path (e.g., "internet.ip")
        arguments: One of NoArguments, PositionalArguments, NamedArguments
    """

    path: str
    arguments: DirectiveArguments = field(default_factory=NoArguments)


@dataclass(frozen=True)
class Capability:
    """How a capability path maps onto a Faker method.

    Attributes:
        method: Faker provider method name
        renames: Named argument renames (faker.js name -> Faker keyword)
        positional: Keyword names positional values bind to, in order.
            None passes positional values straight through.
    """

    method: str
    renames: Mapping[str, str] = field(default_factory=dict)
    positional: tuple[str, ...] | None = None

    def bind(
        self, arguments: DirectiveArguments, *, path: str, pointer: str
    ) -> tuple[tuple[Any, ...], dict[str, Any]]:
        """Turn directive arguments into call arguments.

        Returns:
            (args, kwargs) for ValueProvider.invoke

        Raises:
            DirectiveError: If more positional values are given than the
                capability binds
        """
        if isinstance(arguments, NoArguments):
            return (), {}
        if isinstance(arguments, NamedArguments):
            return (), {self.renames.get(k, k): v for k, v in arguments.values.items()}
        if self.positional is None:
            return arguments.values, {}
        if len(arguments.values) > len(self.positional):
            raise DirectiveError(
                f"Capability accepts at most {len(self.positional)} positional arguments",
                path=path,
                pointer=pointer,
            )
        names = self.positional[: len(arguments.values)]
        return (), dict(zip(names, arguments.values, strict=True))


_NUMBER_RANGE = MappingProxyType({"min": "min_value", "max": "max_value", "precision": "step"})
_FLOAT_RANGE = MappingProxyType({"min": "min_value", "max": "max_value"})

CAPABILITIES: MappingProxyType[str, Capability] = MappingProxyType({
    # internet
    "internet.ip": Capability("ipv4"),
    "internet.exampleEmail": Capability("safe_email"),
    "internet.mac": Capability("mac_address"),
    # numbers
    "random.number": Capability("pyint", _NUMBER_RANGE, ("max_value",)),
    "datatype.number": Capability("pyint", _NUMBER_RANGE, ("max_value",)),
    "number.int": Capability("pyint", _NUMBER_RANGE, ("max_value",)),
    "random.float": Capability("pyfloat", _FLOAT_RANGE),
    "datatype.float": Capability("pyfloat", _FLOAT_RANGE),
    "number.float": Capability("pyfloat", _FLOAT_RANGE),
    "finance.amount": Capability(
        "pydecimal",
        {"min": "min_value", "max": "max_value", "dec": "right_digits"},
        ("min_value", "max_value", "right_digits"),
    ),
    # identifiers and primitives
    "random.uuid": Capability("uuid4"),
    "datatype.uuid": Capability("uuid4"),
    "string.uuid": Capability("uuid4"),
    "random.boolean": Capability("pybool"),
    "datatype.boolean": Capability("pybool"),
    "random.arrayElement": Capability("random_element", positional=("elements",)),
    "helpers.arrayElement": Capability("random_element", positional=("elements",)),
    # text helpers
    "helpers.slugify": Capability("slug", positional=("value",)),
    "helpers.replaceSymbols": Capability("bothify", positional=("text",)),
    # people, places, companies
    "name.findName": Capability("name"),
    "name.fullName": Capability("name"),
    "person.fullName": Capability("name"),
    "name.jobTitle": Capability("job"),
    "person.jobTitle": Capability("job"),
    "address.zipCode": Capability("postcode"),
    "location.zipCode": Capability("postcode"),
    "company.companyName": Capability("company"),
    "company.name": Capability("company"),
    # dates
    "date.past": Capability("past_datetime"),
    "date.future": Capability("future_datetime"),
    "date.recent": Capability("date_time_this_month"),
})


def parse_directive(raw: Any, *, pointer: str = "") -> Directive:
    """Parse a raw `x-faker` value into a Directive.

    The argument shape is decided by the kind of the argument value alone:
    a mapping means named arguments, a list means positional arguments.

    Args:
        raw: The `x-faker` value from the schema
        pointer: JSON pointer of the node carrying the directive

    Returns:
        Parsed Directive

    Raises:
        DirectiveError: If the value has any other shape
    """
    if isinstance(raw, str):
        return Directive(path=raw)
    if not isinstance(raw, Mapping):
        raise DirectiveError(
            "Directive must be a capability path or a single-key mapping",
            pointer=pointer,
            cause=f"got {type(raw).__name__}",
        )
    if len(raw) != 1:
        raise DirectiveError(
            "Directive mapping must hold exactly one capability path",
            pointer=pointer,
            cause=f"got {len(raw)} keys",
        )
    ((path, value),) = raw.items()
    if not isinstance(path, str):
        raise DirectiveError("Directive capability path must be a string", pointer=pointer)
    if isinstance(value, Mapping):
        if not all(isinstance(k, str) for k in value):
            raise DirectiveError("Named argument names must be strings", path=path, pointer=pointer)
        return Directive(path=path, arguments=NamedArguments(dict(value)))
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        return Directive(path=path, arguments=PositionalArguments(tuple(value)))
    raise DirectiveError(
        "Directive arguments must be a mapping or a list",
        path=path,
        pointer=pointer,
        cause=f"got {type(value).__name__}",
    )


def to_json_value(value: Any) -> Any:
    """Convert a provider value into a JSON-compatible value.

    datetime/date/time become ISO-8601 strings, Decimal becomes float,
    UUID becomes its canonical string, bytes become base64 text, and
    tuples and sets become lists.
    """
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, Mapping):
        return {str(k): to_json_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [to_json_value(v) for v in value]
    return str(value)


class DirectiveResolver:
    """Resolves `x-faker` directives against a value provider.

    Attributes:
        provider: ValueProvider the capabilities run on
        capabilities: Capability table keyed by dotted path

    Example:
        >>> resolver = DirectiveResolver(ValueProvider(GenerationOptions(seed=1)))
        >>> resolver.resolve({"random.number": {"min": 42, "max": 42}})
        42
    """

    def __init__(
        self,
        provider: ValueProvider,
        capabilities: Mapping[str, Capability] = CAPABILITIES,
    ) -> None:
        self.provider = provider
        self.capabilities = capabilities

    def lookup(self, path: str, *, pointer: str = "") -> Capability:
        """Find the capability a path names.

        Args:
            path: Dotted capability path
            pointer: JSON pointer of the node carrying the directive

        Returns:
            Capability for the path

        Raises:
            DirectiveError: If neither the table nor the provider knows the path
        """
        if path in self.capabilities:
            return self.capabilities[path]
        method = _CAMEL_BOUNDARY.sub("_", path.rsplit(".", 1)[-1]).lower()
        if self.provider.has_capability(method):
            return Capability(method)
        raise DirectiveError(
            f"Unknown directive capability: {path}",
            path=path,
            pointer=pointer,
        )

    def resolve(self, raw: Any, *, pointer: str = "") -> Any:
        """Produce a value for a raw `x-faker` directive.

        Args:
            raw: The `x-faker` value from the schema
            pointer: JSON pointer of the node carrying the directive

        Returns:
            JSON-compatible value produced by the capability

        Raises:
            DirectiveError: If the directive is malformed, unknown, or its
                arguments are rejected
        """
        directive = parse_directive(raw, pointer=pointer)
        capability = self.lookup(directive.path, pointer=pointer)
        args, kwargs = capability.bind(directive.arguments, path=directive.path, pointer=pointer)
        try:
            value = self.provider.invoke(capability.method, args, kwargs)
        except Exception as e:
            # Faker raises whatever the arguments provoke, e.g. IndexError or OverflowError
            raise DirectiveError(
                "Directive arguments rejected by capability",
                path=directive.path,
                pointer=pointer,
                cause=str(e),
            ) from e
        logger.debug("directive_resolved", path=directive.path, pointer=pointer)
        return to_json_value(value)
