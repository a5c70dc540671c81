"""Random-value provider backed by Faker.

The generator core treats this class as an opaque capability set: generic
primitives, format-specific values, and dynamic dispatch by method name for
`x-faker` directives. One provider is created per generation call, so no
random state is shared between calls.
"""

from __future__ import annotations

import base64
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import structlog
from faker import Faker

from floe_mock.config import GenerationOptions

logger = structlog.get_logger(__name__)

# Upper bound for date values when seeded, so a seed reproduces them
DATE_ANCHOR = datetime(2025, 1, 1, tzinfo=timezone.utc)

# Faker proxy attributes that are plumbing, not value capabilities
_NON_CAPABILITIES = frozenset({
    "add_provider",
    "del_arguments",
    "format",
    "get_arguments",
    "get_formatter",
    "get_providers",
    "parse",
    "seed",
    "seed_instance",
    "seed_locale",
    "set_arguments",
    "set_formatter",
})


class ValueProvider:
    """Seeded source of random values for one generation call.

    Attributes:
        options: GenerationOptions the provider was built from
        fake: Faker instance for data generation
        date_anchor: Latest date/time value when seeded, else None (now)

    Example:
        >>> provider = ValueProvider(GenerationOptions(seed=42))
        >>> provider.uuid()  # canonical lower-case UUID v4
        >>> provider.invoke("pyint", kwargs={"min_value": 1, "max_value": 1})
        1
    """

    def __init__(self, options: GenerationOptions | None = None) -> None:
        """Initialize the provider.

        Args:
            options: Generation options; seed and locale are used here
        """
        self.options = options or GenerationOptions()
        self.fake = Faker(self.options.locale)
        if self.options.seed is not None:
            # Instance-level seeding keeps concurrent calls independent
            self.fake.seed_instance(self.options.seed)
        self.date_anchor = DATE_ANCHOR if self.options.seed is not None else None

    # Generic primitives

    def string(self, min_length: int, max_length: int) -> str:
        """Alphabetic string with length in [min_length, max_length]."""
        return self.fake.pystr(min_chars=min_length, max_chars=max_length)

    def integer(self, low: int, high: int) -> int:
        """Integer in [low, high]."""
        return self.fake.random_int(min=low, max=high)

    def number(self, low: float, high: float) -> float:
        """Float in [low, high]."""
        return self.fake.random.uniform(low, high)

    def boolean(self) -> bool:
        return self.fake.pybool()

    def choice(self, values: Sequence[Any]) -> Any:
        """Pick one element of a non-empty sequence."""
        return values[self.fake.random_int(min=0, max=len(values) - 1)]

    def length(self, low: int, high: int) -> int:
        """Collection length in [low, high]."""
        return self.fake.random_int(min=low, max=high)

    # Format-specific values

    def email(self) -> str:
        return self.fake.email()

    def uuid(self) -> str:
        # Faker returns the canonical hyphenated form, never urn:uuid:
        return self.fake.uuid4()

    def ipv4(self) -> str:
        return self.fake.ipv4()

    def ipv6(self) -> str:
        return self.fake.ipv6()

    def date(self) -> str:
        return self.fake.date(end_datetime=self.date_anchor)

    def date_time(self) -> str:
        return self.fake.date_time(tzinfo=timezone.utc, end_datetime=self.date_anchor).isoformat()

    def time(self) -> str:
        return self.fake.time(end_datetime=self.date_anchor)

    def uri(self) -> str:
        return self.fake.uri()

    def hostname(self) -> str:
        return self.fake.hostname()

    def byte(self) -> str:
        """Base64-encoded random bytes."""
        return base64.b64encode(self.fake.binary(length=16)).decode("ascii")

    def password(self) -> str:
        return self.fake.password()

    # Dynamic dispatch

    def has_capability(self, name: str) -> bool:
        """Check whether a Faker provider method with this name exists.

        Args:
            name: Faker method name (e.g., "ipv4", "pyint")

        Returns:
            True if a public provider method of that name is available
        """
        if not name or name.startswith("_") or name in _NON_CAPABILITIES:
            return False
        return any(callable(getattr(p, name, None)) for p in self.fake.get_providers())

    def invoke(
        self,
        name: str,
        args: Sequence[Any] = (),
        kwargs: dict[str, Any] | None = None,
    ) -> Any:
        """Call a Faker provider method by name.

        Args:
            name: Faker method name; must pass has_capability
            args: Positional arguments
            kwargs: Keyword arguments

        Returns:
            Whatever the Faker method returns

        Raises:
            AttributeError: If the method does not exist
            TypeError: If the arguments do not fit the method
            ValueError: If Faker rejects the argument values
        """
        if not self.has_capability(name):
            msg = f"Unknown value provider capability: {name}"
            raise AttributeError(msg)
        logger.debug("capability_invoked", capability=name, args=len(args), kwargs=sorted(kwargs or {}))
        return getattr(self.fake, name)(*args, **(kwargs or {}))
