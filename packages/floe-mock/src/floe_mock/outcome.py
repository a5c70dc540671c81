"""Success/failure result of a generation call.

A generation call returns exactly one of Success(value) or Failure(error);
a value is never returned alongside an error.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from floe_mock.errors import GenerationError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A generated instance.

    Example:
        >>> outcome = generate({}, {"type": "boolean"})
        >>> outcome.is_success
        True
        >>> isinstance(outcome.unwrap(), bool)
        True
    """

    value: T

    @property
    def is_success(self) -> Literal[True]:
        return True

    @property
    def is_failure(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Success[U]:
        """Apply a function to the instance."""
        return Success(fn(self.value))


@dataclass(frozen=True)
class Failure:
    """A generation error.

    Example:
        >>> outcome = generate({}, {"$ref": "#/definitions/Missing"})
        >>> outcome.is_failure
        True
        >>> outcome.unwrap()
        Traceback (most recent call last):
        ...
        floe_mock.errors.ResolutionError: Unresolved schema reference: ...
    """

    error: GenerationError

    @property
    def is_success(self) -> Literal[False]:
        return False

    @property
    def is_failure(self) -> Literal[True]:
        return True

    def unwrap(self) -> Any:
        """Raise the wrapped error."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable[[Any], Any]) -> Failure:
        return self


Outcome = Success[Any] | Failure
