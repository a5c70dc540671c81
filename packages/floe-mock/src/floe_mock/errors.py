"""Custom exceptions for floe-mock.

This module defines the exception hierarchy:
- GenerationError (base)
- ResolutionError
- UnsupportedSchemaError
- DirectiveError

Every error carries the JSON pointer of the schema node that failed, so a
caller can report which part of a document could not be mocked.
"""

from __future__ import annotations

__all__ = [
    "GenerationError",
    "ResolutionError",
    "UnsupportedSchemaError",
    "DirectiveError",
]


class GenerationError(Exception):
    """Base exception for all instance generation failures.

    Attributes:
        message: Human-readable error description.
        pointer: JSON pointer of the failing schema node ("" for the root).
        details: Optional additional context about the error.

    Example:
        >>> outcome = generate({}, schema)
        >>> if outcome.is_failure:
        ...     print(f"Cannot mock response: {outcome.error}")
    """

    def __init__(
        self,
        message: str,
        *,
        pointer: str = "",
        details: dict[str, str] | None = None,
    ) -> None:
        """Initialize GenerationError.

        Args:
            message: Human-readable error description.
            pointer: JSON pointer of the failing schema node.
            details: Optional additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.pointer = pointer
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with pointer and details if present."""
        parts = [f"pointer={self.pointer or '/'}"]
        parts.extend(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({', '.join(parts)})"


class ResolutionError(GenerationError):
    """The schema still holds a reference that was never dereferenced.

    Raised when a `$ref` survives schema loading, typically because it
    points outside the document handed to the generator.

    Example:
        >>> try:
        ...     generate_instance(options, node)
        ... except ResolutionError as e:
        ...     print(f"Dangling reference: {e.ref}")
    """

    def __init__(
        self,
        ref: str,
        *,
        pointer: str = "",
        message: str | None = None,
    ) -> None:
        """Initialize ResolutionError.

        Args:
            ref: The unresolved reference value.
            pointer: JSON pointer of the node holding the reference.
            message: Optional custom error message.
        """
        msg = message or f"Unresolved schema reference: {ref}"
        super().__init__(msg, pointer=pointer, details={"ref": ref})
        self.ref = ref


class UnsupportedSchemaError(GenerationError):
    """The schema node carries nothing the generator can build a value from.

    Raised when:
    - A node has no type, combinator, enum or structural keyword
    - A declared type is not a JSON Schema type
    - Constraints contradict each other (e.g., minimum > maximum)
    - The document cannot be read as a schema at all
    """

    def __init__(
        self,
        reason: str,
        *,
        pointer: str = "",
        keyword: str | None = None,
    ) -> None:
        """Initialize UnsupportedSchemaError.

        Args:
            reason: Why no value can be generated.
            pointer: JSON pointer of the offending node.
            keyword: The schema keyword involved, if any.
        """
        details: dict[str, str] = {}
        if keyword:
            details["keyword"] = keyword
        super().__init__(reason, pointer=pointer, details=details)
        self.reason = reason
        self.keyword = keyword


class DirectiveError(GenerationError):
    """An `x-faker` directive cannot be carried out.

    Raised when:
    - The directive names a capability the value provider does not have
    - The directive value has a shape that is neither a path, a named
      argument mapping, nor a positional argument list
    - The capability rejects the supplied arguments

    Example:
        >>> try:
        ...     resolver.resolve({"internet.nope": []}, pointer="/properties/ip")
        ... except DirectiveError as e:
        ...     print(f"Bad directive {e.path}: {e}")
    """

    def __init__(
        self,
        message: str = "Directive cannot be resolved",
        *,
        path: str | None = None,
        pointer: str = "",
        cause: str | None = None,
    ) -> None:
        """Initialize DirectiveError.

        Args:
            message: Human-readable error description.
            path: The capability path named by the directive.
            pointer: JSON pointer of the node carrying the directive.
            cause: The underlying cause of the failure.
        """
        details: dict[str, str] = {}
        if path:
            details["path"] = path
        if cause:
            details["cause"] = cause
        super().__init__(message, pointer=pointer, details=details)
        self.path = path
        self.cause = cause
