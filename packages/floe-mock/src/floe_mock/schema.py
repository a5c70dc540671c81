"""Immutable JSON Schema node model.

This module provides:
- SchemaNode: Frozen Pydantic view over the JSON Schema keywords the
  generator consumes
- child_pointer: JSON pointer construction with RFC 6901 escaping
- find_unresolved_reference: Scan for `$ref` residue left by schema loading

The caller's document is read exactly once, when SchemaNode.from_schema copies
it into fresh containers. Nothing downstream touches the caller's objects,
so read-only mappings (types.MappingProxyType) are accepted as well.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from floe_mock.errors import UnsupportedSchemaError

SCALAR_TYPES = frozenset({"string", "number", "integer", "boolean", "null"})


class SchemaNode(BaseModel):
    """A fragment of a JSON Schema document describing one value.

    Unknown keywords are ignored; the generator is not a validator. Only
    the JSON Schema spellings are read (`writeOnly`, not `write_only`).

    Attributes:
        type: Declared JSON type, or list of types.
        format: Semantic string format (email, uuid, ...).
        properties: Property name to sub-schema.
        required: Names of required properties.
        items: Element schema, or list of schemas for tuple arrays.
        enum: Allowed values.
        const: Single allowed value (see has_const).
        one_of / any_of / all_of: Combinator alternatives.
        write_only: Property must never appear in generated responses.
        x_faker: Raw `x-faker` directive value.
        ref: Unresolved `$ref` value, if loading left one behind.

    Example:
        >>> node = SchemaNode.from_schema({"type": "string", "format": "email"})
        >>> node.primary_type
        'string'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str | list[str] | None = None
    format: str | None = None
    properties: dict[str, SchemaNode] = Field(default_factory=dict)
    required: tuple[str, ...] = ()
    items: SchemaNode | list[SchemaNode] | None = None
    enum: list[Any] | None = None
    const: Any = None
    one_of: list[SchemaNode] | None = Field(default=None, alias="oneOf")
    any_of: list[SchemaNode] | None = Field(default=None, alias="anyOf")
    all_of: list[SchemaNode] | None = Field(default=None, alias="allOf")
    write_only: bool = Field(default=False, alias="writeOnly")
    x_faker: Any = Field(default=None, alias="x-faker")
    ref: str | None = Field(default=None, alias="$ref")
    min_length: int | None = Field(default=None, ge=0, alias="minLength")
    max_length: int | None = Field(default=None, ge=0, alias="maxLength")
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: bool | int | float | None = Field(default=None, alias="exclusiveMinimum")
    exclusive_maximum: bool | int | float | None = Field(default=None, alias="exclusiveMaximum")
    multiple_of: int | float | None = Field(default=None, alias="multipleOf")
    min_items: int | None = Field(default=None, ge=0, alias="minItems")
    max_items: int | None = Field(default=None, ge=0, alias="maxItems")

    @classmethod
    def from_schema(cls, schema: Mapping[str, Any]) -> SchemaNode:
        """Validate a raw schema document into an immutable node tree.

        Args:
            schema: JSON Schema fragment as a mapping.

        Returns:
            Root SchemaNode.

        Raises:
            UnsupportedSchemaError: If the document is not a mapping, is
                cyclic, or holds keyword values of the wrong kind.
        """
        if not isinstance(schema, Mapping):
            raise UnsupportedSchemaError("Schema must be a JSON object")
        try:
            return cls.model_validate(_copy_tree(schema, ()))
        except PydanticValidationError as e:
            first = e.errors()[0]
            loc = ".".join(str(part) for part in first["loc"])
            raise UnsupportedSchemaError(
                f"Schema cannot be read: {first['msg']}",
                keyword=loc or None,
            ) from e

    @property
    def declared_types(self) -> tuple[str, ...]:
        """Declared types as a tuple (empty when `type` is absent)."""
        if self.type is None:
            return ()
        if isinstance(self.type, str):
            return (self.type,)
        return tuple(self.type)

    @property
    def primary_type(self) -> str | None:
        """Type to generate: the first non-null declared type.

        A node declaring only "null" yields "null"; a node without `type`
        yields None.
        """
        types = self.declared_types
        for t in types:
            if t != "null":
                return t
        return "null" if types else None

    @property
    def has_const(self) -> bool:
        """Whether `const` was given explicitly (const may be null)."""
        return "const" in self.model_fields_set

    @property
    def has_directive(self) -> bool:
        """Whether the node carries an `x-faker` directive."""
        return "x_faker" in self.model_fields_set

    @property
    def is_bare_reference(self) -> bool:
        """Whether the node is a `$ref` with nothing else to generate from.

        A directive, `allOf`, `enum`/`const` or `type` next to the reference
        takes precedence over it.
        """
        return (
            self.ref is not None
            and not self.has_directive
            and not self.all_of
            and self.enum is None
            and not self.has_const
            and self.type is None
        )


def _copy_tree(value: Any, path: tuple[int, ...]) -> Any:
    """Copy mappings and sequences into fresh dicts and lists.

    `path` holds the ids of the containers on the way down, so a mapping
    that contains itself is reported instead of recursing forever.
    """
    if isinstance(value, Mapping | list | tuple):
        if id(value) in path:
            raise UnsupportedSchemaError("Schema document is cyclic")
        path = (*path, id(value))
        if isinstance(value, Mapping):
            return {key: _copy_tree(item, path) for key, item in value.items()}
        return [_copy_tree(item, path) for item in value]
    return value


def child_pointer(pointer: str, *tokens: str | int) -> str:
    """Append reference tokens to a JSON pointer.

    Args:
        pointer: Parent pointer ("" for the document root).
        *tokens: Keywords, property names or array indexes.

    Returns:
        Extended pointer with "~" and "/" escaped per RFC 6901.

    Example:
        >>> child_pointer("", "properties", "a/b")
        '/properties/a~1b'
    """
    escaped = (str(t).replace("~", "~0").replace("/", "~1") for t in tokens)
    return pointer + "".join(f"/{t}" for t in escaped)


def iter_children(node: SchemaNode, pointer: str = "") -> Iterator[tuple[SchemaNode, str]]:
    """Yield every direct sub-schema of a node with its pointer."""
    for name, child in node.properties.items():
        yield child, child_pointer(pointer, "properties", name)
    if isinstance(node.items, SchemaNode):
        yield node.items, child_pointer(pointer, "items")
    elif node.items is not None:
        for index, child in enumerate(node.items):
            yield child, child_pointer(pointer, "items", index)
    for keyword, members in (("oneOf", node.one_of), ("anyOf", node.any_of), ("allOf", node.all_of)):
        for index, child in enumerate(members or ()):
            yield child, child_pointer(pointer, keyword, index)


def find_unresolved_reference(node: SchemaNode, pointer: str = "") -> tuple[str, str] | None:
    """Find the first bare `$ref` left in a schema tree.

    Optional properties and untaken combinator branches are scanned too.
    Subtrees under an `x-faker` directive are skipped: the directive
    replaces them.

    Args:
        node: Root of the tree to scan.
        pointer: Pointer of `node` within the document.

    Returns:
        (ref, pointer) of the first unresolved reference, or None.
    """
    if node.has_directive:
        return None
    if node.is_bare_reference:
        return node.ref, pointer
    for child, child_ptr in iter_children(node, pointer):
        found = find_unresolved_reference(child, child_ptr)
        if found is not None:
            return found
    return None
