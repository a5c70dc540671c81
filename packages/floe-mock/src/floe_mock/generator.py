"""Schema-to-instance generation.

This module provides:
- InstanceGenerator: Dispatcher, primitive builders, object and array composers
- generate: Entry point wrapping a whole call into a single Outcome

Generation is a read-only recursive walk over an immutable SchemaNode tree.
Builders raise GenerationError subclasses; generate() is the only place an
error becomes a Failure, so the first error aborts the whole call and no
partial instance ever escapes.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

import structlog

from floe_mock.config import GenerationOptions
from floe_mock.directives import DirectiveResolver
from floe_mock.errors import GenerationError, ResolutionError, UnsupportedSchemaError
from floe_mock.formats import get_format_strategy
from floe_mock.observability import timed
from floe_mock.outcome import Failure, Outcome, Success
from floe_mock.provider import ValueProvider
from floe_mock.schema import SCALAR_TYPES, SchemaNode, child_pointer, find_unresolved_reference

logger = structlog.get_logger(__name__)

# Range used for numbers without bounds
DEFAULT_MINIMUM = 0
DEFAULT_MAXIMUM = 9999
DEFAULT_SPAN = DEFAULT_MAXIMUM - DEFAULT_MINIMUM


class InstanceGenerator:
    """Builds example instances from schema nodes.

    One generator serves one call: it owns a freshly seeded provider and
    holds no other state.

    Attributes:
        options: GenerationOptions for the call
        provider: ValueProvider supplying random values
        directives: DirectiveResolver for `x-faker` nodes

    Example:
        >>> node = SchemaNode.from_schema({"type": "integer", "minimum": 5, "maximum": 5})
        >>> InstanceGenerator(GenerationOptions(seed=42)).generate(node)
        5
    """

    def __init__(
        self,
        options: GenerationOptions | None = None,
        provider: ValueProvider | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            options: Generation options (default: GenerationOptions())
            provider: Value provider (default: one built from options)
        """
        self.options = options or GenerationOptions()
        self.provider = provider or ValueProvider(self.options)
        self.directives = DirectiveResolver(self.provider)

    def generate(self, node: SchemaNode, pointer: str = "") -> Any:
        """Generate a value for a node, dispatching on its shape.

        Args:
            node: Schema node to satisfy
            pointer: JSON pointer of the node within the document

        Returns:
            JSON-compatible value

        Raises:
            DirectiveError: If the node's directive cannot be carried out
            ResolutionError: If the node is an unresolved reference
            UnsupportedSchemaError: If nothing usable is declared
        """
        if node.has_directive:
            return self.directives.resolve(node.x_faker, pointer=pointer)
        if node.all_of:
            return self.generate(_merge_all_of(node), pointer)
        if node.enum is not None or node.has_const:
            return self._pick_literal(node, pointer)

        kind = node.primary_type
        if kind == "object":
            return self.build_object(node, pointer)
        if kind == "array":
            return self.build_array(node, pointer)
        if kind in SCALAR_TYPES:
            return self.build_primitive(node, kind, pointer)
        if kind is not None:
            raise UnsupportedSchemaError(
                f"Unsupported schema type: {kind}", pointer=pointer, keyword="type"
            )

        if node.ref is not None:
            raise ResolutionError(node.ref, pointer=pointer)
        if node.one_of:
            return self._pick_alternative(node.one_of, "oneOf", pointer)
        if node.any_of:
            return self._pick_alternative(node.any_of, "anyOf", pointer)
        if node.properties:
            return self.build_object(node, pointer)
        if node.items is not None:
            return self.build_array(node, pointer)
        raise UnsupportedSchemaError("Schema node has no usable type information", pointer=pointer)

    # Primitive builders

    def build_primitive(self, node: SchemaNode, kind: str, pointer: str) -> Any:
        """Generate a scalar of the given kind."""
        if kind == "string":
            return self._build_string(node, pointer)
        if kind == "integer":
            return self._build_integer(node, pointer)
        if kind == "number":
            return self._build_number(node, pointer)
        if kind == "boolean":
            return self.provider.boolean()
        if kind == "null":
            return None
        raise UnsupportedSchemaError(
            f"Unsupported scalar type: {kind}", pointer=pointer, keyword="type"
        )

    def _build_string(self, node: SchemaNode, pointer: str) -> str:
        strategy = get_format_strategy(node.format)
        if strategy is not None:
            return strategy(self.provider)
        if node.format is not None:
            logger.debug("format_not_registered", format=node.format, pointer=pointer)

        if node.max_length is not None:
            high = node.max_length
        else:
            high = max(node.min_length or 0, self.options.default_max_string_length)
        low = node.min_length if node.min_length is not None else min(1, high)
        if low > high:
            raise UnsupportedSchemaError(
                "minLength exceeds maxLength", pointer=pointer, keyword="minLength"
            )
        return self.provider.string(low, high)

    def _build_integer(self, node: SchemaNode, pointer: str) -> int:
        low, high, exclusive_low, exclusive_high = _numeric_bounds(node)
        lowest = math.ceil(low)
        if exclusive_low and lowest == low:
            lowest += 1
        highest = math.floor(high)
        if exclusive_high and highest == high:
            highest -= 1

        if node.multiple_of is not None:
            step = node.multiple_of
            if not math.isfinite(step) or step <= 0 or not float(step).is_integer():
                raise UnsupportedSchemaError(
                    "Integer multipleOf must be a positive whole number",
                    pointer=pointer,
                    keyword="multipleOf",
                )
            step = int(step)
            k_low, k_high = -(-lowest // step), highest // step
            if k_low > k_high:
                raise UnsupportedSchemaError(
                    "No multiple of multipleOf within bounds", pointer=pointer, keyword="multipleOf"
                )
            return self.provider.integer(k_low, k_high) * step

        if lowest > highest:
            raise UnsupportedSchemaError(
                "minimum exceeds maximum", pointer=pointer, keyword="minimum"
            )
        return self.provider.integer(lowest, highest)

    def _build_number(self, node: SchemaNode, pointer: str) -> float:
        low, high, exclusive_low, exclusive_high = _numeric_bounds(node)

        if node.multiple_of is not None:
            if not math.isfinite(node.multiple_of) or node.multiple_of <= 0:
                raise UnsupportedSchemaError(
                    "multipleOf must be a positive finite number",
                    pointer=pointer,
                    keyword="multipleOf",
                )
            # Decimal keeps 0.3 / 0.1 == 3
            step = Decimal(str(node.multiple_of))
            d_low, d_high = Decimal(str(low)), Decimal(str(high))
            k_low = math.ceil(d_low / step)
            if exclusive_low and k_low * step == d_low:
                k_low += 1
            k_high = math.floor(d_high / step)
            if exclusive_high and k_high * step == d_high:
                k_high -= 1
            if k_low > k_high:
                raise UnsupportedSchemaError(
                    "No multiple of multipleOf within bounds", pointer=pointer, keyword="multipleOf"
                )
            return float(self.provider.integer(k_low, k_high) * step)

        if low > high or (low == high and (exclusive_low or exclusive_high)):
            raise UnsupportedSchemaError(
                "minimum exceeds maximum", pointer=pointer, keyword="minimum"
            )
        value = round(self.provider.number(low, high), 2)
        if (
            value < low
            or value > high
            or (exclusive_low and value == low)
            or (exclusive_high and value == high)
        ):
            # Rounding pushed the value out of a narrow range
            value = (low + high) / 2
        return float(value)

    def _pick_literal(self, node: SchemaNode, pointer: str) -> Any:
        if node.has_const:
            return node.const
        if not node.enum:
            raise UnsupportedSchemaError("enum has no values", pointer=pointer, keyword="enum")
        return self.provider.choice(node.enum)

    def _pick_alternative(self, alternatives: list[SchemaNode], keyword: str, pointer: str) -> Any:
        index = self.provider.length(0, len(alternatives) - 1)
        return self.generate(alternatives[index], child_pointer(pointer, keyword, index))

    # Composers

    def build_object(self, node: SchemaNode, pointer: str) -> dict[str, Any]:
        """Generate an object from a node's properties.

        Required properties are always generated; optional ones only when
        options.fill_properties is set. Write-only properties never appear,
        even when required.

        Args:
            node: Object schema node
            pointer: JSON pointer of the node

        Returns:
            Mapping of property name to generated value
        """
        instance: dict[str, Any] = {}
        required = set(node.required)
        for name, child in node.properties.items():
            if child.write_only:
                continue
            if name not in required and not self.options.fill_properties:
                continue
            instance[name] = self.generate(child, child_pointer(pointer, "properties", name))

        # Required names without a property schema still get a value
        for name in node.required:
            if name not in node.properties and name not in instance:
                instance[name] = self.provider.string(1, self.options.default_max_string_length)
        return instance

    def build_array(self, node: SchemaNode, pointer: str) -> list[Any]:
        """Generate an array from a node's items schema.

        A list-valued `items` (tuple form) yields one element per listed
        schema, capped by maxItems and padded with generic strings up to
        minItems. Otherwise the length comes from
        minItems/maxItems, or options.default_array_length when neither is set.

        Args:
            node: Array schema node
            pointer: JSON pointer of the node

        Returns:
            List of generated elements
        """
        if isinstance(node.items, list):
            schemas = node.items
            if node.max_items is not None:
                schemas = schemas[: node.max_items]
            elements = [
                self.generate(child, child_pointer(pointer, "items", index))
                for index, child in enumerate(schemas)
            ]
            missing = (node.min_items or 0) - len(elements)
            if missing > 0:
                if node.max_items is not None and node.min_items > node.max_items:
                    raise UnsupportedSchemaError(
                        "minItems exceeds maxItems", pointer=pointer, keyword="minItems"
                    )
                # Positions past the tuple accept any value
                elements.extend(
                    self.provider.string(1, self.options.default_max_string_length)
                    for _ in range(missing)
                )
            return elements

        length = self._array_length(node, pointer)
        if node.items is None:
            return [
                self.provider.string(1, self.options.default_max_string_length)
                for _ in range(length)
            ]
        items_pointer = child_pointer(pointer, "items")
        return [self.generate(node.items, items_pointer) for _ in range(length)]

    def _array_length(self, node: SchemaNode, pointer: str) -> int:
        if node.min_items is None and node.max_items is None:
            return self.options.default_array_length
        low = node.min_items or 0
        if node.max_items is not None:
            high = node.max_items
        else:
            high = max(low, self.options.default_array_length)
        if low > high:
            raise UnsupportedSchemaError(
                "minItems exceeds maxItems", pointer=pointer, keyword="minItems"
            )
        return self.provider.length(low, high)


def _numeric_bounds(node: SchemaNode) -> tuple[float, float, bool, bool]:
    """Effective (low, high, exclusive_low, exclusive_high) for a numeric node.

    Handles both the boolean (draft 4) and numeric (draft 6+) forms of
    exclusiveMinimum/exclusiveMaximum. Missing or non-finite bounds (YAML
    `.inf`) default to DEFAULT_MINIMUM..DEFAULT_MAXIMUM, shifted when only
    one side is given.
    """
    low, high = _finite(node.minimum), _finite(node.maximum)
    exclusive_low = node.exclusive_minimum is True and low is not None
    exclusive_high = node.exclusive_maximum is True and high is not None

    excl_min = _finite(node.exclusive_minimum)
    if excl_min is not None and (low is None or excl_min >= low):
        low, exclusive_low = excl_min, True
    excl_max = _finite(node.exclusive_maximum)
    if excl_max is not None and (high is None or excl_max <= high):
        high, exclusive_high = excl_max, True

    if low is None and high is None:
        return DEFAULT_MINIMUM, DEFAULT_MAXIMUM, False, False
    if low is None:
        low = DEFAULT_MINIMUM if high >= DEFAULT_MINIMUM else high - DEFAULT_SPAN
        exclusive_low = False
    if high is None:
        high = DEFAULT_MAXIMUM if low <= DEFAULT_MAXIMUM else low + DEFAULT_SPAN
        exclusive_high = False
    return low, high, exclusive_low, exclusive_high


def _finite(value: bool | int | float | None) -> int | float | None:
    """A numeric bound, or None for absent, boolean-form and non-finite values."""
    if value is None or isinstance(value, bool) or not math.isfinite(value):
        return None
    return value


def _merge_all_of(node: SchemaNode) -> SchemaNode:
    """Fold allOf members into their parent node.

    Properties and required names are unioned; any other keyword is taken
    from the parent, else from the first member declaring it. Members with
    their own allOf are folded first.
    """
    merged = node.model_copy(update={"all_of": None})
    for member in node.all_of or ():
        if member.all_of:
            member = _merge_all_of(member)
        update: dict[str, Any] = {}
        for name in member.model_fields_set:
            if name == "properties":
                update["properties"] = {**merged.properties, **member.properties}
            elif name == "required":
                extra = tuple(r for r in member.required if r not in merged.required)
                update["required"] = (*merged.required, *extra)
            elif name not in merged.model_fields_set:
                update[name] = getattr(member, name)
        merged = merged.model_copy(update=update)
    return merged


def generate(
    options: GenerationOptions | Mapping[str, Any] | None,
    schema: Mapping[str, Any],
) -> Outcome:
    """Generate an example instance for a JSON Schema document.

    The schema is read, never written: read-only mappings are accepted.

    Args:
        options: Generation options, a mapping of option fields, or None
            ({} and None both mean defaults)
        schema: JSON Schema fragment, already dereferenced by the caller

    Returns:
        Success(instance) or Failure(error) for the first ResolutionError,
        UnsupportedSchemaError or DirectiveError encountered

    Raises:
        pydantic.ValidationError: If options holds unknown or invalid fields

    Example:
        >>> outcome = generate({"seed": 42}, {
        ...     "type": "object",
        ...     "properties": {"id": {"type": "string", "format": "uuid"}},
        ...     "required": ["id"],
        ... })
        >>> outcome.unwrap()["id"]  # canonical UUID string
    """
    opts = GenerationOptions.from_value(options)
    with timed("generation_completed", logger=logger, seed=opts.seed) as fields:
        try:
            node = SchemaNode.from_schema(schema)
            unresolved = find_unresolved_reference(node)
            if unresolved is not None:
                ref, pointer = unresolved
                raise ResolutionError(ref, pointer=pointer)
            instance = InstanceGenerator(opts).generate(node)
        except GenerationError as e:
            logger.info(
                "generation_failed",
                error_type=type(e).__name__,
                reason=e.message,
                pointer=e.pointer or "/",
            )
            fields["outcome"] = "failure"
            return Failure(e)
        fields["outcome"] = "success"
    return Success(instance)
