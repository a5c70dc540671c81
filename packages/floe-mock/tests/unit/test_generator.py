"""Unit tests for schema-to-instance generation.

Tests cover:
- Format-aware and generic strings
- x-faker directives in named and positional form
- Unresolved references and other failures
- writeOnly filtering and read-only schema input
- Numeric, string and array constraints
- Combinators and deterministic seeding
"""

from __future__ import annotations

import copy
import re
from types import MappingProxyType
from typing import Any

import pytest

from floe_mock import (
    DirectiveError,
    Failure,
    GenerationOptions,
    InstanceGenerator,
    ResolutionError,
    SchemaNode,
    Success,
    UnsupportedSchemaError,
    generate,
)

pytestmark = pytest.mark.unit

IP_RE = re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b")
EMAIL_RE = re.compile(
    r"""^(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))@"""
    r"""((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"""
)
UUID_RE = re.compile(r"^[0-9a-f]{8}-(?:[0-9a-f]{4}-){3}[0-9a-f]{12}$")


def object_with(name: str, prop: dict[str, Any]) -> dict[str, Any]:
    """Wrap a property schema in a required-property object schema."""
    return {"type": "object", "properties": {name: prop}, "required": [name]}


def generated(schema: dict[str, Any], **options: Any) -> Any:
    """Generate and unwrap, failing the test on Failure."""
    outcome = generate(options, schema)
    assert isinstance(outcome, Success), f"unexpected failure: {outcome}"
    return outcome.value


def failure_of(schema: Any, **options: Any) -> Exception:
    """Generate and return the error, failing the test on Success."""
    outcome = generate(options, schema)
    assert isinstance(outcome, Failure), f"unexpected success: {outcome}"
    return outcome.error


class TestStrings:
    """Tests for string generation and the format registry."""

    def test_plain_string_matches_no_known_format(self) -> None:
        """Generic strings look like neither an email nor an IP address."""
        for seed in range(25):
            instance = generated(object_with("name", {"type": "string", "minLength": 1}), seed=seed)
            name = instance["name"]
            assert isinstance(name, str)
            assert len(name) >= 1
            assert not IP_RE.search(name)
            assert not EMAIL_RE.match(name)

    def test_email_format(self) -> None:
        """format: email produces an email address."""
        for seed in range(10):
            email = generated(object_with("email", {"type": "string", "format": "email"}), seed=seed)[
                "email"
            ]
            assert EMAIL_RE.match(email)
            assert not IP_RE.search(email)

    def test_uuid_format(self) -> None:
        """format: uuid produces a canonical UUID, never a URN."""
        for seed in range(10):
            value = generated(object_with("id", {"type": "string", "format": "uuid"}), seed=seed)["id"]
            assert UUID_RE.match(value)
            assert not value.startswith("urn:uuid:")

    def test_ip_format(self) -> None:
        """format: ip produces an IPv4 dotted quad."""
        value = generated({"type": "string", "format": "ip"})
        assert IP_RE.fullmatch(value)

    def test_date_formats(self) -> None:
        """date and date-time formats produce ISO-8601 strings."""
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", generated({"type": "string", "format": "date"}))
        date_time = generated({"type": "string", "format": "date-time"})
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", date_time)
        assert date_time.endswith("+00:00")

    def test_unknown_format_falls_back_to_generic_string(self) -> None:
        """Unknown formats are not errors."""
        value = generated({"type": "string", "format": "made-up", "maxLength": 4})
        assert isinstance(value, str)
        assert 1 <= len(value) <= 4

    def test_length_constraints(self) -> None:
        """minLength/maxLength are respected."""
        assert len(generated({"type": "string", "minLength": 7, "maxLength": 7})) == 7
        assert generated({"type": "string", "maxLength": 0}) == ""
        assert len(generated({"type": "string", "minLength": 40})) == 40

    def test_contradictory_length_fails(self) -> None:
        """minLength above maxLength cannot be satisfied."""
        error = failure_of({"type": "string", "minLength": 5, "maxLength": 2})
        assert isinstance(error, UnsupportedSchemaError)
        assert error.keyword == "minLength"


class TestDirectives:
    """Tests for x-faker directives."""

    def test_path_directive(self) -> None:
        """A bare path invokes the capability without arguments."""
        ip = generated(object_with("ip", {"type": "string", "format": "ip", "x-faker": "internet.ip"}))[
            "ip"
        ]
        assert IP_RE.search(ip)
        assert not EMAIL_RE.match(ip)

    def test_named_parameters(self) -> None:
        """A mapping argument is passed as named parameters."""
        schema = object_with("meaning", {"type": "number", "x-faker": {"random.number": {"min": 42, "max": 42}}})
        assert generated(schema)["meaning"] == 42

    def test_positional_parameters(self) -> None:
        """A list argument is passed as positional parameters."""
        schema = object_with("slug", {"type": "string", "x-faker": {"helpers.slugify": ["two words"]}})
        assert generated(schema)["slug"] == "two-words"

    def test_directive_overrides_declared_type(self) -> None:
        """The directive wins over type and format."""
        value = generated({"type": "integer", "format": "int32", "x-faker": "internet.ip"})
        assert IP_RE.fullmatch(value)

    def test_directive_overrides_object_structure(self) -> None:
        """A directive on an object node replaces property generation."""
        schema = {
            "type": "object",
            "properties": {"a": {"type": "string"}},
            "x-faker": {"random.number": {"min": 1, "max": 1}},
        }
        assert generated(schema) == 1

    def test_snake_case_fallback(self) -> None:
        """Paths outside the capability table resolve by method name."""
        value = generated({"type": "string", "x-faker": "name.firstName"})
        assert isinstance(value, str)
        assert value

    def test_datetime_values_become_strings(self) -> None:
        """Non-JSON provider values are converted."""
        value = generated({"type": "string", "x-faker": "date.past"})
        assert isinstance(value, str)
        assert re.match(r"^\d{4}-\d{2}-\d{2}T", value)

    def test_unknown_capability_fails(self) -> None:
        """Unknown paths fail instead of falling back."""
        error = failure_of(object_with("x", {"type": "string", "x-faker": "internet.doesNotExist"}))
        assert isinstance(error, DirectiveError)
        assert error.path == "internet.doesNotExist"
        assert error.pointer == "/properties/x"

    def test_scalar_argument_fails(self) -> None:
        """Arguments must be a mapping or a list."""
        error = failure_of({"type": "number", "x-faker": {"random.number": 5}})
        assert isinstance(error, DirectiveError)

    def test_rejected_arguments_fail(self) -> None:
        """Arguments the capability does not accept surface as DirectiveError."""
        error = failure_of({"type": "number", "x-faker": {"random.number": {"bogus": 1}}})
        assert isinstance(error, DirectiveError)
        assert error.cause

    @pytest.mark.parametrize(
        "directive",
        [
            {"helpers.arrayElement": [[]]},
            {"lorem.words": [10**30]},
        ],
    )
    def test_any_capability_exception_fails(self, directive: dict[str, Any]) -> None:
        """Exceptions other than argument errors still end up in a Failure."""
        error = failure_of({"type": "string", "x-faker": directive})
        assert isinstance(error, DirectiveError)
        assert error.cause is not None


class TestReferences:
    """Tests for unresolved reference detection."""

    def test_unresolved_reference_fails(self) -> None:
        """A $ref left by loading makes the whole call fail."""
        schema = {
            "type": "object",
            "properties": {"_embedded": {"$ref": "#/definitions/supermodelIoAdidasApiHAL"}},
        }
        error = failure_of(schema)
        assert isinstance(error, ResolutionError)
        assert error.ref == "#/definitions/supermodelIoAdidasApiHAL"
        assert error.pointer == "/properties/_embedded"

    def test_reference_in_optional_property_fails_even_when_not_filled(self) -> None:
        """References are detected whether or not the property is generated."""
        schema = {"type": "object", "properties": {"link": {"$ref": "other.json#/Link"}}}
        assert isinstance(failure_of(schema, fill_properties=False), ResolutionError)

    def test_reference_inside_array_items(self) -> None:
        error = failure_of({"type": "array", "items": {"$ref": "#/defs/Item"}})
        assert isinstance(error, ResolutionError)
        assert error.pointer == "/items"

    def test_directive_takes_precedence_over_reference(self) -> None:
        value = generated({"x-faker": "internet.ip", "$ref": "#/x"})
        assert IP_RE.fullmatch(value)

    def test_type_takes_precedence_over_reference(self) -> None:
        assert generated({"type": "integer", "minimum": 1, "maximum": 1, "$ref": "#/x"}) == 1

    def test_reference_below_directive_is_never_reached(self) -> None:
        schema = {
            "type": "object",
            "properties": {"p": {"x-faker": "internet.ip", "items": {"$ref": "#/x"}}},
            "required": ["p"],
        }
        assert IP_RE.fullmatch(generated(schema)["p"])

    def test_dispatcher_reports_reference_node(self) -> None:
        """A bare reference node reaching the dispatcher is a ResolutionError."""
        node = SchemaNode.from_schema({"$ref": "#/defs/Thing"})
        with pytest.raises(ResolutionError):
            InstanceGenerator().generate(node)


class TestObjects:
    """Tests for the object composer."""

    def test_write_only_properties_removed(self) -> None:
        """writeOnly properties never appear, even when required."""
        schema = {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "title": {"type": "string", "writeOnly": True},
            },
            "required": ["id", "title"],
        }
        instance = generated(schema)
        assert set(instance) == {"id"}
        assert isinstance(instance["id"], str)

    def test_write_only_nested(self, pet_schema: dict[str, Any]) -> None:
        instance = generated(pet_schema, seed=7)
        assert "password" not in instance["owner"]
        assert EMAIL_RE.match(instance["owner"]["email"])

    def test_required_only(self, pet_schema: dict[str, Any]) -> None:
        """fill_properties=False keeps only required properties."""
        instance = generated(pet_schema, seed=1, fill_properties=False)
        assert set(instance) == {"id", "name", "status"}

    def test_all_properties_filled_by_default(self, pet_schema: dict[str, Any]) -> None:
        instance = generated(pet_schema, seed=1)
        assert set(instance) == {"id", "name", "age", "weight", "status", "vaccinated", "tags", "owner"}
        assert instance["status"] in {"available", "pending", "sold"}
        assert 0 <= instance["age"] <= 30
        assert 1 <= len(instance["tags"]) <= 3

    def test_snake_case_write_only_is_not_a_keyword(self) -> None:
        schema = object_with("a", {"type": "string", "write_only": True})
        assert "a" in generated(schema)

    def test_required_name_without_schema(self) -> None:
        """Required names missing from properties still get a value."""
        instance = generated({"type": "object", "required": ["free"]})
        assert isinstance(instance["free"], str)

    def test_frozen_properties_container(self) -> None:
        """Read-only property containers are accepted."""
        schema = {
            "type": "object",
            "properties": MappingProxyType({"name": MappingProxyType({"type": "string"})}),
            "required": ("name",),
        }
        instance = generated(schema)
        assert isinstance(instance["name"], str)

    def test_input_schema_not_mutated(self, pet_schema: dict[str, Any]) -> None:
        before = copy.deepcopy(pet_schema)
        generated(pet_schema, seed=3)
        assert pet_schema == before

    def test_child_failure_aborts_object(self) -> None:
        """The first child failure wins; no partial object is returned."""
        schema = {
            "type": "object",
            "properties": {
                "ok": {"type": "string"},
                "bad": {"type": "string", "x-faker": "nope.nothingHere"},
            },
        }
        outcome = generate({}, schema)
        assert outcome.is_failure
        assert outcome.unwrap_or(None) is None

    def test_object_inferred_from_properties(self) -> None:
        instance = generated({"properties": {"n": {"type": "null"}}, "required": ["n"]})
        assert instance == {"n": None}


class TestNumbers:
    """Tests for integer and number builders."""

    def test_integer_degenerate_range(self) -> None:
        assert generated({"type": "integer", "minimum": 5, "maximum": 5}) == 5

    def test_integer_default_range(self) -> None:
        value = generated({"type": "integer"})
        assert isinstance(value, int)
        assert 0 <= value <= 9999

    def test_exclusive_bounds_numeric_form(self) -> None:
        assert generated({"type": "integer", "exclusiveMinimum": 5, "maximum": 6}) == 6
        assert generated({"type": "integer", "minimum": 5, "exclusiveMaximum": 6}) == 5

    def test_exclusive_bounds_boolean_form(self) -> None:
        schema = {"type": "integer", "minimum": 5, "maximum": 6, "exclusiveMinimum": True}
        assert generated(schema) == 6

    def test_only_maximum_below_default_range(self) -> None:
        value = generated({"type": "integer", "maximum": -10})
        assert value <= -10

    def test_integer_multiple_of(self) -> None:
        for seed in range(10):
            value = generated({"type": "integer", "minimum": 1, "maximum": 20, "multipleOf": 7}, seed=seed)
            assert value in {7, 14}

    def test_number_within_bounds(self) -> None:
        for seed in range(10):
            value = generated({"type": "number", "minimum": 0.5, "maximum": 2.5}, seed=seed)
            assert isinstance(value, float)
            assert 0.5 <= value <= 2.5

    def test_number_degenerate_range(self) -> None:
        assert generated({"type": "number", "minimum": 1.5, "maximum": 1.5}) == 1.5

    def test_number_multiple_of(self) -> None:
        for seed in range(10):
            value = generated({"type": "number", "minimum": 0, "maximum": 1, "multipleOf": 0.25}, seed=seed)
            assert value in {0.0, 0.25, 0.5, 0.75, 1.0}

    def test_non_finite_bounds_use_default_range(self) -> None:
        """YAML `.inf` bounds behave as if the bound were absent."""
        value = generated({"type": "integer", "minimum": float("-inf"), "maximum": float("inf")})
        assert 0 <= value <= 9999
        value = generated({"type": "number", "maximum": float("inf")})
        assert 0 <= value <= 9999
        assert generated({"type": "integer", "minimum": 3, "exclusiveMaximum": float("inf")}) >= 3

    def test_non_finite_multiple_fails(self) -> None:
        error = failure_of({"type": "number", "multipleOf": float("inf")})
        assert isinstance(error, UnsupportedSchemaError)
        assert error.keyword == "multipleOf"

    def test_decimal_multiple_at_bound(self) -> None:
        """0.3 is a multiple of 0.1 even though 0.3 / 0.1 is not 3.0 in floats."""
        assert generated({"type": "number", "minimum": 0.3, "maximum": 0.3, "multipleOf": 0.1}) == 0.3

    def test_large_integer_multiple(self) -> None:
        schema = {"type": "integer", "minimum": 10**17 + 1, "maximum": 10**17 + 3, "multipleOf": 3}
        assert generated(schema) == 10**17 + 2

    def test_contradictory_bounds_fail(self) -> None:
        error = failure_of({"type": "integer", "minimum": 10, "maximum": 1})
        assert isinstance(error, UnsupportedSchemaError)
        assert error.keyword == "minimum"

    def test_unreachable_multiple_fails(self) -> None:
        error = failure_of({"type": "integer", "minimum": 1, "maximum": 6, "multipleOf": 7})
        assert isinstance(error, UnsupportedSchemaError)
        assert error.keyword == "multipleOf"


class TestArrays:
    """Tests for the array composer."""

    def test_default_length(self) -> None:
        value = generated({"type": "array", "items": {"type": "integer"}})
        assert len(value) == 1
        assert isinstance(value[0], int)

    def test_default_length_option(self) -> None:
        value = generated({"type": "array", "items": {"type": "boolean"}}, default_array_length=4)
        assert len(value) == 4

    def test_fixed_length(self) -> None:
        value = generated({"type": "array", "minItems": 3, "maxItems": 3, "items": {"type": "string"}})
        assert len(value) == 3

    def test_min_items_only(self) -> None:
        assert len(generated({"type": "array", "minItems": 5, "items": {"type": "null"}})) == 5

    def test_tuple_items(self) -> None:
        value = generated({"type": "array", "items": [{"const": "a"}, {"type": "integer", "minimum": 2, "maximum": 2}]})
        assert value == ["a", 2]

    def test_tuple_items_capped_by_max_items(self) -> None:
        value = generated({"type": "array", "maxItems": 1, "items": [{"const": "a"}, {"const": "b"}]})
        assert value == ["a"]

    def test_tuple_items_padded_to_min_items(self) -> None:
        value = generated({"type": "array", "minItems": 3, "items": [{"const": 1}]})
        assert len(value) == 3
        assert value[0] == 1
        assert all(isinstance(v, str) for v in value[1:])

    def test_tuple_min_items_above_max_items_fails(self) -> None:
        error = failure_of({"type": "array", "minItems": 3, "maxItems": 2, "items": [{"const": 1}]})
        assert isinstance(error, UnsupportedSchemaError)
        assert error.keyword == "minItems"

    def test_array_without_items(self) -> None:
        value = generated({"type": "array", "minItems": 2, "maxItems": 2})
        assert len(value) == 2
        assert all(isinstance(v, str) for v in value)

    def test_contradictory_item_counts_fail(self) -> None:
        error = failure_of({"type": "array", "minItems": 3, "maxItems": 1, "items": {"type": "string"}})
        assert isinstance(error, UnsupportedSchemaError)

    def test_element_failure_aborts_array(self) -> None:
        error = failure_of({"type": "array", "items": {"type": "string", "x-faker": {"a": 1, "b": 2}}})
        assert isinstance(error, DirectiveError)
        assert error.pointer == "/items"


class TestCombinatorsAndLiterals:
    """Tests for enum, const and combinators."""

    def test_enum(self) -> None:
        for seed in range(10):
            assert generated({"type": "string", "enum": ["a", "b"]}, seed=seed) in {"a", "b"}

    def test_enum_without_type(self) -> None:
        assert generated({"enum": [{"k": 1}]}) == {"k": 1}

    def test_const_null(self) -> None:
        assert generated({"const": None}) is None

    def test_empty_enum_fails(self) -> None:
        assert isinstance(failure_of({"type": "string", "enum": []}), UnsupportedSchemaError)

    def test_one_of(self) -> None:
        for seed in range(10):
            assert generated({"oneOf": [{"const": "x"}, {"const": "y"}]}, seed=seed) in {"x", "y"}

    def test_any_of(self) -> None:
        assert generated({"anyOf": [{"type": "boolean"}]}) in {True, False}

    def test_all_of_merges_members(self) -> None:
        schema = {
            "allOf": [
                {"type": "object", "properties": {"a": {"const": 1}}, "required": ["a"]},
                {"properties": {"b": {"const": 2}}, "required": ["b"]},
            ]
        }
        assert generated(schema, fill_properties=False) == {"a": 1, "b": 2}

    def test_nested_all_of(self) -> None:
        inner = {"type": "object", "properties": {"a": {"type": "integer"}}, "required": ["a"]}
        schema = {"allOf": [{"allOf": [inner]}]}
        value = generated(schema)
        assert set(value) == {"a"}
        assert isinstance(value["a"], int)

    def test_type_list_uses_first_non_null(self) -> None:
        assert generated({"type": ["null", "integer"], "minimum": 3, "maximum": 3}) == 3
        assert generated({"type": ["null"]}) is None


class TestUnsupportedSchemas:
    """Tests for schemas without usable information."""

    @pytest.mark.parametrize(
        "schema",
        [
            {},
            {"description": "no type at all"},
            {"type": "file"},
            {"type": "object", "properties": []},
        ],
    )
    def test_unsupported(self, schema: dict[str, Any]) -> None:
        assert isinstance(failure_of(schema), UnsupportedSchemaError)

    def test_non_mapping_schema(self) -> None:
        assert isinstance(failure_of(["not", "a", "schema"]), UnsupportedSchemaError)

    def test_cyclic_document(self) -> None:
        schema: dict[str, Any] = {"type": "object", "properties": {}}
        schema["properties"]["self"] = schema
        assert isinstance(failure_of(schema), UnsupportedSchemaError)


class TestDeterminism:
    """Tests for seeding and options handling."""

    def test_same_seed_same_instance(self) -> None:
        schema = {
            "type": "object",
            "properties": {
                "id": {"type": "string", "format": "uuid"},
                "email": {"type": "string", "format": "email"},
                "n": {"type": "number"},
                "words": {"type": "array", "maxItems": 5, "items": {"type": "string"}},
            },
        }
        assert generated(schema, seed=42) == generated(schema, seed=42)

    def test_same_seed_same_dates(self) -> None:
        schema = {
            "type": "object",
            "properties": {
                "day": {"type": "string", "format": "date"},
                "at": {"type": "string", "format": "date-time"},
            },
        }
        assert generated(schema, seed=7) == generated(schema, seed=7)

    def test_different_seeds_differ(self) -> None:
        schema = {"type": "string", "format": "uuid"}
        assert generated(schema, seed=1) != generated(schema, seed=2)

    def test_options_model_accepted(self) -> None:
        outcome = generate(GenerationOptions(seed=5), {"type": "boolean"})
        assert outcome.is_success

    def test_none_options_accepted(self) -> None:
        assert generate(None, {"type": "null"}) == Success(None)
