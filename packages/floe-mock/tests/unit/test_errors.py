"""Unit tests for the generation error hierarchy."""

from __future__ import annotations

import pytest

from floe_mock.errors import (
    DirectiveError,
    GenerationError,
    ResolutionError,
    UnsupportedSchemaError,
)

pytestmark = pytest.mark.unit


class TestGenerationErrors:
    """Tests for error attributes and formatting."""

    @pytest.mark.parametrize(
        "error",
        [
            ResolutionError("#/a"),
            UnsupportedSchemaError("nothing usable"),
            DirectiveError(),
        ],
    )
    def test_hierarchy(self, error: GenerationError) -> None:
        assert isinstance(error, GenerationError)
        assert isinstance(error, Exception)

    def test_root_pointer_rendered_as_slash(self) -> None:
        assert str(GenerationError("boom")) == "boom (pointer=/)"

    def test_resolution_error(self) -> None:
        error = ResolutionError("#/definitions/A", pointer="/properties/a")
        assert error.ref == "#/definitions/A"
        assert error.message == "Unresolved schema reference: #/definitions/A"
        assert str(error) == (
            "Unresolved schema reference: #/definitions/A "
            "(pointer=/properties/a, ref=#/definitions/A)"
        )

    def test_unsupported_schema_error(self) -> None:
        error = UnsupportedSchemaError("minimum exceeds maximum", pointer="/n", keyword="minimum")
        assert error.reason == "minimum exceeds maximum"
        assert error.details == {"keyword": "minimum"}

    def test_directive_error(self) -> None:
        error = DirectiveError("rejected", path="random.number", pointer="/n", cause="bad")
        assert error.path == "random.number"
        assert error.cause == "bad"
        assert "path=random.number" in str(error)
        assert "cause=bad" in str(error)
