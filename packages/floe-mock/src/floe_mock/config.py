"""Pydantic configuration model for instance generation.

This module provides:
- GenerationOptions: Settings forwarded to the value provider and composers
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from faker.config import AVAILABLE_LOCALES
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_LOCALE = "en_US"


class GenerationOptions(BaseModel):
    """Options for a single generation call.

    An empty configuration is valid and means "use defaults".

    Attributes:
        seed: Random seed for reproducible instances (None = unseeded).
        locale: Faker locale used by the value provider.
        fill_properties: Also populate optional object properties.
        default_array_length: Array length when minItems/maxItems are absent.
        default_max_string_length: Upper length for unconstrained strings.

    Example:
        >>> options = GenerationOptions(seed=42, fill_properties=False)
        >>> GenerationOptions.from_value({"seed": 42}).seed
        42
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    seed: int | None = Field(default=None, description="Random seed")
    locale: str = Field(default=DEFAULT_LOCALE, min_length=2, description="Faker locale")
    fill_properties: bool = Field(default=True, description="Populate optional properties")
    default_array_length: int = Field(default=1, ge=0, le=100, description="Unbounded array length")
    default_max_string_length: int = Field(
        default=20, ge=1, le=1000, description="Unbounded string length"
    )

    @field_validator("locale")
    @classmethod
    def validate_locale_format(cls, v: str) -> str:
        """Normalize locale separators (en-US -> en_US) and check Faker knows it."""
        normalized = v.replace("-", "_")
        if normalized not in AVAILABLE_LOCALES:
            msg = f"Unsupported locale: {v}"
            raise ValueError(msg)
        return normalized

    @classmethod
    def from_value(cls, value: GenerationOptions | Mapping[str, Any] | None) -> GenerationOptions:
        """Build options from a model, a plain mapping, or None.

        Args:
            value: Existing options, a mapping of option fields, or None.

        Returns:
            GenerationOptions instance.

        Raises:
            pydantic.ValidationError: If the mapping holds unknown or invalid options.
        """
        if isinstance(value, GenerationOptions):
            return value
        if value is None:
            return cls()
        return cls.model_validate(dict(value))
