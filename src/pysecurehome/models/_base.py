"""Base model and enum for alarm service API responses.

Every response model inherits from :class:`SecureHomeBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``None`` and blank
  string values so the field default is used.
* A ``raw`` dict that captures the original payload.

State enums inherit from :class:`SecureHomeEnum` which resolves any
value without a mapped member to ``UNKNOWN``.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class SecureHomeEnum(enum.IntEnum):
    """Base for panel state enums.

    Every subclass **must** define ``UNKNOWN = -1``.
    """

    @classmethod
    def _missing_(cls, value: object) -> SecureHomeEnum:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.lstrip("-").isdigit():
                return cls(int(stripped))
            member = cls.__members__.get(stripped.upper())
            if member is not None:
                return member
        if hasattr(cls, "UNKNOWN"):
            unknown: SecureHomeEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class SecureHomeBaseModel(BaseModel):
    """Base for alarm service response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop empty values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[key] = value
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
