"""Reflector configuration.

Settings can be built directly or read from the ``[tool.domoschema]`` table
of a pyproject-style TOML file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from domoschema.errors import ConfigurationError

TOOL_TABLE = "domoschema"


class ReflectorConfig(BaseModel):
    """How record fields are read into columns."""
    tag_key: str = Field("domo", description="Metadata key holding the column tag string")
    tag_separator: str = Field(",", description="Separator between tag tokens")
    normalizer: str = Field("identity", description="Name of a built-in name normalizer")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("tag_key", "tag_separator")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("normalizer")
    @classmethod
    def validate_normalizer(cls, v: str) -> str:
        from domoschema.kernel.tags import NORMALIZERS

        if v not in NORMALIZERS:
            raise ValueError(f"unknown normalizer '{v}', expected one of {sorted(NORMALIZERS)}")
        return v

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ReflectorConfig":
        try:
            return cls(**dict(data))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid reflector configuration: {exc}") from exc


def load_config(path: Path | str) -> ReflectorConfig:
    """Load reflector settings from a TOML file.

    A missing ``[tool.domoschema]`` table yields the defaults.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")
    try:
        with open(path, "rb") as f:
            document = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Failed to parse configuration file {path}: {exc}") from exc

    section = document.get("tool", {}).get(TOOL_TABLE, {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"[tool.{TOOL_TABLE}] must be a table")
    return ReflectorConfig.from_mapping(section)
