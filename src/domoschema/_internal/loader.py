"""Loading helpers for the CLI: record references and remote schema files."""

import importlib
import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from domoschema.contracts import Schema
from domoschema.errors import SchemaLoadError


def load_record_type(reference: str) -> Any:
    """Resolve ``"package.module:Attr"`` (or ``"package.module:Outer.Inner"``)."""
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise SchemaLoadError(f"Expected a 'module:Attr' reference, got '{reference}'")
    try:
        obj = importlib.import_module(module_name)
    except ImportError as exc:
        raise SchemaLoadError(f"Cannot import module '{module_name}': {exc}") from exc
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise SchemaLoadError(f"'{module_name}' has no attribute '{attr_path}'") from None
    return obj


def load_schema_from_path(path: Path) -> Schema:
    """Load a remote schema saved from a dataset/stream API response."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise SchemaLoadError(f"Schema file not found: {path}") from None
    except json.JSONDecodeError as exc:
        raise SchemaLoadError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SchemaLoadError(f"Expected a JSON object in {path}")
    if Schema.locate_columns(data) is None:
        raise SchemaLoadError(f"No column list found in {path}")
    try:
        return Schema.from_payload(data)
    except ValidationError as exc:
        raise SchemaLoadError(f"Invalid schema in {path}: {exc}") from exc
