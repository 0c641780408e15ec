"""Public API for domoschema.

High-level entry points. Everything here is re-exported from the package root.
"""

from typing import Any, Optional

from domoschema.config import ReflectorConfig
from domoschema.contracts import Schema
from domoschema.kernel.diff import (
    SchemaDiffResult,
    SchemaMismatch,
    diff_by_column_index,
    diff_by_column_name,
    diff_schemas,
    find_schema_changes,
    has_schema_changed,
)
from domoschema.kernel.introspect import Embedded, FieldSpec, RecordType, Tag, column
from domoschema.kernel.reflect import FieldInfo, SchemaReflector
from domoschema.kernel.tags import Normalizer


def create_reflector(
    config: Optional[ReflectorConfig] = None,
    normalizer: Optional[Normalizer] = None,
) -> SchemaReflector:
    """Create a reflector; keep it for the life of the process to benefit from its cache."""
    return SchemaReflector(config=config, normalizer=normalizer)


def compare(reflector: SchemaReflector, record_type: Any, remote: Schema) -> SchemaDiffResult:
    """Diff a record type's generated schema against a remote schema."""
    return diff_schemas(reflector.generate_schema(record_type), remote)


__all__ = [
    "Embedded",
    "FieldInfo",
    "FieldSpec",
    "RecordType",
    "ReflectorConfig",
    "Schema",
    "SchemaDiffResult",
    "SchemaMismatch",
    "SchemaReflector",
    "Tag",
    "column",
    "compare",
    "create_reflector",
    "diff_by_column_index",
    "diff_by_column_name",
    "diff_schemas",
    "find_schema_changes",
    "has_schema_changed",
]
