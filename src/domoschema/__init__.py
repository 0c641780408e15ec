"""domoschema: dataset schema reflection and schema diffing for Domo datasets and streams."""

import logging
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("domoschema")
except PackageNotFoundError:
    __version__ = "dev"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from domoschema.api import (
    Embedded,
    FieldSpec,
    RecordType,
    ReflectorConfig,
    Schema,
    SchemaDiffResult,
    SchemaMismatch,
    SchemaReflector,
    Tag,
    column,
    compare,
    create_reflector,
    diff_schemas,
    find_schema_changes,
    has_schema_changed,
)
from domoschema.codes import ColumnType
from domoschema.contracts import Column
from domoschema.errors import (
    ConfigurationError,
    DomoSchemaError,
    ReflectionError,
    SchemaDiffError,
    SchemaLoadError,
)
from domoschema.service import DatasetSchemaService, SchemaSource

__all__ = [
    "__version__",
    "Column",
    "ColumnType",
    "ConfigurationError",
    "DatasetSchemaService",
    "DomoSchemaError",
    "Embedded",
    "FieldSpec",
    "RecordType",
    "ReflectionError",
    "ReflectorConfig",
    "Schema",
    "SchemaDiffError",
    "SchemaDiffResult",
    "SchemaLoadError",
    "SchemaMismatch",
    "SchemaReflector",
    "SchemaSource",
    "Tag",
    "column",
    "compare",
    "create_reflector",
    "diff_schemas",
    "find_schema_changes",
    "has_schema_changed",
]
