"""Exception hierarchy for domoschema."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domoschema.kernel.diff import SchemaDiffResult


class DomoSchemaError(Exception):
    """Base class for all domoschema errors."""


class ReflectionError(DomoSchemaError, TypeError):
    """Raised when a type handed to the reflector is not a record type."""


class ConfigurationError(DomoSchemaError, ValueError):
    """Raised when reflector configuration is invalid."""


class SchemaLoadError(DomoSchemaError):
    """Raised when a remote schema document or record reference cannot be loaded."""


class SchemaDiffError(DomoSchemaError):
    """A non-empty schema diff surfaced as an error.

    The full diff is kept on ``result`` so callers branching on the error
    can still inspect every mismatch.
    """

    def __init__(self, result: "SchemaDiffResult"):
        super().__init__(result.to_message())
        self.result = result

    def diffs_count(self) -> int:
        return self.result.diffs_count()

    def only_column_name_changes(self) -> bool:
        return self.result.only_column_name_changes()
