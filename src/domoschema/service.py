"""Schema checks for remote datasets and streams.

The service never performs HTTP itself. Callers inject a ``SchemaSource``
(usually a thin wrapper over their API client) that returns the current
remote schema for a dataset id, either as a ``Schema`` or as the raw JSON
body of a dataset/stream info response.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Protocol, Union

from domoschema.contracts import Schema
from domoschema.kernel.diff import SchemaDiffResult, diff_schemas, find_schema_changes, has_schema_changed
from domoschema.kernel.reflect import SchemaReflector

logger = logging.getLogger(__name__)

UPDATE_METHODS = ("APPEND", "REPLACE")


class SchemaSource(Protocol):
    """Anything that can fetch the remote schema of a dataset."""

    def get_schema(self, dataset_id: str) -> Union[Schema, Mapping[str, Any]]:
        ...


class DatasetSchemaService:
    """Compare record types against the schemas of remote datasets."""

    def __init__(self, source: SchemaSource, reflector: Optional[SchemaReflector] = None):
        self.source = source
        self.reflector = reflector or SchemaReflector()

    def remote_schema(self, dataset_id: str) -> Schema:
        fetched = self.source.get_schema(dataset_id)
        if isinstance(fetched, Schema):
            return fetched
        return Schema.from_payload(fetched)

    def has_schema_changed(self, dataset_id: str, record_type: Any) -> bool:
        """Check whether a record type's schema differs from the dataset's schema.

        Use ``find_schema_changes`` to get the list of differences.
        """
        current = self.reflector.generate_schema(record_type)
        changed = has_schema_changed(current, self.remote_schema(dataset_id))
        logger.debug("Dataset %s schema changed: %s", dataset_id, changed)
        return changed

    def diff(self, dataset_id: str, record_type: Any) -> SchemaDiffResult:
        current = self.reflector.generate_schema(record_type)
        return diff_schemas(current, self.remote_schema(dataset_id))

    def find_schema_changes(self, dataset_id: str, record_type: Any) -> None:
        """Raise ``SchemaDiffError`` if the record type no longer matches the dataset."""
        current = self.reflector.generate_schema(record_type)
        find_schema_changes(current, self.remote_schema(dataset_id))

    def schema_update_body(self, record_type: Any) -> Dict[str, Any]:
        """JSON body for a dataset schema update built from a record type."""
        return {"schema": self.reflector.generate_schema(record_type).to_payload()}

    def dataset_create_body(self, record_type: Any, name: str, description: str = "") -> Dict[str, Any]:
        """JSON body for creating a dataset whose columns come from a record type."""
        body: Dict[str, Any] = {"name": name, "rows": 0}
        if description:
            body["description"] = description
        body["schema"] = self.reflector.generate_schema(record_type).to_payload()
        return body

    def stream_create_body(
        self,
        record_type: Any,
        name: str,
        description: str = "",
        update_method: str = "APPEND",
    ) -> Dict[str, Any]:
        """JSON body for creating a stream (and its dataset) from a record type."""
        if update_method not in UPDATE_METHODS:
            raise ValueError(f"update_method must be one of {UPDATE_METHODS}, got '{update_method}'")
        return {
            "schema": self.dataset_create_body(record_type, name, description),
            "updateMethod": update_method,
        }
