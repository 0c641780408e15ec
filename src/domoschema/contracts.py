"""Public wire models for dataset and stream schemas."""

from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from domoschema.codes import ColumnType


class Column(BaseModel):
    """A single dataset column: name plus remote data type."""
    name: str
    type: ColumnType

    model_config = ConfigDict(frozen=True, extra="ignore")


class Schema(BaseModel):
    """Ordered column list describing a dataset or stream schema."""
    columns: Tuple[Column, ...] = ()

    model_config = ConfigDict(frozen=True, extra="ignore")

    def __len__(self) -> int:
        return len(self.columns)

    def column_names(self) -> list[str]:
        """Get column names in schema order."""
        return [c.name for c in self.columns]

    @staticmethod
    def locate_columns(payload: Mapping[str, Any]) -> Optional[list]:
        """Find the column list in an API response or request body.

        Accepts a bare schema (``{"columns": [...]}``) or any dataset or
        stream body wrapping it under ``"schema"`` or ``"dataset"``, possibly
        more than once. In dataset bodies ``"columns"`` is a column count.
        Returns None when the body carries no column list.
        """
        while not isinstance(payload.get("columns"), (list, tuple)):
            nested = payload.get("schema") or payload.get("dataset")
            if not isinstance(nested, Mapping):
                return None
            payload = nested
        return list(payload["columns"])

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Schema":
        """Parse a schema from an API response or request body.

        A body without a column list yields an empty schema.
        """
        return cls.model_validate({"columns": cls.locate_columns(payload) or ()})

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the remote JSON schema representation."""
        return self.model_dump(mode="json")
