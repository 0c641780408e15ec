"""Remote column type constants for domoschema.

These constants prevent stringly-typed column types and make sure
client code only produces types the remote dataset API accepts.
"""

from enum import Enum
from typing import Optional


class ColumnType(str, Enum):
    """Column data types understood by Domo datasets and streams."""

    STRING = "STRING"
    LONG = "LONG"
    DOUBLE = "DOUBLE"
    DATE = "DATE"
    DATETIME = "DATETIME"
    DECIMAL = "DECIMAL"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> Optional["ColumnType"]:
        """Return the column type named by an exact tag token, or None."""
        try:
            return cls(token)
        except ValueError:
            return None
