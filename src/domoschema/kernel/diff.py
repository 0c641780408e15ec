"""Structural diff between a locally generated schema and a remote schema.

Two strategies, picked by column count:

- equal counts: positional comparison. Column i is compared with column i;
  name and type differences are reported independently.
- different counts: name-keyed comparison. Columns are matched by name;
  unmatched remote columns are delete candidates, unmatched local columns
  are add candidates.

A rename combined with an add/remove therefore shows up as a delete of the
old name plus an add of the new name, not as a rename.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from domoschema.codes import ColumnType
from domoschema.contracts import Column, Schema
from domoschema.errors import SchemaDiffError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaMismatch:
    """A single difference between the remote schema and the compared (local) schema."""
    remote_column_index: int
    remote_column_name: str
    compared_column_name: str
    remote_column_type: Optional[ColumnType]
    compared_column_type: Optional[ColumnType]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "remote_column_index": self.remote_column_index,
            "remote_column_name": self.remote_column_name,
            "compared_column_name": self.compared_column_name,
            "remote_column_type": self.remote_column_type.value if self.remote_column_type else None,
            "compared_column_type": self.compared_column_type.value if self.compared_column_type else None,
            "message": self.message,
        }


@dataclass(frozen=True)
class SchemaDiffResult:
    """All differences found by one comparison, grouped by kind."""
    name_mismatches: Tuple[SchemaMismatch, ...] = ()
    type_mismatches: Tuple[SchemaMismatch, ...] = ()
    columns_to_delete: Tuple[SchemaMismatch, ...] = ()  # in remote, not local
    columns_to_add: Tuple[SchemaMismatch, ...] = ()  # in local, not remote

    def diffs_count(self) -> int:
        return (
            len(self.name_mismatches)
            + len(self.type_mismatches)
            + len(self.columns_to_delete)
            + len(self.columns_to_add)
        )

    def only_column_name_changes(self) -> bool:
        """True if every difference is a positional rename."""
        return not (self.type_mismatches or self.columns_to_delete or self.columns_to_add)

    def merge(self, other: "SchemaDiffResult") -> "SchemaDiffResult":
        """New result with ``other``'s mismatches appended per category."""
        return SchemaDiffResult(
            name_mismatches=self.name_mismatches + other.name_mismatches,
            type_mismatches=self.type_mismatches + other.type_mismatches,
            columns_to_delete=self.columns_to_delete + other.columns_to_delete,
            columns_to_add=self.columns_to_add + other.columns_to_add,
        )

    def mismatches(self) -> Tuple[SchemaMismatch, ...]:
        """Every mismatch in report order: names, types, deletes, adds."""
        return self.name_mismatches + self.type_mismatches + self.columns_to_delete + self.columns_to_add

    def to_message(self) -> str:
        lines = [f"{self.diffs_count()} schema differences found:"]
        lines.extend(m.message for m in self.mismatches())
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_message()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "diffs_count": self.diffs_count(),
            "only_column_name_changes": self.only_column_name_changes(),
            "name_mismatches": [m.to_dict() for m in self.name_mismatches],
            "type_mismatches": [m.to_dict() for m in self.type_mismatches],
            "columns_to_delete": [m.to_dict() for m in self.columns_to_delete],
            "columns_to_add": [m.to_dict() for m in self.columns_to_add],
        }


def diff_by_column_index(local: Schema, remote: Schema) -> SchemaDiffResult:
    """Positional comparison. Only meaningful when both schemas have the same length."""
    name_mismatches = []
    type_mismatches = []
    for i, (col, remote_col) in enumerate(zip(local.columns, remote.columns)):
        if col.name != remote_col.name:
            name_mismatches.append(SchemaMismatch(
                remote_column_index=i,
                remote_column_name=remote_col.name,
                compared_column_name=col.name,
                remote_column_type=remote_col.type,
                compared_column_type=col.type,
                message=(
                    f"Column Name Change: Expected column {i} to be named {col.name}, "
                    f"currently it's called {remote_col.name}"
                ),
            ))
        if col.type != remote_col.type:
            type_mismatches.append(SchemaMismatch(
                remote_column_index=i,
                remote_column_name=remote_col.name,
                compared_column_name=col.name,
                remote_column_type=remote_col.type,
                compared_column_type=col.type,
                message=(
                    f"Column Type Change: Expected column ({i}) {col.name} to be type {col.type.value}, "
                    f"in Domo it's type {remote_col.type.value}"
                ),
            ))
    return SchemaDiffResult(
        name_mismatches=tuple(name_mismatches),
        type_mismatches=tuple(type_mismatches),
    )


def _index_by_name(schema: Schema, side: str) -> Dict[str, Tuple[int, Column]]:
    """Map column name to (index, column); on duplicate names the last one wins."""
    indexed: Dict[str, Tuple[int, Column]] = {}
    for i, col in enumerate(schema.columns):
        if col.name in indexed:
            logger.warning(
                "Duplicate column name %r in %s schema (indexes %d and %d); using index %d",
                col.name, side, indexed[col.name][0], i, i,
            )
        indexed[col.name] = (i, col)
    return indexed


def diff_by_column_name(local: Schema, remote: Schema) -> SchemaDiffResult:
    """Name-keyed comparison for schemas whose column counts differ."""
    local_by_name = _index_by_name(local, "local")
    remote_by_name = _index_by_name(remote, "remote")

    type_mismatches = []
    to_delete = []
    to_add = []
    for name, (i, remote_col) in remote_by_name.items():
        match = local_by_name.get(name)
        if match is None:
            to_delete.append(SchemaMismatch(
                remote_column_index=i,
                remote_column_name=name,
                compared_column_name="",
                remote_column_type=remote_col.type,
                compared_column_type=None,
                message=(
                    f"Missing a column {i} found in Domo Schema: Expected a column {name} "
                    f"({remote_col.type.value}). Either it's missing from the local schema "
                    f"or it's a column to delete from Domo Schema"
                ),
            ))
            continue
        _, col = match
        if col.type != remote_col.type:
            type_mismatches.append(SchemaMismatch(
                remote_column_index=i,
                remote_column_name=name,
                compared_column_name=col.name,
                remote_column_type=remote_col.type,
                compared_column_type=col.type,
                message=(
                    f"Column Type Change: Expected column {name} ({i}) to be type "
                    f"{remote_col.type.value} (current Domo Column Type), found local type {col.type.value}"
                ),
            ))

    for name, (_, col) in local_by_name.items():
        if name not in remote_by_name:
            to_add.append(SchemaMismatch(
                remote_column_index=0,
                remote_column_name="",
                compared_column_name=name,
                remote_column_type=None,
                compared_column_type=col.type,
                message=(
                    f"Extra Column Found: Found a column {name} ({col.type.value}) that's not in Domo. "
                    f"Either it's an extra column that should be removed from the local schema "
                    f"or it's a column to add to Domo Schema"
                ),
            ))

    return SchemaDiffResult(
        type_mismatches=tuple(type_mismatches),
        columns_to_delete=tuple(to_delete),
        columns_to_add=tuple(to_add),
    )


def diff_schemas(local: Schema, remote: Schema) -> SchemaDiffResult:
    """Compare schemas, positionally if the column counts match, by name otherwise."""
    if len(local.columns) == len(remote.columns):
        return diff_by_column_index(local, remote)
    return diff_by_column_name(local, remote)


def has_schema_changed(local: Schema, remote: Schema) -> bool:
    """Cheap check: any difference at all between the two schemas."""
    if len(local.columns) != len(remote.columns):
        return True
    return diff_by_column_index(local, remote).diffs_count() > 0


def find_schema_changes(current: Schema, remote: Schema) -> None:
    """Raise ``SchemaDiffError`` describing every difference, if there are any.

    Raises:
        SchemaDiffError: carrying the full ``SchemaDiffResult``
    """
    diffs = SchemaDiffResult().merge(diff_schemas(current, remote))
    if diffs.diffs_count() > 0:
        raise SchemaDiffError(diffs)
