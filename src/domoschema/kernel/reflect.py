"""Record type to dataset schema reflection.

``SchemaReflector.generate_schema`` walks a record type's declared fields in
order and produces one column per exported scalar field:

- nested record fields are flattened in place, their children keyed by
  their own names; the nested field is then tagged like any other field,
  so it needs a ``"-"`` tag to avoid a column of its own
- embedded records are flattened in place and never produce a column
- scalar fields get a column type from their Python type, optionally
  overridden by a type token in the field tag

Results are cached per type. The cache lives on the reflector instance;
create one reflector and share it.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from domoschema.codes import ColumnType
from domoschema.config import ReflectorConfig
from domoschema.contracts import Column, Schema
from domoschema.errors import ReflectionError
from domoschema.kernel.introspect import (
    FieldKind,
    RecordType,
    describe_fields,
    is_record,
    is_exported,
    resolve_kind,
    type_name,
)
from domoschema.kernel.tags import Normalizer, get_normalizer, parse_tag

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_TYPES: Dict[FieldKind, ColumnType] = {
    FieldKind.INTEGER: ColumnType.LONG,
    FieldKind.FLOAT: ColumnType.DOUBLE,
    FieldKind.STRING: ColumnType.STRING,
    FieldKind.BOOLEAN: ColumnType.STRING,
    FieldKind.TIMESTAMP: ColumnType.DATETIME,
}


def default_column_type(kind: FieldKind) -> ColumnType:
    """Column type for a field kind when its tag names no type."""
    return DEFAULT_COLUMN_TYPES.get(kind, ColumnType.STRING)


@dataclass(frozen=True)
class FieldInfo:
    """A resolved column source within a (possibly nested) record."""
    keys: Tuple[str, ...]  # first key is the column name
    column_type: ColumnType
    index_chain: Tuple[int, ...]  # field positions from the root record down
    omit_empty: bool = False

    @property
    def first_key(self) -> str:
        return self.keys[0]

    def matches_key(self, key: str) -> bool:
        """True if ``key`` (or ``key`` stripped of whitespace) is one of this field's keys."""
        return key in self.keys or key.strip() in self.keys

    def to_column(self) -> Column:
        return Column(name=self.first_key, type=self.column_type)


@dataclass(frozen=True)
class RecordInfo:
    """Cached reflection result for one record type."""
    fields: Tuple[FieldInfo, ...]
    schema: Schema


class SchemaReflector:
    """Derives dataset schemas from record types.

    Args:
        config: tag key, tag separator and normalizer name
        normalizer: explicit name normalizer; takes precedence over ``config.normalizer``
    """

    def __init__(self, config: Optional[ReflectorConfig] = None, normalizer: Optional[Normalizer] = None):
        self.config = config or ReflectorConfig()
        self.normalizer = normalizer or get_normalizer(self.config.normalizer)
        self._cache: Dict[Any, Tuple[Any, RecordInfo]] = {}
        self._lock = threading.Lock()

    def generate_schema(self, record_type: Any) -> Schema:
        """Generate the dataset schema for a record type."""
        return self._record_info(record_type).schema

    def field_infos(self, record_type: Any) -> Tuple[FieldInfo, ...]:
        """Resolved fields of a record type, flattened, in column order."""
        return self._record_info(record_type).fields

    def cached_types(self) -> List[Any]:
        with self._lock:
            return [record_type for record_type, _ in self._cache.values()]

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _record_info(self, record_type: Any) -> RecordInfo:
        if not is_record(record_type):
            raise ReflectionError(
                f"Expected a dataclass, pydantic model or RecordType, got {record_type!r}"
            )
        key = _cache_key(record_type)
        with self._lock:
            entry = self._cache.get(key)
        if entry is not None:
            return entry[1]

        # Computed outside the lock; a concurrent duplicate is identical and discarded.
        logger.debug("Reflecting record type %s", type_name(record_type))
        fields = tuple(self._collect_fields(record_type, ()))
        info = RecordInfo(
            fields=fields,
            schema=Schema(columns=tuple(f.to_column() for f in fields)),
        )
        with self._lock:
            # The entry holds the descriptor so an id() key is never reused while cached.
            return self._cache.setdefault(key, (record_type, info))[1]

    def _collect_fields(self, record_type: Any, parent_chain: Tuple[int, ...]) -> List[FieldInfo]:
        collected: List[FieldInfo] = []
        for i, spec in enumerate(describe_fields(record_type, self.config.tag_key)):
            if not is_exported(spec.name):
                continue
            index_chain = parent_chain + (i,)
            kind, inner = resolve_kind(spec.annotation)

            if kind is FieldKind.RECORD:
                collected.extend(self._collect_fields(inner, index_chain))
            if spec.embedded:
                # embedded record: its fields are promoted, it has no column itself
                continue

            parsed = parse_tag(spec.tag, self.normalizer, self.config.tag_separator)
            if parsed.excluded:
                continue
            keys = parsed.names if parsed.has_name else (self.normalizer(spec.name),)
            collected.append(FieldInfo(
                keys=keys,
                column_type=parsed.column_type or default_column_type(kind),
                index_chain=index_chain,
                omit_empty=parsed.omit_empty,
            ))
        return collected


def _cache_key(record_type: Any) -> Any:
    # RecordType values hash their annotations, whose metadata may be unhashable.
    if isinstance(record_type, RecordType):
        return id(record_type)
    return record_type
