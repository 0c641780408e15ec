"""Record type introspection.

The reflector never touches class internals directly; it asks this module
for a record's declared fields as ``FieldSpec`` values. Three kinds of record
are understood:

- dataclasses
- pydantic models
- explicit ``RecordType`` descriptors built by callers

Column tags and embedding can be declared with ``typing.Annotated`` markers
(``Tag``, ``Embedded``) on any of them, or with field metadata:
``dataclasses.field(metadata={"domo": "..."})`` (see ``column()``) and
``pydantic.Field(json_schema_extra={"domo": "..."})``.
"""

import dataclasses
import enum
import inspect
import sys
import types
import typing
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from domoschema.errors import ReflectionError

EMBEDDED_KEY = "embedded"


@dataclass(frozen=True)
class Tag:
    """``Annotated`` marker carrying a column tag string."""
    value: str


@dataclass(frozen=True)
class Embedded:
    """``Annotated`` marker promoting a sub-record's fields into its parent."""


@dataclass(frozen=True)
class FieldSpec:
    """One declared field of a record type."""
    name: str
    annotation: Any
    tag: Optional[str] = None
    embedded: bool = False


@dataclass(frozen=True)
class RecordType:
    """Explicit record descriptor for shapes that are not Python classes.

    Field annotations may be plain types or other ``RecordType`` values.
    """
    name: str
    fields: Tuple[FieldSpec, ...] = ()

    @classmethod
    def build(cls, name: str, *fields: Union[FieldSpec, tuple]) -> "RecordType":
        """Build from ``FieldSpec`` values or ``(name, annotation[, tag[, embedded]])`` tuples."""
        specs = tuple(f if isinstance(f, FieldSpec) else FieldSpec(*f) for f in fields)
        return cls(name=name, fields=specs)


class FieldKind(enum.Enum):
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    RECORD = "record"
    OTHER = "other"


def column(tag: str = "", embedded: bool = False, tag_key: str = "domo", **kwargs: Any) -> Any:
    """``dataclasses.field`` carrying a column tag and/or the embedded flag."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag_key] = tag
    if embedded:
        metadata[EMBEDDED_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def is_record(tp: Any) -> bool:
    """True for dataclass types, pydantic model classes and ``RecordType`` values."""
    if isinstance(tp, RecordType):
        return True
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def _split_annotated(annotation: Any) -> Tuple[Any, Tuple[Any, ...]]:
    if get_origin(annotation) is typing.Annotated:
        base, *extras = get_args(annotation)
        return base, tuple(extras)
    return annotation, ()


def _markers(extras: Tuple[Any, ...]) -> Tuple[Optional[str], bool]:
    tag = None
    embedded = False
    for extra in extras:
        if isinstance(extra, Tag):
            tag = extra.value
        elif isinstance(extra, Embedded) or extra is Embedded:
            embedded = True
    return tag, embedded


def unwrap_optional(annotation: Any) -> Any:
    """Strip one level of ``Optional[X]`` / ``X | None``.

    Unions of more than one concrete type are returned unchanged.
    """
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def resolve_kind(annotation: Any) -> Tuple[FieldKind, Any]:
    """Classify a field annotation.

    Returns the kind together with the unwrapped inner type, which is the
    record type itself when the kind is ``RECORD``.
    """
    inner, _ = _split_annotated(annotation)
    inner = unwrap_optional(inner)
    inner, _ = _split_annotated(inner)

    if is_record(inner):
        return FieldKind.RECORD, inner
    if not isinstance(inner, type) or get_origin(inner) is not None:
        return FieldKind.OTHER, inner
    # bool is a subclass of int
    if issubclass(inner, bool):
        return FieldKind.BOOLEAN, inner
    if issubclass(inner, int):
        return FieldKind.INTEGER, inner
    if issubclass(inner, float):
        return FieldKind.FLOAT, inner
    if issubclass(inner, str):
        return FieldKind.STRING, inner
    if issubclass(inner, datetime):
        return FieldKind.TIMESTAMP, inner
    return FieldKind.OTHER, inner


def _dataclass_hints(cls: type) -> dict:
    try:
        return get_type_hints(cls, include_extras=True)
    except NameError:
        # Local classes named in postponed annotations are not in module globals.
        pass
    hints = {}
    for f in dataclasses.fields(cls):
        annotation = f.type
        if isinstance(annotation, str):
            annotation = _resolve_annotation(cls, f.name, annotation)
        hints[f.name] = annotation
    return hints


def _resolve_annotation(cls: type, field_name: str, annotation: str) -> Any:
    owner = next(
        (c for c in cls.__mro__ if field_name in inspect.get_annotations(c)),
        cls,
    )
    module = sys.modules.get(owner.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = {owner.__name__: owner, cls.__name__: cls}
    try:
        return eval(annotation, globalns, localns)
    except NameError as exc:
        raise ReflectionError(
            f"Cannot resolve annotation {annotation!r} of field "
            f"{type_name(cls)}.{field_name}: {exc}"
        ) from exc


def _dataclass_fields(cls: type, tag_key: str) -> Tuple[FieldSpec, ...]:
    hints = _dataclass_hints(cls)
    specs = []
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        _, extras = _split_annotated(annotation)
        tag, embedded = _markers(extras)
        if tag is None:
            tag = f.metadata.get(tag_key)
        embedded = embedded or bool(f.metadata.get(EMBEDDED_KEY, False))
        specs.append(FieldSpec(name=f.name, annotation=annotation, tag=tag, embedded=embedded))
    return tuple(specs)


def _model_fields(cls: type, tag_key: str) -> Tuple[FieldSpec, ...]:
    specs = []
    for name, info in cls.model_fields.items():
        tag, embedded = _markers(tuple(info.metadata))
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        if tag is None:
            tag = extra.get(tag_key)
        embedded = embedded or bool(extra.get(EMBEDDED_KEY, False))
        specs.append(FieldSpec(name=name, annotation=info.annotation, tag=tag, embedded=embedded))
    return tuple(specs)


def describe_fields(record_type: Any, tag_key: str = "domo") -> Tuple[FieldSpec, ...]:
    """Declared fields of a record type, in declaration order.

    Raises:
        ReflectionError: if ``record_type`` is not a record type
    """
    if not is_record(record_type):
        raise ReflectionError(
            f"Expected a dataclass, pydantic model or RecordType, got {record_type!r}"
        )
    if isinstance(record_type, RecordType):
        return record_type.fields
    if dataclasses.is_dataclass(record_type):
        return _dataclass_fields(record_type, tag_key)
    return _model_fields(record_type, tag_key)


def is_exported(name: str) -> bool:
    """Fields with a leading underscore are private and never become columns."""
    return not name.startswith("_")


def type_name(record_type: Any) -> str:
    if isinstance(record_type, RecordType):
        return record_type.name
    return getattr(record_type, "__qualname__", repr(record_type))
