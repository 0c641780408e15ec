"""Reflection of records whose annotations are postponed (PEP 563)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import pytest

from domoschema.errors import ReflectionError
from domoschema.kernel.reflect import SchemaReflector
from sample_records import DomoSample


def test_local_record_referencing_module_types():
    @dataclass
    class Event:
        sample: DomoSample = field(default_factory=DomoSample, metadata={"domo": "-"})
        at: datetime | None = None

    schema = SchemaReflector().generate_schema(Event)
    assert schema.column_names()[-1] == "at"
    assert schema.columns[-1].type.value == "DATETIME"
    assert "sample" not in schema.column_names()


def test_unresolvable_local_record_raises_reflection_error():
    @dataclass
    class Inner:
        x: int = 0

    @dataclass
    class Outer:
        n: int = 0
        inner: Inner = field(default_factory=Inner)

    with pytest.raises(ReflectionError, match="Outer.inner"):
        SchemaReflector().generate_schema(Outer)
