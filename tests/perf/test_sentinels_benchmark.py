"""Performance sentinels (gated)."""

from __future__ import annotations

from datetime import datetime

import pytest

from domoschema.codes import ColumnType
from domoschema.contracts import Column, Schema
from domoschema.kernel.diff import diff_schemas
from domoschema.kernel.introspect import FieldSpec, RecordType
from domoschema.kernel.reflect import SchemaReflector

MAX_REFLECT_WIDE_MS = 50.0
MAX_CACHED_REFLECT_MS = 0.5
MAX_DIFF_WIDE_MS = 20.0

WIDTH = 250
KINDS = (int, float, str, bool, datetime)


def _wide_record() -> RecordType:
    leaves = tuple(FieldSpec(f"col_{i}", KINDS[i % len(KINDS)]) for i in range(WIDTH))
    half = RecordType("Half", leaves[: WIDTH // 2])
    return RecordType("Wide", (FieldSpec("half", half, "-"),) + leaves[WIDTH // 2:])


def _assert_budget(benchmark, max_ms: float) -> None:
    mean_ms = benchmark.stats.stats.mean * 1000.0
    assert mean_ms < max_ms, f"Mean {mean_ms:.2f} ms exceeded budget {max_ms:.2f} ms"


@pytest.mark.perf
def test_reflect_wide_record_sentinel(benchmark):
    record = _wide_record()
    schema = benchmark.pedantic(lambda: SchemaReflector().generate_schema(record), rounds=5, iterations=1)
    assert len(schema.columns) == WIDTH
    _assert_budget(benchmark, MAX_REFLECT_WIDE_MS)


@pytest.mark.perf
def test_cached_reflect_sentinel(benchmark):
    record = _wide_record()
    reflector = SchemaReflector()
    reflector.generate_schema(record)
    schema = benchmark(reflector.generate_schema, record)
    assert len(schema.columns) == WIDTH
    _assert_budget(benchmark, MAX_CACHED_REFLECT_MS)


@pytest.mark.perf
def test_diff_wide_schema_sentinel(benchmark):
    local = SchemaReflector().generate_schema(_wide_record())
    remote = Schema(columns=tuple(
        Column(name=c.name.upper(), type=ColumnType.STRING) for c in local.columns
    ) + (Column(name="extra", type=ColumnType.LONG),))
    result = benchmark.pedantic(lambda: diff_schemas(local, remote), rounds=5, iterations=1)
    assert len(result.columns_to_add) == WIDTH
    assert len(result.columns_to_delete) == WIDTH + 1
    _assert_budget(benchmark, MAX_DIFF_WIDE_MS)
