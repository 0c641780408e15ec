"""Schema diff reports: plain text, markdown and canonical JSON."""

from pathlib import Path
from typing import Dict, Tuple

from domoschema._internal.canonical_json import canonical_dumps
from domoschema.contracts import Schema
from domoschema.kernel.diff import SchemaDiffResult, SchemaMismatch

SECTION_TITLES = (
    ("name_mismatches", "Column Name Changes"),
    ("type_mismatches", "Column Type Changes"),
    ("columns_to_delete", "Columns Only In Domo"),
    ("columns_to_add", "Columns Only In Local Schema"),
)


def generate_text_report(result: SchemaDiffResult) -> str:
    if result.diffs_count() == 0:
        return "No schema differences found."
    return result.to_message()


def _mismatch_row(m: SchemaMismatch) -> str:
    remote_type = m.remote_column_type.value if m.remote_column_type else ""
    local_type = m.compared_column_type.value if m.compared_column_type else ""
    return f"| {m.remote_column_index} | {m.remote_column_name} | {remote_type} | {m.compared_column_name} | {local_type} |"


def generate_markdown_report(result: SchemaDiffResult, local: Schema, remote: Schema) -> str:
    """Generate markdown schema diff report."""
    lines = []
    lines.append("# Schema Diff Report")
    lines.append("")
    lines.append(f"- Local columns: {len(local.columns)}")
    lines.append(f"- Domo columns: {len(remote.columns)}")
    mode = "by column index" if len(local.columns) == len(remote.columns) else "by column name"
    lines.append(f"- Comparison: {mode}")
    lines.append(f"- Differences: {result.diffs_count()}")
    lines.append("")

    if result.diffs_count() == 0:
        lines.append("No schema differences found.")
        return "\n".join(lines) + "\n"

    for attr, title in SECTION_TITLES:
        mismatches: Tuple[SchemaMismatch, ...] = getattr(result, attr)
        if not mismatches:
            continue
        lines.append(f"## {title} ({len(mismatches)})")
        lines.append("")
        lines.append("| Index | Domo Name | Domo Type | Local Name | Local Type |")
        lines.append("|---|---|---|---|---|")
        for m in mismatches:
            lines.append(_mismatch_row(m))
        lines.append("")
    return "\n".join(lines)


def generate_json_report(result: SchemaDiffResult, local: Schema, remote: Schema) -> str:
    report = {
        "local_schema": local.to_payload(),
        "remote_schema": remote.to_payload(),
        "diff": result.to_dict(),
    }
    return canonical_dumps(report)


def write_reports(
    result: SchemaDiffResult,
    local: Schema,
    remote: Schema,
    output_dir: Path,
) -> Dict[str, Path]:
    """Write markdown and JSON reports; returns their paths keyed by format."""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        "markdown": output_dir / "schema_diff.md",
        "json": output_dir / "schema_diff.json",
    }
    paths["markdown"].write_text(generate_markdown_report(result, local, remote), encoding="utf-8")
    paths["json"].write_text(generate_json_report(result, local, remote) + "\n", encoding="utf-8")
    return paths
