"""domoschema CLI: generate and diff dataset schemas from record types."""

import argparse
import json
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import List, Optional

from .config import ReflectorConfig, load_config
from .errors import DomoSchemaError

EXIT_OK = 0
EXIT_DIFFERENCES = 1
EXIT_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    try:
        domoschema_version = get_version("domoschema")
    except PackageNotFoundError:
        domoschema_version = "dev"

    parser = argparse.ArgumentParser(
        prog="domoschema",
        description="Generate Domo dataset schemas from record types and diff them against remote schemas"
    )
    parser.add_argument("--version", action="version", version=f"domoschema {domoschema_version}")

    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--type",
        dest="record_type",
        required=True,
        help="Record type reference, e.g. 'myapp.models:Sale'"
    )
    parent_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="TOML file with a [tool.domoschema] table"
    )
    parent_parser.add_argument(
        "--normalizer",
        default=None,
        help="Column name normalizer (identity, lower, upper, snake_case); overrides --config"
    )
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "generate",
        help="Print the schema generated from a record type",
        parents=[parent_parser]
    )

    diff_parser = subparsers.add_parser(
        "diff",
        help="Diff a record type's schema against a saved remote schema",
        parents=[parent_parser]
    )
    diff_parser.add_argument(
        "--remote",
        type=Path,
        required=True,
        help="Path to a JSON schema or dataset/stream info response"
    )
    diff_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format for stdout"
    )
    diff_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Also write schema_diff.md and schema_diff.json to this directory"
    )
    return parser


def _load_reflector_config(args: argparse.Namespace) -> ReflectorConfig:
    config = load_config(args.config) if args.config else ReflectorConfig()
    if args.normalizer:
        config = ReflectorConfig.from_mapping({**config.model_dump(), "normalizer": args.normalizer})
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point for domoschema commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Lazy imports: only load the kernel once a command is known
    from ._internal.loader import load_record_type, load_schema_from_path
    from .kernel.diff import diff_schemas
    from .kernel.reflect import SchemaReflector
    from .report import generate_json_report, generate_text_report, write_reports

    try:
        reflector = SchemaReflector(_load_reflector_config(args))
        record_type = load_record_type(args.record_type)
        local = reflector.generate_schema(record_type)

        if args.command == "generate":
            if not args.quiet:
                print(json.dumps(local.to_payload(), indent=2))
            return EXIT_OK

        remote = load_schema_from_path(args.remote)
    except DomoSchemaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    result = diff_schemas(local, remote)
    if args.output_dir:
        paths = write_reports(result, local, remote, args.output_dir.resolve())
        if not args.quiet:
            print("[OK] Schema diff complete")
            print(f"  Markdown: {paths['markdown']}")
            print(f"  JSON: {paths['json']}")
    if not args.quiet:
        if args.format == "json":
            print(generate_json_report(result, local, remote))
        else:
            print(generate_text_report(result))

    return EXIT_DIFFERENCES if result.diffs_count() > 0 else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
