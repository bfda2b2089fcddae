"""CLI for typed transformation operations."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from typed_transform.config.settings import settings
from typed_transform.transformation.detector import detect_type, normalize_target_type
from typed_transform.transformation.exceptions import TransformationError
from typed_transform.transformation.record_transformer import RecordTransformer
from typed_transform.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def load_records_file(records_path: str) -> List[Any]:
    """Load records from a JSON array/object file or a JSON Lines file."""
    path = Path(records_path)

    if not path.exists():
        raise FileNotFoundError(f"Records file not found: {records_path}")

    with open(path, "r", encoding="utf-8") as f:
        if path.suffix in [".jsonl", ".ndjson"]:
            return [json.loads(line) for line in f if line.strip()]
        if path.suffix == ".json":
            data = json.load(f)
            return data if isinstance(data, list) else [data]

    raise ValueError(f"Unsupported records file format: {path.suffix}")


def _parse_cli_value(raw: str) -> Any:
    """Decode a command-line value as JSON when possible, else keep the string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def transform_command(args: argparse.Namespace) -> int:
    """Transform a records file against a table specification."""
    try:
        records = load_records_file(args.input)
        transformer = RecordTransformer(
            dialect=args.dialect,
            on_error=args.on_error,
            batch_size=args.batch_size,
        )

        logger.info(f"Transforming {len(records)} records from {args.input}")
        result = transformer.transform_records(records, args.table)

        payload = json.dumps(result.rows, indent=2, default=str, ensure_ascii=False)
        summary = sys.stderr
        if args.output:
            Path(args.output).write_text(payload + "\n", encoding="utf-8")
            summary = sys.stdout
        else:
            print(payload)

        stats = result.statistics
        print(
            f"✓ {len(result.rows)}/{stats.total_records} records transformed for "
            f"{result.table_name} ({stats.failed_records} failed, "
            f"{stats.warning_count} warnings, avg confidence {stats.average_confidence:.2f})",
            file=summary,
        )
        for error in result.errors:
            print(
                f"  ✗ record {error.record_index} column {error.column_name}: "
                f"[{error.error_type.value}] {error.message}",
                file=summary,
            )
        if args.show_warnings:
            for warning in result.warnings:
                print(f"  ! {warning}", file=summary)

        return 0
    except TransformationError as e:
        logger.error(f"Transformation aborted: {e}")
        print(f"✗ Transformation aborted: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Failed to transform records: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def detect_command(args: argparse.Namespace) -> int:
    """Print the detected source type of each value."""
    for raw in args.values:
        value = raw if args.raw else _parse_cli_value(raw)
        print(f"{raw}\t{detect_type(value).value}")
    return 0


def normalize_command(args: argparse.Namespace) -> int:
    """Print the canonical target type of each declared column type."""
    for declared in args.types:
        print(f"{declared}\t{normalize_target_type(declared).value}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="typed-transform",
        description="Transform loosely-typed JSON values into typed destination columns",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Transform command
    transform_parser = subparsers.add_parser("transform", help="Transform a records file")
    transform_parser.add_argument("--input", type=str, required=True, help="Records file (.json or .jsonl)")
    transform_parser.add_argument("--table", type=str, required=True, help="Table specification (YAML or JSON)")
    transform_parser.add_argument(
        "--dialect",
        type=str,
        choices=["postgresql", "mysql", "sqlserver", "sqlite"],
        default=None,
        help="Destination dialect (defaults to DEFAULT_DIALECT)",
    )
    transform_parser.add_argument(
        "--on-error",
        type=str,
        choices=["skip", "raise"],
        default=None,
        help="Skip failing rows or abort on the first failure",
    )
    transform_parser.add_argument("--batch-size", type=int, help="Records per progress chunk")
    transform_parser.add_argument("--output", type=str, help="Write rows to this file instead of stdout")
    transform_parser.add_argument("--show-warnings", action="store_true", help="Print per-value warnings")

    # Detect command
    detect_parser = subparsers.add_parser("detect", help="Detect source types of values")
    detect_parser.add_argument("values", nargs="+", help="Values (decoded as JSON when possible)")
    detect_parser.add_argument("--raw", action="store_true", help="Treat every value as a plain string")

    # Normalize command
    normalize_parser = subparsers.add_parser("normalize", help="Normalize declared column types")
    normalize_parser.add_argument("types", nargs="+", help="Declared types, e.g. VARCHAR(255)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(level=settings.LOG_LEVEL, format_type="console")

    try:
        if args.command == "transform":
            return transform_command(args)
        elif args.command == "detect":
            return detect_command(args)
        elif args.command == "normalize":
            return normalize_command(args)
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
