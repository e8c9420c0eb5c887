"""Command-line interface for schemadoc."""

import argparse
import logging
import sys
from pathlib import Path

from schemadoc.config import Config
from schemadoc.exceptions import ConfigError
from schemadoc.schema.additional import load_additional_data
from schemadoc.schema.exporter import export_schema_json, write_schema_json
from schemadoc.schema.loader import load_schema
from schemadoc.schema.sorter import sort_schema
from schemadoc.schema.validator import SchemaValidator

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="schemadoc",
        description="Merge additional relations and comments into a database schema snapshot",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser(
        "validate", help="Check schema snapshot invariants"
    )
    validate_parser.add_argument("--schema", dest="schema_path", type=Path)

    build_parser = subparsers.add_parser(
        "build", help="Merge additional data, sort, and write the schema JSON"
    )
    build_parser.add_argument("--schema", dest="schema_path", type=Path)
    build_parser.add_argument(
        "--additional-data",
        dest="additional_data",
        type=Path,
        action="append",
        help="YAML file with additional relations and comments (repeatable)",
    )
    build_parser.add_argument(
        "--output",
        type=Path,
        help="Output file path (default: stdout)",
    )
    build_parser.add_argument(
        "--atomic",
        action="store_true",
        default=None,
        help="Leave the schema untouched if any additional data fails to merge",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )

    if args.command == "validate":
        return cmd_validate(args)
    elif args.command == "build":
        return cmd_build(args)
    else:
        print(f"Command '{args.command}' not yet implemented", file=sys.stderr)
        return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a schema snapshot."""
    try:
        config = Config.from_env(
            schema_path=str(args.schema_path) if args.schema_path else None
        )
        config.validate()
        schema = load_schema(Path(config.schema_path))
        result = SchemaValidator().validate(schema)
        if result.ok:
            print(
                f"Validated {len(schema.tables)} tables and {len(schema.relations)} relations"
            )
            return 0
        print(f"Found {len(result.issues)} issue(s):")
        for issue in result.issues:
            print(f"  [{issue.kind}] {issue.message}")
        return 1
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"Validation error: {e}", file=sys.stderr)
        return 1


def cmd_build(args: argparse.Namespace) -> int:
    """Load, merge additional data, sort, and export a schema."""
    try:
        config = Config.from_env(
            schema_path=str(args.schema_path) if args.schema_path else None,
            additional_data_paths=[str(p) for p in args.additional_data]
            if args.additional_data
            else None,
            output_path=str(args.output) if args.output else None,
            atomic_merge=args.atomic,
        )
        config.validate()

        schema = load_schema(Path(config.schema_path))
        logger.debug(
            f"Loaded schema '{schema.name}' with {len(schema.tables)} tables"
        )
        for path in config.additional_data_paths:
            load_additional_data(schema, path, atomic=config.atomic_merge)
        sort_schema(schema)

        if config.output_path:
            written = write_schema_json(schema, Path(config.output_path))
            logger.info(f"Wrote {written}")
        else:
            print(export_schema_json(schema))
        return 0
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"Build error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
