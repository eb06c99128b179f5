"""
CLI commands for compiling XML Schema documents into C++ sources.
"""

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from .compiler import compile_schema
from .config import load_settings
from .errors import XsdCodegenError
from .model_builder import build_model
from .schema import load


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def cmd_generate(args):
    """Generate enumeration and numeric sources command."""
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.settings)
        result = compile_schema(args.schema, args.output, settings, source_root=args.build)
    except (XsdCodegenError, ValidationError) as e:
        print(f"✗ Generation failed: {e}")
        return 1

    model = result.model
    print(
        f"✓ Generated {len(model.enumerations)} enumerations, "
        f"{len(model.integers)} integers and {len(model.decimals)} decimals "
        f"into: {args.output}"
    )
    if args.build:
        print(f"✓ Build and tests passed for: {args.build}")
    return 0


def cmd_entries(args):
    """List top-level schema entries command."""
    setup_logging(args.verbose)

    try:
        xsd = load(args.schema)
    except XsdCodegenError as e:
        print(f"✗ Failed to load schema: {e}")
        return 1
    sys.stdout.write(str(xsd))
    return 0


def cmd_dump(args):
    """Print the derived model as JSON command."""
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.settings)
        model = build_model(load(args.schema), include_builtin_numerics=settings.include_builtin_numerics)
    except (XsdCodegenError, ValidationError) as e:
        print(f"✗ Failed to build model: {e}")
        return 1
    print(json.dumps(model.to_dict(), indent=2))
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="XML Schema to C++ code generator",
        prog="xsd-codegen"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands"
    )

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate enumeration and numeric C++ sources from a schema"
    )
    generate_parser.add_argument("schema", help="Path to the XSD document")
    generate_parser.add_argument(
        "-o", "--output",
        required=True,
        help="Directory receiving the generated files"
    )
    generate_parser.add_argument(
        "--settings",
        help="JSON settings file"
    )
    generate_parser.add_argument(
        "--build",
        metavar="SOURCE_ROOT",
        help="Build and test the C++ project at SOURCE_ROOT after generating"
    )
    generate_parser.set_defaults(func=cmd_generate)

    # Entries command
    entries_parser = subparsers.add_parser(
        "entries",
        help="List the top-level entries of a schema"
    )
    entries_parser.add_argument("schema", help="Path to the XSD document")
    entries_parser.set_defaults(func=cmd_entries)

    # Dump command
    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the derived enumeration and numeric model as JSON"
    )
    dump_parser.add_argument("schema", help="Path to the XSD document")
    dump_parser.add_argument(
        "--settings",
        help="JSON settings file"
    )
    dump_parser.set_defaults(func=cmd_dump)

    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
