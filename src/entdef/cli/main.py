# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the EntDef command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter

from entdef.errors import DefinitionError, EvaluationError
from entdef.model.entities import EntityDefinition, PointEntityDefinition
from entdef.model.types import Color
from entdef.parser.parser import DEFAULT_ENTITY_COLOR, DefParser
from entdef.parser.status import CollectingParserStatus, ParserWarning
from entdef.validation.checks import validate
from entdef.workspace.config import CONFIG_FILE_NAME, ConfigError, load_config

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the EntDef CLI."""
    parser = argparse.ArgumentParser(
        prog="entdef",
        description="EntDef - entity definition file toolkit",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Create a starter configuration file",
        description=f"Write a starter {CONFIG_FILE_NAME} into a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to write the configuration to (default: current directory)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Parse and validate definition files",
        description="Parse definition files and report warnings and consistency errors.",
    )
    check_parser.add_argument(
        "files",
        nargs="*",
        help="Definition files to check (default: the files listed in the configuration)",
    )
    check_parser.add_argument(
        "--config",
        default=None,
        help=f"Configuration file (default: {CONFIG_FILE_NAME} in the current directory, if present)",
    )
    check_parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors",
    )

    # dump subcommand
    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the parsed entity classes as JSON",
        description="Parse a definition file and print its entity classes as JSON.",
    )
    dump_parser.add_argument("file", help="Definition file to parse")
    dump_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )

    # model subcommand
    model_parser = subparsers.add_parser(
        "model",
        help="Show the model a point class displays",
        description="Evaluate a point class's model definition for the given entity attributes.",
    )
    model_parser.add_argument("file", help="Definition file to parse")
    model_parser.add_argument("class_name", metavar="CLASS", help="Name of the point class")
    model_parser.add_argument(
        "--attr",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Entity attribute to evaluate the model with (repeatable)",
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_STARTER_CONFIG = (
    "# EntDef configuration\n"
    "\n"
    "# Color for brush classes that declare none (3 or 4 channels, 0..1 or 0..255).\n"
    "default-color: [0.6, 0.6, 0.6]\n"
    "\n"
    "# Definition files checked by 'entdef check', relative to this file.\n"
    "definition-files: []\n"
    "\n"
    "# Fail 'entdef check' on warnings.\n"
    "strict: false\n"
)


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "dump":
        return _cmd_dump(args)
    if args.command == "model":
        return _cmd_model(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME

    if config_file.exists():
        print(f"Error: configuration already exists at '{config_file}'.", file=sys.stderr)
        return 1

    config_file.write_text(_STARTER_CONFIG, encoding="utf-8")
    print(f"Initialized EntDef configuration at '{config_file}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    default_color = DEFAULT_ENTITY_COLOR
    strict = args.strict
    files = [Path(name) for name in args.files]

    config_path = Path(args.config) if args.config else Path(CONFIG_FILE_NAME)
    if args.config or config_path.exists():
        try:
            config = load_config(config_path)
        except ConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        default_color = config.default_color
        strict = strict or config.strict
        if not files:
            files = config.resolve_definition_files(config_path.resolve().parent)

    if not files:
        print("No definition files to check.")
        return 0

    print(f"Checking {len(files)} definition file(s)...")
    has_errors = False
    has_warnings = False
    for path in files:
        loaded = _load_definitions(path, default_color)
        if loaded is None:
            has_errors = True
            continue
        definitions, warnings = loaded
        for warning in warnings:
            print(f"Warning: {path}:{warning}")
            has_warnings = True

        result = validate(definitions)
        for finding in result.warnings:
            print(f"Warning: {path}: {finding.message}")
            has_warnings = True
        for error in result.errors:
            print(f"Error: {path}: {error.message}", file=sys.stderr)
            has_errors = True

    if has_errors or (strict and has_warnings):
        return 1

    print("No issues found." if not has_warnings else "No errors found.")
    return 0


def _cmd_dump(args: argparse.Namespace) -> int:
    """Handle the dump subcommand."""
    loaded = _load_definitions(Path(args.file), DEFAULT_ENTITY_COLOR)
    if loaded is None:
        return 1
    definitions, warnings = loaded
    for warning in warnings:
        print(f"Warning: {args.file}:{warning}", file=sys.stderr)

    adapter = TypeAdapter(list[EntityDefinition])
    print(adapter.dump_json(definitions, indent=args.indent).decode("utf-8"))
    return 0


def _cmd_model(args: argparse.Namespace) -> int:
    """Handle the model subcommand."""
    attributes: dict[str, str] = {}
    for item in args.attr:
        key, separator, value = item.partition("=")
        if not separator or not key:
            print(f"Error: invalid attribute '{item}', expected KEY=VALUE.", file=sys.stderr)
            return 1
        attributes[key] = value

    loaded = _load_definitions(Path(args.file), DEFAULT_ENTITY_COLOR)
    if loaded is None:
        return 1
    definitions, _ = loaded

    definition = next((d for d in definitions if d.name == args.class_name), None)
    if definition is None:
        print(f"Error: no entity class named '{args.class_name}'.", file=sys.stderr)
        return 1
    if not isinstance(definition, PointEntityDefinition) or definition.model is None:
        print(f"'{args.class_name}' has no model definition.")
        return 0

    try:
        specification = definition.model.model_specification(attributes)
    except EvaluationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if specification is None:
        print(f"No model selected for '{args.class_name}'.")
        return 0
    print(f"path: {specification.path}")
    print(f"skin: {specification.skin}")
    print(f"frame: {specification.frame}")
    return 0


def _load_definitions(path: Path, default_color: Color) -> tuple[list[EntityDefinition], list[ParserWarning]] | None:
    """Parse one file; returns (definitions, warnings), or None after printing an error."""
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot read '{path}': {exc}", file=sys.stderr)
        return None

    status = CollectingParserStatus(source_label=str(path))
    try:
        definitions = DefParser(source, default_color).parse_definitions(status)
    except DefinitionError as exc:
        print(f"Error: {path}: {exc}", file=sys.stderr)
        return None
    return definitions, status.warnings
