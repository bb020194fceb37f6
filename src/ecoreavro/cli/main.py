# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the ecore-avro command-line interface."""

import argparse
import sys
from pathlib import Path

from ecoreavro.emission.build import GenerationError, check, generate
from ecoreavro.workspace.config import (
    CONFIG_FILE_NAME,
    DEFAULT_OUTPUT_DIRECTORY,
    WorkspaceConfigError,
    load_workspace_config,
)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the ecore-avro CLI."""
    parser = argparse.ArgumentParser(
        prog="ecoreavro",
        description="ecore-avro: generate Avro protocols from Ecore meta-models",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Create a generator configuration file",
        description=f"Create a template {CONFIG_FILE_NAME} in a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to create the configuration in (default: current directory)",
    )

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate Avro protocol files",
        description="Translate each model into an Avro protocol (.avpr) below the output directory.",
    )
    _add_input_arguments(generate_parser)
    generate_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help=f"Output root directory (default: from the configuration, else {DEFAULT_OUTPUT_DIRECTORY})",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check that models translate without writing files",
        description="Load and translate each model, reporting errors without writing output.",
    )
    _add_input_arguments(check_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help=f"Directory containing {CONFIG_FILE_NAME} (default: current directory)",
    )
    parser.add_argument(
        "--model",
        "-m",
        action="append",
        default=[],
        metavar="PATH",
        help="Model file to translate (repeatable); overrides the configured models",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "generate":
        return _cmd_generate(args)
    if args.command == "check":
        return _cmd_check(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME

    if config_file.exists():
        print(
            f"Error: configuration already exists at '{config_file}'.",
            file=sys.stderr,
        )
        return 1

    config_content = (
        "# ecore-avro generator configuration\n"
        "# Paths are relative to this file.\n"
        "\n"
        f"output-directory: {DEFAULT_OUTPUT_DIRECTORY}\n"
        "models: []\n"
    )
    config_file.write_text(config_content, encoding="utf-8")
    print(f"Initialized configuration at '{config_file}'.")
    return 0


def _resolve_inputs(args: argparse.Namespace) -> tuple[list[Path], Path] | None:
    """Return the model files and output root for a run, or None after reporting an error."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return None

    models: list[Path] = []
    output_root = directory / DEFAULT_OUTPUT_DIRECTORY
    config_file = directory / CONFIG_FILE_NAME

    if config_file.exists():
        try:
            config = load_workspace_config(config_file)
        except WorkspaceConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return None
        models = [(directory / m).resolve() for m in config.models]
        output_root = directory / config.output_directory
    elif not args.model:
        print(
            f"Error: no {CONFIG_FILE_NAME} found at '{directory}'. "
            "Run 'ecoreavro init' or pass models with --model.",
            file=sys.stderr,
        )
        return None

    # --model replaces the configured models but keeps the configured output directory.
    if args.model:
        models = [Path(m).resolve() for m in args.model]

    output = getattr(args, "output", None)
    if output is not None:
        output_root = Path(output).resolve()
    return models, output_root


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    inputs = _resolve_inputs(args)
    if inputs is None:
        return 1
    models, output_root = inputs

    if not models:
        print("No models configured. Nothing to generate.")
        return 0

    print(f"Generating {len(models)} protocol(s)...")
    try:
        result = generate(models, output_root)
    except GenerationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for generated in result.protocols:
        status = "written" if generated.written else "unchanged"
        print(f"  {generated.path} ({status})")
    for resource_dir in result.resource_directories:
        print(f"Generated resources: {resource_dir}")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    inputs = _resolve_inputs(args)
    if inputs is None:
        return 1
    models, _ = inputs

    if not models:
        print("No models configured. Nothing to check.")
        return 0

    print(f"Checking {len(models)} model(s)...")
    try:
        protocols = check(models)
    except GenerationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for model_path, protocol in zip(models, protocols):
        print(f"  {model_path}: {protocol.namespace}.{protocol.name} with {len(protocol.types)} type(s)")
    print("No issues found.")
    return 0
