# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the cidl2rs command-line interface."""

import argparse
import sys
from pathlib import Path
from typing import Any, NoReturn

from cidl2rs.codegen.errors import GenerationError
from cidl2rs.codegen.generate import DEFAULT_COBIA_MODULE, DEFAULT_NATIVE_MODULE, GeneratorOptions, generate
from cidl2rs.loader.artifact import CollaboratorParseError, load_libraries
from cidl2rs.loader.resolver import LibraryTypeResolver
from cidl2rs.settings.config import CONFIG_FILE_NAME, GeneratorConfig, GeneratorConfigError, load_generator_config

# ###############
# Public Interface
# ###############


class UsageError(Exception):
    """Raised for invalid command-line usage."""


def main() -> None:
    """Run the cidl2rs CLI."""
    parser = _build_parser()
    try:
        args = parser.parse_args()
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    sys.exit(_run(args))


# ################
# Implementation
# ################


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors as :class:`UsageError`."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


class _StoreOnce(argparse.Action):
    """Store an option value, rejecting a second specification of the same option."""

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> None:
        if getattr(namespace, self.dest) is not None:
            parser.error(f"multiple specifications of {self.help}")
        setattr(namespace, self.dest, values)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="cidl2rs",
        description="Generate Rust bindings from resolved CIDL type library descriptions.",
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        metavar="INPUT",
        help="Resolved CIDL description file, or the name of the library to generate",
    )
    parser.add_argument("-o", "--output", action=_StoreOnce, help="output file name")
    parser.add_argument("-c", "--cobia-module", action=_StoreOnce, help="COBIA module name")
    parser.add_argument("-m", "--module-name", action=_StoreOnce, help="module name as referred in example code")
    parser.add_argument("-n", "--native-module", action=_StoreOnce, help="native module name")
    parser.add_argument("-s", "--native-namespace", action=_StoreOnce, help="native namespace")
    parser.add_argument(
        "--config",
        action=_StoreOnce,
        help=f"generator configuration file (default: {CONFIG_FILE_NAME} in the current directory)",
    )
    return parser


def _load_config(args: argparse.Namespace) -> GeneratorConfig:
    """Load the configuration file named on the command line or found in the working directory."""
    if args.config is not None:
        return load_generator_config(Path(args.config))
    default_path = Path.cwd() / CONFIG_FILE_NAME
    if default_path.exists():
        return load_generator_config(default_path)
    return GeneratorConfig()


def _run(args: argparse.Namespace) -> int:
    """Generate the bindings and return the process exit status."""
    try:
        config = _load_config(args)
    except GeneratorConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    options = GeneratorOptions(
        cobia_module=args.cobia_module or config.cobia_module or DEFAULT_COBIA_MODULE,
        example_module=args.module_name or config.example_module,
        native_module=args.native_module or config.native_module or DEFAULT_NATIVE_MODULE,
        native_namespace=args.native_namespace or config.native_namespace,
    )
    output = args.output or config.output

    try:
        parse_result = load_libraries(args.inputs)
        library = parse_result.target()
    except CollaboratorParseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    resolver = LibraryTypeResolver(parse_result.libraries, default_namespace=library.name)
    try:
        code = generate(library, resolver, options)
    except GenerationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if output is None:
        sys.stdout.write(code)
        return 0

    output_path = Path(output)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(code, encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write output file '{output_path}': {exc}", file=sys.stderr)
        return 1

    print(f"Generated bindings for library '{library.name}' in '{output_path}'.")
    return 0
