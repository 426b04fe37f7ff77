"""The ``tftest`` command line."""

from __future__ import annotations

import argparse
from typing import Sequence

from tftest import log
from tftest.errors import FrameworkError
from tftest.format_command import format_tests
from tftest.run_command import run_tests

VERSION = "dev"

_ROOT_DESCRIPTION = """🚀 TFTest CLI 🚀
A command-line tool for testing Terraform modules using the Terraform Test Framework.

This framework is opinionated about directory structure and expects:
- Examples in the 'examples/' directory
- Tests in the 'tests/' directory with the same name as the example
- Common tests in 'tests/common/'
- Helper functions in 'tests/helpers/'

Run 'tftest run' to execute tests for your Terraform module."""

_RUN_DESCRIPTION = """Run tests for a Terraform module using the Terraform Test Framework.

Examples:
  tftest run                     # Run all tests in the current directory
  tftest run --example-path vpc  # Run tests for the vpc example
  tftest run --common            # Run only common tests
  tftest run --module-root /path/to/terraform-module  # Run all tests in the specified module
  tftest run --parallel-fixtures=true   # Run test fixtures in parallel
  tftest run --parallel-tests=true     # Run tests within fixtures in parallel

This command expects a specific directory structure:
- Examples in the 'examples/' directory
- Tests in the 'tests/' directory with the same name as the example
- Common tests in 'tests/common/'
- Helper functions in 'tests/helpers/'"""

_FORMAT_DESCRIPTION = """Format and verify Go test code in the tests directory.

This command formats Go test files using 'gofmt' and verifies the formatting.
If formatting issues are found, it will attempt to fix them and exit with a non-zero
status code if any issues couldn't be automatically fixed.

Examples:
  tftest format --all            # Format all Go test files, verifies each example has a matching test directory
  tftest format --example-path vpc    # Format only the vpc example test files, verifies the example exists
  tftest format --common         # Format only common test files, verifies the common directory exists

The command verifies the directory structure follows the expected pattern:
- With --all: Checks each example has a matching test directory
- With --example-path: Checks both the example and its test directory exist
- With --common: Checks the common test directory exists"""

_TRUE = {"1", "t", "true"}
_FALSE = {"0", "f", "false"}


class _HelpFormatter(argparse.RawDescriptionHelpFormatter):
    def add_usage(self, usage, actions, groups, prefix=None):
        super().add_usage(usage, actions, groups, "Usage: " if prefix is None else prefix)


def _flag(text: str) -> bool:
    lowered = text.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {text}")


def _bool_option(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    parser.add_argument(
        name, type=_flag, nargs="?", const=True, default=False, metavar="BOOL", help=help_text
    )


def _cmd_run(args: argparse.Namespace) -> None:
    run_tests(
        args.module_root,
        args.example_path,
        args.common,
        args.parallel_fixtures,
        args.parallel_tests,
    )


def _cmd_format(args: argparse.Namespace) -> None:
    format_tests(args.module_root, args.example_path, args.common, args.all)


def _cmd_version(args: argparse.Namespace) -> None:
    log.info("TFTest CLI %s", VERSION)
    print(f"🎉 TFTest CLI {VERSION} 🎉")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for ``tftest`` and its subcommands."""
    verbose_help = "Set verbosity level (DEBUG, INFO, WARN, ERROR, FATAL)"

    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument(
        "-v", "--verbose", default=argparse.SUPPRESS, metavar="LEVEL", help=verbose_help
    )

    parser = argparse.ArgumentParser(
        prog="tftest", description=_ROOT_DESCRIPTION, formatter_class=_HelpFormatter
    )
    parser.add_argument("-v", "--verbose", default="", metavar="LEVEL", help=verbose_help)
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"TFTest CLI {VERSION}",
        help="Print version information",
    )

    commands = parser.add_subparsers(
        dest="command", title="Available Commands", metavar="COMMAND"
    )

    run_parser = commands.add_parser(
        "run",
        parents=[shared],
        help="Run tests for a Terraform module",
        description=_RUN_DESCRIPTION,
        formatter_class=_HelpFormatter,
    )
    run_parser.add_argument(
        "--module-root",
        default=".",
        help="Path to the root of the Terraform module (runs all tests)",
    )
    run_parser.add_argument(
        "--example-path", default="", help="Specific example to test (leave empty to test all)"
    )
    run_parser.add_argument("--common", action="store_true", help="Run only common tests")
    _bool_option(
        run_parser, "--parallel-fixtures", "Run test fixtures in parallel (default: false)"
    )
    _bool_option(
        run_parser,
        "--parallel-tests",
        "Run tests within each fixture in parallel (default: false)",
    )
    run_parser.set_defaults(handler=_cmd_run)

    format_parser = commands.add_parser(
        "format",
        parents=[shared],
        help="Format and verify Go test code",
        description=_FORMAT_DESCRIPTION,
        formatter_class=_HelpFormatter,
    )
    format_parser.add_argument(
        "--module-root", default=".", help="Path to the root of the Terraform module"
    )
    format_parser.add_argument(
        "--example-path", default="", help="Specific example test files to format"
    )
    format_parser.add_argument(
        "--common", action="store_true", help="Format only common test files"
    )
    format_parser.add_argument(
        "-A", "--all", action="store_true", help="Format all Go test files"
    )
    format_parser.set_defaults(handler=_cmd_format)

    version_parser = commands.add_parser(
        "version",
        parents=[shared],
        help="Print the version number",
        description="Print the version number",
        formatter_class=_HelpFormatter,
    )
    version_parser.set_defaults(handler=_cmd_version)

    return parser


def _apply_verbosity(level_name: str) -> None:
    if not level_name:
        return
    try:
        level = log.parse_log_level(level_name)
    except ValueError as exc:
        print(f"Warning: {exc}, using INFO level instead")
        level = log.LogLevel.INFO
    log.set_default_log_level(level)
    log.debug("Log level set to %s", level)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return its exit status."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1

    _apply_verbosity(args.verbose)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0

    try:
        handler(args)
    except FrameworkError as exc:
        log.error("Command failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())