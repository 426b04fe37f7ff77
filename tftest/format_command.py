"""The ``format`` command: gofmt and go vet over a module's test code."""

from __future__ import annotations

import os
import subprocess

from tftest import log
from tftest.errors import config_error, validation_error
from tftest.run_command import verify_directory_structure


def _all_paths(abs_path: str) -> list[str]:
    examples_path = os.path.join(abs_path, "examples")
    tests_path = os.path.join(abs_path, "tests")

    try:
        with os.scandir(examples_path) as it:
            examples = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        raise config_error("Error reading examples directory", exc) from exc

    paths: list[str] = []
    missing = False
    for example in examples:
        if not example.is_dir():
            continue
        test_path = os.path.join(tests_path, example.name)
        if not os.path.exists(test_path):
            log.error("Missing test directory for example %s: %s", example.name, test_path)
            missing = True
            continue
        paths.append(test_path)

    for optional in ("common", "helpers"):
        optional_path = os.path.join(tests_path, optional)
        if os.path.exists(optional_path):
            paths.append(optional_path)

    if missing:
        raise validation_error("Directory structure validation failed")

    log.info("Formatting all Go test files")
    return paths


def _example_paths(abs_path: str, example_path: str) -> list[str]:
    example_dir = os.path.join(abs_path, "examples", example_path)
    if not os.path.exists(example_dir):
        raise validation_error(f"Example directory not found: {example_dir}")
    test_path = os.path.join(abs_path, "tests", example_path)
    if not os.path.exists(test_path):
        raise validation_error(
            f"Test directory for example {example_path} not found: {test_path}"
        )
    log.info("Formatting example test files: %s", example_path)
    return [test_path]


def _common_paths(abs_path: str) -> list[str]:
    common_path = os.path.join(abs_path, "tests", "common")
    if not os.path.exists(common_path):
        raise validation_error(f"Common test directory not found: {common_path}")
    log.info("Formatting common test files")
    return [common_path]


def _format_path(path: str) -> bool:
    """Format and vet one directory; return True if no unfixed issue remains."""
    log.info("Formatting Go files in: %s", path)
    try:
        check = subprocess.run(
            ["gofmt", "-l", "."], cwd=path, capture_output=True, text=True, check=False
        )
    except OSError as exc:
        log.error("Error checking format: %s", exc)
        return False
    if check.returncode != 0:
        log.error("Error checking format: exit status %d", check.returncode)
        return False

    ok = True
    if check.stdout:
        log.warn("Found formatting issues in:\n%s", check.stdout)
        try:
            fix = subprocess.run(
                ["gofmt", "-w", "."],
                cwd=path,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
            fix_error = None if fix.returncode == 0 else f"exit status {fix.returncode}"
        except OSError as exc:
            fix_error = str(exc)
        if fix_error is not None:
            log.error("Failed to fix formatting issues: %s", fix_error)
            ok = False
        else:
            log.info("Fixed formatting issues")
    else:
        log.info("No formatting issues found")

    try:
        vet = subprocess.run(
            ["go", "vet", "./..."],
            cwd=path,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
        vet_failed, vet_output = vet.returncode != 0, vet.stdout or ""
    except OSError as exc:
        vet_failed, vet_output = True, str(exc)
    if vet_failed:
        log.error("Go vet found issues:\n%s", vet_output)
        ok = False
    else:
        log.info("Go vet passed")
    return ok


def format_tests(
    module_root: str = ".",
    example_path: str = "",
    common_only: bool = False,
    all_examples: bool = False,
) -> None:
    """Format and vet the selected test directories.

    Raises a FrameworkError if the layout is wrong, nothing is selected,
    or an issue could not be fixed.
    """
    abs_path = os.path.abspath(module_root)

    if not verify_directory_structure(abs_path):
        log.error("Invalid directory structure at %s", abs_path)
        log.info("Expected structure:")
        log.info("  - examples/")
        log.info("  - tests/")
        raise validation_error(f"Invalid directory structure at {abs_path}")

    if all_examples:
        paths = _all_paths(abs_path)
    elif example_path:
        paths = _example_paths(abs_path, example_path)
    elif common_only:
        paths = _common_paths(abs_path)
    else:
        raise config_error(
            "Please specify what to format: --all, --example-path, or --common"
        )

    log.info("Module root: %s", abs_path)
    log.info("Starting Go code formatting...")

    results = [_format_path(path) for path in paths]
    if not all(results):
        raise validation_error(
            "Format verification failed! Some issues could not be automatically fixed."
        )
    log.info("Format verification passed! 🎉")