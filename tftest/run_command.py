"""The ``run`` command: run a module's Go test suites."""

from __future__ import annotations

import os
import subprocess

from tftest import log
from tftest.errors import assertion_error, internal_error, validation_error


def verify_directory_structure(path: str | os.PathLike[str]) -> bool:
    """Return True if ``path`` holds both ``examples`` and ``tests`` directories."""
    examples_path = os.path.join(path, "examples")
    if not os.path.exists(examples_path):
        log.error("Examples directory not found at: %s", examples_path)
        return False

    tests_path = os.path.join(path, "tests")
    if not os.path.exists(tests_path):
        log.error("Tests directory not found at: %s", tests_path)
        return False

    return True


def _test_path(example_path: str, common_only: bool) -> str:
    if example_path:
        log.info("Running tests for example: %s", example_path)
        return f"./tests/{example_path}/..."
    if common_only:
        log.info("Running common tests")
        return "./tests/common/..."
    log.info("Running all tests")
    return "./tests/..."


def run_tests(
    module_root: str = ".",
    example_path: str = "",
    common_only: bool = False,
    parallel_fixtures: bool = False,
    parallel_tests: bool = False,
) -> None:
    """Run ``go test`` over the module's tests.

    Raises a FrameworkError if the layout is wrong or the tests fail.
    """
    abs_path = os.path.abspath(module_root)

    if not verify_directory_structure(abs_path):
        log.error("Invalid directory structure at %s", abs_path)
        log.info("Expected structure:")
        log.info("  - examples/")
        log.info("  - tests/")
        log.info("  - tests/common/ (optional)")
        log.info("  - tests/helpers/ (optional)")
        raise validation_error(f"Invalid directory structure at {abs_path}")

    if example_path:
        example_dir = os.path.join(abs_path, "examples", example_path)
        test_dir = os.path.join(abs_path, "tests", example_path)
        if not os.path.exists(example_dir):
            raise validation_error(f"Example directory not found: {example_dir}")
        if not os.path.exists(test_dir):
            raise validation_error(f"Test directory for example not found: {test_dir}")

    if common_only:
        common_dir = os.path.join(abs_path, "tests", "common")
        if not os.path.exists(common_dir):
            raise validation_error(f"Common test directory not found: {common_dir}")

    test_path = _test_path(example_path, common_only)

    log.info("Module root: %s", abs_path)
    if parallel_fixtures:
        log.info("Running test fixtures in parallel")
    else:
        log.info("Running test fixtures sequentially")
    if parallel_tests:
        log.info("Running tests within fixtures in parallel")
    else:
        log.info("Running tests within fixtures sequentially")
    log.info("Starting tests...")

    args = ["go", "test", test_path, "-v"]
    if not parallel_fixtures:
        args += ["-p", "1"]

    env = {
        **os.environ,
        "TERRATEST_DISABLE_PARALLEL_TESTS": "false" if parallel_tests else "true",
    }

    try:
        completed = subprocess.run(args, cwd=abs_path, env=env, check=False)
    except OSError as exc:
        raise internal_error("Tests failed", exc) from exc
    if completed.returncode != 0:
        raise assertion_error(f"Tests failed: exit status {completed.returncode}")

    log.info("All tests passed! 🎉")