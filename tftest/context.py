"""Test configuration and context, example discovery and environment switches."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from tftest.errors import config_error
from tftest.terraform import TerraformOptions, output

EXAMPLE_PREFIX = "example-"


@dataclass
class TestConfig:
    """Configuration for one example: its name and extra terraform variables."""

    __test__ = False

    name: str = ""
    extra_vars: dict[str, Any] = field(default_factory=dict)


@dataclass
class TestContext:
    """A test configuration together with the terraform options it runs with."""

    __test__ = False

    config: TestConfig = field(default_factory=TestConfig)
    terraform: TerraformOptions | None = None
    example_path: str = ""
    name: str = ""
    terraform_vars: dict[str, Any] = field(default_factory=dict)

    def get_output(self, key: str) -> str:
        """Return the terraform output ``key``."""
        if self.terraform is None:
            raise config_error(f"context {self.name!r} has no terraform options")
        return output(self.terraform, key)

    def variables(self) -> dict[str, Any]:
        """Return the variables passed to terraform, or an empty dict."""
        if self.terraform is not None and self.terraform.vars is not None:
            return self.terraform.vars
        return {}


def new_test_context(
    example_path: str, variables: dict[str, Any] | None = None
) -> TestContext:
    """Create a context for ``example_path`` with empty terraform options."""
    return TestContext(
        name=example_path,
        terraform=TerraformOptions(),
        terraform_vars=variables if variables is not None else {},
        example_path=example_path,
    )


def idempotency_enabled() -> bool:
    """Idempotency checks run unless TERRATEST_IDEMPOTENCY is exactly "false"."""
    return os.environ.get("TERRATEST_IDEMPOTENCY", "") != "false"


def discover_examples(module_root_path: str | os.PathLike[str]) -> list[str]:
    """Return the sorted names of directories starting with ``example-``."""
    try:
        with os.scandir(module_root_path) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        raise config_error("Failed to read examples directory", exc) from exc
    return [
        entry.name
        for entry in entries
        if entry.is_dir() and entry.name.startswith(EXAMPLE_PREFIX)
    ]


def parallel_tests_enabled() -> bool:
    """False when TERRATEST_DISABLE_PARALLEL_TESTS is "true" in any case."""
    return os.environ.get("TERRATEST_DISABLE_PARALLEL_TESTS", "").lower() != "true"