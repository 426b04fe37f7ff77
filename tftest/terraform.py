"""Thin wrappers around the terraform command line."""

from __future__ import annotations

import json
import os
import subprocess
from dataclasses import dataclass, field
from typing import Any

from tftest.errors import terraform_error


@dataclass
class TerraformOptions:
    """Where and how terraform is run, and the variables passed to it."""

    terraform_dir: str = "."
    vars: dict[str, Any] = field(default_factory=dict)
    env_vars: dict[str, str] = field(default_factory=dict)
    binary: str = "terraform"


def _format_var(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value)


def _var_args(options: TerraformOptions) -> list[str]:
    args: list[str] = []
    for key, value in (options.vars or {}).items():
        args += ["-var", f"{key}={_format_var(value)}"]
    return args


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value)


def run_command(options: TerraformOptions, *args: str) -> str:
    """Run terraform with ``args`` in the options' directory and return stdout.

    Raises a terraform FrameworkError if the command cannot start or fails.
    """
    cmd = [options.binary, *args]
    env = {**os.environ, **options.env_vars} if options.env_vars else None
    try:
        completed = subprocess.run(
            cmd,
            cwd=options.terraform_dir or None,
            capture_output=True,
            text=True,
            env=env,
            check=False,
        )
    except OSError as exc:
        raise terraform_error(f"could not run {' '.join(cmd)}", exc) from exc
    if completed.returncode != 0:
        raise terraform_error(
            f"{' '.join(cmd)} exited with status {completed.returncode}: "
            f"{(completed.stderr or '').strip()}"
        )
    return completed.stdout or ""


def init_and_apply(options: TerraformOptions) -> str:
    """Run ``init`` then ``apply`` and return their combined output."""
    out = run_command(options, "init", "-input=false", "-no-color")
    out += run_command(
        options, "apply", "-input=false", "-auto-approve", "-no-color", *_var_args(options)
    )
    return out


def plan(options: TerraformOptions) -> str:
    """Run ``plan`` and return its output."""
    return run_command(
        options, "plan", "-input=false", "-lock=false", "-no-color", *_var_args(options)
    )


def destroy(options: TerraformOptions) -> str:
    """Run ``destroy`` and return its output."""
    return run_command(
        options, "destroy", "-input=false", "-auto-approve", "-no-color", *_var_args(options)
    )


def _output_json(options: TerraformOptions, name: str) -> Any:
    text = run_command(options, "output", "-no-color", "-json", name)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise terraform_error(f"output {name} is not valid JSON", exc) from exc


def output(options: TerraformOptions, name: str) -> str:
    """Return the named output rendered as a string."""
    return _stringify(_output_json(options, name))


def output_map(options: TerraformOptions, name: str) -> dict[str, str]:
    """Return the named map output with its values rendered as strings."""
    value = _output_json(options, name)
    if not isinstance(value, dict):
        raise terraform_error(f"output {name} is not a map")
    return {key: _stringify(item) for key, item in value.items()}


def output_list(options: TerraformOptions, name: str) -> list[str]:
    """Return the named list output with its items rendered as strings."""
    value = _output_json(options, name)
    if not isinstance(value, list):
        raise terraform_error(f"output {name} is not a list")
    return [_stringify(item) for item in value]