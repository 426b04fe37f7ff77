"""Assertions on the outputs and state of an applied terraform example.

Every assertion returns None when it holds and raises an assertion
FrameworkError describing the mismatch when it does not.
"""

from __future__ import annotations

import json
import os
import re
from typing import Any

from tftest.context import TestContext
from tftest.errors import FrameworkError, assertion_error, config_error
from tftest.terraform import (
    TerraformOptions,
    output,
    output_list,
    output_map,
    plan,
    run_command,
)

_LINE_SPLIT = re.compile(r"\r?\n")
_VERSION = re.compile(r"Terraform v(\d+\.\d+\.\d+)")
_NO_CHANGES = re.compile(r"No changes|no changes")


def _options(ctx: TestContext) -> TerraformOptions:
    if ctx.terraform is None:
        raise config_error(f"context {ctx.name!r} has no terraform options")
    return ctx.terraform


def _join(base: str, path: str) -> str:
    """Join ``path`` under ``base`` even when ``path`` is absolute."""
    if not base:
        return os.path.normpath(path)
    return os.path.normpath(f"{base}/{path}")


def _state_list(ctx: TestContext) -> str:
    try:
        return run_command(_options(ctx), "state", "list")
    except FrameworkError as exc:
        raise assertion_error("Terraform state list should not fail", exc) from exc


def assert_output_equals(ctx: TestContext, output_name: str, expected_value: Any) -> None:
    actual = output(_options(ctx), output_name)
    if expected_value != actual:
        raise assertion_error(
            f"Output {output_name} should match expected value: "
            f"expected {expected_value!r}, got {actual!r}"
        )


def assert_output_contains(
    ctx: TestContext, output_name: str, expected_substring: str
) -> None:
    actual = output(_options(ctx), output_name)
    if expected_substring not in actual:
        raise assertion_error(
            f"Output {output_name} should contain expected substring "
            f"{expected_substring!r}, got {actual!r}"
        )


def assert_output_matches(ctx: TestContext, output_name: str, regex: str) -> None:
    actual = output(_options(ctx), output_name)
    try:
        pattern = re.compile(regex)
    except re.error as exc:
        raise assertion_error("Regex should be valid", exc) from exc
    if pattern.search(actual) is None:
        raise assertion_error(
            f"Output {output_name} should match regex {regex}, got {actual!r}"
        )


def assert_output_not_empty(ctx: TestContext, output_name: str) -> None:
    if output(_options(ctx), output_name) == "":
        raise assertion_error(f"Output {output_name} should not be empty")


def assert_output_empty(ctx: TestContext, output_name: str) -> None:
    actual = output(_options(ctx), output_name)
    if actual != "":
        raise assertion_error(f"Output {output_name} should be empty, got {actual!r}")


def assert_file_exists(ctx: TestContext) -> None:
    """The file named by the ``output_file_path`` output exists in the example."""
    options = _options(ctx)
    full_path = _join(options.terraform_dir, output(options, "output_file_path"))
    if not os.path.exists(full_path):
        raise assertion_error(f"File should exist at path: {full_path}")


def assert_file_content(ctx: TestContext) -> None:
    """That file holds exactly the ``output_content`` output."""
    options = _options(ctx)
    expected = output(options, "output_content")
    full_path = _join(options.terraform_dir, output(options, "output_file_path"))
    try:
        with open(full_path, encoding="utf-8") as handle:
            content = handle.read()
    except OSError as exc:
        raise assertion_error(f"Should be able to read file: {full_path}", exc) from exc
    if content != expected:
        raise assertion_error(
            f"File content should match expected value: expected {expected!r}, "
            f"got {content!r}"
        )


def assert_output_map_contains_key(ctx: TestContext, output_name: str, key: str) -> None:
    if key not in output_map(_options(ctx), output_name):
        raise assertion_error(f"Output map {output_name} should contain key {key}")


def assert_output_map_key_equals(
    ctx: TestContext, output_name: str, key: str, expected_value: Any
) -> None:
    values = output_map(_options(ctx), output_name)
    if key not in values:
        raise assertion_error(f"Output map {output_name} should contain key {key}")
    if expected_value != values[key]:
        raise assertion_error(
            f"Output map {output_name} key {key} should equal expected value: "
            f"expected {expected_value!r}, got {values[key]!r}"
        )


def assert_output_list_contains(
    ctx: TestContext, output_name: str, expected_value: str
) -> None:
    items = output_list(_options(ctx), output_name)
    if expected_value not in items:
        raise assertion_error(f"Output list {output_name} should contain {expected_value}")


def assert_output_list_length(
    ctx: TestContext, output_name: str, expected_length: int
) -> None:
    items = output_list(_options(ctx), output_name)
    if len(items) != expected_length:
        raise assertion_error(
            f"Output list {output_name} should have length {expected_length}, "
            f"got {len(items)}"
        )


def assert_output_json_contains(
    ctx: TestContext, output_name: str, key: str, expected_value: Any
) -> None:
    text = output(_options(ctx), output_name)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise assertion_error(f"Output {output_name} should be valid JSON", exc) from exc
    if not isinstance(data, dict):
        raise assertion_error(f"Output {output_name} should be a JSON object")
    if key not in data:
        raise assertion_error(f"JSON output {output_name} should contain key {key}")
    if expected_value != data[key]:
        raise assertion_error(
            f"JSON output {output_name} key {key} should equal expected value: "
            f"expected {expected_value!r}, got {data[key]!r}"
        )


def assert_resource_exists(ctx: TestContext, resource_type: str, resource_name: str) -> None:
    address = f"module.example.{resource_type}.{resource_name}"
    if address not in _state_list(ctx):
        raise assertion_error(f"Resource {address} should exist in Terraform state")


def assert_resource_count(ctx: TestContext, resource_type: str, expected_count: int) -> None:
    pattern = re.compile(rf"module\.example\.{resource_type}\.")
    count = sum(
        1 for line in _LINE_SPLIT.split(_state_list(ctx)) if pattern.search(line)
    )
    if count != expected_count:
        raise assertion_error(
            f"Resource count for {resource_type} should match expected count: "
            f"expected {expected_count}, got {count}"
        )


def assert_no_resources_of_type(ctx: TestContext, resource_type: str) -> None:
    assert_resource_count(ctx, resource_type, 0)


def assert_terraform_version(ctx: TestContext, min_version: str) -> None:
    """The reported version compares, as a string, at or above ``min_version``."""
    try:
        text = run_command(_options(ctx), "version")
    except FrameworkError as exc:
        raise assertion_error("Terraform version should not fail", exc) from exc
    match = _VERSION.search(text)
    if match is None:
        raise assertion_error("Should be able to extract Terraform version")
    if not match.group(1) >= min_version:
        raise assertion_error(
            f"Terraform version should be at least {min_version}, got {match.group(1)}"
        )


def assert_idempotent(ctx: TestContext) -> None:
    """A fresh plan reports no changes."""
    if _NO_CHANGES.search(plan(_options(ctx))) is None:
        raise assertion_error("Terraform plan should show no changes after apply")