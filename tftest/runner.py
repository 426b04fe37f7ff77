"""Running terraform examples and custom checks against them."""

from __future__ import annotations

import functools
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from tftest.context import (
    TestConfig,
    TestContext,
    discover_examples,
    idempotency_enabled,
    parallel_tests_enabled,
)
from tftest.errors import assertion_error, config_error
from tftest.log import Logger, LogLevel
from tftest.terraform import TerraformOptions, destroy, init_and_apply, plan

CleanupRegistrar = Callable[[Callable[[], object]], object]
TestFunc = Callable[[TestContext], object]

_log = Logger(LogLevel.INFO, "testctx")


def init_terraform(path: str, config: TestConfig) -> TerraformOptions:
    """Terraform options for running in ``path`` with the config's variables."""
    return TerraformOptions(terraform_dir=path, vars=config.extra_vars)


def run(path: str, config: TestConfig) -> TestContext:
    """Build a context for one example without running terraform."""
    return TestContext(
        config=config,
        terraform=init_terraform(path, config),
        example_path=path,
        name=config.name,
    )


def run_example(
    example_path: str,
    config: TestConfig,
    register_cleanup: CleanupRegistrar | None = None,
) -> TestContext:
    """Apply one example and check it is idempotent unless that is disabled.

    ``register_cleanup`` receives a callable that destroys the resources,
    e.g. pytest's ``request.addfinalizer`` or ``ExitStack.callback``.
    """
    ctx = run(example_path, config)
    assert ctx.terraform is not None
    init_and_apply(ctx.terraform)

    if idempotency_enabled():
        _log.info("Running idempotency test...")
        plan_output = plan(ctx.terraform)
        if "No changes" in plan_output or "no changes" in plan_output:
            _log.info("Idempotency test passed")
        else:
            raise assertion_error(
                f"Idempotency test failed: Terraform plan would make changes: {plan_output}"
            )
    else:
        _log.info("Idempotency testing disabled via TERRATEST_IDEMPOTENCY=false")

    if register_cleanup is not None:
        register_cleanup(functools.partial(destroy, ctx.terraform))
    return ctx


def run_custom_tests(results: dict[str, TestContext], test_func: TestFunc) -> None:
    """Call ``test_func`` on every context in ``results``."""
    for ctx in results.values():
        test_func(ctx)


def run_all_examples_with_tests(
    module_root_path: str,
    configs: dict[str, TestConfig] | None = None,
    register_cleanup: CleanupRegistrar | None = None,
    *args: TestFunc,
) -> dict[str, TestContext]:
    """Run all examples, then each test function in ``args`` on every one."""
    results = run_all_examples(module_root_path, configs, register_cleanup)
    for test_func in args:
        run_custom_tests(results, test_func)
    return results


def _default_configs(names: list[str]) -> dict[str, TestConfig]:
    return {name: TestConfig(name=name) for name in names}


def discover_and_run_all_tests(
    module_root_path: str,
    test_func: TestFunc | None = None,
    register_cleanup: CleanupRegistrar | None = None,
) -> dict[str, TestContext]:
    """Run every ``example-`` directory with default configs, then ``test_func``."""
    configs = _default_configs(discover_examples(module_root_path))
    results = run_all_examples(module_root_path, configs, register_cleanup)
    if test_func is not None:
        for ctx in results.values():
            test_func(ctx)
    return results


def run_all_examples(
    module_root_path: str,
    configs: dict[str, TestConfig] | None = None,
    register_cleanup: CleanupRegistrar | None = None,
) -> dict[str, TestContext]:
    """Run every configured ``example-`` directory under ``module_root_path``.

    Without configs, every example runs with a default config. Examples run
    concurrently unless TERRATEST_DISABLE_PARALLEL_TESTS is "true". Every
    example is attempted; if any fail, an assertion error naming them is raised.
    """
    names = discover_examples(module_root_path)
    if not configs:
        configs = _default_configs(names)

    jobs: list[tuple[str, str, TestConfig]] = []
    for name in names:
        config = configs.get(name)
        if config is None:
            _log.info("Skipping example %s: no config provided", name)
            continue
        jobs.append((name, os.path.join(module_root_path, name), config))

    results: dict[str, TestContext] = {}
    failures: dict[str, Exception] = {}

    if parallel_tests_enabled() and jobs:
        with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
            futures = {
                name: pool.submit(run_example, path, config, register_cleanup)
                for name, path, config in jobs
            }
        for name, future in futures.items():
            exc = future.exception()
            if exc is None:
                results[name] = future.result()
            elif isinstance(exc, Exception):
                failures[name] = exc
            else:
                raise exc
    else:
        for name, path, config in jobs:
            try:
                results[name] = run_example(path, config, register_cleanup)
            except Exception as exc:
                failures[name] = exc

    if failures:
        details = "; ".join(f"Example_{name}: {exc}" for name, exc in failures.items())
        raise assertion_error(
            f"{len(failures)} example(s) failed: {details}",
            next(iter(failures.values())),
        )
    return results


def run_single_example(
    module_root_path: str,
    example_name: str,
    config: TestConfig | None = None,
    register_cleanup: CleanupRegistrar | None = None,
) -> TestContext:
    """Run one example; ``"."`` means ``module_root_path`` itself is the example."""
    if example_name == ".":
        example_path = module_root_path
    else:
        example_path = os.path.join(module_root_path, example_name)

    if not os.path.exists(example_path):
        raise config_error(f"Example {example_name} not found at path {example_path}")

    if config is None or config.name == "":
        config = TestConfig(name=example_name)

    return run_example(example_path, config, register_cleanup)