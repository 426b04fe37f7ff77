"""Checks that applied examples plan no further changes."""

from __future__ import annotations

from tftest.context import TestContext, idempotency_enabled
from tftest.log import Logger, LogLevel
from tftest.terraform import plan

_log = Logger(LogLevel.INFO, "idempotency")


def verify(ctx: TestContext) -> bool:
    """Return True if planning ``ctx`` produces no output, or checks are disabled."""
    name = ctx.config.name
    if not idempotency_enabled():
        _log.info("Idempotency testing disabled for %s via TERRATEST_IDEMPOTENCY=false", name)
        return True

    _log.info("Running idempotency test for %s", name)
    if ctx.terraform is None:
        _log.error("Idempotency test failed for %s: no terraform options", name)
        return False
    plan_result = plan(ctx.terraform)
    if plan_result != "":
        _log.error(
            "Idempotency test failed for %s: Terraform plan would make changes: %s",
            name,
            plan_result,
        )
        return False

    _log.info("Idempotency test passed for %s", name)
    return True


def verify_all(contexts: dict[str, TestContext]) -> dict[str, bool]:
    """Verify every context, keyed by the same names."""
    return {name: verify(ctx) for name, ctx in contexts.items()}