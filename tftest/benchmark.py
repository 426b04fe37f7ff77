"""Timing of named operations, alone or collected into suites."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from tftest.log import Logger, LogLevel

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_S = 1_000_000_000


def _decimal(value_ns: int, unit_ns: int) -> str:
    whole, rest = divmod(value_ns, unit_ns)
    if not rest:
        return str(whole)
    digits = len(str(unit_ns)) - 1
    return f"{whole}.{str(rest).zfill(digits).rstrip('0')}"


def _format_duration(seconds: float) -> str:
    """Render a duration compactly, e.g. ``1.5s``, ``250ms``, ``2m3s``."""
    ns = round(seconds * _NS_PER_S)
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < _NS_PER_US:
        return f"{sign}{ns}ns"
    if ns < _NS_PER_MS:
        return f"{sign}{_decimal(ns, _NS_PER_US)}µs"
    if ns < _NS_PER_S:
        return f"{sign}{_decimal(ns, _NS_PER_MS)}ms"
    minutes_total, rest = divmod(ns, 60 * _NS_PER_S)
    hours, minutes = divmod(minutes_total, 60)
    secs = _decimal(rest, _NS_PER_S)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


@dataclass
class BenchmarkResult:
    """Outcome of one timed operation; ``duration`` is in seconds."""

    name: str
    duration: float
    success: bool
    error: BaseException | None = None

    def __str__(self) -> str:
        status = "✅ Success" if self.success else f"❌ Failed: {self.error}"
        return f"{self.name}: {status} ({_format_duration(self.duration)})"


def benchmark(name: str, fn: Callable[[], object]) -> BenchmarkResult:
    """Run ``fn`` and time it; an exception it raises marks the result failed."""
    logger = Logger(LogLevel.INFO, "Benchmark")
    logger.info("Starting benchmark: %s", name)

    error: BaseException | None = None
    start = time.perf_counter()
    try:
        fn()
    except Exception as exc:
        error = exc
    duration = time.perf_counter() - start

    result = BenchmarkResult(name, duration, error is None, error)
    if error is not None:
        logger.error(
            "Benchmark failed: %s (%s): %s", name, _format_duration(duration), error
        )
    else:
        logger.info("Benchmark completed: %s (%s)", name, _format_duration(duration))
    return result


@dataclass
class BenchmarkSuite:
    """A named collection of benchmark results."""

    name: str
    results: list[BenchmarkResult] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._logger = Logger(LogLevel.INFO, f"BenchmarkSuite[{self.name}]")

    def run(self, name: str, fn: Callable[[], object]) -> BenchmarkResult:
        """Benchmark ``fn`` and record its result in the suite."""
        self._logger.info("Running benchmark: %s", name)
        result = benchmark(name, fn)
        self.results.append(result)
        return result

    @property
    def total_duration(self) -> float:
        return sum(r.duration for r in self.results)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return len(self.results) - self.success_count

    def summary(self) -> str:
        return (
            f"Benchmark Suite: {self.name}\n"
            f"Total Duration: {_format_duration(self.total_duration)}\n"
            f"Total Benchmarks: {len(self.results)}\n"
            f"Successful: {self.success_count}\n"
            f"Failed: {self.failure_count}"
        )

    def print_summary(self) -> None:
        log = self._logger
        log.info("Benchmark Suite Summary:")
        log.info("------------------------")
        log.info("Suite: %s", self.name)
        log.info("Total Benchmarks: %d", len(self.results))
        log.info("Total Duration: %s", _format_duration(self.total_duration))
        log.info("Successful: %d", self.success_count)
        log.info("Failed: %d", self.failure_count)
        log.info("------------------------")
        log.info("Individual Results:")
        for result in self.results:
            duration = _format_duration(result.duration)
            if result.success:
                log.info("✅ %s: %s", result.name, duration)
            else:
                log.error("❌ %s: %s - %s", result.name, duration, result.error)