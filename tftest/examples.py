"""Discovery of a module's examples under its ``examples`` directory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Iterable

from tftest.context import TestConfig
from tftest.errors import config_error


@dataclass
class Example:
    """One terraform example directory and its test configuration."""

    name: str
    path: str
    config: TestConfig = field(default_factory=TestConfig)


def find_all_examples(module_root_path: str | os.PathLike[str]) -> list[Example]:
    """Return every directory under ``<module_root_path>/examples``, sorted by name."""
    examples_path = os.path.join(module_root_path, "examples")
    try:
        with os.scandir(examples_path) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        raise config_error("Failed to read examples directory", exc) from exc
    return [
        Example(
            name=entry.name,
            path=os.path.join(examples_path, entry.name),
            config=TestConfig(name=entry.name),
        )
        for entry in entries
        if entry.is_dir()
    ]


def configure_examples(
    examples: Iterable[Example], configurator: Callable[[Example], TestConfig]
) -> dict[str, TestConfig]:
    """Map each example's name to the config ``configurator`` builds for it."""
    return {example.name: configurator(example) for example in examples}