"""Version-gated migration chains.

A chain is an ordered list of pure ``old -> new`` steps keyed by the schema
version each step produces. Applying a chain runs, in ascending order, every
step newer than the record's stored version and no newer than the current
one. A shipped step is never edited or removed; a schema change adds one.

Two chains exist:

  progress data    steps take and return the raw stored mapping, after the
                   required fields have been filled in (questlog.progress).
  character model  steps take and return a PartyMember (questlog.characters).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

from questlog.models import CURRENT_CHARACTER_MODEL_VERSION, CURRENT_VERSION

logger = logging.getLogger(__name__)

T = TypeVar("T")

Step = Callable[[T], T]


class MigrationChain(Generic[T]):
    def __init__(self, name: str, current_version: int) -> None:
        self.name = name
        self.current_version = current_version
        self._steps: dict[int, Step] = {}

    @property
    def versions(self) -> list[int]:
        return sorted(self._steps)

    def step(self, version: int) -> Callable[[Step], Step]:
        """Register the step that upgrades a record to ``version``."""
        if version < 1:
            raise ValueError(f"{self.name}: migration versions start at 1, got {version}")
        if version > self.current_version:
            raise ValueError(
                f"{self.name}: step for version {version} is newer than "
                f"current version {self.current_version}"
            )
        if version in self._steps:
            raise ValueError(f"{self.name}: step for version {version} already registered")

        def register(fn: Step) -> Step:
            self._steps[version] = fn
            return fn

        return register

    def apply(self, value: T, from_version: int) -> T:
        """Run every step between ``from_version`` (exclusive) and current."""
        for version in self.versions:
            if from_version < version <= self.current_version:
                logger.debug("%s: applying migration step to v%d", self.name, version)
                value = self._steps[version](value)
        return value


PROGRESS_MIGRATIONS: MigrationChain[dict[str, Any]] = MigrationChain(
    "progress data", CURRENT_VERSION
)
CHARACTER_MIGRATIONS: MigrationChain[Any] = MigrationChain(
    "character model", CURRENT_CHARACTER_MODEL_VERSION
)
