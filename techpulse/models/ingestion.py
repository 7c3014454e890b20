"""Ingestion run bookkeeping.

Each story handled by the pipeline yields one :class:`StoryOutcome`.  The
run summary :class:`IngestionOutcome` is a fold over those outcomes rather
than a set of counters mutated from inside the loop, so the tally is
always consistent with the per-story results.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict


class StoryOutcome(str, Enum):  # noqa: UP042
    """What happened to a single candidate story during ingestion."""

    NEW = "new"
    SKIPPED = "skipped"
    FAILED = "failed"


class StoryResult(BaseModel):
    """Per-story result with the reason it was skipped or failed."""

    model_config = ConfigDict(frozen=True)

    story_id: int
    outcome: StoryOutcome
    url: str | None = None
    reason: str | None = None


class IngestionOutcome(BaseModel):
    """Counts reported by one ingestion run.

    ``failed_count`` is reported separately; a failed story is counted
    neither as new nor as skipped.
    """

    model_config = ConfigDict(frozen=True)

    new_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0

    def record(self, outcome: StoryOutcome) -> IngestionOutcome:
        """Return a copy with the counter for *outcome* incremented."""
        field = f"{outcome.value}_count"
        return self.model_copy(update={field: getattr(self, field) + 1})

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[StoryOutcome]) -> IngestionOutcome:
        return functools.reduce(lambda acc, outcome: acc.record(outcome), outcomes, cls())

    @property
    def total(self) -> int:
        return self.new_count + self.skipped_count + self.failed_count
