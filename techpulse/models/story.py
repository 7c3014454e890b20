"""Boundary models for the upstream story source and the classifier.

Both the Hacker News item JSON and the LLM's classification JSON are
untrusted input.  Validating them here turns a shape change upstream into
a typed error at the edge instead of an ``AttributeError`` three calls
later.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from techpulse.models.news import Category


class SourceStory(BaseModel):
    """A single Hacker News item as returned by ``/item/{id}.json``.

    Only the fields TechPulse uses are declared; everything else in the
    payload is ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    title: str = ""
    url: str | None = None
    by: str | None = None
    score: int = 0
    # Unix epoch seconds.
    time: int | None = None
    type: str = "story"
    deleted: bool = False
    dead: bool = False

    @property
    def published_at(self) -> datetime | None:
        """Publish time converted from epoch seconds (UTC)."""
        if self.time is None:
            return None
        return datetime.fromtimestamp(self.time, tz=timezone.utc)  # noqa: UP017

    def has_url(self) -> bool:
        return bool(self.url and self.url.strip())


class StoryAnalysis(BaseModel):
    """Validated output of the content classifier."""

    model_config = ConfigDict(frozen=True)

    summary: str = Field(min_length=1, description="A 2-sentence summary for a busy CTO.")
    sentiment_score: int = Field(ge=1, le=10, description="1=very negative, 5=neutral, 10=very positive.")
    category: Category

    @field_validator("summary", mode="before")
    @classmethod
    def _strip_summary(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("sentiment_score", mode="before")
    @classmethod
    def _round_score(cls, value: Any) -> Any:
        # Models occasionally answer 7.5 or "8"; store the nearest integer.
        if isinstance(value, bool):
            raise ValueError("sentiment_score must be a number")
        if isinstance(value, str) and value.strip():
            try:
                value = float(value)
            except ValueError:
                return value
        if isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError("sentiment_score must be finite")
            return round(value)
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _match_category(cls, value: Any) -> Any:
        if isinstance(value, str):
            wanted = value.strip().lower()
            for category in Category:
                if category.value.lower() == wanted:
                    return category
        return value
