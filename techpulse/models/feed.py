"""Feed query and page models.

A :class:`FeedQuery` is the normalised form of the ``category``,
``sentiment`` and ``page`` request parameters.  It carries the compiled
SQL predicate (``where_sql`` + ``params``) so the store applies exactly
one combined filter for both the page fetch and the total count.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from techpulse.models.news import NewsItem, SentimentBucket


class FeedQuery(BaseModel):
    """Normalised feed filter plus pagination window."""

    model_config = ConfigDict(frozen=True)

    category: str | None = None
    sentiment: SentimentBucket | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)
    # Compiled predicate; empty string means "no filter".
    where_sql: str = ""
    params: tuple[Any, ...] = ()

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


class FeedPage(BaseModel):
    """One page of feed results, newest first."""

    model_config = ConfigDict(frozen=True)

    items: list[NewsItem] = Field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total: int = 0

    @property
    def has_more(self) -> bool:
        return self.page * self.page_size < self.total
