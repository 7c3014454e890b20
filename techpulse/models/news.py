"""News feed domain models -- stored items, subscribers, categories, buckets.

Layer: Models (bottom of the dependency graph -- no imports from upper
layers).  All models are frozen Pydantic v2 models; a stored
:class:`NewsItem` is never updated after insertion, so there is no
mutation path to model.

``NewsItem.url`` is the natural identity of a story and the only
deduplication key.  ``id`` is a surrogate assigned by the store.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Dimension of text-embedding-3-small vectors stored on each item.
EMBEDDING_DIMENSIONS = 1536


class Category(str, Enum):  # noqa: UP042
    """Closed set of categories the classifier may assign."""

    AI = "AI"
    WEB = "Web"
    MOBILE = "Mobile"
    SECURITY = "Security"
    HARDWARE = "Hardware"
    BUSINESS = "Business"
    PROGRAMMING = "Programming"
    OTHER = "Other"


class SentimentBucket(str, Enum):  # noqa: UP042
    """Named ranges partitioning the 1-10 sentiment score for filtering.

    positive -> score >= 7, neutral -> 4..6, negative -> score <= 3.
    """

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

    @property
    def bounds(self) -> tuple[int | None, int | None]:
        """Inclusive ``(low, high)`` score bounds; ``None`` means open-ended."""
        if self is SentimentBucket.POSITIVE:
            return (7, None)
        if self is SentimentBucket.NEUTRAL:
            return (4, 6)
        return (None, 3)

    def contains(self, score: int | None) -> bool:
        """Return True if *score* falls inside this bucket."""
        if score is None:
            return False
        low, high = self.bounds
        if low is not None and score < low:
            return False
        if high is not None and score > high:
            return False
        return True


class NewsItemCreate(BaseModel):
    """Payload for inserting a new news item (no id, no created_at yet)."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    url: str = Field(min_length=1)
    summary: str | None = None
    sentiment_score: int | None = None
    category: str | None = None
    published_at: datetime | None = None
    embedding: list[float] | None = None


class NewsItem(BaseModel):
    """One ingested story as stored in the news_items table."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    url: str
    summary: str | None = None
    sentiment_score: int | None = None
    category: str | None = None
    published_at: datetime | None = None
    created_at: datetime
    embedding: list[float] | None = Field(default=None, repr=False)

    def has_embedding(self) -> bool:
        return self.embedding is not None


class Subscriber(BaseModel):
    """An email address opted in to digests."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    is_active: bool = True
    created_at: datetime


class SearchMatch(BaseModel):
    """A semantic search hit: the stored item and its similarity to the query."""

    model_config = ConfigDict(frozen=True)

    item: NewsItem
    similarity: float = Field(ge=0.0, le=1.0)
