"""TechPulse domain models -- re-exports all public model classes.

Submodules by concern:
    - news.py       -- stored news items, subscribers, categories, sentiment buckets
    - story.py      -- upstream story payloads and validated classifier output
    - feed.py       -- feed query and page
    - ingestion.py  -- per-story outcomes and run counts
    - chat.py       -- chat turns, article context, subscription results
"""

from __future__ import annotations

from techpulse.models.chat import ArticleContext, ChatMessage, SubscriptionResult
from techpulse.models.feed import FeedPage, FeedQuery
from techpulse.models.ingestion import IngestionOutcome, StoryOutcome, StoryResult
from techpulse.models.news import (
    EMBEDDING_DIMENSIONS,
    Category,
    NewsItem,
    NewsItemCreate,
    SearchMatch,
    SentimentBucket,
    Subscriber,
)
from techpulse.models.story import SourceStory, StoryAnalysis

__all__ = [
    "EMBEDDING_DIMENSIONS",
    "ArticleContext",
    "Category",
    "ChatMessage",
    "FeedPage",
    "FeedQuery",
    "IngestionOutcome",
    "NewsItem",
    "NewsItemCreate",
    "SearchMatch",
    "SentimentBucket",
    "SourceStory",
    "StoryAnalysis",
    "StoryOutcome",
    "StoryResult",
    "Subscriber",
    "SubscriptionResult",
]
