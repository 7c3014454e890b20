"""Pydantic request/response schemas for the TechPulse API.

Convention: request schemas end with "Request", response schemas end with
"Response".  Stored embeddings never appear in a response body.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from techpulse.models.chat import ArticleContext, ChatMessage
from techpulse.models.news import NewsItem


class NewsItemResponse(BaseModel):
    """A stored news item as shown in the feed."""

    id: int
    title: str
    url: str
    summary: str | None = None
    sentiment_score: int | None = None
    category: str | None = None
    published_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_item(cls, item: NewsItem) -> NewsItemResponse:
        return cls(**item.model_dump(exclude={"embedding"}))


class FeedResponse(BaseModel):
    """One page of the news feed."""

    items: list[NewsItemResponse]
    page: int
    page_size: int
    total: int


class IngestionResponse(BaseModel):
    """Counts from one ingestion run."""

    success: bool = True
    new_count: int
    skipped_count: int
    failed_count: int
    timestamp: datetime


class SearchRequest(BaseModel):
    query: str = Field(default="", max_length=1000)


class SearchMatchResponse(BaseModel):
    item: NewsItemResponse
    similarity: float


class SearchResponse(BaseModel):
    results: list[SearchMatchResponse]


class SubscribeRequest(BaseModel):
    email: str = Field(default="", max_length=320)


class SubscribeResponse(BaseModel):
    success: bool
    error: str | None = None


class ChatTurnRequest(BaseModel):
    """One client-supplied turn.  The system prompt is always built server-side."""

    role: Literal["user", "assistant"]
    content: str

    def to_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


class ChatRequest(BaseModel):
    """A chat conversation, optionally about one article."""

    messages: list[ChatTurnRequest] = Field(..., min_length=1)
    article_context: ArticleContext | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
