"""Shared pytest fixtures for the TechPulse test suite."""

from __future__ import annotations

import math
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from techpulse.config.settings import Settings
from techpulse.interfaces.embedding_provider import IEmbeddingProvider
from techpulse.interfaces.llm_provider import ILLMProvider
from techpulse.interfaces.story_source_provider import IStorySourceProvider
from techpulse.models.chat import ChatMessage
from techpulse.models.news import NewsItemCreate
from techpulse.models.story import SourceStory
from techpulse.providers.store.sqlite_news_store import SQLiteNewsStore
from techpulse.utils.errors import EmbeddingError

# Small vectors keep store tests readable; the store is built with the
# same dimension.
TEST_DIMENSION = 4

# One axis per topic for the keyword embedder below.
_TOPIC_AXES = ("ai", "security", "hardware", "web")


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from any local ``.env`` file."""
    defaults: dict[str, Any] = {
        "openai_api_key": "sk-test",
        "openai_base_url": "",
        "openai_text_model": "",
        "openai_embedding_model": "",
        "cron_secret": "",
        "database_path": "data/test.db",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def make_item(
    title: str = "Story",
    url: str | None = None,
    sentiment_score: int | None = 5,
    category: str | None = "Other",
    embedding: list[float] | None = None,
    summary: str | None = "Summary sentence one. Summary sentence two.",
) -> NewsItemCreate:
    return NewsItemCreate(
        title=title,
        url=url or f"https://example.com/{title.lower().replace(' ', '-')}",
        summary=summary,
        sentiment_score=sentiment_score,
        category=category,
        embedding=embedding,
    )


# ---------------------------------------------------------------------------
# Fake providers
# ---------------------------------------------------------------------------


class FakeStorySource(IStorySourceProvider):
    """In-memory story source.

    ``stories`` maps id -> SourceStory, ``None`` (missing upstream) or an
    exception instance to raise from ``fetch_story``.
    """

    def __init__(
        self,
        top_ids: list[int] | Exception,
        stories: dict[int, SourceStory | Exception | None] | None = None,
    ) -> None:
        self.top_ids = top_ids
        self.stories = stories or {}
        self.fetched: list[int] = []

    async def fetch_top_ids(self) -> list[int]:
        if isinstance(self.top_ids, Exception):
            raise self.top_ids
        return list(self.top_ids)

    async def fetch_story(self, story_id: int) -> SourceStory | None:
        self.fetched.append(story_id)
        story = self.stories.get(story_id)
        if isinstance(story, Exception):
            raise story
        return story

    def get_provider_name(self) -> str:
        return "fake_source"


class KeywordEmbedder(IEmbeddingProvider):
    """Deterministic embedder: one dimension per topic keyword, L2-normalised."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[str] = []

    async def embed(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed_single(text) for text in texts]

    async def embed_single(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise EmbeddingError(message="embedding service down", provider_name="keyword")
        lowered = text.lower()
        vector = [float(lowered.count(topic)) for topic in _TOPIC_AXES]
        norm = math.sqrt(sum(v * v for v in vector))
        if norm == 0:
            return [0.0] * TEST_DIMENSION
        return [v / norm for v in vector]

    def get_dimension(self) -> int:
        return TEST_DIMENSION

    def get_provider_name(self) -> str:
        return "keyword"

    def is_available(self) -> bool:
        return True


class ScriptedLLM(ILLMProvider):
    """LLM fake that replays canned completions and stream fragments."""

    def __init__(
        self,
        completions: list[str | Exception] | None = None,
        fragments: list[str] | None = None,
    ) -> None:
        self.completions = list(completions or [])
        self.fragments = list(fragments or [])
        self.complete_calls: list[dict[str, Any]] = []
        self.stream_calls: list[list[ChatMessage]] = []

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 400,
        json_mode: bool = False,
    ) -> str:
        self.complete_calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "json_mode": json_mode,
            }
        )
        result = self.completions.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def stream_chat(
        self,
        messages: list[ChatMessage],
        temperature: float = 0.5,
        max_tokens: int = 800,
    ) -> AsyncIterator[str]:
        self.stream_calls.append(messages)
        for fragment in self.fragments:
            yield fragment

    def get_provider_name(self) -> str:
        return "scripted"

    def is_available(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "techpulse.db"


@pytest.fixture
async def store(db_path: Path) -> SQLiteNewsStore:
    news_store = SQLiteNewsStore(db_path=db_path, embedding_dimension=TEST_DIMENSION)
    await news_store.initialize()
    return news_store


@pytest.fixture
def embedder() -> KeywordEmbedder:
    return KeywordEmbedder()


@pytest.fixture
def mock_llm() -> MagicMock:
    """A spec'd LLM mock whose ``complete`` is an AsyncMock."""
    llm = MagicMock(spec=ILLMProvider)
    llm.complete = AsyncMock()
    llm.get_provider_name.return_value = "mock-llm"
    llm.is_available.return_value = True
    return llm
