"""Article chat -- streams model replies grounded on one article.

The caller's conversation is forwarded unchanged after a single system
turn describing the article (or a generic tech-news persona when no
article is attached).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from techpulse.interfaces.llm_provider import ILLMProvider
from techpulse.models.chat import ArticleContext, ChatMessage
from techpulse.utils.logging import get_logger

GENERIC_SYSTEM_PROMPT = "You are a helpful assistant discussing tech news."


def build_system_prompt(article: ArticleContext | None) -> str:
    """Return the system prompt for a conversation about *article*."""
    if article is None:
        return GENERIC_SYSTEM_PROMPT
    return (
        "You are a helpful assistant discussing this tech news article:\n"
        "\n"
        f"Title: {article.title}\n"
        f"Summary: {article.summary or ''}\n"
        f"URL: {article.url}\n"
        "\n"
        "Answer questions about this article. Be concise and insightful. "
        "If you don't know something specific about the article beyond what's "
        "provided, say so honestly."
    )


class ChatService:
    """Streams assistant replies for the article chat modal."""

    def __init__(
        self,
        llm_provider: ILLMProvider,
        temperature: float = 0.5,
        max_tokens: int = 800,
    ) -> None:
        self._llm = llm_provider
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._logger = get_logger(__name__)

    def build_messages(
        self,
        messages: list[ChatMessage],
        article: ArticleContext | None = None,
    ) -> list[ChatMessage]:
        system = ChatMessage(role="system", content=build_system_prompt(article))
        return [system, *messages]

    async def stream_reply(
        self,
        messages: list[ChatMessage],
        article: ArticleContext | None = None,
    ) -> AsyncIterator[str]:
        """Yield reply fragments in the order the model produces them."""
        self._logger.info(
            "chat_stream_started",
            turns=len(messages),
            has_article=article is not None,
        )
        async for fragment in self._llm.stream_chat(
            self.build_messages(messages, article),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        ):
            yield fragment
