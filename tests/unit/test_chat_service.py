"""Unit tests for ChatService and the system prompt builder."""

from __future__ import annotations

from techpulse.models.chat import ArticleContext, ChatMessage
from techpulse.services.chat_service import GENERIC_SYSTEM_PROMPT, ChatService, build_system_prompt
from tests.conftest import ScriptedLLM

_ARTICLE = ArticleContext(
    title="Rust in the kernel",
    summary="Linux merges more Rust. Drivers benefit first.",
    url="https://example.com/rust-kernel",
)


class TestSystemPrompt:
    def test_generic_prompt_without_article(self) -> None:
        assert build_system_prompt(None) == GENERIC_SYSTEM_PROMPT

    def test_article_prompt_names_title_summary_and_url(self) -> None:
        prompt = build_system_prompt(_ARTICLE)
        assert prompt.startswith("You are a helpful assistant discussing this tech news article:")
        assert "Title: Rust in the kernel" in prompt
        assert "Summary: Linux merges more Rust." in prompt
        assert "URL: https://example.com/rust-kernel" in prompt
        assert "say so honestly" in prompt

    def test_missing_summary(self) -> None:
        prompt = build_system_prompt(ArticleContext(title="t", url="https://u"))
        assert "Summary: \n" in prompt


class TestStreamReply:
    async def test_system_turn_prepended_and_history_forwarded(self) -> None:
        llm = ScriptedLLM(fragments=["Short ", "answer."])
        history = [
            ChatMessage(role="user", content="What changed?"),
            ChatMessage(role="assistant", content="More Rust."),
            ChatMessage(role="user", content="Why?"),
        ]

        fragments = [f async for f in ChatService(llm).stream_reply(history, _ARTICLE)]

        assert "".join(fragments) == "Short answer."
        sent = llm.stream_calls[0]
        assert sent[0].role == "system"
        assert "Rust in the kernel" in sent[0].content
        assert sent[1:] == history

    async def test_without_article(self) -> None:
        llm = ScriptedLLM(fragments=["ok"])
        messages = [ChatMessage(role="user", content="hi")]

        fragments = [f async for f in ChatService(llm).stream_reply(messages)]

        assert fragments == ["ok"]
        assert llm.stream_calls[0][0].content == GENERIC_SYSTEM_PROMPT
