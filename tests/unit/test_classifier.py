"""Unit tests for StoryClassifier."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from techpulse.models.news import Category
from techpulse.services.classifier import StoryClassifier
from techpulse.utils.errors import ClassificationError, LLMError

_VALID = json.dumps(
    {
        "summary": "A new model ships. CTOs should evaluate it.",
        "sentiment_score": 8,
        "category": "AI",
    }
)


class TestClassify:
    async def test_valid_json(self, mock_llm: MagicMock) -> None:
        mock_llm.complete.return_value = _VALID
        analysis = await StoryClassifier(mock_llm).classify("New model", "https://example.com/model")

        assert analysis.category is Category.AI
        assert analysis.sentiment_score == 8
        kwargs = mock_llm.complete.call_args.kwargs
        assert kwargs["json_mode"] is True
        assert "Title: New model" in kwargs["user_prompt"]
        assert "URL: https://example.com/model" in kwargs["user_prompt"]
        assert "busy CTO" in kwargs["user_prompt"]

    async def test_fenced_json_with_preamble(self, mock_llm: MagicMock) -> None:
        mock_llm.complete.return_value = f"Here you go:\n```json\n{_VALID}\n```"
        analysis = await StoryClassifier(mock_llm).classify("t", "https://u")
        assert analysis.summary.startswith("A new model ships.")

    async def test_camel_case_key_accepted(self, mock_llm: MagicMock) -> None:
        mock_llm.complete.return_value = json.dumps(
            {"summary": "One. Two.", "sentimentScore": 2, "category": "security"}
        )
        analysis = await StoryClassifier(mock_llm).classify("t", "https://u")
        assert analysis.sentiment_score == 2
        assert analysis.category is Category.SECURITY

    async def test_invalid_first_answer_is_not_retried(self, mock_llm: MagicMock) -> None:
        mock_llm.complete.side_effect = ["not json at all", _VALID]
        with pytest.raises(ClassificationError) as exc_info:
            await StoryClassifier(mock_llm).classify("t", "https://u")

        assert exc_info.value.provider_name == "mock-llm"
        assert mock_llm.complete.await_count == 1

    async def test_out_of_range_score_raises(self, mock_llm: MagicMock) -> None:
        mock_llm.complete.return_value = json.dumps({"summary": "x", "sentiment_score": 42, "category": "AI"})
        with pytest.raises(ClassificationError):
            await StoryClassifier(mock_llm).classify("t", "https://u")
        assert mock_llm.complete.await_count == 1

    async def test_unknown_category_raises(self, mock_llm: MagicMock) -> None:
        mock_llm.complete.return_value = json.dumps({"summary": "x", "sentiment_score": 5, "category": "Gaming"})
        with pytest.raises(ClassificationError):
            await StoryClassifier(mock_llm).classify("t", "https://u")

    @pytest.mark.parametrize(
        "raw_score",
        ["Infinity", "-Infinity", "NaN", '"1e999"', '"eight"', "null", '{"value": 7}'],
    )
    async def test_non_finite_or_non_numeric_score_raises(self, mock_llm: MagicMock, raw_score: str) -> None:
        # Raw JSON text so Infinity/NaN literals reach json.loads unchanged.
        mock_llm.complete.return_value = (
            '{"summary": "One. Two.", "sentiment_score": ' + raw_score + ', "category": "AI"}'
        )
        with pytest.raises(ClassificationError):
            await StoryClassifier(mock_llm).classify("t", "https://u")
        assert mock_llm.complete.await_count == 1

    async def test_llm_error_is_not_retried(self, mock_llm: MagicMock) -> None:
        mock_llm.complete.side_effect = LLMError(message="timeout", provider_name="mock-llm")
        with pytest.raises(LLMError):
            await StoryClassifier(mock_llm).classify("t", "https://u")
        assert mock_llm.complete.await_count == 1

    async def test_json_array_rejected(self, mock_llm: MagicMock) -> None:
        mock_llm.complete.return_value = "[1, 2, 3]"
        with pytest.raises(ClassificationError):
            await StoryClassifier(mock_llm).classify("t", "https://u")


class TestParseLLMResponse:
    def test_plain_object(self) -> None:
        assert StoryClassifier._parse_llm_response('{"a": 1}') == {"a": 1}

    def test_brace_extraction(self) -> None:
        assert StoryClassifier._parse_llm_response('Sure! {"a": {"b": 2}} Done.') == {"a": {"b": 2}}

    def test_garbage_raises(self) -> None:
        with pytest.raises(json.JSONDecodeError):
            StoryClassifier._parse_llm_response("no braces here")
