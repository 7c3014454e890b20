"""Story classifier -- summary, sentiment score and category from one LLM call.

Layer: Services.  Depends only on :class:`ILLMProvider`.

The model is asked for a JSON object ``{"summary", "sentiment_score",
"category"}`` in JSON mode.  There is exactly one call per story: an
answer that cannot be parsed or fails validation raises
:class:`ClassificationError` and the story is not stored.

LLM transport errors propagate as
:class:`~techpulse.utils.errors.LLMError`.
"""

from __future__ import annotations

import json
import re
from typing import Any

from techpulse.interfaces.llm_provider import ILLMProvider
from techpulse.models.news import Category
from techpulse.models.story import StoryAnalysis
from techpulse.utils.errors import ClassificationError
from techpulse.utils.logging import get_logger

# Captures the content inside ```json ... ``` fences.
_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

_CATEGORY_LIST = ", ".join(category.value for category in Category)


class StoryClassifier:
    """Turns a story title and URL into a validated :class:`StoryAnalysis`."""

    def __init__(
        self,
        llm_provider: ILLMProvider,
        temperature: float = 0.2,
        max_tokens: int = 400,
    ) -> None:
        self._llm = llm_provider
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._logger = get_logger(__name__)

    async def classify(self, title: str, url: str) -> StoryAnalysis:
        """Summarize, score and categorize one story.

        Parameters
        ----------
        title:
            The story headline.
        url:
            The story's destination URL.

        Returns
        -------
        StoryAnalysis
            Summary, sentiment score in 1..10 and one :class:`Category`.

        Raises
        ------
        ClassificationError
            If the answer is not a valid classification record.
        techpulse.utils.errors.LLMError
            If the model call itself fails.
        """
        provider_name = self._llm.get_provider_name()

        response = await self._llm.complete(
            system_prompt=self._system_prompt(),
            user_prompt=self._build_prompt(title, url),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            json_mode=True,
        )
        try:
            analysis = self._parse_analysis(response)
        except (ValueError, TypeError, ArithmeticError, RecursionError) as exc:
            # ValidationError and JSONDecodeError are both ValueErrors.
            self._logger.warning("classification_invalid", error=str(exc), provider=provider_name)
            raise ClassificationError(
                message=f"LLM returned an invalid classification: {exc}",
                provider_name=provider_name,
            ) from exc

        self._logger.info(
            "story_classified",
            category=analysis.category.value,
            sentiment_score=analysis.sentiment_score,
        )
        return analysis

    # ------------------------------------------------------------------
    # Prompt construction
    # ------------------------------------------------------------------

    @staticmethod
    def _system_prompt() -> str:
        return (
            "You are a sharp technology news analyst writing for busy CTOs. "
            "You read a headline and its link and return a JSON object."
        )

    @staticmethod
    def _build_prompt(title: str, url: str) -> str:
        return (
            "Analyze this tech news article:\n"
            f"Title: {title}\n"
            f"URL: {url}\n"
            "\n"
            "Provide a concise 2-sentence summary, a sentiment score (1-10), "
            "and categorize it.\n"
            "\n"
            "Return ONLY a JSON object with exactly these keys:\n"
            '  "summary": a 2-sentence summary of the tech news for a busy CTO\n'
            '  "sentiment_score": integer 1-10 (1=very negative, 5=neutral, 10=very positive)\n'
            f'  "category": one of {_CATEGORY_LIST}\n'
        )

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_llm_response(response: str) -> dict[str, Any]:
        """Extract a JSON object from an LLM response string.

        Handles markdown code fences and preamble text before the object.

        Raises
        ------
        json.JSONDecodeError
            If no valid JSON can be extracted.
        ValueError
            If the JSON is not an object.
        """
        text = response.strip()

        fence_match = _JSON_FENCE_RE.search(text)
        if fence_match:
            text = fence_match.group(1).strip()

        if not text.startswith("{"):
            brace_start = text.find("{")
            brace_end = text.rfind("}")
            if brace_start != -1 and brace_end > brace_start:
                text = text[brace_start : brace_end + 1]

        parsed = json.loads(text)
        if not isinstance(parsed, dict):
            raise ValueError("LLM response is not a JSON object")
        return parsed

    @classmethod
    def _parse_analysis(cls, response: str) -> StoryAnalysis:
        parsed = cls._parse_llm_response(response)
        # Accept camelCase from models that ignore the key spelling.
        if "sentiment_score" not in parsed and "sentimentScore" in parsed:
            parsed["sentiment_score"] = parsed.pop("sentimentScore")
        return StoryAnalysis.model_validate(parsed)
