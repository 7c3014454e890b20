"""Chat-model provider adapters."""

from techpulse.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OpenAILLMProvider"]
