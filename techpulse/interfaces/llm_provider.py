"""Abstract base class for chat-model service providers.

Defines the contract for the hosted language model used to classify
stories and to answer chat questions.  Concrete adapters wrap a vendor
SDK; services only ever see this interface, so tests inject a fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from techpulse.models.chat import ChatMessage


# Concrete implementation: OpenAILLMProvider (techpulse/providers/llm/)
class ILLMProvider(ABC):
    """Contract for chat-completion services used by TechPulse."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 400,
        json_mode: bool = False,
    ) -> str:
        """Generate a single text completion.

        Parameters
        ----------
        system_prompt:
            The instruction message that sets the model's behaviour.
        user_prompt:
            The user message containing the actual request or data.
        temperature:
            Sampling temperature (0.0 = deterministic).
        max_tokens:
            Upper bound on the number of tokens in the response.
        json_mode:
            Ask the model to answer with a single JSON object.

        Returns
        -------
        str
            The model's text response.

        Raises
        ------
        techpulse.utils.errors.LLMError
            If the API call fails or returns an empty response.
        """

    @abstractmethod
    def stream_chat(
        self,
        messages: list[ChatMessage],
        temperature: float = 0.5,
        max_tokens: int = 800,
    ) -> AsyncIterator[str]:
        """Stream the assistant's reply to *messages* as text fragments.

        Implementations are async generators.  Fragments are yielded in the
        order the model produces them; their concatenation is the full
        reply.

        Raises
        ------
        techpulse.utils.errors.LLMError
            If the stream cannot be opened or breaks mid-way.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"openai"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured (no network call)."""
