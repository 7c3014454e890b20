"""Abstract base class for text-embedding service providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: OpenAIEmbeddingProvider (techpulse/providers/embedding/)
class IEmbeddingProvider(ABC):
    """Contract for turning text into fixed-length vectors.

    Stored item embeddings and query embeddings must come from the same
    model, otherwise similarity scores are meaningless.
    """

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Returns
        -------
        list[list[float]]
            Vectors corresponding positionally to *texts*, each of length
            :meth:`get_dimension`.

        Raises
        ------
        techpulse.utils.errors.EmbeddingError
            If the API call fails or a vector has the wrong dimension.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate the embedding vector for one text string."""

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the length of every vector this provider produces."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured."""
