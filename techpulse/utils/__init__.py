"""Utility modules for TechPulse.

- **errors** -- exception hierarchy rooted at TechPulseError; upstream,
  classification, embedding and storage failures each get their own
  subclass so the ingestion loop can skip exactly one story at a time.
- **logging** -- structlog setup with a dual renderer: coloured console
  output in development, structured JSON in production.
"""

from techpulse.utils.errors import (
    ClassificationError,
    ConfigurationError,
    DuplicateItemError,
    EmbeddingError,
    LLMError,
    ProviderUnavailableError,
    StorageError,
    TechPulseError,
    UpstreamContractError,
)
from techpulse.utils.logging import configure_logging, get_logger

__all__ = [
    "ClassificationError",
    "ConfigurationError",
    "DuplicateItemError",
    "EmbeddingError",
    "LLMError",
    "ProviderUnavailableError",
    "StorageError",
    "TechPulseError",
    "UpstreamContractError",
    "configure_logging",
    "get_logger",
]
