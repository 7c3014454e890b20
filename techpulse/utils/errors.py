"""Custom exception hierarchy for TechPulse.

All application exceptions inherit from :class:`TechPulseError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openai", "hacker_news", "sqlite_news") caused the
failure.

    TechPulseError  (base -- catch-all for any TechPulse error)
    +-- ProviderUnavailableError (upstream unreachable / HTTP failure)
    +-- UpstreamContractError    (upstream answered with a malformed payload)
    +-- LLMError                 (chat completion call failed)
    +-- ClassificationError      (no valid summary/sentiment/category record)
    +-- EmbeddingError           (embedding call failed or wrong dimension)
    +-- StorageError             (persistence failure)
    |   +-- DuplicateItemError   (news item URL already stored)
    +-- ConfigurationError       (startup / missing config)

Ingestion catches these per story: source errors skip the story,
classification and storage errors fail it, embedding errors only drop
the vector.  The API layer turns whatever escapes into a sanitized 500
response.
"""


class TechPulseError(Exception):
    """Base exception for all TechPulse errors.

    ``__str__`` prefixes the provider name in brackets for structured log
    output, e.g. ``[openai] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Upstream (story source, model API) errors
# ---------------------------------------------------------------------------

class ProviderUnavailableError(TechPulseError):
    """Raised when an external service is unreachable or answers with an HTTP error."""

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UpstreamContractError(TechPulseError):
    """Raised when an external service responds, but not in the agreed shape.

    Kept distinct from :class:`ProviderUnavailableError` so operators can
    tell "the feed is down" apart from "the feed changed its JSON".
    """

    def __init__(
        self,
        message: str = "Upstream response violated the expected schema",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(TechPulseError):
    """Raised when an LLM API call fails or returns an empty response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ClassificationError(TechPulseError):
    """Raised when a story cannot be summarized, scored and categorized."""

    def __init__(
        self,
        message: str = "Story classification failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmbeddingError(TechPulseError):
    """Raised when an embedding call fails or returns a vector of the wrong size."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------

class StorageError(TechPulseError):
    """Raised when a database read or write fails."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DuplicateItemError(StorageError):
    """Raised when inserting a news item whose URL is already stored."""

    def __init__(
        self,
        message: str = "News item already exists",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(TechPulseError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
