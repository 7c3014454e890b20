"""Abstract base class for upstream story sources.

A story source exposes a ranked list of current story ids and the detail
record for each id.  The only implementation today reads the public
Hacker News API.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from techpulse.models.story import SourceStory


# Concrete implementation: HackerNewsProvider (techpulse/providers/source/)
class IStorySourceProvider(ABC):
    """Contract for fetching candidate stories to ingest."""

    @abstractmethod
    async def fetch_top_ids(self) -> list[int]:
        """Return the current top story ids, best first.

        Raises
        ------
        techpulse.utils.errors.ProviderUnavailableError
            If the source cannot be reached or answers with an HTTP error.
        techpulse.utils.errors.UpstreamContractError
            If the body is not a list of integer ids.
        """

    @abstractmethod
    async def fetch_story(self, story_id: int) -> SourceStory | None:
        """Return the detail record for *story_id*.

        Returns ``None`` when the source has no record for the id (the
        Hacker News API answers ``null`` for those).

        Raises
        ------
        techpulse.utils.errors.ProviderUnavailableError
            If the request fails.
        techpulse.utils.errors.UpstreamContractError
            If the record does not have the expected shape.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this source."""
