"""Hacker News story source.

Reads the public Firebase-backed Hacker News API:

    GET {base}/topstories.json     -> [int, ...]   (ranked, up to 500 ids)
    GET {base}/item/{id}.json      -> {...} | null

Transport failures and non-2xx answers become
:class:`ProviderUnavailableError`; bodies that parse but have the wrong
shape become :class:`UpstreamContractError`.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from techpulse.interfaces.story_source_provider import IStorySourceProvider
from techpulse.models.story import SourceStory
from techpulse.utils.errors import ProviderUnavailableError, UpstreamContractError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_BASE_URL = "https://hacker-news.firebaseio.com/v0"
_DEFAULT_TIMEOUT = 10.0
DEFAULT_HEADERS = {
    "User-Agent": "TechPulse/0.1 (+https://github.com/techpulse)",
    "Accept": "application/json",
}


class HackerNewsProvider(IStorySourceProvider):
    """Story source backed by the Hacker News v0 API."""

    def __init__(
        self,
        base_url: str = _DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(_DEFAULT_TIMEOUT),
            headers=DEFAULT_HEADERS,
            follow_redirects=True,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get_json(self, path: str) -> Any:
        url = f"{self._base_url}/{path}"
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ProviderUnavailableError(
                message=f"Timeout fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderUnavailableError(
                message=f"HTTP {exc.response.status_code} fetching {url}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(
                message=f"HTTP error fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamContractError(
                message=f"Non-JSON body from {url}",
                provider_name=self.get_provider_name(),
            ) from exc

    # ------------------------------------------------------------------
    # IStorySourceProvider implementation
    # ------------------------------------------------------------------

    async def fetch_top_ids(self) -> list[int]:
        data = await self._get_json("topstories.json")
        if not isinstance(data, list) or not all(
            isinstance(story_id, int) and not isinstance(story_id, bool) for story_id in data
        ):
            raise UpstreamContractError(
                message="topstories.json is not a list of integer ids",
                provider_name=self.get_provider_name(),
            )
        logger.debug("hn_top_ids_fetched", count=len(data))
        return data

    async def fetch_story(self, story_id: int) -> SourceStory | None:
        data = await self._get_json(f"item/{story_id}.json")
        if data is None:
            logger.debug("hn_story_missing", story_id=story_id)
            return None
        if not isinstance(data, dict):
            raise UpstreamContractError(
                message=f"item {story_id} is not a JSON object",
                provider_name=self.get_provider_name(),
            )
        try:
            return SourceStory.model_validate(data)
        except ValidationError as exc:
            raise UpstreamContractError(
                message=f"item {story_id} failed validation: {exc.error_count()} error(s)",
                provider_name=self.get_provider_name(),
            ) from exc

    def get_provider_name(self) -> str:
        return "hacker_news"

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()
