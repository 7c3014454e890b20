"""Semantic search over stored news items."""

from __future__ import annotations

from techpulse.interfaces.embedding_provider import IEmbeddingProvider
from techpulse.interfaces.news_store import INewsStore
from techpulse.models.news import SearchMatch
from techpulse.utils.errors import EmbeddingError, StorageError
from techpulse.utils.logging import get_logger


class SearchService:
    """Embeds a free-text query and returns the closest stored items.

    An empty query, or a failure to embed it or to read the store, yields
    no results rather than an error.
    """

    def __init__(
        self,
        store: INewsStore,
        embedding_provider: IEmbeddingProvider,
        limit: int = 5,
    ) -> None:
        self._store = store
        self._embedder = embedding_provider
        self._limit = limit
        self._logger = get_logger(__name__)

    async def search(self, query: str) -> list[SearchMatch]:
        text = (query or "").strip()
        if not text:
            return []

        try:
            vector = await self._embedder.embed_single(text)
        except EmbeddingError as exc:
            self._logger.error("search_embedding_failed", error=str(exc), query_length=len(text))
            return []

        try:
            matches = await self._store.nearest(vector, limit=self._limit)
        except StorageError as exc:
            self._logger.error("search_store_failed", error=str(exc), query_length=len(text))
            return []

        self._logger.info(
            "search_complete",
            query_length=len(text),
            results=len(matches),
            top_similarity=matches[0].similarity if matches else None,
        )
        return matches
