"""Ingestion pipeline -- pull top stories, classify, embed, persist.

For each of the first ``batch_size`` top story ids, in ranked order and
one at a time:

    fetch detail -> skip if missing / no URL / already stored
                 -> classify (summary, sentiment, category)
                 -> embed "title + summary" (optional, best effort)
                 -> insert

Every story ends in exactly one :class:`StoryOutcome`; the run summary is
the fold of those outcomes.  A story that fails is logged and the loop
moves on; only a failure to fetch the top-id list ends the run early, with
an all-zero outcome.
"""

from __future__ import annotations

import structlog

from techpulse.interfaces.embedding_provider import IEmbeddingProvider
from techpulse.interfaces.news_store import INewsStore
from techpulse.interfaces.story_source_provider import IStorySourceProvider
from techpulse.models.ingestion import IngestionOutcome, StoryOutcome, StoryResult
from techpulse.models.news import NewsItemCreate
from techpulse.models.story import SourceStory, StoryAnalysis
from techpulse.services.classifier import StoryClassifier
from techpulse.utils.errors import DuplicateItemError, EmbeddingError, TechPulseError
from techpulse.utils.logging import get_logger


def embedding_text(title: str, summary: str) -> str:
    """Text embedded for each stored item; search queries are compared to this."""
    return f"{title}\n\n{summary}"


class IngestionPipeline:
    """Runs one ingestion pass over the story source.

    All collaborators are injected.  ``embedding_provider`` may be ``None``,
    in which case items are stored without an embedding and are invisible
    to semantic search.
    """

    def __init__(
        self,
        source: IStorySourceProvider,
        store: INewsStore,
        classifier: StoryClassifier,
        embedding_provider: IEmbeddingProvider | None = None,
        batch_size: int = 5,
    ) -> None:
        self._source = source
        self._store = store
        self._classifier = classifier
        self._embedder = embedding_provider
        self._batch_size = batch_size
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def run(self) -> IngestionOutcome:
        """Ingest up to ``batch_size`` new stories and return the counts."""
        try:
            top_ids = await self._source.fetch_top_ids()
        except TechPulseError as exc:
            self._logger.error("ingestion_top_ids_failed", error=str(exc))
            return IngestionOutcome()

        candidate_ids = top_ids[: self._batch_size]
        self._logger.info("ingestion_started", candidates=len(candidate_ids))

        results: list[StoryResult] = []
        for story_id in candidate_ids:
            result = await self.process_story(story_id)
            results.append(result)

        outcome = IngestionOutcome.from_outcomes(result.outcome for result in results)
        self._logger.info(
            "ingestion_complete",
            new_count=outcome.new_count,
            skipped_count=outcome.skipped_count,
            failed_count=outcome.failed_count,
        )
        return outcome

    async def process_story(self, story_id: int) -> StoryResult:
        """Take one story id through the pipeline; never raises TechPulseError."""
        try:
            story = await self._source.fetch_story(story_id)
        except TechPulseError as exc:
            return self._skip(story_id, None, "fetch_failed", error=str(exc))

        if story is None:
            return self._skip(story_id, None, "missing")
        if not story.has_url():
            return self._skip(story_id, None, "no_url")
        if not story.title.strip():
            return self._skip(story_id, story.url, "no_title")

        url = story.url.strip()
        try:
            existing = await self._store.find_by_url(url)
        except TechPulseError as exc:
            return self._fail(story_id, url, "lookup_failed", error=str(exc))
        if existing is not None:
            return self._skip(story_id, url, "duplicate")

        self._logger.info("classifying_story", story_id=story_id, title=story.title[:50])
        try:
            analysis = await self._classifier.classify(story.title, url)
        except Exception as exc:  # noqa: BLE001
            # Any classifier failure costs only this story.
            return self._fail(
                story_id, url, "classification_failed", error=str(exc), error_type=type(exc).__name__
            )

        embedding = await self._embed(story, analysis)

        try:
            await self._store.insert_item(
                NewsItemCreate(
                    title=story.title,
                    url=url,
                    summary=analysis.summary,
                    sentiment_score=analysis.sentiment_score,
                    category=analysis.category.value,
                    published_at=story.published_at,
                    embedding=embedding,
                )
            )
        except DuplicateItemError as exc:
            # Another run stored the same URL between lookup and insert.
            return self._fail(story_id, url, "duplicate_insert", error=str(exc))
        except TechPulseError as exc:
            return self._fail(story_id, url, "insert_failed", error=str(exc))

        self._logger.info(
            "story_ingested",
            story_id=story_id,
            category=analysis.category.value,
            sentiment_score=analysis.sentiment_score,
            embedded=embedding is not None,
        )
        return StoryResult(story_id=story_id, outcome=StoryOutcome.NEW, url=url)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _embed(self, story: SourceStory, analysis: StoryAnalysis) -> list[float] | None:
        if self._embedder is None:
            return None
        try:
            return await self._embedder.embed_single(embedding_text(story.title, analysis.summary))
        except EmbeddingError as exc:
            self._logger.warning("story_embedding_failed", story_id=story.id, error=str(exc))
            return None

    def _skip(self, story_id: int, url: str | None, reason: str, **extra: str) -> StoryResult:
        self._logger.info("story_skipped", story_id=story_id, reason=reason, **extra)
        return StoryResult(story_id=story_id, outcome=StoryOutcome.SKIPPED, url=url, reason=reason)

    def _fail(self, story_id: int, url: str | None, reason: str, **extra: str) -> StoryResult:
        self._logger.error("story_failed", story_id=story_id, reason=reason, **extra)
        return StoryResult(story_id=story_id, outcome=StoryOutcome.FAILED, url=url, reason=reason)
