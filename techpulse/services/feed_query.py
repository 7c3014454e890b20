"""Feed query building and page retrieval.

:func:`build_feed_query` normalises raw request parameters into a
:class:`FeedQuery`: ``"All"``/empty category and ``"all"``/empty sentiment
mean "no filter", the page is clamped to at least 1, and every active
filter is AND-ed into a single predicate.  :class:`FeedService` applies
that predicate to both the page fetch and the total count.
"""

from __future__ import annotations

from typing import Any

from techpulse.interfaces.news_store import INewsStore
from techpulse.models.feed import FeedPage, FeedQuery
from techpulse.models.news import SentimentBucket
from techpulse.utils.logging import get_logger

_ALL = "all"


def parse_sentiment(value: str | None) -> SentimentBucket | None:
    """Map a sentiment request parameter to a bucket.

    ``None``, ``""`` and ``"all"`` (any case) mean no filter.

    Raises
    ------
    ValueError
        If *value* names no bucket.
    """
    if value is None:
        return None
    normalized = value.strip().lower()
    if not normalized or normalized == _ALL:
        return None
    try:
        return SentimentBucket(normalized)
    except ValueError:
        allowed = ", ".join(bucket.value for bucket in SentimentBucket)
        raise ValueError(f"unknown sentiment {value!r}; expected one of: all, {allowed}") from None


def build_feed_query(
    category: str | None = None,
    sentiment: str | SentimentBucket | None = None,
    page: int = 1,
    page_size: int = 10,
) -> FeedQuery:
    """Combine the active filters into one :class:`FeedQuery`.

    Raises
    ------
    ValueError
        If *sentiment* is not a known bucket name.
    """
    conditions: list[str] = []
    params: list[Any] = []

    normalized_category = (category or "").strip()
    if normalized_category and normalized_category.lower() != _ALL:
        conditions.append("category = ?")
        params.append(normalized_category)
    else:
        normalized_category = None

    bucket = sentiment if isinstance(sentiment, SentimentBucket) else parse_sentiment(sentiment)
    if bucket is not None:
        low, high = bucket.bounds
        if low is not None:
            conditions.append("sentiment_score >= ?")
            params.append(low)
        if high is not None:
            conditions.append("sentiment_score <= ?")
            params.append(high)

    return FeedQuery(
        category=normalized_category,
        sentiment=bucket,
        page=max(1, page),
        page_size=max(1, page_size),
        where_sql=" AND ".join(conditions),
        params=tuple(params),
    )


class FeedService:
    """Serves paginated, filtered pages of the news feed."""

    def __init__(self, store: INewsStore, page_size: int = 10) -> None:
        self._store = store
        self._page_size = page_size
        self._logger = get_logger(__name__)

    @property
    def page_size(self) -> int:
        return self._page_size

    async def get_page(
        self,
        category: str | None = None,
        sentiment: str | None = None,
        page: int = 1,
    ) -> FeedPage:
        """Return one page of the feed; pages past the end are empty."""
        query = build_feed_query(category, sentiment, page, self._page_size)
        total = await self._store.count_items(query)
        # Offsets at or past the total are answered without a second query;
        # SQLite rejects OFFSET values beyond 64 bits.
        items = await self._store.list_items(query) if query.offset < total else []
        self._logger.debug(
            "feed_page_served",
            category=query.category,
            sentiment=query.sentiment.value if query.sentiment else None,
            page=query.page,
            returned=len(items),
            total=total,
        )
        return FeedPage(items=items, page=query.page, page_size=query.page_size, total=total)
