"""Abstract base class for news item and subscriber persistence.

# The concrete implementation is SQLiteNewsStore
# (techpulse/providers/store/sqlite_news_store.py).  All operations are
# async so the backend can be swapped for a network database without
# touching callers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from techpulse.models.feed import FeedQuery
from techpulse.models.news import NewsItem, NewsItemCreate, SearchMatch, Subscriber


class INewsStore(ABC):
    """Contract for the news item and subscriber tables.

    Implementations must enforce URL uniqueness for news items and email
    uniqueness for subscribers at the storage level.
    """

    # -- Lifecycle ---------------------------------------------------------

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables and indices if they don't exist.  Called at startup."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""

    # -- News items --------------------------------------------------------

    @abstractmethod
    async def find_by_url(self, url: str) -> NewsItem | None:
        """Return the stored item with exactly this URL, or ``None``."""

    @abstractmethod
    async def insert_item(self, item: NewsItemCreate) -> NewsItem:
        """Persist a new item and return it with ``id`` and ``created_at`` set.

        Raises
        ------
        techpulse.utils.errors.DuplicateItemError
            If an item with the same URL already exists.
        techpulse.utils.errors.StorageError
            For any other write failure.
        """

    @abstractmethod
    async def list_items(self, query: FeedQuery) -> list[NewsItem]:
        """Return one page of items matching *query*, newest first.

        Ordering is ``created_at`` descending with ``id`` descending as the
        tie-breaker.
        """

    @abstractmethod
    async def count_items(self, query: FeedQuery) -> int:
        """Return how many items match *query*'s filter, ignoring pagination."""

    @abstractmethod
    async def nearest(self, vector: list[float], limit: int = 5) -> list[SearchMatch]:
        """Return up to *limit* embedded items closest to *vector*.

        Items without an embedding are never returned.  Results are ordered
        by descending similarity (``1 - cosine distance``, clamped to
        ``[0, 1]``).
        """

    # -- Subscribers -------------------------------------------------------

    @abstractmethod
    async def add_subscriber(self, email: str) -> bool:
        """Store *email* as an active subscriber.

        Returns
        -------
        bool
            ``True`` if a new row was created, ``False`` if the address was
            already subscribed.
        """

    @abstractmethod
    async def get_subscriber(self, email: str) -> Subscriber | None:
        """Return the subscriber row for *email*, or ``None``."""
