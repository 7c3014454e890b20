"""SQLite-backed news item and subscriber store.

# --- ARCHITECTURE ROLE ------------------------------------------------
#
# Layer: Providers (concrete adapter implementing INewsStore).
#
# Database: ``data/techpulse.db`` with two tables:
#   - news_items   -- one row per ingested story, ``url`` UNIQUE
#   - subscribers  -- one row per email address, ``email`` UNIQUE
#
# Embeddings are stored as JSON arrays in a TEXT column.  Nearest-
# neighbour search loads the embedded rows and ranks them with numpy
# cosine similarity; the table holds a few thousand rows at most, so a
# full scan is fine.
#
# Uses ``aiosqlite`` for async I/O and ``PRAGMA journal_mode=WAL`` for
# concurrent read safety.  Timestamps are ISO-8601 UTC strings with
# microseconds so lexical order equals chronological order.
# ----------------------------------------------------------------------
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite
import numpy as np
import structlog

from techpulse.interfaces.news_store import INewsStore
from techpulse.models.feed import FeedQuery
from techpulse.models.news import (
    EMBEDDING_DIMENSIONS,
    NewsItem,
    NewsItemCreate,
    SearchMatch,
    Subscriber,
)
from techpulse.utils.errors import DuplicateItemError, StorageError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/techpulse.db")

# -- Schema DDL ------------------------------------------------------------

_CREATE_NEWS_ITEMS_TABLE = """\
CREATE TABLE IF NOT EXISTS news_items (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    title            TEXT    NOT NULL,
    url              TEXT    NOT NULL UNIQUE,
    summary          TEXT,
    sentiment_score  INTEGER,
    category         TEXT,
    published_at     TEXT,
    created_at       TEXT    NOT NULL,
    embedding        TEXT
);
"""

_CREATE_SUBSCRIBERS_TABLE = """\
CREATE TABLE IF NOT EXISTS subscribers (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    email       TEXT    NOT NULL UNIQUE,
    is_active   INTEGER NOT NULL DEFAULT 1,
    created_at  TEXT    NOT NULL
);
"""

_CREATE_INDICES = [
    "CREATE INDEX IF NOT EXISTS idx_news_created ON news_items(created_at);",
    "CREATE INDEX IF NOT EXISTS idx_news_category ON news_items(category);",
    "CREATE INDEX IF NOT EXISTS idx_news_sentiment ON news_items(sentiment_score);",
]

# -- DML -------------------------------------------------------------------

_ITEM_COLUMNS = (
    "id, title, url, summary, sentiment_score, category, published_at, created_at, embedding"
)

_INSERT_ITEM = """\
INSERT INTO news_items (title, url, summary, sentiment_score, category, published_at, created_at, embedding)
VALUES (?, ?, ?, ?, ?, ?, ?, ?);
"""

_SELECT_BY_URL = f"SELECT {_ITEM_COLUMNS} FROM news_items WHERE url = ?;"

_SELECT_EMBEDDED = f"SELECT {_ITEM_COLUMNS} FROM news_items WHERE embedding IS NOT NULL;"

_INSERT_SUBSCRIBER = """\
INSERT OR IGNORE INTO subscribers (email, is_active, created_at)
VALUES (?, 1, ?);
"""

_SELECT_SUBSCRIBER = "SELECT id, email, is_active, created_at FROM subscribers WHERE email = ?;"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")  # noqa: UP017


class SQLiteNewsStore(INewsStore):
    """SQLite-backed persistence for news items and subscribers."""

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        embedding_dimension: int = EMBEDDING_DIMENSIONS,
    ) -> None:
        self._db_path = Path(db_path)
        self._embedding_dimension = embedding_dimension

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection with Row factory; driver errors become StorageError."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"SQLite error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def initialize(self) -> None:
        """Create tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self._connect() as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.execute(_CREATE_NEWS_ITEMS_TABLE)
            await db.execute(_CREATE_SUBSCRIBERS_TABLE)
            for idx_sql in _CREATE_INDICES:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("news_db_initialized", path=str(self._db_path))

    def get_provider_name(self) -> str:
        return "sqlite_news"

    # -- News items --------------------------------------------------------

    async def find_by_url(self, url: str) -> NewsItem | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_BY_URL, (url,))
            row = await cursor.fetchone()
        return self._row_to_item(dict(row)) if row is not None else None

    async def insert_item(self, item: NewsItemCreate) -> NewsItem:
        """Insert *item*; a URL already present raises DuplicateItemError."""
        if item.embedding is not None and len(item.embedding) != self._embedding_dimension:
            raise StorageError(
                message=(
                    f"embedding has {len(item.embedding)} dimensions, "
                    f"expected {self._embedding_dimension}"
                ),
                provider_name=self.get_provider_name(),
            )

        created_at = _utc_now_iso()
        params = (
            item.title,
            item.url,
            item.summary,
            item.sentiment_score,
            item.category,
            item.published_at.isoformat() if item.published_at else None,
            created_at,
            json.dumps(item.embedding) if item.embedding is not None else None,
        )
        async with self._connect() as db:
            try:
                cursor = await db.execute(_INSERT_ITEM, params)
            except aiosqlite.IntegrityError as exc:
                raise DuplicateItemError(
                    message=f"url already stored: {item.url}",
                    provider_name=self.get_provider_name(),
                ) from exc
            await db.commit()
            item_id = cursor.lastrowid

        logger.info("news_item_inserted", item_id=item_id, url=item.url, category=item.category)
        return NewsItem(
            id=item_id,
            title=item.title,
            url=item.url,
            summary=item.summary,
            sentiment_score=item.sentiment_score,
            category=item.category,
            published_at=item.published_at,
            created_at=datetime.fromisoformat(created_at),
            embedding=item.embedding,
        )

    async def list_items(self, query: FeedQuery) -> list[NewsItem]:
        where_clause = f"WHERE {query.where_sql}" if query.where_sql else ""
        sql = f"""\
            SELECT {_ITEM_COLUMNS}
            FROM news_items
            {where_clause}
            ORDER BY created_at DESC, id DESC
            LIMIT ? OFFSET ?;
        """
        params: list[Any] = [*query.params, query.limit, query.offset]
        async with self._connect() as db:
            cursor = await db.execute(sql, params)
            rows = await cursor.fetchall()
        return [self._row_to_item(dict(row)) for row in rows]

    async def count_items(self, query: FeedQuery) -> int:
        where_clause = f"WHERE {query.where_sql}" if query.where_sql else ""
        async with self._connect() as db:
            cursor = await db.execute(
                f"SELECT COUNT(*) AS total FROM news_items {where_clause};",
                list(query.params),
            )
            row = await cursor.fetchone()
        return int(row["total"]) if row else 0

    async def nearest(self, vector: list[float], limit: int = 5) -> list[SearchMatch]:
        """Rank embedded items by cosine similarity to *vector*."""
        if len(vector) != self._embedding_dimension:
            raise StorageError(
                message=(
                    f"query vector has {len(vector)} dimensions, "
                    f"expected {self._embedding_dimension}"
                ),
                provider_name=self.get_provider_name(),
            )
        if limit <= 0:
            return []

        async with self._connect() as db:
            cursor = await db.execute(_SELECT_EMBEDDED)
            rows = await cursor.fetchall()
        if not rows:
            return []

        items = [self._row_to_item(dict(row)) for row in rows]
        matrix = np.asarray([item.embedding for item in items], dtype=np.float64)
        query_vec = np.asarray(vector, dtype=np.float64)

        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query_vec)
        dots = matrix @ query_vec
        # Zero vectors have no direction; treat them as unrelated.
        similarities = np.divide(dots, norms, out=np.zeros_like(dots), where=norms > 0)
        similarities = np.clip(similarities, 0.0, 1.0)

        order = np.argsort(-similarities, kind="stable")[:limit]
        return [
            SearchMatch(item=items[idx], similarity=float(similarities[idx]))
            for idx in order
        ]

    # -- Subscribers -------------------------------------------------------

    async def add_subscriber(self, email: str) -> bool:
        async with self._connect() as db:
            cursor = await db.execute(_INSERT_SUBSCRIBER, (email, _utc_now_iso()))
            await db.commit()
            created = cursor.rowcount == 1
        logger.info("subscriber_added" if created else "subscriber_exists", email=email)
        return created

    async def get_subscriber(self, email: str) -> Subscriber | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_SUBSCRIBER, (email,))
            row = await cursor.fetchone()
        if row is None:
            return None
        return Subscriber(
            id=row["id"],
            email=row["email"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    # -- Private helpers ---------------------------------------------------

    @staticmethod
    def _row_to_item(row: dict[str, Any]) -> NewsItem:
        """Convert a news_items row dict into a NewsItem."""
        embedding = json.loads(row["embedding"]) if row.get("embedding") else None
        published_at = row.get("published_at")
        return NewsItem(
            id=row["id"],
            title=row["title"],
            url=row["url"],
            summary=row.get("summary"),
            sentiment_score=row.get("sentiment_score"),
            category=row.get("category"),
            published_at=datetime.fromisoformat(published_at) if published_at else None,
            created_at=datetime.fromisoformat(row["created_at"]),
            embedding=embedding,
        )
