"""Persistence adapters."""

from techpulse.providers.store.sqlite_news_store import SQLiteNewsStore

__all__ = ["SQLiteNewsStore"]
