"""Upstream story source adapters."""

from techpulse.providers.source.hacker_news_provider import HackerNewsProvider

__all__ = ["HackerNewsProvider"]
