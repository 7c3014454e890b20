"""Interface definitions for every external service TechPulse talks to.

Interface                  ->  Concrete implementation (techpulse/providers/)
-----------------------------------------------------------------------
ILLMProvider               ->  OpenAILLMProvider
IEmbeddingProvider         ->  OpenAIEmbeddingProvider
IStorySourceProvider       ->  HackerNewsProvider
INewsStore                 ->  SQLiteNewsStore
"""

from techpulse.interfaces.embedding_provider import IEmbeddingProvider
from techpulse.interfaces.llm_provider import ILLMProvider
from techpulse.interfaces.news_store import INewsStore
from techpulse.interfaces.story_source_provider import IStorySourceProvider

__all__ = [
    "IEmbeddingProvider",
    "ILLMProvider",
    "INewsStore",
    "IStorySourceProvider",
]
