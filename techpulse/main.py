"""TechPulse FastAPI application entry point.

Wires together providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and
configures structured logging.  Every component is built once in the
lifespan and stored on ``app.state``; nothing request-scoped lives at
module level.

Run locally with::

    python -m techpulse.main
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from techpulse import __version__
from techpulse.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from techpulse.api.routes import router as api_router
from techpulse.config.loader import load_config
from techpulse.config.settings import Settings
from techpulse.pipeline.orchestrator import IngestionPipeline
from techpulse.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from techpulse.providers.llm.openai_provider import OpenAILLMProvider
from techpulse.providers.source.hacker_news_provider import DEFAULT_HEADERS, HackerNewsProvider
from techpulse.providers.store.sqlite_news_store import SQLiteNewsStore
from techpulse.services.chat_service import ChatService
from techpulse.services.classifier import StoryClassifier
from techpulse.services.feed_query import FeedService
from techpulse.services.search_service import SearchService
from techpulse.services.subscription_service import SubscriptionService
from techpulse.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=10.0, headers=DEFAULT_HEADERS, follow_redirects=True)

    # -- Providers --
    store = SQLiteNewsStore(db_path=config["storage"]["database_path"])
    source = HackerNewsProvider(
        base_url=app_settings.hacker_news_base_url,
        http_client=http_client,
    )
    llm = OpenAILLMProvider(settings=app_settings)
    embedder = OpenAIEmbeddingProvider(settings=app_settings)

    # -- Services --
    classifier = StoryClassifier(
        llm_provider=llm,
        temperature=config["classifier"]["temperature"],
        max_tokens=config["classifier"]["max_tokens"],
    )
    pipeline = IngestionPipeline(
        source=source,
        store=store,
        classifier=classifier,
        embedding_provider=embedder if embedder.is_available() else None,
        batch_size=config["ingestion"]["batch_size"],
    )
    feed_service = FeedService(store=store, page_size=config["feed"]["page_size"])
    search_service = SearchService(
        store=store,
        embedding_provider=embedder,
        limit=config["search"]["limit"],
    )
    subscription_service = SubscriptionService(store=store)
    chat_service = ChatService(
        llm_provider=llm,
        temperature=config["chat"]["temperature"],
        max_tokens=config["chat"]["max_tokens"],
    )

    provider_registry: dict[str, Any] = {
        "llm": llm.is_available(),
        "llm_name": llm.get_provider_name(),
        "embedding": embedder.is_available(),
        "embedding_name": embedder.get_provider_name(),
        "source": source.get_provider_name(),
        "store": True,
        "cron_secret_configured": bool(app_settings.cron_secret),
    }

    return {
        "settings": app_settings,
        "config": config,
        "http_client": http_client,
        "store": store,
        "source": source,
        "llm": llm,
        "embedder": embedder,
        "classifier": classifier,
        "pipeline": pipeline,
        "feed_service": feed_service,
        "search_service": search_service,
        "subscription_service": subscription_service,
        "chat_service": chat_service,
        "provider_registry": provider_registry,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    app_settings: Settings = application.state.settings
    config = load_config(application.state.config_path, settings=app_settings)
    components = _build_all(app_settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    await components["store"].initialize()

    if not app_settings.cron_secret:
        _logger.warning("cron_secret_missing", message="scheduled ingestion will be rejected")

    _logger.info(
        "app_startup",
        version=__version__,
        environment=app_settings.app_env,
        llm=components["provider_registry"]["llm"],
        embedding=components["provider_registry"]["embedding"],
        database=config["storage"]["database_path"],
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    config_path: str = "config/config.yaml",
) -> FastAPI:
    """Build and configure the FastAPI application."""
    app_settings = app_settings or settings
    application = FastAPI(
        title="TechPulse API",
        version=__version__,
        description=(
            "AI-curated tech news: top Hacker News stories summarized, scored "
            "for sentiment and categorized, with filtering, semantic search, "
            "digest sign-up and article chat."
        ),
        lifespan=_lifespan,
    )
    application.state.settings = app_settings
    application.state.config_path = config_path

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=app_settings.get_cors_origins())

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "techpulse.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
