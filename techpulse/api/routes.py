"""FastAPI routes for the TechPulse news feed.

# Endpoint                 Method  Description
# ---------------------------------------------------------------------
# /api/v1/cron/ingest      GET     Scheduled ingestion (Bearer CRON_SECRET)
# /api/v1/news/refresh     POST    Manual ingestion from the UI
# /api/v1/news             GET     Filtered, paginated feed
# /api/v1/search           POST    Semantic search
# /api/v1/subscribe        POST    Email digest sign-up
# /api/v1/chat             POST    Streamed chat about an article
# /api/v1/health           GET     Health check + provider status
#
# Services are resolved from ``app.state`` (populated at startup in
# main.py's _build_all) through ``Annotated[..., Depends(...)]`` aliases.
"""

from __future__ import annotations

import hmac
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse, StreamingResponse

from techpulse import __version__
from techpulse.api.schemas import (
    ChatRequest,
    FeedResponse,
    HealthResponse,
    IngestionResponse,
    NewsItemResponse,
    SearchMatchResponse,
    SearchRequest,
    SearchResponse,
    SubscribeRequest,
    SubscribeResponse,
)
from techpulse.config.settings import Settings
from techpulse.models.ingestion import IngestionOutcome
from techpulse.pipeline.orchestrator import IngestionPipeline
from techpulse.services.chat_service import ChatService
from techpulse.services.feed_query import FeedService
from techpulse.services.search_service import SearchService
from techpulse.services.subscription_service import SubscriptionService
from techpulse.utils.errors import LLMError
from techpulse.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _get_pipeline(request: Request) -> IngestionPipeline:
    return request.app.state.pipeline


def _get_feed_service(request: Request) -> FeedService:
    return request.app.state.feed_service


def _get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def _get_subscription_service(request: Request) -> SubscriptionService:
    return request.app.state.subscription_service


def _get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


SettingsDep = Annotated[Settings, Depends(_get_settings)]
PipelineDep = Annotated[IngestionPipeline, Depends(_get_pipeline)]
FeedDep = Annotated[FeedService, Depends(_get_feed_service)]
SearchDep = Annotated[SearchService, Depends(_get_search_service)]
SubscriptionDep = Annotated[SubscriptionService, Depends(_get_subscription_service)]
ChatDep = Annotated[ChatService, Depends(_get_chat_service)]


def _is_authorized(request: Request, secret: str) -> bool:
    """Constant-time check of ``Authorization: Bearer <secret>``."""
    if not secret:
        return False
    header = request.headers.get("authorization", "")
    return hmac.compare_digest(header.encode(), f"Bearer {secret}".encode())


def _ingestion_response(outcome: IngestionOutcome) -> IngestionResponse:
    return IngestionResponse(
        success=True,
        new_count=outcome.new_count,
        skipped_count=outcome.skipped_count,
        failed_count=outcome.failed_count,
        timestamp=datetime.now(timezone.utc),  # noqa: UP017
    )


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


@router.get(
    "/cron/ingest",
    response_model=IngestionResponse,
    summary="Scheduled ingestion run",
)
async def cron_ingest(
    request: Request,
    settings: SettingsDep,
    pipeline: PipelineDep,
) -> Any:
    """Run one ingestion pass; requires the cron bearer token."""
    if not _is_authorized(request, settings.cron_secret):
        _logger.warning("cron_unauthorized", path=str(request.url.path))
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    _logger.info("cron_ingest_started")
    try:
        outcome = await pipeline.run()
    except Exception as exc:  # noqa: BLE001
        _logger.error("cron_ingest_failed", error=str(exc), error_type=type(exc).__name__)
        return JSONResponse(status_code=500, content={"error": "Ingestion failed"})

    return _ingestion_response(outcome)


@router.post(
    "/news/refresh",
    response_model=IngestionResponse,
    summary="Manual ingestion run",
)
async def refresh_news(pipeline: PipelineDep) -> IngestionResponse:
    """Run one ingestion pass on demand and return the counts."""
    outcome = await pipeline.run()
    return _ingestion_response(outcome)


# ---------------------------------------------------------------------------
# Feed & search
# ---------------------------------------------------------------------------


@router.get(
    "/news",
    response_model=FeedResponse,
    summary="Filtered, paginated news feed",
)
async def list_news(
    feed: FeedDep,
    category: Annotated[str, Query(max_length=50)] = "All",
    sentiment: Annotated[str | None, Query(max_length=20)] = None,
    page: int = 1,
) -> FeedResponse:
    """Return one page of the feed, newest first."""
    try:
        result = await feed.get_page(category=category, sentiment=sentiment, page=page)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return FeedResponse(
        items=[NewsItemResponse.from_item(item) for item in result.items],
        page=result.page,
        page_size=result.page_size,
        total=result.total,
    )


@router.post(
    "/search",
    response_model=SearchResponse,
    summary="Semantic search over stored news",
)
async def search_news(body: SearchRequest, search: SearchDep) -> SearchResponse:
    matches = await search.search(body.query)
    return SearchResponse(
        results=[
            SearchMatchResponse(item=NewsItemResponse.from_item(m.item), similarity=m.similarity)
            for m in matches
        ]
    )


# ---------------------------------------------------------------------------
# Subscriptions & chat
# ---------------------------------------------------------------------------


@router.post(
    "/subscribe",
    response_model=SubscribeResponse,
    response_model_exclude_none=True,
    summary="Subscribe an email address to digests",
)
async def subscribe(body: SubscribeRequest, subscriptions: SubscriptionDep) -> SubscribeResponse:
    result = await subscriptions.subscribe(body.email)
    return SubscribeResponse(success=result.success, error=result.error)


@router.post(
    "/chat",
    summary="Chat about an article (streamed plain text)",
)
async def chat(body: ChatRequest, chat_service: ChatDep) -> StreamingResponse:
    """Stream the assistant's reply as plain text fragments."""
    messages = [turn.to_message() for turn in body.messages]

    async def reply_stream() -> AsyncIterator[str]:
        try:
            async for fragment in chat_service.stream_reply(messages, body.article_context):
                yield fragment
        except LLMError as exc:
            # Headers are already sent; end the stream and keep the details server-side.
            _logger.error("chat_stream_failed", error=str(exc))

    return StreamingResponse(
        reply_stream(),
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability."""
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    if providers.get("llm", False) and providers.get("embedding", False):
        status = "healthy"
    elif providers.get("store", False):
        status = "degraded"
    else:
        status = "unhealthy"

    return HealthResponse(status=status, version=__version__, providers=providers)
