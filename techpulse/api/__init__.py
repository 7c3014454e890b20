"""TechPulse API layer -- routes, schemas, and middleware."""

from techpulse.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from techpulse.api.routes import router
from techpulse.api.schemas import (
    ErrorResponse,
    FeedResponse,
    HealthResponse,
    IngestionResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ErrorResponse",
    "FeedResponse",
    "HealthResponse",
    "IngestionResponse",
]
