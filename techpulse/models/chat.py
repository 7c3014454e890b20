"""Chat and subscription request/response models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class ChatMessage(BaseModel):
    """One turn of a chat conversation, forwarded verbatim to the model."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class ArticleContext(BaseModel):
    """The article a chat conversation is about."""

    model_config = ConfigDict(frozen=True)

    title: str
    summary: str | None = None
    url: str


class SubscriptionResult(BaseModel):
    """Outcome of a subscribe request.

    Re-subscribing an existing address is a success; ``already_subscribed``
    tells the two cases apart.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    error: str | None = None
    already_subscribed: bool = False
