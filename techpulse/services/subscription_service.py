"""Email digest subscriptions."""

from __future__ import annotations

import re

from techpulse.interfaces.news_store import INewsStore
from techpulse.models.chat import SubscriptionResult
from techpulse.utils.errors import StorageError
from techpulse.utils.logging import get_logger

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
SUBSCRIBE_FAILED_MESSAGE = "Failed to subscribe. Please try again."


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


class SubscriptionService:
    """Registers subscribers; subscribing twice is not an error."""

    def __init__(self, store: INewsStore) -> None:
        self._store = store
        self._logger = get_logger(__name__)

    async def subscribe(self, email: str | None) -> SubscriptionResult:
        address = normalize_email(email or "")
        if not is_valid_email(address):
            self._logger.info("subscribe_rejected", reason="invalid_email")
            return SubscriptionResult(success=False, error=INVALID_EMAIL_MESSAGE)

        try:
            created = await self._store.add_subscriber(address)
        except StorageError as exc:
            self._logger.error("subscribe_failed", error=str(exc))
            return SubscriptionResult(success=False, error=SUBSCRIBE_FAILED_MESSAGE)

        return SubscriptionResult(success=True, already_subscribed=not created)
