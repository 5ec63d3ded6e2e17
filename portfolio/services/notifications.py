from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Protocol

import httpx

from portfolio.core.config import settings

logger = logging.getLogger(__name__)

NotificationType = Literal["submission", "verification"]


@dataclass(frozen=True)
class Notification:
    type: NotificationType
    assignment_id: str
    recipient_id: str

    def as_payload(self) -> dict[str, str]:
        return {
            "type": self.type,
            "assignmentId": self.assignment_id,
            "recipientId": self.recipient_id,
        }


class NotificationDispatcher(Protocol):
    def dispatch(self, notification: Notification) -> None: ...


class LoggingNotificationDispatcher:
    """Used when no webhook is configured."""

    def dispatch(self, notification: Notification) -> None:
        logger.info(
            "notification %s for assignment %s -> %s",
            notification.type,
            notification.assignment_id,
            notification.recipient_id,
        )


class WebhookNotificationDispatcher:
    """POSTs the notification to the email function. Never raises."""

    def __init__(self, url: str, timeout: float = 5.0):
        self.url = url
        self.timeout = timeout

    def dispatch(self, notification: Notification) -> None:
        try:
            r = httpx.post(self.url, json=notification.as_payload(), timeout=self.timeout)
            r.raise_for_status()
        except httpx.HTTPError:
            logger.exception(
                "notification %s for assignment %s failed",
                notification.type,
                notification.assignment_id,
            )


def get_notification_dispatcher() -> NotificationDispatcher:
    if settings.NOTIFICATION_WEBHOOK_URL:
        return WebhookNotificationDispatcher(
            settings.NOTIFICATION_WEBHOOK_URL,
            timeout=settings.NOTIFICATION_TIMEOUT_SECONDS,
        )
    return LoggingNotificationDispatcher()
