# app/core/notifications.py
import logging
from typing import Literal, Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)

NotificationVariant = Literal["default", "success", "destructive"]


class Notification(BaseModel):
    """
    A transient, user-facing message describing the outcome of a store action.

    Rendering (toasts) is the client's job; the backend only reports them.
    """

    title: str
    description: str | None = None
    variant: NotificationVariant = "default"


class Notifier(Protocol):
    def __call__(
        self,
        title: str,
        description: str | None = None,
        variant: NotificationVariant = "default",
    ) -> None: ...


def log_notifier(
    title: str,
    description: str | None = None,
    variant: NotificationVariant = "default",
) -> None:
    """Default sink: just log the notification."""
    logger.info("[%s] %s%s", variant, title, f": {description}" if description else "")


class NotificationCollector:
    """
    Collects notifications raised while handling one request,
    so they can be returned to the client alongside the new state.
    """

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def __call__(
        self,
        title: str,
        description: str | None = None,
        variant: NotificationVariant = "default",
    ) -> None:
        self.notifications.append(
            Notification(title=title, description=description, variant=variant)
        )
        log_notifier(title, description, variant)
