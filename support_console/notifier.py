"""User-facing notifications: new-message alerts, unread badge, errors, scrolling."""

from collections import deque
from typing import Protocol

from .logging_config import get_logger

logger = get_logger(__name__)

# Oldest undismissed errors are dropped past this many.
MAX_PENDING_ERRORS = 50


class INotifier(Protocol):
    """Side effects the session asks the console frontend to perform."""

    def notify_new_message(self, unread_total: int) -> None:
        """Alert the admin that a user wrote."""
        ...

    def update_badge(self, unread_total: int) -> None:
        """Refresh the unread badge."""
        ...

    def show_error(self, message: str) -> None:
        """Surface a non-fatal error until dismissed."""
        ...

    def scroll_to_bottom(self) -> None:
        """Bring the latest message into view."""
        ...


def badge_text(unread_total: int) -> str:
    """Badge label; empty hides the badge."""
    if unread_total <= 0:
        return ""
    return "99+" if unread_total > 99 else str(unread_total)


class ConsoleNotifier:
    """Keeps notification state for the console API and logs each effect."""

    def __init__(self, max_errors: int = MAX_PENDING_ERRORS):
        self.badge = ""
        self.errors: deque[str] = deque(maxlen=max_errors)
        self.notification_count = 0
        self.scroll_requests = 0

    def notify_new_message(self, unread_total: int) -> None:
        self.notification_count += 1
        logger.info("New message from a user (%s unread)", unread_total)

    def update_badge(self, unread_total: int) -> None:
        self.badge = badge_text(unread_total)

    def show_error(self, message: str) -> None:
        logger.error("Console error: %s", message)
        self.errors.append(message)

    def dismiss_errors(self) -> list[str]:
        """Drop pending errors and return what was dismissed."""
        dismissed = list(self.errors)
        self.errors.clear()
        return dismissed

    def scroll_to_bottom(self) -> None:
        self.scroll_requests += 1
