"""Notification inbox and fire-and-forget delivery."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diet_marketplace.domain.errors import AuthorizationError, NotFound
from diet_marketplace.domain.notifications import Notification

_logger = logging.getLogger(__name__)


class NotificationRepository(Protocol):
    """Persistence interface for notifications."""

    def create_notification(  # noqa: PLR0913
        self,
        user_id: UUID,
        title: str,
        message: str,
        kind: str,
        category: str,
        action_url: str | None,
    ) -> Notification:
        """Create a notification row and return it."""

    def get_notification(self, notification_id: UUID) -> Notification | None:
        """Return a notification by id, if present."""

    def list_notifications(
        self, user_id: UUID, unread_only: bool, limit: int
    ) -> list[Notification]:
        """Return the newest notifications for a user."""

    def mark_read(self, notification_id: UUID) -> None:
        """Mark one notification as read."""

    def mark_all_read(self, user_id: UUID) -> int:
        """Mark every unread notification of a user as read."""

    def delete_notification(self, notification_id: UUID) -> None:
        """Remove one notification."""

    def count_unread(self, user_id: UUID) -> int:
        """Return the number of unread notifications for a user."""


@dataclass
class NotificationService:
    """Queues notifications for counterparties and serves the inbox."""

    repository: NotificationRepository

    def notify(  # noqa: PLR0913
        self,
        user_id: UUID,
        title: str,
        message: str,
        category: str,
        action_url: str | None = None,
        kind: str = "info",
    ) -> None:
        """Enqueue a notification; delivery failures never reach the caller."""
        try:
            self.repository.create_notification(
                user_id=user_id,
                title=title,
                message=message,
                kind=kind,
                category=category,
                action_url=action_url,
            )
        except Exception:
            _logger.exception(
                "Failed to enqueue notification",
                extra={"user_id": str(user_id), "category": category},
            )

    def list_notifications(
        self, user_id: UUID, unread_only: bool = False, limit: int = 50
    ) -> list[Notification]:
        """Return the user's notifications, newest first."""
        return self.repository.list_notifications(user_id, unread_only, limit)

    def mark_read(self, notification_id: UUID, user_id: UUID) -> None:
        """Mark a notification read on behalf of its owner."""
        self._require_owned(notification_id, user_id, "update")
        self.repository.mark_read(notification_id)

    def delete(self, notification_id: UUID, user_id: UUID) -> None:
        """Delete a notification on behalf of its owner."""
        self._require_owned(notification_id, user_id, "delete")
        self.repository.delete_notification(notification_id)

    def mark_all_read(self, user_id: UUID) -> int:
        """Mark all of a user's notifications read."""
        return self.repository.mark_all_read(user_id)

    def unread_count(self, user_id: UUID) -> int:
        """Return the number of unread notifications."""
        return self.repository.count_unread(user_id)

    def _require_owned(
        self, notification_id: UUID, user_id: UUID, action: str
    ) -> Notification:
        notification = self.repository.get_notification(notification_id)
        if notification is None:
            raise NotFound("Notification not found")
        if notification.user_id != user_id:
            raise AuthorizationError(f"Not authorized to {action} this notification")
        return notification
