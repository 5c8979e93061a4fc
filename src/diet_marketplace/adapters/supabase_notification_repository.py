"""Supabase repository for in-app notifications."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_marketplace.adapters.supabase_rows import parse_datetime
from diet_marketplace.domain.notifications import Notification
from diet_marketplace.services.notifications import NotificationRepository


@dataclass
class SupabaseNotificationRepository(NotificationRepository):
    """Supabase implementation for notification storage."""

    client: Client

    def create_notification(  # noqa: PLR0913
        self,
        user_id: UUID,
        title: str,
        message: str,
        kind: str,
        category: str,
        action_url: str | None,
    ) -> Notification:
        """Insert an unread notification and return it."""
        response = (
            self.client.table("notifications")
            .insert(
                {
                    "user_id": str(user_id),
                    "title": title,
                    "message": message,
                    "type": kind,
                    "category": category,
                    "action_url": action_url,
                    "is_read": False,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create notification")
        return _parse_notification(response.data[0])

    def get_notification(self, notification_id: UUID) -> Notification | None:
        """Return a notification by id, if present."""
        response = (
            self.client.table("notifications")
            .select("*")
            .eq("id", str(notification_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_notification(response.data[0])

    def list_notifications(
        self, user_id: UUID, unread_only: bool, limit: int
    ) -> list[Notification]:
        """Return the newest notifications for a user."""
        query = (
            self.client.table("notifications")
            .select("*")
            .eq("user_id", str(user_id))
        )
        if unread_only:
            query = query.eq("is_read", False)
        response = query.order("created_at", desc=True).limit(limit).execute()
        return [_parse_notification(row) for row in response.data or []]

    def mark_read(self, notification_id: UUID) -> None:
        """Mark one notification as read."""
        self.client.table("notifications").update({"is_read": True}).eq(
            "id", str(notification_id)
        ).execute()

    def mark_all_read(self, user_id: UUID) -> int:
        """Mark every unread notification of a user as read."""
        response = (
            self.client.table("notifications")
            .update({"is_read": True})
            .eq("user_id", str(user_id))
            .eq("is_read", False)
            .execute()
        )
        return len(response.data or [])

    def delete_notification(self, notification_id: UUID) -> None:
        """Remove one notification."""
        self.client.table("notifications").delete().eq(
            "id", str(notification_id)
        ).execute()

    def count_unread(self, user_id: UUID) -> int:
        """Return the number of unread notifications for a user."""
        response = (
            self.client.table("notifications")
            .select("id", count="exact")
            .eq("user_id", str(user_id))
            .eq("is_read", False)
            .execute()
        )
        if response.count is not None:
            return response.count
        return len(response.data or [])


def _parse_notification(row: dict[str, object]) -> Notification:
    return Notification(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        title=str(row.get("title") or ""),
        message=str(row.get("message") or ""),
        kind=str(row.get("type") or "info"),
        category=str(row.get("category") or ""),
        action_url=row.get("action_url"),
        is_read=bool(row.get("is_read")),
        created_at=parse_datetime(row.get("created_at")),
    )
