"""Notification inbox endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from diet_marketplace.api.dependencies import current_user_id, get_container
from diet_marketplace.api.schemas import NotificationOut

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
def list_notifications(
    request: Request,
    unread_only: bool = False,
    limit: int = Query(default=50, ge=1, le=200),
    user_id: UUID = Depends(current_user_id),
) -> list[NotificationOut]:
    """Return the caller's newest notifications."""
    notifications = get_container(request).notification_service.list_notifications(
        user_id, unread_only=unread_only, limit=limit
    )
    return [NotificationOut.from_domain(item) for item in notifications]


@router.get("/unread-count")
def unread_count(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, int]:
    """Return the number of unread notifications."""
    return {"count": get_container(request).notification_service.unread_count(user_id)}


@router.put("/read-all")
def mark_all_read(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, int]:
    """Mark all of the caller's notifications read."""
    return {
        "updated": get_container(request).notification_service.mark_all_read(user_id)
    }


@router.put("/{notification_id}/read")
def mark_read(
    notification_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, str]:
    """Mark one notification read."""
    get_container(request).notification_service.mark_read(notification_id, user_id)
    return {"status": "ok"}


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, str]:
    """Delete one of the caller's notifications."""
    get_container(request).notification_service.delete(notification_id, user_id)
    return {"status": "deleted"}
