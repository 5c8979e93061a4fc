"""Tests for the notification inbox."""

from uuid import uuid4

import pytest

from diet_marketplace.domain.errors import AuthorizationError, NotFound
from diet_marketplace.services.notifications import NotificationService
from tests.conftest import InMemoryNotificationRepository


def test_notify_and_read_inbox(notification_service) -> None:
    user_id = uuid4()
    notification_service.notify(user_id, "First", "hello", "order")
    notification_service.notify(user_id, "Second", "again", "order", kind="success")
    notification_service.notify(uuid4(), "Other", "not yours", "order")

    inbox = notification_service.list_notifications(user_id)

    assert [item.title for item in inbox] == ["Second", "First"]
    assert inbox[0].kind == "success"
    assert notification_service.unread_count(user_id) == 2


def test_mark_read_is_owner_only(notification_service) -> None:
    user_id = uuid4()
    notification_service.notify(user_id, "Quote", "ready", "order")
    notification = notification_service.list_notifications(user_id)[0]

    with pytest.raises(AuthorizationError):
        notification_service.mark_read(notification.id, uuid4())
    with pytest.raises(NotFound):
        notification_service.mark_read(uuid4(), user_id)

    notification_service.mark_read(notification.id, user_id)

    assert notification_service.unread_count(user_id) == 0
    assert notification_service.list_notifications(user_id, unread_only=True) == []


def test_mark_all_read(notification_service) -> None:
    user_id = uuid4()
    for title in ("a", "b", "c"):
        notification_service.notify(user_id, title, "msg", "shopping-request")

    updated = notification_service.mark_all_read(user_id)

    assert updated == 3
    assert notification_service.mark_all_read(user_id) == 0


def test_notify_failure_is_logged_not_raised(package_log) -> None:
    repository = InMemoryNotificationRepository(fail=True)
    service = NotificationService(repository)

    service.notify(uuid4(), "Title", "message", "order")

    assert repository.notifications == []
    assert "Failed to enqueue notification" in package_log.text


def test_delete_is_owner_only(notification_service) -> None:
    user_id = uuid4()
    notification_service.notify(user_id, "Quote", "ready", "order")
    notification_service.notify(user_id, "Delivered", "done", "shopping-request")
    delivered, quote = notification_service.list_notifications(user_id)

    with pytest.raises(AuthorizationError):
        notification_service.delete(quote.id, uuid4())
    with pytest.raises(NotFound):
        notification_service.delete(uuid4(), user_id)

    notification_service.delete(quote.id, user_id)

    assert [item.id for item in notification_service.list_notifications(user_id)] == [
        delivered.id
    ]
    assert notification_service.unread_count(user_id) == 1
