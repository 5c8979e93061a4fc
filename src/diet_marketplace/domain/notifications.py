"""Domain models for in-app notifications."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Notification:
    """A message queued for one user's inbox."""

    id: UUID
    user_id: UUID
    title: str
    message: str
    kind: str
    category: str
    action_url: str | None
    is_read: bool
    created_at: datetime | None = None
