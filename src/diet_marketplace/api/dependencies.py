"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Header, HTTPException, Request, status

if TYPE_CHECKING:
    from diet_marketplace.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


async def current_user_id(x_user_id: str | None = Header(default=None)) -> UUID:
    """Resolve the caller identity forwarded by the gateway."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id"
        )
    try:
        return UUID(x_user_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid X-User-Id"
        ) from exc
