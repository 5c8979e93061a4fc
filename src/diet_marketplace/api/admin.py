"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from diet_marketplace.api.schemas import ShoppingRequestOut

if TYPE_CHECKING:
    from diet_marketplace.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/disputes", dependencies=[Depends(require_admin)])
def list_disputes(
    request: Request, limit: int = Query(default=50, ge=1, le=200)
) -> dict[str, object]:
    """Return disputed shopping deliveries for review."""
    container: AppContainer = request.app.state.container
    disputed = container.assignment_service.list_disputed(limit)
    return {
        "disputes": [
            ShoppingRequestOut.from_domain(item).model_dump(mode="json")
            for item in disputed
        ]
    }
