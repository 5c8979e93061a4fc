"""Shopping-list request endpoints for customers and delivery partners."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from diet_marketplace.api.dependencies import current_user_id, get_container
from diet_marketplace.api.schemas import (
    DisputeIn,
    ShoppingRequestIn,
    ShoppingRequestOut,
    StatusUpdateIn,
)
from diet_marketplace.domain.shopping import ShoppingRequest

router = APIRouter(prefix="/shopping-requests", tags=["shopping"])


def _serialize(requests: list[ShoppingRequest]) -> list[ShoppingRequestOut]:
    return [ShoppingRequestOut.from_domain(item) for item in requests]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_request(
    payload: ShoppingRequestIn,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> ShoppingRequestOut:
    """Create a shopping request and alert delivery partners."""
    created = get_container(request).assignment_service.create_request(
        customer_id=user_id,
        items=payload.items,
        delivery_address=payload.delivery_address.to_domain(),
        estimated_cost=payload.estimated_cost,
        notes=payload.notes,
        meal_plan_id=payload.meal_plan_id,
    )
    return ShoppingRequestOut.from_domain(created)


@router.get("/available", dependencies=[Depends(current_user_id)])
def list_available(
    request: Request, limit: int = Query(default=50, ge=1, le=200)
) -> list[ShoppingRequestOut]:
    """Return requests still open for claiming."""
    return _serialize(get_container(request).assignment_service.list_available(limit))


@router.get("/my-requests")
def list_my_requests(
    request: Request,
    status_filter: list[str] | None = Query(default=None, alias="status"),
    user_id: UUID = Depends(current_user_id),
) -> list[ShoppingRequestOut]:
    """Return the caller's own requests."""
    return _serialize(
        get_container(request).assignment_service.list_customer_requests(
            user_id, status_filter
        )
    )


@router.get("/my-deliveries")
def list_my_deliveries(
    request: Request,
    status_filter: list[str] | None = Query(default=None, alias="status"),
    user_id: UUID = Depends(current_user_id),
) -> list[ShoppingRequestOut]:
    """Return deliveries assigned to the calling partner."""
    return _serialize(
        get_container(request).assignment_service.list_partner_deliveries(
            user_id, status_filter
        )
    )


@router.get("/{request_id}")
def get_request(
    request_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> ShoppingRequestOut:
    """Return a request to its customer or assigned partner."""
    found = get_container(request).assignment_service.get_request(request_id, user_id)
    return ShoppingRequestOut.from_domain(found)


@router.put("/{request_id}/accept")
def claim_request(
    request_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> ShoppingRequestOut:
    """Claim a pending request; only the first partner wins."""
    claimed = get_container(request).assignment_service.claim(request_id, user_id)
    return ShoppingRequestOut.from_domain(claimed)


@router.put("/{request_id}/status")
def update_status(
    request_id: UUID,
    payload: StatusUpdateIn,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> ShoppingRequestOut:
    """Assigned partner advances the delivery."""
    updated = get_container(request).assignment_service.advance_status(
        request_id, user_id, payload.status, payload.final_cost
    )
    return ShoppingRequestOut.from_domain(updated)


@router.put("/{request_id}/confirm-delivery")
def confirm_delivery(
    request_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> ShoppingRequestOut:
    """Customer confirms the delivery and pays."""
    updated = get_container(request).assignment_service.confirm_delivery(
        request_id, user_id
    )
    return ShoppingRequestOut.from_domain(updated)


@router.put("/{request_id}/dispute-delivery")
def dispute_delivery(
    request_id: UUID,
    payload: DisputeIn,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> ShoppingRequestOut:
    """Customer disputes a delivered request."""
    updated = get_container(request).assignment_service.dispute_delivery(
        request_id, user_id, payload.reason
    )
    return ShoppingRequestOut.from_domain(updated)


@router.put("/{request_id}/cancel")
def cancel_request(
    request_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> ShoppingRequestOut:
    """Customer cancels a request nobody has claimed."""
    cancelled = get_container(request).assignment_service.cancel(request_id, user_id)
    return ShoppingRequestOut.from_domain(cancelled)
