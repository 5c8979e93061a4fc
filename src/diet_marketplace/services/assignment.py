"""First-come-first-served claims and delivery lifecycle for shopping requests."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from diet_marketplace.domain.errors import (
    AuthorizationError,
    NotFound,
    StateConflict,
    ValidationError,
)
from diet_marketplace.domain.shopping import (
    CANCELLED,
    CONFIRMED,
    DELIVERED,
    DISPUTED,
    IN_PROGRESS,
    PENDING,
    STATUSES,
    DeliveryAddress,
    ShoppingRequest,
)
from diet_marketplace.services.notifications import NotificationService

_logger = logging.getLogger(__name__)

ALREADY_CLAIMED = "This request has already been accepted by another delivery partner"

# Transitions the assigned partner may drive.
_PARTNER_SUCCESSORS: dict[str, frozenset[str]] = {
    IN_PROGRESS: frozenset({DELIVERED}),
}


class ShoppingRequestRepository(Protocol):
    """Persistence interface for shopping requests."""

    def create_request(  # noqa: PLR0913
        self,
        customer_id: UUID,
        items: list[str],
        delivery_address: DeliveryAddress,
        delivery_fee: float,
        estimated_cost: float,
        notes: str | None,
        meal_plan_id: UUID | None,
    ) -> ShoppingRequest:
        """Create a pending request and return it."""

    def get_request(self, request_id: UUID) -> ShoppingRequest | None:
        """Return a request by id, if present."""

    def update_where(
        self,
        request_id: UUID,
        expected: dict[str, object],
        changes: dict[str, object],
    ) -> ShoppingRequest | None:
        """Atomically apply changes only if every expected column matches.

        A None expectation means the column must be null. Returns the updated
        request, or None when the row did not match.
        """

    def list_available(self, limit: int) -> list[ShoppingRequest]:
        """Return pending, unassigned requests, newest first."""

    def list_by_status(self, status: str, limit: int) -> list[ShoppingRequest]:
        """Return requests in one status, newest first."""

    def list_for_customer(
        self, customer_id: UUID, statuses: list[str] | None
    ) -> list[ShoppingRequest]:
        """Return a customer's requests, newest first."""

    def list_for_partner(
        self, partner_id: UUID, statuses: list[str] | None
    ) -> list[ShoppingRequest]:
        """Return requests assigned to a partner, newest first."""


class DeliveryPartnerDirectory(Protocol):
    """Lookup of partners that should hear about new requests."""

    def list_active_partner_ids(self) -> list[UUID]:
        """Return ids of active delivery partners."""


@dataclass
class AssignmentService:
    """Race-safe claim protocol and the delivery lifecycle after it."""

    requests: ShoppingRequestRepository
    partners: DeliveryPartnerDirectory
    notifications: NotificationService
    delivery_fee: float = 10.0

    def create_request(  # noqa: PLR0913
        self,
        customer_id: UUID,
        items: list[str],
        delivery_address: DeliveryAddress,
        estimated_cost: float = 0.0,
        notes: str | None = None,
        meal_plan_id: UUID | None = None,
    ) -> ShoppingRequest:
        """Create a pending request and tell every active partner about it."""
        cleaned_items = [item.strip() for item in items if item and item.strip()]
        if not cleaned_items:
            raise ValidationError("Shopping list items are required")
        _validate_address(delivery_address)
        if not math.isfinite(estimated_cost) or estimated_cost < 0:
            raise ValidationError("Estimated cost cannot be negative")
        request = self.requests.create_request(
            customer_id=customer_id,
            items=cleaned_items,
            delivery_address=delivery_address,
            delivery_fee=self.delivery_fee,
            estimated_cost=estimated_cost,
            notes=notes,
            meal_plan_id=meal_plan_id,
        )
        for partner_id in self.partners.list_active_partner_ids():
            self.notifications.notify(
                user_id=partner_id,
                title="New Shopping List Request",
                message=(
                    f"New shopping delivery request with {len(cleaned_items)} "
                    f"items in {delivery_address.city}"
                ),
                category="shopping-request",
                action_url="/delivery-partner/requests",
            )
        return request

    def claim(self, request_id: UUID, partner_id: UUID) -> ShoppingRequest:
        """Assign the request to the first partner whose claim lands.

        The assignment is a single conditional update; a partner retrying its
        own successful claim gets the record back unchanged.
        """
        claimed = self.requests.update_where(
            request_id,
            expected={"status": PENDING, "delivery_partner_id": None},
            changes={
                "status": IN_PROGRESS,
                "delivery_partner_id": partner_id,
                "accepted_at": datetime.now(tz=UTC),
            },
        )
        if claimed is not None:
            _logger.info(
                "Shopping request claimed",
                extra={"request_id": str(request_id), "partner_id": str(partner_id)},
            )
            self.notifications.notify(
                user_id=claimed.customer_id,
                title="Shopping Started",
                message="A delivery partner accepted your request and started shopping",
                category="shopping-request",
                action_url="/shopping-requests",
                kind="success",
            )
            return claimed

        current = self._require_request(request_id)
        if current.delivery_partner_id == partner_id and current.status == IN_PROGRESS:
            return current
        if current.delivery_partner_id == partner_id:
            raise StateConflict(
                f"This request is already assigned to you and is '{current.status}'"
            )
        _logger.info(
            "Shopping request claim lost",
            extra={"request_id": str(request_id), "partner_id": str(partner_id)},
        )
        if current.delivery_partner_id is not None:
            raise StateConflict(ALREADY_CLAIMED)
        raise StateConflict("This request is no longer available")

    def advance_status(
        self,
        request_id: UUID,
        partner_id: UUID,
        status: str,
        final_cost: float | None = None,
    ) -> ShoppingRequest:
        """Move an assigned request forward on behalf of its partner."""
        request = self._require_request(request_id)
        if request.delivery_partner_id != partner_id:
            raise AuthorizationError("Not authorized to update this request")
        if status not in _PARTNER_SUCCESSORS.get(request.status, frozenset()):
            raise StateConflict(
                f"Cannot move request from '{request.status}' to '{status}'"
            )
        changes: dict[str, object] = {"status": status}
        if status == DELIVERED:
            if final_cost is None or not math.isfinite(final_cost) or final_cost < 0:
                raise ValidationError("Final cost is required and cannot be negative")
            changes["final_cost"] = float(final_cost)
            changes["delivered_at"] = datetime.now(tz=UTC)
        updated = self._transition(
            request,
            expected={"status": request.status, "delivery_partner_id": partner_id},
            changes=changes,
        )
        if status == DELIVERED:
            self.notifications.notify(
                user_id=request.customer_id,
                title="Items Delivered",
                message=(
                    "Your shopping items have been delivered. "
                    "Please make payment to the delivery partner."
                ),
                category="shopping-request",
                action_url="/shopping-requests",
                kind="success",
            )
        return updated

    def confirm_delivery(self, request_id: UUID, customer_id: UUID) -> ShoppingRequest:
        """Customer confirms receipt; payment is marked as paid."""
        request = self._require_customer_request(request_id, customer_id)
        _require_status(request, DELIVERED, "Can only confirm delivered requests")
        updated = self._transition(
            request,
            expected={"status": DELIVERED},
            changes={
                "status": CONFIRMED,
                "payment_status": "paid",
                "confirmed_at": datetime.now(tz=UTC),
            },
        )
        self._notify_partner(
            request,
            title="Delivery Confirmed",
            message=(
                "Customer confirmed receipt of shopping list delivery. "
                "Payment completed."
            ),
            kind="success",
        )
        return updated

    def dispute_delivery(
        self, request_id: UUID, customer_id: UUID, reason: str
    ) -> ShoppingRequest:
        """Customer reports a problem with a delivered request."""
        cleaned = (reason or "").strip()
        if not cleaned:
            raise ValidationError("Please provide a reason for the dispute")
        request = self._require_customer_request(request_id, customer_id)
        _require_status(request, DELIVERED, "Can only dispute delivered requests")
        updated = self._transition(
            request,
            expected={"status": DELIVERED},
            changes={
                "status": DISPUTED,
                "dispute_reason": cleaned,
                "disputed_at": datetime.now(tz=UTC),
            },
        )
        self._notify_partner(
            request,
            title="Delivery Disputed",
            message=f"Customer reported an issue with delivery: {cleaned}",
            kind="warning",
        )
        return updated

    def cancel(self, request_id: UUID, customer_id: UUID) -> ShoppingRequest:
        """Cancel a request that no partner has claimed yet."""
        request = self._require_customer_request(request_id, customer_id)
        _require_status(request, PENDING, "Can only cancel pending requests")
        cancelled = self.requests.update_where(
            request_id,
            expected={"status": PENDING, "delivery_partner_id": None},
            changes={"status": CANCELLED, "cancelled_at": datetime.now(tz=UTC)},
        )
        if cancelled is None:
            _logger.info(
                "Shopping request cancel lost to a claim",
                extra={"request_id": str(request_id)},
            )
            raise StateConflict("Can only cancel pending requests")
        return cancelled

    def get_request(self, request_id: UUID, caller_id: UUID) -> ShoppingRequest:
        """Return a request visible to its customer or its partner."""
        request = self._require_request(request_id)
        if caller_id not in {request.customer_id, request.delivery_partner_id}:
            raise AuthorizationError("Not authorized to view this request")
        return request

    def list_available(self, limit: int = 50) -> list[ShoppingRequest]:
        """Return requests still open for claiming."""
        return self.requests.list_available(limit)

    def list_customer_requests(
        self, customer_id: UUID, statuses: list[str] | None = None
    ) -> list[ShoppingRequest]:
        """Return the customer's own requests."""
        _validate_statuses(statuses)
        return self.requests.list_for_customer(customer_id, statuses)

    def list_partner_deliveries(
        self, partner_id: UUID, statuses: list[str] | None = None
    ) -> list[ShoppingRequest]:
        """Return the partner's assigned deliveries."""
        _validate_statuses(statuses)
        return self.requests.list_for_partner(partner_id, statuses)

    def list_disputed(self, limit: int = 50) -> list[ShoppingRequest]:
        """Return disputed deliveries for admin review."""
        return self.requests.list_by_status(DISPUTED, limit)

    def _require_request(self, request_id: UUID) -> ShoppingRequest:
        request = self.requests.get_request(request_id)
        if request is None:
            raise NotFound("Request not found")
        return request

    def _require_customer_request(
        self, request_id: UUID, customer_id: UUID
    ) -> ShoppingRequest:
        request = self._require_request(request_id)
        if request.customer_id != customer_id:
            raise AuthorizationError("Not authorized to update this request")
        return request

    def _transition(
        self,
        request: ShoppingRequest,
        expected: dict[str, object],
        changes: dict[str, object],
    ) -> ShoppingRequest:
        updated = self.requests.update_where(request.id, expected, changes)
        if updated is None:
            raise StateConflict(
                f"Request is no longer in state '{expected.get('status')}'"
            )
        return updated

    def _notify_partner(
        self, request: ShoppingRequest, title: str, message: str, kind: str
    ) -> None:
        if request.delivery_partner_id is None:
            return
        self.notifications.notify(
            user_id=request.delivery_partner_id,
            title=title,
            message=message,
            category="shopping-request",
            action_url="/delivery-partner/deliveries",
            kind=kind,
        )


def _validate_address(address: DeliveryAddress) -> None:
    missing = [
        name
        for name in ("street", "city", "state", "zip_code")
        if not str(getattr(address, name) or "").strip()
    ]
    if missing:
        raise ValidationError(
            f"Complete delivery address is required (missing: {', '.join(missing)})"
        )


def _require_status(request: ShoppingRequest, status: str, message: str) -> None:
    if request.status != status:
        raise StateConflict(message)


def _validate_statuses(statuses: list[str] | None) -> None:
    unknown = sorted(set(statuses or ()) - set(STATUSES))
    if unknown:
        raise ValidationError(f"Unknown status filter: {', '.join(unknown)}")
