"""Quote negotiation state machine for custom recipe orders."""

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
from diet_marketplace.domain.foods import Restaurant
from diet_marketplace.domain.orders import (
    ACCEPTED,
    PENDING_QUOTE,
    QUOTED,
    REJECTED,
    TERMINAL_NEGOTIATION_STATES,
    CustomRecipeOrder,
    RecipeDetails,
)
from diet_marketplace.services.notifications import NotificationService

_logger = logging.getLogger(__name__)


class RestaurantRepository(Protocol):
    """Read access to restaurants for ownership checks."""

    def get_restaurant(self, restaurant_id: UUID) -> Restaurant | None:
        """Return a restaurant by id, if present."""


class OrderRepository(Protocol):
    """Persistence interface for custom recipe orders."""

    def create_order(  # noqa: PLR0913
        self,
        customer_id: UUID,
        restaurant_id: UUID,
        recipe: RecipeDetails,
        delivery_address: dict[str, str] | None,
        notes: str | None,
    ) -> CustomRecipeOrder:
        """Create an order in the pending-quote state and return it."""

    def get_order(self, order_id: UUID) -> CustomRecipeOrder | None:
        """Return an order by id, if present."""

    def update_if_state(
        self, order_id: UUID, expected_state: str, changes: dict[str, object]
    ) -> CustomRecipeOrder | None:
        """Apply changes only while the negotiation state matches.

        Returns the updated order, or None when no row matched.
        """

    def list_for_customer(self, customer_id: UUID) -> list[CustomRecipeOrder]:
        """Return a customer's custom recipe orders, newest first."""

    def list_for_restaurant(
        self, restaurant_id: UUID, negotiation_state: str | None
    ) -> list[CustomRecipeOrder]:
        """Return a restaurant's custom recipe orders, newest first."""


@dataclass
class NegotiationService:
    """Drives quote, accept and reject transitions between two parties."""

    orders: OrderRepository
    restaurants: RestaurantRepository
    notifications: NotificationService

    def submit_custom_recipe_order(  # noqa: PLR0913
        self,
        customer_id: UUID,
        restaurant_id: UUID,
        recipe: RecipeDetails,
        delivery_address: dict[str, str] | None = None,
        notes: str | None = None,
    ) -> CustomRecipeOrder:
        """Create a custom recipe order awaiting the restaurant's quote."""
        if not recipe.name or not recipe.name.strip():
            raise ValidationError("Recipe details are required")
        restaurant = self.restaurants.get_restaurant(restaurant_id)
        if restaurant is None:
            raise NotFound("Restaurant not found")
        if not restaurant.is_approved or not restaurant.is_active:
            raise ValidationError("Restaurant not available")
        order = self.orders.create_order(
            customer_id=customer_id,
            restaurant_id=restaurant_id,
            recipe=recipe,
            delivery_address=delivery_address,
            notes=notes,
        )
        self.notifications.notify(
            user_id=restaurant.owner_id,
            title="New Custom Recipe Request",
            message=f'New custom recipe request for "{recipe.name}"',
            category="order",
            action_url="/restaurant/orders",
        )
        return order

    def quote_price(
        self, order_id: UUID, caller_id: UUID, price: float
    ) -> CustomRecipeOrder:
        """Record the restaurant's price and move the order to quoted."""
        if price is None or not math.isfinite(price) or price <= 0:
            raise ValidationError("Valid price is required")
        order = self._require_order(order_id)
        restaurant = self.restaurants.get_restaurant(order.restaurant_id)
        if restaurant is None or restaurant.owner_id != caller_id:
            raise AuthorizationError("Not authorized to quote price for this order")
        _require_state(order, PENDING_QUOTE)
        updated = self._transition(
            order,
            PENDING_QUOTE,
            {
                "negotiation_state": QUOTED,
                "quoted_price": float(price),
                "quoted_at": datetime.now(tz=UTC),
            },
        )
        self.notifications.notify(
            user_id=order.customer_id,
            title="Price Quote Received",
            message=(
                f"{restaurant.name} has quoted ${price:.2f} for your custom "
                f'recipe "{order.recipe.name}"'
            ),
            category="order",
            action_url="/orders",
        )
        return updated

    def accept_quote(self, order_id: UUID, caller_id: UUID) -> CustomRecipeOrder:
        """Accept the quote; the order becomes confirmed at the quoted price."""
        order = self._require_customer_order(order_id, caller_id)
        _require_state(order, QUOTED)
        updated = self._transition(
            order,
            QUOTED,
            {
                "negotiation_state": ACCEPTED,
                "status": "confirmed",
                "total_amount": order.quoted_price,
                "accepted_at": datetime.now(tz=UTC),
            },
        )
        self._notify_restaurant(
            order,
            title="Custom Recipe Order Confirmed",
            message=(
                f"Customer accepted your quote of ${order.quoted_price or 0:.2f} "
                f'for "{order.recipe.name}"'
            ),
            kind="success",
        )
        return updated

    def reject_quote(self, order_id: UUID, caller_id: UUID) -> CustomRecipeOrder:
        """Reject the quote; the order is cancelled."""
        order = self._require_customer_order(order_id, caller_id)
        _require_state(order, QUOTED)
        updated = self._transition(
            order,
            QUOTED,
            {
                "negotiation_state": REJECTED,
                "status": "cancelled",
                "rejected_at": datetime.now(tz=UTC),
            },
        )
        self._notify_restaurant(
            order,
            title="Quote Rejected",
            message=f'Customer rejected your quote for "{order.recipe.name}"',
            kind="warning",
        )
        return updated

    def get_order(self, order_id: UUID, caller_id: UUID) -> CustomRecipeOrder:
        """Return an order visible to its customer or the restaurant owner."""
        order = self._require_order(order_id)
        if order.customer_id == caller_id:
            return order
        restaurant = self.restaurants.get_restaurant(order.restaurant_id)
        if restaurant is None or restaurant.owner_id != caller_id:
            raise AuthorizationError("Not authorized to view this order")
        return order

    def list_customer_orders(self, customer_id: UUID) -> list[CustomRecipeOrder]:
        """Return the caller's own custom recipe orders."""
        return self.orders.list_for_customer(customer_id)

    def list_restaurant_orders(
        self,
        restaurant_id: UUID,
        caller_id: UUID,
        negotiation_state: str | None = None,
    ) -> list[CustomRecipeOrder]:
        """Return a restaurant's custom recipe orders for its owner."""
        restaurant = self.restaurants.get_restaurant(restaurant_id)
        if restaurant is None:
            raise NotFound("Restaurant not found")
        if restaurant.owner_id != caller_id:
            raise AuthorizationError("Not authorized to view these orders")
        return self.orders.list_for_restaurant(restaurant_id, negotiation_state)

    def _require_order(self, order_id: UUID) -> CustomRecipeOrder:
        order = self.orders.get_order(order_id)
        if order is None:
            raise NotFound("Order not found")
        return order

    def _require_customer_order(
        self, order_id: UUID, caller_id: UUID
    ) -> CustomRecipeOrder:
        order = self._require_order(order_id)
        if order.customer_id != caller_id:
            raise AuthorizationError("Not authorized")
        return order

    def _transition(
        self,
        order: CustomRecipeOrder,
        expected_state: str,
        changes: dict[str, object],
    ) -> CustomRecipeOrder:
        updated = self.orders.update_if_state(order.id, expected_state, changes)
        if updated is None:
            _logger.info(
                "Order transition lost a race",
                extra={"order_id": str(order.id), "expected": expected_state},
            )
            raise StateConflict(f"Order is no longer in state '{expected_state}'")
        return updated

    def _notify_restaurant(
        self, order: CustomRecipeOrder, title: str, message: str, kind: str
    ) -> None:
        restaurant = self.restaurants.get_restaurant(order.restaurant_id)
        if restaurant is None:
            _logger.warning(
                "Restaurant missing for order notification",
                extra={"order_id": str(order.id)},
            )
            return
        self.notifications.notify(
            user_id=restaurant.owner_id,
            title=title,
            message=message,
            category="order",
            action_url="/restaurant/orders",
            kind=kind,
        )


def _require_state(order: CustomRecipeOrder, expected_state: str) -> None:
    if order.negotiation_state in TERMINAL_NEGOTIATION_STATES:
        raise StateConflict(
            f"Order is already '{order.negotiation_state}' and cannot change"
        )
    if order.negotiation_state != expected_state:
        raise StateConflict(
            f"Order must be in state '{expected_state}', "
            f"current state is '{order.negotiation_state}'"
        )
