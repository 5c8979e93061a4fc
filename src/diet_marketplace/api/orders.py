"""Custom recipe order and quote negotiation endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from diet_marketplace.api.dependencies import current_user_id, get_container
from diet_marketplace.api.schemas import (
    CustomRecipeOrderIn,
    CustomRecipeOrderOut,
    QuotePriceIn,
)

router = APIRouter(tags=["orders"])


@router.post("/orders/custom-recipe", status_code=status.HTTP_201_CREATED)
def submit_custom_recipe_order(
    payload: CustomRecipeOrderIn,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> CustomRecipeOrderOut:
    """Submit a recipe for the restaurant to quote."""
    order = get_container(request).negotiation_service.submit_custom_recipe_order(
        customer_id=user_id,
        restaurant_id=payload.restaurant_id,
        recipe=payload.recipe.to_domain(),
        delivery_address=payload.delivery_address,
        notes=payload.notes,
    )
    return CustomRecipeOrderOut.from_domain(order)


@router.get("/orders/custom-recipe")
def list_my_orders(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> list[CustomRecipeOrderOut]:
    """Return the caller's custom recipe orders."""
    orders = get_container(request).negotiation_service.list_customer_orders(user_id)
    return [CustomRecipeOrderOut.from_domain(order) for order in orders]


@router.get("/orders/{order_id}")
def get_order(
    order_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> CustomRecipeOrderOut:
    """Return one order to its customer or restaurant owner."""
    order = get_container(request).negotiation_service.get_order(order_id, user_id)
    return CustomRecipeOrderOut.from_domain(order)


@router.put("/orders/{order_id}/quote-price")
def quote_price(
    order_id: UUID,
    payload: QuotePriceIn,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> CustomRecipeOrderOut:
    """Restaurant owner quotes a price."""
    order = get_container(request).negotiation_service.quote_price(
        order_id, user_id, payload.price
    )
    return CustomRecipeOrderOut.from_domain(order)


@router.put("/orders/{order_id}/accept-quote")
def accept_quote(
    order_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> CustomRecipeOrderOut:
    """Customer accepts the quoted price."""
    order = get_container(request).negotiation_service.accept_quote(
        order_id, user_id
    )
    return CustomRecipeOrderOut.from_domain(order)


@router.put("/orders/{order_id}/reject-quote")
def reject_quote(
    order_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> CustomRecipeOrderOut:
    """Customer rejects the quoted price."""
    order = get_container(request).negotiation_service.reject_quote(
        order_id, user_id
    )
    return CustomRecipeOrderOut.from_domain(order)


@router.get("/restaurants/{restaurant_id}/custom-orders")
def list_restaurant_orders(
    restaurant_id: UUID,
    request: Request,
    negotiation_state: str | None = None,
    user_id: UUID = Depends(current_user_id),
) -> list[CustomRecipeOrderOut]:
    """Return a restaurant's custom recipe orders to its owner."""
    orders = get_container(request).negotiation_service.list_restaurant_orders(
        restaurant_id, user_id, negotiation_state
    )
    return [CustomRecipeOrderOut.from_domain(order) for order in orders]
