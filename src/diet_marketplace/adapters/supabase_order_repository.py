"""Supabase repository for custom recipe orders."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_marketplace.adapters.supabase_rows import (
    parse_datetime,
    parse_float,
    parse_optional_float,
    parse_strings,
    to_columns,
)
from diet_marketplace.domain.orders import (
    PENDING_QUOTE,
    CustomRecipeOrder,
    RecipeDetails,
)
from diet_marketplace.services.negotiation import OrderRepository


@dataclass
class SupabaseOrderRepository(OrderRepository):
    """Supabase implementation for custom recipe orders."""

    client: Client

    def create_order(  # noqa: PLR0913
        self,
        customer_id: UUID,
        restaurant_id: UUID,
        recipe: RecipeDetails,
        delivery_address: dict[str, str] | None,
        notes: str | None,
    ) -> CustomRecipeOrder:
        """Insert an order awaiting a quote and return it."""
        payload = {
            "customer_id": str(customer_id),
            "restaurant_id": str(restaurant_id),
            "is_custom_recipe": True,
            "custom_recipe_details": _recipe_payload(recipe),
            "negotiation_state": PENDING_QUOTE,
            "status": "pending",
            "total_amount": 0,
            "delivery_address": delivery_address,
            "notes": notes,
        }
        response = self.client.table("orders").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create order")
        return _parse_order(response.data[0])

    def get_order(self, order_id: UUID) -> CustomRecipeOrder | None:
        """Return an order by id, if present."""
        response = (
            self.client.table("orders")
            .select("*")
            .eq("id", str(order_id))
            .eq("is_custom_recipe", True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_order(response.data[0])

    def update_if_state(
        self, order_id: UUID, expected_state: str, changes: dict[str, object]
    ) -> CustomRecipeOrder | None:
        """Apply changes with a single conditional update on the state."""
        response = (
            self.client.table("orders")
            .update(to_columns(changes))
            .eq("id", str(order_id))
            .eq("negotiation_state", expected_state)
            .execute()
        )
        if not response.data:
            return None
        return _parse_order(response.data[0])

    def list_for_customer(self, customer_id: UUID) -> list[CustomRecipeOrder]:
        """Return a customer's custom recipe orders, newest first."""
        response = (
            self.client.table("orders")
            .select("*")
            .eq("customer_id", str(customer_id))
            .eq("is_custom_recipe", True)
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_order(row) for row in response.data or []]

    def list_for_restaurant(
        self, restaurant_id: UUID, negotiation_state: str | None
    ) -> list[CustomRecipeOrder]:
        """Return a restaurant's custom recipe orders, newest first."""
        query = (
            self.client.table("orders")
            .select("*")
            .eq("restaurant_id", str(restaurant_id))
            .eq("is_custom_recipe", True)
        )
        if negotiation_state:
            query = query.eq("negotiation_state", negotiation_state)
        response = query.order("created_at", desc=True).execute()
        return [_parse_order(row) for row in response.data or []]


def _recipe_payload(recipe: RecipeDetails) -> dict[str, object]:
    return {
        "name": recipe.name,
        "description": recipe.description,
        "ingredients": list(recipe.ingredients),
        "instructions": recipe.instructions,
        "calories": recipe.calories,
        "protein": recipe.protein_g,
        "carbs": recipe.carbs_g,
        "fats": recipe.fat_g,
        "meal_type": recipe.meal_type,
    }


def _parse_recipe(raw: object) -> RecipeDetails:
    details = raw if isinstance(raw, dict) else {}
    return RecipeDetails(
        name=str(details.get("name") or ""),
        description=details.get("description"),
        ingredients=parse_strings(details.get("ingredients")),
        instructions=details.get("instructions"),
        calories=parse_optional_float(details.get("calories")),
        protein_g=parse_optional_float(details.get("protein")),
        carbs_g=parse_optional_float(details.get("carbs")),
        fat_g=parse_optional_float(details.get("fats")),
        meal_type=details.get("meal_type"),
    )


def _parse_order(row: dict[str, object]) -> CustomRecipeOrder:
    address = row.get("delivery_address")
    return CustomRecipeOrder(
        id=UUID(str(row["id"])),
        customer_id=UUID(str(row["customer_id"])),
        restaurant_id=UUID(str(row["restaurant_id"])),
        recipe=_parse_recipe(row.get("custom_recipe_details")),
        negotiation_state=str(row.get("negotiation_state") or PENDING_QUOTE),
        status=str(row.get("status") or "pending"),
        quoted_price=parse_optional_float(row.get("quoted_price")),
        total_amount=parse_float(row.get("total_amount")),
        delivery_address=address if isinstance(address, dict) else None,
        notes=row.get("notes"),
        created_at=parse_datetime(row.get("created_at")),
        quoted_at=parse_datetime(row.get("quoted_at")),
        accepted_at=parse_datetime(row.get("accepted_at")),
        rejected_at=parse_datetime(row.get("rejected_at")),
    )
