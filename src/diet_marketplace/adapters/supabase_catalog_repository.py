"""Supabase repository for the diet food catalog and restaurants."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_marketplace.adapters.supabase_rows import (
    parse_float,
    parse_optional_float,
    parse_strings,
    parse_uuid,
)
from diet_marketplace.domain.foods import FoodItem, Restaurant
from diet_marketplace.services.catalog import CatalogRepository
from diet_marketplace.services.negotiation import RestaurantRepository


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Read-only catalog queries over available diet foods."""

    client: Client

    def list_foods(
        self, restaurant_id: UUID | None, diet_type: str | None
    ) -> list[FoodItem]:
        """Return available foods, optionally filtered."""
        query = (
            self.client.table("diet_foods")
            .select("*")
            .eq("is_available", True)
        )
        if restaurant_id is not None:
            query = query.eq("restaurant_id", str(restaurant_id))
        if diet_type:
            query = query.eq("diet_type", diet_type)
        response = query.order("created_at", desc=True).execute()
        return [_parse_food(row) for row in response.data or []]


@dataclass
class SupabaseRestaurantRepository(RestaurantRepository):
    """Restaurant lookups used for ownership checks."""

    client: Client

    def get_restaurant(self, restaurant_id: UUID) -> Restaurant | None:
        """Return a restaurant by id, if present."""
        response = (
            self.client.table("restaurants")
            .select("id, owner_id, name, is_approved, is_active")
            .eq("id", str(restaurant_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Restaurant(
            id=UUID(str(row["id"])),
            owner_id=UUID(str(row["owner_id"])),
            name=str(row.get("name") or ""),
            is_approved=bool(row.get("is_approved")),
            is_active=bool(row.get("is_active")),
        )


def _parse_food(row: dict[str, object]) -> FoodItem:
    return FoodItem(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        calories=parse_float(row.get("calories")),
        protein_g=parse_float(row.get("protein")),
        carbs_g=parse_float(row.get("carbs")),
        fat_g=parse_float(row.get("fats")),
        diet_type=str(row.get("diet_type") or ""),
        allergens=tuple(parse_strings(row.get("allergens"))),
        restaurant_id=parse_uuid(row.get("restaurant_id")),
        price=parse_optional_float(row.get("price")),
    )
