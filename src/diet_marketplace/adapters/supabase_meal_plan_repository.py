"""Supabase repository for saved meal plans."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_marketplace.adapters.supabase_rows import parse_datetime
from diet_marketplace.domain.meal_plans import SavedMealPlan, WeeklyMealPlan
from diet_marketplace.services.meal_plans import MealPlanRepository


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for the meal-plan history."""

    client: Client

    def save_plan(
        self, user_id: UUID, plan: WeeklyMealPlan, notes: str | None
    ) -> SavedMealPlan:
        """Insert a generated plan and return it."""
        response = (
            self.client.table("meal_plans")
            .insert(
                {
                    "user_id": str(user_id),
                    "plan": plan.model_dump(mode="json"),
                    "notes": notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal plan")
        return _parse_plan(response.data[0])

    def get_plan(self, plan_id: UUID) -> SavedMealPlan | None:
        """Return a saved plan by id, if present."""
        response = (
            self.client.table("meal_plans")
            .select("*")
            .eq("id", str(plan_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_plan(response.data[0])

    def list_plans(self, user_id: UUID, limit: int) -> list[SavedMealPlan]:
        """Return a user's saved plans, newest first."""
        response = (
            self.client.table("meal_plans")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_plan(row) for row in response.data or []]

    def update_rating(
        self, plan_id: UUID, rating: int, feedback: str | None
    ) -> SavedMealPlan | None:
        """Set the rating and feedback of a plan."""
        response = (
            self.client.table("meal_plans")
            .update({"rating": rating, "feedback": feedback})
            .eq("id", str(plan_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_plan(response.data[0])

    def delete_plan(self, plan_id: UUID) -> None:
        """Remove a saved plan."""
        self.client.table("meal_plans").delete().eq("id", str(plan_id)).execute()


def _parse_plan(row: dict[str, object]) -> SavedMealPlan:
    rating = row.get("rating")
    return SavedMealPlan(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        plan=WeeklyMealPlan.model_validate(row.get("plan") or {}),
        notes=row.get("notes"),
        rating=int(rating) if rating is not None else None,
        feedback=row.get("feedback"),
        created_at=parse_datetime(row.get("created_at")),
    )
