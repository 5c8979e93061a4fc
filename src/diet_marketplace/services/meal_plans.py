"""Weekly meal-plan generation using LLMs."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diet_marketplace.domain.errors import (
    AuthorizationError,
    NotComputable,
    NotFound,
    ValidationError,
)
from diet_marketplace.domain.meal_plans import (
    MAX_RATING,
    MIN_RATING,
    SavedMealPlan,
    WeeklyMealPlan,
)
from diet_marketplace.domain.profiles import MEAL_SLOTS, Profile
from diet_marketplace.services.energy import compute_energy_budget
from diet_marketplace.services.scoring import ScoredPlanMeal, score_meal_plan

_NULLABLE_STRING = {"anyOf": [{"type": "string"}, {"type": "null"}]}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_NON_NEGATIVE = {"type": "number", "minimum": 0}

MEAL_PLAN_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "days": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "day": {"type": "string"},
                    "meals": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "meal_type": {"type": "string"},
                                "name": {"type": "string"},
                                "description": _NULLABLE_STRING,
                                "calories": _NON_NEGATIVE,
                                "macros": {
                                    "type": "object",
                                    "properties": {
                                        "protein": _NON_NEGATIVE,
                                        "carbs": _NON_NEGATIVE,
                                        "fats": _NON_NEGATIVE,
                                    },
                                    "required": ["protein", "carbs", "fats"],
                                    "additionalProperties": False,
                                },
                                "ingredients": _STRING_LIST,
                                "instructions": _NULLABLE_STRING,
                            },
                            "required": [
                                "meal_type",
                                "name",
                                "description",
                                "calories",
                                "macros",
                                "ingredients",
                                "instructions",
                            ],
                            "additionalProperties": False,
                        },
                    },
                },
                "required": ["day", "meals"],
                "additionalProperties": False,
            },
        },
        "nutritional_analysis": _NULLABLE_STRING,
        "shopping_list": _STRING_LIST,
        "tips": _STRING_LIST,
    },
    "required": ["summary", "days", "nutritional_analysis", "shopping_list", "tips"],
    "additionalProperties": False,
}


class MealPlanClient(Protocol):
    """Interface for LLM meal-plan generation."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return the structured weekly plan."""


class MealPlanRepository(Protocol):
    """Persistence interface for saved meal plans."""

    def save_plan(
        self, user_id: UUID, plan: WeeklyMealPlan, notes: str | None
    ) -> SavedMealPlan:
        """Store a generated plan and return it."""

    def get_plan(self, plan_id: UUID) -> SavedMealPlan | None:
        """Return a saved plan by id, if present."""

    def list_plans(self, user_id: UUID, limit: int) -> list[SavedMealPlan]:
        """Return a user's saved plans, newest first."""

    def update_rating(
        self, plan_id: UUID, rating: int, feedback: str | None
    ) -> SavedMealPlan | None:
        """Set the rating and feedback of a plan."""

    def delete_plan(self, plan_id: UUID) -> None:
        """Remove a saved plan."""


@dataclass(frozen=True)
class GeneratedMealPlan:
    """A saved plan together with per-meal scores."""

    saved: SavedMealPlan
    scores: list[ScoredPlanMeal]

    @property
    def plan(self) -> WeeklyMealPlan:
        return self.saved.plan


@dataclass
class MealPlanService:
    """Builds plan prompts from profiles and keeps the generated history."""

    client: MealPlanClient
    plans: MealPlanRepository
    model: str
    reasoning_effort: str | None
    store: bool

    async def generate(
        self, profile: Profile, notes: str | None = None
    ) -> GeneratedMealPlan:
        """Generate a weekly plan for the profile, save it and score its meals."""
        raw = await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            schema=MEAL_PLAN_SCHEMA,
            prompt=build_prompt(profile, notes),
        )
        plan = WeeklyMealPlan.model_validate(raw)
        saved = self.plans.save_plan(profile.user_id, plan, notes)
        try:
            scores = score_meal_plan(plan, profile)
        except NotComputable:
            scores = []
        return GeneratedMealPlan(saved=saved, scores=scores)

    def list_plans(self, user_id: UUID, limit: int = 10) -> list[SavedMealPlan]:
        """Return the user's saved plans, newest first."""
        return self.plans.list_plans(user_id, limit)

    def get_plan(self, plan_id: UUID, user_id: UUID) -> SavedMealPlan:
        """Return a saved plan to its owner."""
        saved = self.plans.get_plan(plan_id)
        if saved is None:
            raise NotFound("Meal plan not found")
        if saved.user_id != user_id:
            raise AuthorizationError("Not authorized to access this meal plan")
        return saved

    def rate_plan(
        self,
        plan_id: UUID,
        user_id: UUID,
        rating: int,
        feedback: str | None = None,
    ) -> SavedMealPlan:
        """Record the owner's rating of a saved plan."""
        if rating is None or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}"
            )
        saved = self.get_plan(plan_id, user_id)
        updated = self.plans.update_rating(
            saved.id, rating, (feedback or "").strip() or saved.feedback
        )
        if updated is None:
            raise NotFound("Meal plan not found")
        return updated

    def delete_plan(self, plan_id: UUID, user_id: UUID) -> None:
        """Remove a saved plan on behalf of its owner."""
        saved = self.get_plan(plan_id, user_id)
        self.plans.delete_plan(saved.id)


def build_prompt(profile: Profile, notes: str | None = None) -> str:
    """Render the planning prompt for a profile."""
    try:
        calorie_target = f"{compute_energy_budget(profile).tdee:.0f} kcal"
    except NotComputable:
        calorie_target = "Not specified"
    lines = [
        "You are an expert nutritionist and diet planner. Create a personalized "
        "7-day meal plan for the following preferences.",
        f"Dietary Restrictions: {_join(profile.dietary_restrictions, 'None')}",
        f"Health Goals: {_join(profile.health_goals, 'None')}",
        f"Allergies: {_join(profile.allergies, 'None')}",
        f"Preferred Cuisines: {_join(profile.preferred_cuisines, 'Any')}",
        f"Daily Calorie Target: {calorie_target}",
        f"Meals Per Day: {profile.meals_per_day}",
        f"Activity Level: {profile.activity_level}",
        f"Additional Notes: {notes or 'None'}",
        f"Use meal_type values {', '.join(MEAL_SLOTS)}. "
        "Include a consolidated shopping list for the week.",
    ]
    return "\n".join(lines)


def _join(values: frozenset[str], fallback: str) -> str:
    return ", ".join(sorted(values)) if values else fallback
