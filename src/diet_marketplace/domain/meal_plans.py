"""Models for generated weekly meal plans."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

MIN_RATING = 1
MAX_RATING = 5


class PlanMacros(BaseModel):
    """Macros of one planned meal in grams."""

    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fats: float = Field(ge=0.0)


class PlannedMeal(BaseModel):
    """Single meal of a planned day."""

    meal_type: str
    name: str
    description: str | None = None
    calories: float = Field(ge=0.0)
    macros: PlanMacros
    ingredients: list[str] = Field(default_factory=list)
    instructions: str | None = None


class PlanDay(BaseModel):
    """All meals planned for one weekday."""

    day: str
    meals: list[PlannedMeal]


class WeeklyMealPlan(BaseModel):
    """Structured output of the meal-plan generator."""

    summary: str
    days: list[PlanDay]
    nutritional_analysis: str | None = None
    shopping_list: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class SavedMealPlan:
    """A generated plan kept in the customer's recommendation history."""

    id: UUID
    user_id: UUID
    plan: WeeklyMealPlan
    notes: str | None = None
    rating: int | None = None
    feedback: str | None = None
    created_at: datetime | None = None
