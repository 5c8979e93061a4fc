"""Domain models for customer profiles and energy budgets."""

from dataclasses import dataclass, field
from uuid import UUID

SEX_MALE = "male"
SEX_FEMALE = "female"

ACTIVITY_LEVELS = ("sedentary", "light", "moderate", "active", "very_active")

MEAL_SLOTS = ("breakfast", "lunch", "dinner", "snacks")


@dataclass(frozen=True)
class Profile:
    """Biometric profile and dietary preferences of a customer."""

    user_id: UUID
    age: int | None = None
    weight_kg: float | None = None
    height_cm: float | None = None
    sex: str | None = None
    activity_level: str = "moderate"
    meals_per_day: int = 3
    dietary_restrictions: frozenset[str] = field(default_factory=frozenset)
    allergies: frozenset[str] = field(default_factory=frozenset)
    health_goals: frozenset[str] = field(default_factory=frozenset)
    preferred_cuisines: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class MealBudget:
    """Calorie band for one meal slot."""

    min: float
    target: float
    max: float

    def contains(self, calories: float) -> bool:
        """Return true when calories fall inside the band."""
        return self.min <= calories <= self.max


@dataclass(frozen=True)
class EnergyBudget:
    """Derived daily energy estimate with per-slot budgets."""

    bmr: float
    tdee: float
    meals: dict[str, MealBudget]


@dataclass(frozen=True)
class MacroTargets:
    """Daily macronutrient targets in grams."""

    protein_g: float
    carbs_g: float
    fat_g: float
