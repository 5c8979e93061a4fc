"""Catalog food items and their personalized scores."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class FoodItem:
    """Menu item as served by the catalog."""

    id: UUID
    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    diet_type: str
    allergens: tuple[str, ...] = ()
    restaurant_id: UUID | None = None
    price: float | None = None


@dataclass(frozen=True)
class ScoredFoodItem:
    """Food item annotated for one customer and meal slot."""

    food: FoodItem
    macro_score: int
    calorie_match: bool
    match_reasons: list[str] = field(default_factory=list)
    badges: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Restaurant:
    """Minimal restaurant view needed for ownership checks."""

    id: UUID
    owner_id: UUID
    name: str
    is_approved: bool
    is_active: bool
