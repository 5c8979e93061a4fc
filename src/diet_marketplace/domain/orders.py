"""Domain models for custom recipe orders."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

PENDING_QUOTE = "pending-quote"
QUOTED = "quoted"
ACCEPTED = "accepted"
REJECTED = "rejected"

TERMINAL_NEGOTIATION_STATES = frozenset({ACCEPTED, REJECTED})


@dataclass(frozen=True)
class RecipeDetails:
    """Customer-submitted recipe payload."""

    name: str
    description: str | None = None
    ingredients: list[str] = field(default_factory=list)
    instructions: str | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    meal_type: str | None = None


@dataclass(frozen=True)
class CustomRecipeOrder:
    """Order whose price is negotiated between customer and restaurant."""

    id: UUID
    customer_id: UUID
    restaurant_id: UUID
    recipe: RecipeDetails
    negotiation_state: str
    status: str
    quoted_price: float | None = None
    total_amount: float = 0.0
    delivery_address: dict[str, str] | None = None
    notes: str | None = None
    created_at: datetime | None = None
    quoted_at: datetime | None = None
    accepted_at: datetime | None = None
    rejected_at: datetime | None = None
