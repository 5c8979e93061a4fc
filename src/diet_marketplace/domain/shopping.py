"""Domain models for shopping-list delivery requests."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

PENDING = "pending"
IN_PROGRESS = "in-progress"
DELIVERED = "delivered"
CONFIRMED = "confirmed"
DISPUTED = "disputed"
CANCELLED = "cancelled"

STATUSES = (PENDING, IN_PROGRESS, DELIVERED, CONFIRMED, DISPUTED, CANCELLED)


@dataclass(frozen=True)
class DeliveryAddress:
    """Where the shopped items are delivered."""

    street: str
    city: str
    state: str
    zip_code: str
    country: str = "USA"


@dataclass(frozen=True)
class ShoppingRequest:
    """A grocery list a delivery partner shops and delivers."""

    id: UUID
    customer_id: UUID
    items: list[str]
    delivery_address: DeliveryAddress
    delivery_fee: float
    status: str
    delivery_partner_id: UUID | None = None
    estimated_cost: float = 0.0
    final_cost: float | None = None
    payment_status: str = "pending"
    dispute_reason: str | None = None
    notes: str | None = None
    meal_plan_id: UUID | None = None
    created_at: datetime | None = None
    accepted_at: datetime | None = None
    delivered_at: datetime | None = None
    confirmed_at: datetime | None = None
    disputed_at: datetime | None = None
    cancelled_at: datetime | None = None
