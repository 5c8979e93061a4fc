"""Personalized browsing over the external food catalog."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diet_marketplace.domain.foods import FoodItem, ScoredFoodItem
from diet_marketplace.services.profiles import ProfileService
from diet_marketplace.services.scoring import score_catalog

_logger = logging.getLogger(__name__)


class CatalogRepository(Protocol):
    """Read-only access to available menu items."""

    def list_foods(
        self, restaurant_id: UUID | None, diet_type: str | None
    ) -> list[FoodItem]:
        """Return available foods, optionally filtered."""


@dataclass
class CatalogService:
    """Scores catalog slices against a customer's stored profile."""

    catalog: CatalogRepository
    profile_service: ProfileService

    def personalized_foods(
        self,
        user_id: UUID,
        meal_type: str | None = None,
        restaurant_id: UUID | None = None,
        diet_type: str | None = None,
    ) -> list[ScoredFoodItem]:
        """Return ranked foods for the user's budget and constraints."""
        profile = self.profile_service.get_profile(user_id)
        foods = self.catalog.list_foods(restaurant_id, diet_type)
        ranked = score_catalog(foods, profile, meal_type)
        _logger.info(
            "Scored catalog slice",
            extra={
                "user_id": str(user_id),
                "candidates": len(foods),
                "ranked": len(ranked),
            },
        )
        return ranked
