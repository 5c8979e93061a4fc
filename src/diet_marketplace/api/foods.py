"""Personalized catalog endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from diet_marketplace.api.dependencies import current_user_id, get_container
from diet_marketplace.api.schemas import PersonalizedFoodsOut, ScoredFoodOut

router = APIRouter(prefix="/foods", tags=["foods"])


@router.get("/personalized")
def personalized_foods(
    request: Request,
    meal_type: str | None = None,
    restaurant_id: UUID | None = None,
    diet_type: str | None = None,
    user_id: UUID = Depends(current_user_id),
) -> PersonalizedFoodsOut:
    """Return catalog items ranked for the caller's profile."""
    scored = get_container(request).catalog_service.personalized_foods(
        user_id,
        meal_type=meal_type,
        restaurant_id=restaurant_id,
        diet_type=diet_type,
    )
    return PersonalizedFoodsOut(
        foods=[ScoredFoodOut.from_domain(item) for item in scored], count=len(scored)
    )
