"""Meal-plan generation and history endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from diet_marketplace.api.dependencies import current_user_id, get_container
from diet_marketplace.api.schemas import (
    GeneratedMealPlanOut,
    MealPlanIn,
    MealPlanShoppingRequestIn,
    RateMealPlanIn,
    SavedMealPlanOut,
    ShoppingRequestOut,
)

router = APIRouter(prefix="/meal-plans", tags=["meal-plans"])


@router.post("/generate")
async def generate_meal_plan(
    payload: MealPlanIn, request: Request, user_id: UUID = Depends(current_user_id)
) -> GeneratedMealPlanOut:
    """Generate and save a weekly plan for the caller's stored profile."""
    container = get_container(request)
    profile = container.profile_service.get_profile(user_id)
    generated = await container.meal_plan_service.generate(profile, payload.notes)
    return GeneratedMealPlanOut.from_generated(generated)


@router.get("")
def list_meal_plans(
    request: Request,
    limit: int = Query(default=10, ge=1, le=100),
    user_id: UUID = Depends(current_user_id),
) -> list[SavedMealPlanOut]:
    """Return the caller's saved plans, newest first."""
    plans = get_container(request).meal_plan_service.list_plans(user_id, limit)
    return [SavedMealPlanOut.from_domain(item) for item in plans]


@router.get("/{plan_id}")
def get_meal_plan(
    plan_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> SavedMealPlanOut:
    saved = get_container(request).meal_plan_service.get_plan(plan_id, user_id)
    return SavedMealPlanOut.from_domain(saved)


@router.put("/{plan_id}/rate")
def rate_meal_plan(
    plan_id: UUID,
    payload: RateMealPlanIn,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> SavedMealPlanOut:
    """Rate a saved plan from 1 to 5."""
    rated = get_container(request).meal_plan_service.rate_plan(
        plan_id, user_id, payload.rating, payload.feedback
    )
    return SavedMealPlanOut.from_domain(rated)


@router.delete("/{plan_id}")
def delete_meal_plan(
    plan_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, str]:
    get_container(request).meal_plan_service.delete_plan(plan_id, user_id)
    return {"status": "deleted"}


@router.post("/{plan_id}/shopping-request", status_code=status.HTTP_201_CREATED)
def shop_meal_plan(
    plan_id: UUID,
    payload: MealPlanShoppingRequestIn,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> ShoppingRequestOut:
    """Create a shopping request from a saved plan's shopping list."""
    container = get_container(request)
    saved = container.meal_plan_service.get_plan(plan_id, user_id)
    created = container.assignment_service.create_request(
        customer_id=user_id,
        items=saved.plan.shopping_list,
        delivery_address=payload.delivery_address.to_domain(),
        estimated_cost=payload.estimated_cost,
        notes=payload.notes,
        meal_plan_id=saved.id,
    )
    return ShoppingRequestOut.from_domain(created)
