"""Profile and energy budget endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from diet_marketplace.api.dependencies import current_user_id, get_container
from diet_marketplace.api.schemas import EnergyBudgetOut, ProfileIn, ProfileOut

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
def get_profile(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> ProfileOut:
    """Return the caller's profile."""
    profile = get_container(request).profile_service.get_profile(user_id)
    return ProfileOut.from_domain(profile)


@router.put("")
def save_profile(
    payload: ProfileIn, request: Request, user_id: UUID = Depends(current_user_id)
) -> ProfileOut:
    """Create or replace the caller's profile."""
    profile = get_container(request).profile_service.save_profile(
        payload.to_domain(user_id)
    )
    return ProfileOut.from_domain(profile)


@router.get("/energy-budget")
def energy_budget(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> EnergyBudgetOut:
    """Return BMR, TDEE, per-meal budgets and daily macro targets."""
    service = get_container(request).profile_service
    return EnergyBudgetOut.from_domain(
        service.get_energy_budget(user_id), service.get_macro_targets(user_id)
    )
