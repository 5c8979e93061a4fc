"""Customer profile storage and energy budget lookups."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diet_marketplace.domain.errors import NotFound, ValidationError
from diet_marketplace.domain.profiles import (
    ACTIVITY_LEVELS,
    SEX_FEMALE,
    SEX_MALE,
    EnergyBudget,
    MacroTargets,
    Profile,
)
from diet_marketplace.services.energy import (
    compute_energy_budget,
    compute_macro_targets,
)


class ProfileRepository(Protocol):
    """Persistence interface for customer profiles."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""

    def upsert_profile(self, profile: Profile) -> Profile:
        """Create or replace a user's profile and return it."""


@dataclass
class ProfileService:
    """Reads and writes profiles and derives their energy budgets."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID) -> Profile:
        """Return a stored profile or raise NotFound."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    def save_profile(self, profile: Profile) -> Profile:
        """Validate and persist a profile."""
        _validate_profile(profile)
        return self.repository.upsert_profile(profile)

    def get_energy_budget(self, user_id: UUID) -> EnergyBudget:
        """Compute the energy budget of a stored profile."""
        return compute_energy_budget(self.get_profile(user_id))

    def get_macro_targets(self, user_id: UUID) -> MacroTargets:
        """Compute daily macro targets of a stored profile."""
        profile = self.get_profile(user_id)
        budget = compute_energy_budget(profile)
        return compute_macro_targets(budget.tdee, profile.health_goals)


def _validate_profile(profile: Profile) -> None:
    for name in ("age", "weight_kg", "height_cm"):
        value = getattr(profile, name)
        if value is not None and value <= 0:
            raise ValidationError(f"{name} must be positive")
    if profile.sex is not None and profile.sex not in {SEX_MALE, SEX_FEMALE}:
        raise ValidationError("sex must be 'male' or 'female'")
    if profile.activity_level not in ACTIVITY_LEVELS:
        raise ValidationError(f"Unknown activity level: {profile.activity_level}")
    if profile.meals_per_day < 1:
        raise ValidationError("meals_per_day must be at least 1")
