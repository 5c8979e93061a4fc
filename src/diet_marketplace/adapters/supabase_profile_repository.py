"""Supabase repository for customer profiles."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_marketplace.adapters.supabase_rows import (
    parse_optional_float,
    parse_strings,
)
from diet_marketplace.domain.profiles import Profile
from diet_marketplace.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def upsert_profile(self, profile: Profile) -> Profile:
        """Create or replace the profile row keyed by user id."""
        payload = {
            "user_id": str(profile.user_id),
            "age": profile.age,
            "weight": profile.weight_kg,
            "height": profile.height_cm,
            "gender": profile.sex,
            "activity_level": profile.activity_level,
            "meals_per_day": profile.meals_per_day,
            "dietary_restrictions": sorted(profile.dietary_restrictions),
            "allergies": sorted(profile.allergies),
            "health_goals": sorted(profile.health_goals),
            "preferred_cuisines": sorted(profile.preferred_cuisines),
        }
        response = (
            self.client.table("profiles")
            .upsert(payload, on_conflict="user_id")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save profile")
        return _parse_profile(response.data[0])


def _parse_profile(row: dict[str, object]) -> Profile:
    age = row.get("age")
    return Profile(
        user_id=UUID(str(row["user_id"])),
        age=int(age) if age is not None else None,
        weight_kg=parse_optional_float(row.get("weight")),
        height_cm=parse_optional_float(row.get("height")),
        sex=row.get("gender") or None,
        activity_level=str(row.get("activity_level") or "moderate"),
        meals_per_day=int(row.get("meals_per_day") or 3),
        dietary_restrictions=frozenset(parse_strings(row.get("dietary_restrictions"))),
        allergies=frozenset(parse_strings(row.get("allergies"))),
        health_goals=frozenset(parse_strings(row.get("health_goals"))),
        preferred_cuisines=frozenset(parse_strings(row.get("preferred_cuisines"))),
    )
