"""Energy budget calculations from a biometric profile."""

from collections.abc import Iterable

from diet_marketplace.domain.errors import NotComputable
from diet_marketplace.domain.profiles import (
    SEX_FEMALE,
    SEX_MALE,
    EnergyBudget,
    MacroTargets,
    MealBudget,
    Profile,
)

ACTIVITY_FACTORS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}
_DEFAULT_ACTIVITY_FACTOR = ACTIVITY_FACTORS["moderate"]

MEAL_DISTRIBUTION: dict[str, float] = {
    "breakfast": 0.25,
    "lunch": 0.35,
    "dinner": 0.30,
    "snacks": 0.10,
}
MEAL_BAND = 0.15

GOAL_BALANCED = "balanced"
GOAL_MUSCLE_GAIN = "muscle_gain"
GOAL_LOW_CARB = "low_carb"

# protein / carbs / fat share of daily kcal
_MACRO_SPLITS: dict[str, tuple[float, float, float]] = {
    GOAL_BALANCED: (0.30, 0.40, 0.30),
    GOAL_MUSCLE_GAIN: (0.40, 0.30, 0.30),
    GOAL_LOW_CARB: (0.30, 0.25, 0.45),
}

_MUSCLE_KEYWORDS = ("muscle", "gain")
_LOW_CARB_KEYWORDS = ("keto", "low carb", "low-carb", "low_carb")
_WEIGHT_LOSS_KEYWORDS = ("weight loss", "fat loss")

KCAL_PER_G_PROTEIN = 4.0
KCAL_PER_G_CARBS = 4.0
KCAL_PER_G_FAT = 9.0


def compute_bmr(profile: Profile) -> float:
    """Return basal metabolic rate using the revised Harris-Benedict equation."""
    age = profile.age
    weight = profile.weight_kg
    height = profile.height_cm
    if not _is_positive(age) or not _is_positive(weight) or not _is_positive(height):
        raise NotComputable("Age, weight and height are required to compute BMR")
    sex = (profile.sex or "").strip().lower()
    if sex == SEX_MALE:
        return 88.362 + 13.397 * weight + 4.799 * height - 5.677 * age
    if sex == SEX_FEMALE:
        return 447.593 + 9.247 * weight + 3.098 * height - 4.330 * age
    raise NotComputable("Sex must be 'male' or 'female' to compute BMR")


def compute_tdee(bmr: float, activity_level: str | None) -> float:
    """Scale BMR by the activity factor; unknown levels count as moderate."""
    factor = ACTIVITY_FACTORS.get(
        (activity_level or "").lower(), _DEFAULT_ACTIVITY_FACTOR
    )
    return bmr * factor


def compute_meal_budgets(tdee: float) -> dict[str, MealBudget]:
    """Split TDEE into per-slot calorie bands."""
    budgets: dict[str, MealBudget] = {}
    for slot, share in MEAL_DISTRIBUTION.items():
        target = tdee * share
        budgets[slot] = MealBudget(
            min=target * (1 - MEAL_BAND),
            target=target,
            max=target * (1 + MEAL_BAND),
        )
    return budgets


def compute_macro_targets(tdee: float, health_goals: Iterable[str]) -> MacroTargets:
    """Return daily macro grams for the resolved goal family."""
    protein_share, carbs_share, fat_share = _MACRO_SPLITS[goal_family(health_goals)]
    return MacroTargets(
        protein_g=tdee * protein_share / KCAL_PER_G_PROTEIN,
        carbs_g=tdee * carbs_share / KCAL_PER_G_CARBS,
        fat_g=tdee * fat_share / KCAL_PER_G_FAT,
    )


def compute_energy_budget(profile: Profile) -> EnergyBudget:
    """Compute BMR, TDEE and meal budgets for a profile."""
    bmr = compute_bmr(profile)
    tdee = compute_tdee(bmr, profile.activity_level)
    return EnergyBudget(bmr=bmr, tdee=tdee, meals=compute_meal_budgets(tdee))


def goal_family(health_goals: Iterable[str]) -> str:
    """Resolve free-text goals to one adjustment family.

    Low-carb goals take precedence over muscle-gain goals when both appear.
    """
    goals = [goal.lower() for goal in health_goals]
    if _mentions(goals, _LOW_CARB_KEYWORDS):
        return GOAL_LOW_CARB
    if _mentions(goals, _MUSCLE_KEYWORDS):
        return GOAL_MUSCLE_GAIN
    return GOAL_BALANCED


def wants_weight_loss(health_goals: Iterable[str]) -> bool:
    """Return true when any goal asks for weight or fat loss."""
    return _mentions([goal.lower() for goal in health_goals], _WEIGHT_LOSS_KEYWORDS)


def _mentions(goals: list[str], keywords: tuple[str, ...]) -> bool:
    return any(keyword in goal for goal in goals for keyword in keywords)


def _is_positive(value: float | None) -> bool:
    return isinstance(value, int | float) and value > 0
