"""Personalized scoring and ranking of food items."""

from collections.abc import Iterable
from dataclasses import dataclass
from uuid import NAMESPACE_URL, UUID, uuid5

from diet_marketplace.domain.errors import ValidationError
from diet_marketplace.domain.foods import FoodItem, ScoredFoodItem
from diet_marketplace.domain.meal_plans import WeeklyMealPlan
from diet_marketplace.domain.profiles import (
    MEAL_SLOTS,
    MacroTargets,
    MealBudget,
    Profile,
)
from diet_marketplace.services.energy import (
    GOAL_LOW_CARB,
    GOAL_MUSCLE_GAIN,
    compute_energy_budget,
    compute_macro_targets,
    goal_family,
    wants_weight_loss,
)

HIGH_RATIO = 1.3
LOW_RATIO = 0.7
EMPHASIS_WEIGHT = 1.5
MAX_REASONS = 3
EXCELLENT_SCORE = 80
GOOD_SCORE = 60

_DIET_TYPE_BADGES = {"keto": "keto_friendly"}


@dataclass(frozen=True)
class _Reason:
    text: str
    strength: float


@dataclass(frozen=True)
class ScoredPlanMeal:
    """A generated plan meal scored against its slot budget."""

    day: str
    meal_type: str
    name: str
    score: ScoredFoodItem


def score(
    food: FoodItem,
    macro_targets: MacroTargets,
    meals_per_day: int,
    health_goals: Iterable[str],
    meal_budget: MealBudget | None,
) -> ScoredFoodItem:
    """Score one food item against per-meal macro allocations and a budget."""
    goals = frozenset(health_goals)
    meals = max(1, meals_per_day)
    allocation = {
        "protein": macro_targets.protein_g / meals,
        "carbs": macro_targets.carbs_g / meals,
        "fat": macro_targets.fat_g / meals,
    }
    actual = {
        "protein": food.protein_g,
        "carbs": food.carbs_g,
        "fat": food.fat_g,
    }
    weights = _macro_weights(goal_family(goals))
    deviation = sum(
        weights[macro] * _relative_deviation(actual[macro], allocation[macro])
        for macro in allocation
    ) / sum(weights.values())
    macro_score = min(100, max(0, round(100 * max(0.0, 1.0 - deviation))))
    calorie_match = meal_budget is not None and meal_budget.contains(food.calories)
    ratios = {
        macro: _ratio(actual[macro], allocation[macro]) for macro in allocation
    }
    return ScoredFoodItem(
        food=food,
        macro_score=macro_score,
        calorie_match=calorie_match,
        match_reasons=_match_reasons(
            food, ratios, macro_score, calorie_match, goals, meal_budget
        ),
        badges=_badges(food, ratios, meal_budget),
    )


def filter_by_allergens(food: FoodItem, allergies: Iterable[str]) -> bool:
    """Return false when any allergy appears inside an allergen tag."""
    allergens = [allergen.lower() for allergen in food.allergens]
    for allergy in allergies:
        needle = allergy.strip().lower()
        if needle and any(needle in allergen for allergen in allergens):
            return False
    return True


def filter_by_dietary_restrictions(food: FoodItem, restrictions: Iterable[str]) -> bool:
    """Return true when there are no restrictions or the diet type is allowed."""
    allowed = {restriction.strip().lower() for restriction in restrictions}
    allowed.discard("")
    if not allowed:
        return True
    return food.diet_type.lower() in allowed


def rank(scored: Iterable[ScoredFoodItem]) -> list[ScoredFoodItem]:
    """Sort by macro score, then calorie match, then item id."""
    return sorted(
        scored,
        key=lambda item: (-item.macro_score, not item.calorie_match, str(item.food.id)),
    )


def score_catalog(
    items: Iterable[FoodItem], profile: Profile, meal_type: str | None
) -> list[ScoredFoodItem]:
    """Filter, score and rank a catalog slice for one customer."""
    if meal_type is not None and meal_type not in MEAL_SLOTS:
        raise ValidationError(f"Unknown meal type: {meal_type}")
    budget = compute_energy_budget(profile)
    meal_budget = budget.meals.get(meal_type) if meal_type is not None else None
    macro_targets = compute_macro_targets(budget.tdee, profile.health_goals)
    scored = [
        score(
            food,
            macro_targets,
            profile.meals_per_day,
            profile.health_goals,
            meal_budget,
        )
        for food in items
        if filter_by_allergens(food, profile.allergies)
        and filter_by_dietary_restrictions(food, profile.dietary_restrictions)
    ]
    return rank(scored)


def score_meal_plan(plan: WeeklyMealPlan, profile: Profile) -> list[ScoredPlanMeal]:
    """Score every meal of a generated plan against its slot budget."""
    budget = compute_energy_budget(profile)
    macro_targets = compute_macro_targets(budget.tdee, profile.health_goals)
    results: list[ScoredPlanMeal] = []
    for day in plan.days:
        for meal in day.meals:
            slot = _plan_slot(meal.meal_type)
            food = FoodItem(
                id=_plan_meal_id(day.day, meal.meal_type, meal.name),
                name=meal.name,
                calories=meal.calories,
                protein_g=meal.macros.protein,
                carbs_g=meal.macros.carbs,
                fat_g=meal.macros.fats,
                diet_type="",
            )
            results.append(
                ScoredPlanMeal(
                    day=day.day,
                    meal_type=meal.meal_type,
                    name=meal.name,
                    score=score(
                        food,
                        macro_targets,
                        profile.meals_per_day,
                        profile.health_goals,
                        budget.meals.get(slot),
                    ),
                )
            )
    return results


def _macro_weights(family: str) -> dict[str, float]:
    weights = {"protein": 1.0, "carbs": 1.0, "fat": 1.0}
    if family == GOAL_MUSCLE_GAIN:
        weights["protein"] = EMPHASIS_WEIGHT
    elif family == GOAL_LOW_CARB:
        weights["carbs"] = EMPHASIS_WEIGHT
    return weights


def _relative_deviation(actual: float, allocation: float) -> float:
    if allocation <= 0:
        return 0.0 if actual <= 0 else 1.0
    return abs(actual - allocation) / allocation


def _ratio(actual: float, allocation: float) -> float:
    if allocation <= 0:
        return 0.0
    return actual / allocation


def _match_reasons(  # noqa: PLR0913
    food: FoodItem,
    ratios: dict[str, float],
    macro_score: int,
    calorie_match: bool,
    goals: frozenset[str],
    meal_budget: MealBudget | None,
) -> list[str]:
    reasons: list[_Reason] = []
    if calorie_match and meal_budget is not None:
        half_band = meal_budget.max - meal_budget.target
        closeness = (
            1.0 - abs(food.calories - meal_budget.target) / half_band
            if half_band > 0
            else 1.0
        )
        reasons.append(_Reason("within calorie budget", closeness))
    high_protein = ratios["protein"] >= HIGH_RATIO
    if high_protein:
        reasons.append(_Reason("high protein", ratios["protein"] - 1.0))
    if ratios["carbs"] <= LOW_RATIO:
        reasons.append(_Reason("low carb", 1.0 - ratios["carbs"]))
    if ratios["fat"] <= LOW_RATIO:
        reasons.append(_Reason("low fat", 1.0 - ratios["fat"]))
    if macro_score >= EXCELLENT_SCORE:
        reasons.append(_Reason("excellent macro balance", macro_score / 100))
    elif macro_score >= GOOD_SCORE:
        reasons.append(_Reason("good macro balance", macro_score / 100))
    if high_protein and goal_family(goals) == GOAL_MUSCLE_GAIN:
        reasons.append(_Reason("great for muscle building", ratios["protein"] - 1.0))
    if (
        meal_budget is not None
        and wants_weight_loss(goals)
        and food.calories < meal_budget.target
    ):
        reasons.append(
            _Reason(
                "supports weight loss goal",
                1.0 - food.calories / meal_budget.target,
            )
        )
    strongest = sorted(reasons, key=lambda reason: -reason.strength)
    return [reason.text for reason in strongest[:MAX_REASONS]]


def _badges(
    food: FoodItem, ratios: dict[str, float], meal_budget: MealBudget | None
) -> frozenset[str]:
    badges: set[str] = set()
    if meal_budget is not None:
        if meal_budget.contains(food.calories):
            badges.add("optimal_calories")
        elif food.calories < meal_budget.min:
            badges.add("low_calories")
        else:
            badges.add("high_calories")
    if ratios["protein"] >= HIGH_RATIO:
        badges.add("high_protein")
    if ratios["carbs"] <= LOW_RATIO:
        badges.add("low_carb")
    if ratios["fat"] <= LOW_RATIO:
        badges.add("low_fat")
    diet_type = food.diet_type.strip().lower()
    if diet_type:
        badges.add(_DIET_TYPE_BADGES.get(diet_type, diet_type.replace("-", "_")))
    return frozenset(badges)


def _plan_slot(meal_type: str) -> str:
    slot = meal_type.strip().lower()
    if slot in {"snack", "snacks"}:
        return "snacks"
    return slot


def _plan_meal_id(day: str, meal_type: str, name: str) -> UUID:
    return uuid5(NAMESPACE_URL, f"meal-plan:{day}:{meal_type}:{name}")
