"""Tests for food scoring and ranking."""

from uuid import UUID

import pytest

from diet_marketplace.domain.errors import NotComputable, ValidationError
from diet_marketplace.services.energy import (
    compute_energy_budget,
    compute_macro_targets,
)
from diet_marketplace.services.scoring import (
    filter_by_allergens,
    filter_by_dietary_restrictions,
    rank,
    score,
    score_catalog,
)
from tests.conftest import make_food, reference_profile


def _per_meal_allocation(goals: list[str]) -> tuple[float, float, float]:
    tdee = compute_energy_budget(reference_profile()).tdee
    targets = compute_macro_targets(tdee, goals)
    return targets.protein_g / 3, targets.carbs_g / 3, targets.fat_g / 3


def test_exact_allocation_scores_full_marks() -> None:
    protein, carbs, fat = _per_meal_allocation([])
    profile = reference_profile()
    budget = compute_energy_budget(profile)
    food = make_food(calories=950.0, protein_g=protein, carbs_g=carbs, fat_g=fat)

    scored = score(
        food,
        compute_macro_targets(budget.tdee, []),
        3,
        [],
        budget.meals["lunch"],
    )

    assert scored.macro_score == 100
    assert scored.calorie_match
    assert "optimal_calories" in scored.badges
    assert "balanced" in scored.badges
    assert "excellent macro balance" in scored.match_reasons
    assert "within calorie budget" in scored.match_reasons


def test_score_is_bounded() -> None:
    profile = reference_profile()
    targets = compute_macro_targets(compute_energy_budget(profile).tdee, [])
    foods = [
        make_food(protein_g=0.0, carbs_g=0.0, fat_g=0.0),
        make_food(protein_g=1000.0, carbs_g=900.0, fat_g=400.0),
        make_food(),
    ]

    scores = [score(food, targets, 3, [], None).macro_score for food in foods]

    assert all(0 <= value <= 100 for value in scores)
    assert scores[1] == 0


def test_no_budget_means_no_calorie_match() -> None:
    profile = reference_profile()
    targets = compute_macro_targets(compute_energy_budget(profile).tdee, [])

    scored = score(make_food(), targets, 3, [], None)

    assert not scored.calorie_match
    assert not {"optimal_calories", "low_calories", "high_calories"} & scored.badges


def test_calorie_badges_outside_band() -> None:
    budget = compute_energy_budget(reference_profile())
    targets = compute_macro_targets(budget.tdee, [])

    light = score(make_food(calories=300.0), targets, 3, [], budget.meals["lunch"])
    heavy = score(make_food(calories=1500.0), targets, 3, [], budget.meals["lunch"])

    assert "low_calories" in light.badges
    assert "high_calories" in heavy.badges
    assert not light.calorie_match
    assert not heavy.calorie_match


def test_muscle_gain_reasons_are_capped() -> None:
    goals = ["muscle gain"]
    protein, carbs, fat = _per_meal_allocation(goals)
    tdee = compute_energy_budget(reference_profile()).tdee
    food = make_food(protein_g=protein * 1.45, carbs_g=carbs, fat_g=fat)

    scored = score(food, compute_macro_targets(tdee, goals), 3, goals, None)

    assert "high protein" in scored.match_reasons
    assert "great for muscle building" in scored.match_reasons
    assert "high_protein" in scored.badges
    assert len(scored.match_reasons) <= 3


def test_weight_loss_reason_below_target() -> None:
    goals = ["Weight loss"]
    budget = compute_energy_budget(reference_profile())
    lunch = budget.meals["lunch"]
    food = make_food(calories=lunch.min + 10)

    scored = score(food, compute_macro_targets(budget.tdee, goals), 3, goals, lunch)

    assert scored.calorie_match
    assert "supports weight loss goal" in scored.match_reasons


def test_keto_badge_and_low_carb() -> None:
    budget = compute_energy_budget(reference_profile())
    targets = compute_macro_targets(budget.tdee, [])
    food = make_food(diet_type="keto", carbs_g=5.0)

    scored = score(food, targets, 3, [], None)

    assert "keto_friendly" in scored.badges
    assert "low_carb" in scored.badges
    assert "low carb" in scored.match_reasons


def test_allergen_substring_match_is_case_insensitive() -> None:
    food = make_food(allergens=("Peanuts", "Soy"))

    assert not filter_by_allergens(food, ["peanut"])
    assert not filter_by_allergens(food, ["SOY"])
    assert filter_by_allergens(food, ["shellfish"])
    assert filter_by_allergens(food, [])


def test_dietary_restrictions_filter() -> None:
    vegan = make_food(diet_type="Vegan")

    assert filter_by_dietary_restrictions(vegan, [])
    assert filter_by_dietary_restrictions(vegan, ["vegan", "keto"])
    assert not filter_by_dietary_restrictions(vegan, ["keto"])


def test_rank_orders_by_score_then_match_then_id() -> None:
    budget = compute_energy_budget(reference_profile())
    targets = compute_macro_targets(budget.tdee, [])
    protein, carbs, fat = _per_meal_allocation([])
    lunch = budget.meals["lunch"]
    first_id = UUID("00000000-0000-0000-0000-000000000001")
    second_id = UUID("00000000-0000-0000-0000-000000000002")
    third_id = UUID("00000000-0000-0000-0000-000000000003")
    perfect = {"protein_g": protein, "carbs_g": carbs, "fat_g": fat}
    foods = [
        make_food(id=third_id, calories=950.0, **perfect),
        make_food(id=first_id, calories=100.0, **perfect),
        make_food(id=second_id, calories=950.0, **perfect),
        make_food(protein_g=500.0),
    ]
    items = [score(food, targets, 3, [], lunch) for food in foods]

    ranked = rank(items)

    assert [item.food.id for item in ranked[:3]] == [second_id, third_id, first_id]
    assert ranked[-1].macro_score < ranked[0].macro_score


def test_score_catalog_filters_and_ranks() -> None:
    profile = reference_profile(allergies=frozenset({"peanut"}))
    safe = make_food(name="Salmon bowl")
    unsafe = make_food(name="Satay", allergens=("Peanuts",))

    ranked = score_catalog([unsafe, safe], profile, "dinner")

    assert [item.food.name for item in ranked] == ["Salmon bowl"]


def test_score_catalog_rejects_unknown_meal_type() -> None:
    with pytest.raises(ValidationError):
        score_catalog([make_food()], reference_profile(), "brunch")


def test_score_catalog_requires_complete_profile() -> None:
    with pytest.raises(NotComputable):
        score_catalog([make_food()], reference_profile(age=None), None)


def test_unknown_meal_type_is_reported_before_profile_gaps() -> None:
    with pytest.raises(ValidationError):
        score_catalog([make_food()], reference_profile(age=None), "brunch")
