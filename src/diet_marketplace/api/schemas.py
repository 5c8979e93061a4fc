"""Request and response models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from diet_marketplace.domain.foods import ScoredFoodItem
from diet_marketplace.domain.meal_plans import SavedMealPlan, WeeklyMealPlan
from diet_marketplace.domain.notifications import Notification
from diet_marketplace.domain.orders import CustomRecipeOrder, RecipeDetails
from diet_marketplace.domain.profiles import (
    EnergyBudget,
    MacroTargets,
    MealBudget,
    Profile,
)
from diet_marketplace.domain.shopping import DeliveryAddress, ShoppingRequest
from diet_marketplace.services.meal_plans import GeneratedMealPlan
from diet_marketplace.services.scoring import ScoredPlanMeal


class ProfileIn(BaseModel):
    """Editable profile fields."""

    age: int | None = None
    weight_kg: float | None = None
    height_cm: float | None = None
    sex: str | None = None
    activity_level: str = "moderate"
    meals_per_day: int = 3
    dietary_restrictions: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    health_goals: list[str] = Field(default_factory=list)
    preferred_cuisines: list[str] = Field(default_factory=list)

    def to_domain(self, user_id: UUID) -> Profile:
        """Build a profile owned by user_id."""
        return Profile(
            user_id=user_id,
            age=self.age,
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            sex=self.sex.lower() if self.sex else None,
            activity_level=self.activity_level,
            meals_per_day=self.meals_per_day,
            dietary_restrictions=frozenset(self.dietary_restrictions),
            allergies=frozenset(self.allergies),
            health_goals=frozenset(self.health_goals),
            preferred_cuisines=frozenset(self.preferred_cuisines),
        )


class ProfileOut(ProfileIn):
    """Stored profile."""

    user_id: UUID

    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileOut":
        return cls(
            user_id=profile.user_id,
            age=profile.age,
            weight_kg=profile.weight_kg,
            height_cm=profile.height_cm,
            sex=profile.sex,
            activity_level=profile.activity_level,
            meals_per_day=profile.meals_per_day,
            dietary_restrictions=sorted(profile.dietary_restrictions),
            allergies=sorted(profile.allergies),
            health_goals=sorted(profile.health_goals),
            preferred_cuisines=sorted(profile.preferred_cuisines),
        )


class MealBudgetOut(BaseModel):
    min: float
    target: float
    max: float

    @classmethod
    def from_domain(cls, budget: MealBudget) -> "MealBudgetOut":
        return cls(min=budget.min, target=budget.target, max=budget.max)


class MacroTargetsOut(BaseModel):
    protein_g: float
    carbs_g: float
    fat_g: float

    @classmethod
    def from_domain(cls, targets: MacroTargets) -> "MacroTargetsOut":
        return cls(
            protein_g=targets.protein_g,
            carbs_g=targets.carbs_g,
            fat_g=targets.fat_g,
        )


class EnergyBudgetOut(BaseModel):
    """Energy budget with daily macro targets."""

    bmr: float
    tdee: float
    meals: dict[str, MealBudgetOut]
    macros: MacroTargetsOut

    @classmethod
    def from_domain(
        cls, budget: EnergyBudget, macros: MacroTargets
    ) -> "EnergyBudgetOut":
        return cls(
            bmr=budget.bmr,
            tdee=budget.tdee,
            meals={
                slot: MealBudgetOut.from_domain(meal)
                for slot, meal in budget.meals.items()
            },
            macros=MacroTargetsOut.from_domain(macros),
        )


class ScoredFoodOut(BaseModel):
    """Catalog item with its personalized score."""

    id: UUID
    restaurant_id: UUID | None
    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    diet_type: str
    allergens: list[str]
    price: float | None
    macro_score: int
    calorie_match: bool
    match_reasons: list[str]
    badges: list[str]

    @classmethod
    def from_domain(cls, scored: ScoredFoodItem) -> "ScoredFoodOut":
        food = scored.food
        return cls(
            id=food.id,
            restaurant_id=food.restaurant_id,
            name=food.name,
            calories=food.calories,
            protein_g=food.protein_g,
            carbs_g=food.carbs_g,
            fat_g=food.fat_g,
            diet_type=food.diet_type,
            allergens=list(food.allergens),
            price=food.price,
            macro_score=scored.macro_score,
            calorie_match=scored.calorie_match,
            match_reasons=list(scored.match_reasons),
            badges=sorted(scored.badges),
        )


class RecipeIn(BaseModel):
    """Custom recipe payload."""

    name: str = ""
    description: str | None = None
    ingredients: list[str] = Field(default_factory=list)
    instructions: str | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    meal_type: str | None = None

    def to_domain(self) -> RecipeDetails:
        return RecipeDetails(**self.model_dump())


class CustomRecipeOrderIn(BaseModel):
    restaurant_id: UUID
    recipe: RecipeIn
    delivery_address: dict[str, str] | None = None
    notes: str | None = None


class QuotePriceIn(BaseModel):
    price: float = Field(allow_inf_nan=False)


class CustomRecipeOrderOut(BaseModel):
    """Custom recipe order with its negotiation state."""

    id: UUID
    customer_id: UUID
    restaurant_id: UUID
    recipe: RecipeIn
    negotiation_state: str
    status: str
    quoted_price: float | None
    total_amount: float
    delivery_address: dict[str, str] | None
    notes: str | None
    created_at: datetime | None
    quoted_at: datetime | None
    accepted_at: datetime | None
    rejected_at: datetime | None

    @classmethod
    def from_domain(cls, order: CustomRecipeOrder) -> "CustomRecipeOrderOut":
        recipe = order.recipe
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            restaurant_id=order.restaurant_id,
            recipe=RecipeIn(
                name=recipe.name,
                description=recipe.description,
                ingredients=list(recipe.ingredients),
                instructions=recipe.instructions,
                calories=recipe.calories,
                protein_g=recipe.protein_g,
                carbs_g=recipe.carbs_g,
                fat_g=recipe.fat_g,
                meal_type=recipe.meal_type,
            ),
            negotiation_state=order.negotiation_state,
            status=order.status,
            quoted_price=order.quoted_price,
            total_amount=order.total_amount,
            delivery_address=order.delivery_address,
            notes=order.notes,
            created_at=order.created_at,
            quoted_at=order.quoted_at,
            accepted_at=order.accepted_at,
            rejected_at=order.rejected_at,
        )


class AddressIn(BaseModel):
    """Delivery address; zip code also accepted as zipCode."""

    model_config = ConfigDict(populate_by_name=True)

    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = Field(default="", alias="zipCode")
    country: str = "USA"

    def to_domain(self) -> DeliveryAddress:
        return DeliveryAddress(
            street=self.street,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
            country=self.country,
        )


class ShoppingRequestIn(BaseModel):
    items: list[str]
    delivery_address: AddressIn
    estimated_cost: float = Field(default=0.0, allow_inf_nan=False)
    notes: str | None = None
    meal_plan_id: UUID | None = None


class StatusUpdateIn(BaseModel):
    status: str
    final_cost: float | None = Field(default=None, allow_inf_nan=False)


class DisputeIn(BaseModel):
    reason: str = ""


class ShoppingRequestOut(BaseModel):
    """Shopping request as seen by its customer or partner."""

    id: UUID
    customer_id: UUID
    delivery_partner_id: UUID | None
    items: list[str]
    delivery_address: dict[str, str]
    delivery_fee: float
    estimated_cost: float
    final_cost: float | None
    status: str
    payment_status: str
    dispute_reason: str | None
    notes: str | None
    meal_plan_id: UUID | None
    created_at: datetime | None
    accepted_at: datetime | None
    delivered_at: datetime | None
    confirmed_at: datetime | None
    disputed_at: datetime | None
    cancelled_at: datetime | None

    @classmethod
    def from_domain(cls, request: ShoppingRequest) -> "ShoppingRequestOut":
        address = request.delivery_address
        return cls(
            id=request.id,
            customer_id=request.customer_id,
            delivery_partner_id=request.delivery_partner_id,
            items=list(request.items),
            delivery_address={
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "zipCode": address.zip_code,
                "country": address.country,
            },
            delivery_fee=request.delivery_fee,
            estimated_cost=request.estimated_cost,
            final_cost=request.final_cost,
            status=request.status,
            payment_status=request.payment_status,
            dispute_reason=request.dispute_reason,
            notes=request.notes,
            meal_plan_id=request.meal_plan_id,
            created_at=request.created_at,
            accepted_at=request.accepted_at,
            delivered_at=request.delivered_at,
            confirmed_at=request.confirmed_at,
            disputed_at=request.disputed_at,
            cancelled_at=request.cancelled_at,
        )


class NotificationOut(BaseModel):
    id: UUID
    title: str
    message: str
    type: str
    category: str
    action_url: str | None
    is_read: bool
    created_at: datetime | None

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationOut":
        return cls(
            id=notification.id,
            title=notification.title,
            message=notification.message,
            type=notification.kind,
            category=notification.category,
            action_url=notification.action_url,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )


class MealPlanIn(BaseModel):
    notes: str | None = None


class ScoredPlanMealOut(BaseModel):
    day: str
    meal_type: str
    name: str
    macro_score: int
    calorie_match: bool
    match_reasons: list[str]
    badges: list[str]

    @classmethod
    def from_domain(cls, scored: ScoredPlanMeal) -> "ScoredPlanMealOut":
        return cls(
            day=scored.day,
            meal_type=scored.meal_type,
            name=scored.name,
            macro_score=scored.score.macro_score,
            calorie_match=scored.score.calorie_match,
            match_reasons=list(scored.score.match_reasons),
            badges=sorted(scored.score.badges),
        )


class PersonalizedFoodsOut(BaseModel):
    foods: list[ScoredFoodOut]
    count: int


class SavedMealPlanOut(BaseModel):
    """Meal plan from the customer's history."""

    id: UUID
    plan: WeeklyMealPlan
    notes: str | None
    rating: int | None
    feedback: str | None
    created_at: datetime | None

    @classmethod
    def from_domain(cls, saved: SavedMealPlan) -> "SavedMealPlanOut":
        return cls(
            id=saved.id,
            plan=saved.plan,
            notes=saved.notes,
            rating=saved.rating,
            feedback=saved.feedback,
            created_at=saved.created_at,
        )


class GeneratedMealPlanOut(SavedMealPlanOut):
    """Freshly generated plan with per-meal scores."""

    scores: list[ScoredPlanMealOut]

    @classmethod
    def from_generated(cls, generated: GeneratedMealPlan) -> "GeneratedMealPlanOut":
        saved = SavedMealPlanOut.from_domain(generated.saved)
        return cls(
            **saved.model_dump(exclude={"plan"}),
            plan=generated.plan,
            scores=[ScoredPlanMealOut.from_domain(item) for item in generated.scores],
        )


class RateMealPlanIn(BaseModel):
    rating: int
    feedback: str | None = None


class MealPlanShoppingRequestIn(BaseModel):
    """Delivery details for shopping a saved plan's list."""

    delivery_address: AddressIn
    estimated_cost: float = Field(default=0.0, allow_inf_nan=False)
    notes: str | None = None
