"""Shared test fixtures."""

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from itertools import count
from uuid import UUID, uuid4

import pytest

from diet_marketplace.config import Settings
from diet_marketplace.containers import AppContainer
from diet_marketplace.domain.foods import FoodItem, Restaurant
from diet_marketplace.domain.meal_plans import SavedMealPlan, WeeklyMealPlan
from diet_marketplace.domain.notifications import Notification
from diet_marketplace.domain.orders import (
    PENDING_QUOTE,
    CustomRecipeOrder,
    RecipeDetails,
)
from diet_marketplace.domain.profiles import Profile
from diet_marketplace.domain.shopping import (
    PENDING,
    DeliveryAddress,
    ShoppingRequest,
)
from diet_marketplace.services.assignment import (
    AssignmentService,
    DeliveryPartnerDirectory,
    ShoppingRequestRepository,
)
from diet_marketplace.services.catalog import CatalogRepository, CatalogService
from diet_marketplace.services.meal_plans import (
    MealPlanClient,
    MealPlanRepository,
    MealPlanService,
)
from diet_marketplace.services.negotiation import (
    NegotiationService,
    OrderRepository,
    RestaurantRepository,
)
from diet_marketplace.services.notifications import (
    NotificationRepository,
    NotificationService,
)
from diet_marketplace.services.profiles import ProfileRepository, ProfileService

_BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


def reference_profile(user_id: UUID | None = None, **overrides: object) -> Profile:
    """30 year old moderately active male, 175 cm and 75 kg."""
    values: dict[str, object] = {
        "user_id": user_id or uuid4(),
        "age": 30,
        "weight_kg": 75.0,
        "height_cm": 175.0,
        "sex": "male",
        "activity_level": "moderate",
    }
    values.update(overrides)
    return Profile(**values)


def make_food(**overrides: object) -> FoodItem:
    values: dict[str, object] = {
        "id": uuid4(),
        "name": "Grilled chicken bowl",
        "calories": 800.0,
        "protein_g": 60.0,
        "carbs_g": 90.0,
        "fat_g": 30.0,
        "diet_type": "balanced",
    }
    values.update(overrides)
    return FoodItem(**values)


def make_address() -> DeliveryAddress:
    return DeliveryAddress(
        street="1 Market St", city="Springfield", state="IL", zip_code="62701"
    )


def sample_plan_payload() -> dict[str, object]:
    return {
        "summary": "High protein week",
        "days": [
            {
                "day": "Monday",
                "meals": [
                    {
                        "meal_type": "breakfast",
                        "name": "Egg white omelette",
                        "description": None,
                        "calories": 650,
                        "macros": {"protein": 50, "carbs": 60, "fats": 22},
                        "ingredients": ["egg whites", "spinach"],
                        "instructions": None,
                    },
                    {
                        "meal_type": "snack",
                        "name": "Greek yogurt",
                        "description": "Plain, with berries",
                        "calories": 250,
                        "macros": {"protein": 20, "carbs": 25, "fats": 6},
                        "ingredients": ["greek yogurt", "berries"],
                        "instructions": None,
                    },
                ],
            }
        ],
        "nutritional_analysis": None,
        "shopping_list": ["egg whites", "spinach", "greek yogurt", "berries"],
        "tips": ["Prep breakfasts on Sunday"],
    }


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, Profile] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> Profile | None:
        return self.profiles.get(user_id)

    def upsert_profile(self, profile: Profile) -> Profile:
        self.profiles[profile.user_id] = profile
        return profile


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog for tests."""

    foods: list[FoodItem] = field(default_factory=list)

    def list_foods(
        self, restaurant_id: UUID | None, diet_type: str | None
    ) -> list[FoodItem]:
        return [
            food
            for food in self.foods
            if (restaurant_id is None or food.restaurant_id == restaurant_id)
            and (not diet_type or food.diet_type == diet_type)
        ]


@dataclass
class InMemoryRestaurantRepository(RestaurantRepository):
    """In-memory restaurant lookup for tests."""

    restaurants: dict[UUID, Restaurant] = field(default_factory=dict)

    def add(
        self,
        owner_id: UUID,
        name: str = "Green Kitchen",
        is_approved: bool = True,
        is_active: bool = True,
    ) -> Restaurant:
        restaurant = Restaurant(
            id=uuid4(),
            owner_id=owner_id,
            name=name,
            is_approved=is_approved,
            is_active=is_active,
        )
        self.restaurants[restaurant.id] = restaurant
        return restaurant

    def get_restaurant(self, restaurant_id: UUID) -> Restaurant | None:
        return self.restaurants.get(restaurant_id)


@dataclass
class InMemoryOrderRepository(OrderRepository):
    """In-memory order repository with atomic conditional updates."""

    orders: dict[UUID, CustomRecipeOrder] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)
    _sequence: count = field(default_factory=count)

    def create_order(  # noqa: PLR0913
        self,
        customer_id: UUID,
        restaurant_id: UUID,
        recipe: RecipeDetails,
        delivery_address: dict[str, str] | None,
        notes: str | None,
    ) -> CustomRecipeOrder:
        order = CustomRecipeOrder(
            id=uuid4(),
            customer_id=customer_id,
            restaurant_id=restaurant_id,
            recipe=recipe,
            negotiation_state=PENDING_QUOTE,
            status="pending",
            delivery_address=delivery_address,
            notes=notes,
            created_at=_BASE_TIME + timedelta(seconds=next(self._sequence)),
        )
        self.orders[order.id] = order
        return order

    def get_order(self, order_id: UUID) -> CustomRecipeOrder | None:
        return self.orders.get(order_id)

    def update_if_state(
        self, order_id: UUID, expected_state: str, changes: dict[str, object]
    ) -> CustomRecipeOrder | None:
        with self._lock:
            order = self.orders.get(order_id)
            if order is None or order.negotiation_state != expected_state:
                return None
            updated = replace(order, **changes)
            self.orders[order_id] = updated
            return updated

    def list_for_customer(self, customer_id: UUID) -> list[CustomRecipeOrder]:
        return _newest_first(
            order for order in self.orders.values() if order.customer_id == customer_id
        )

    def list_for_restaurant(
        self, restaurant_id: UUID, negotiation_state: str | None
    ) -> list[CustomRecipeOrder]:
        return _newest_first(
            order
            for order in self.orders.values()
            if order.restaurant_id == restaurant_id
            and negotiation_state in {None, order.negotiation_state}
        )


@dataclass
class InMemoryShoppingRequestRepository(ShoppingRequestRepository):
    """In-memory shopping requests with atomic conditional updates."""

    requests: dict[UUID, ShoppingRequest] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)
    _sequence: count = field(default_factory=count)

    def create_request(  # noqa: PLR0913
        self,
        customer_id: UUID,
        items: list[str],
        delivery_address: DeliveryAddress,
        delivery_fee: float,
        estimated_cost: float,
        notes: str | None,
        meal_plan_id: UUID | None,
    ) -> ShoppingRequest:
        request = ShoppingRequest(
            id=uuid4(),
            customer_id=customer_id,
            items=list(items),
            delivery_address=delivery_address,
            delivery_fee=delivery_fee,
            status=PENDING,
            estimated_cost=estimated_cost,
            notes=notes,
            meal_plan_id=meal_plan_id,
            created_at=_BASE_TIME + timedelta(seconds=next(self._sequence)),
        )
        self.requests[request.id] = request
        return request

    def get_request(self, request_id: UUID) -> ShoppingRequest | None:
        return self.requests.get(request_id)

    def update_where(
        self,
        request_id: UUID,
        expected: dict[str, object],
        changes: dict[str, object],
    ) -> ShoppingRequest | None:
        with self._lock:
            request = self.requests.get(request_id)
            if request is None:
                return None
            for column, value in expected.items():
                if getattr(request, column) != value:
                    return None
            updated = replace(request, **changes)
            self.requests[request_id] = updated
            return updated

    def list_available(self, limit: int) -> list[ShoppingRequest]:
        return _newest_first(
            request
            for request in self.requests.values()
            if request.status == PENDING and request.delivery_partner_id is None
        )[:limit]

    def list_by_status(self, status: str, limit: int) -> list[ShoppingRequest]:
        return _newest_first(
            request for request in self.requests.values() if request.status == status
        )[:limit]

    def list_for_customer(
        self, customer_id: UUID, statuses: list[str] | None
    ) -> list[ShoppingRequest]:
        return _newest_first(
            request
            for request in self.requests.values()
            if request.customer_id == customer_id
            and (not statuses or request.status in statuses)
        )

    def list_for_partner(
        self, partner_id: UUID, statuses: list[str] | None
    ) -> list[ShoppingRequest]:
        return _newest_first(
            request
            for request in self.requests.values()
            if request.delivery_partner_id == partner_id
            and (not statuses or request.status in statuses)
        )


@dataclass
class InMemoryPartnerDirectory(DeliveryPartnerDirectory):
    """Fixed list of active delivery partners."""

    partner_ids: list[UUID] = field(default_factory=list)

    def list_active_partner_ids(self) -> list[UUID]:
        return list(self.partner_ids)


@dataclass
class InMemoryNotificationRepository(NotificationRepository):
    """In-memory notification inbox; can be told to fail on create."""

    notifications: list[Notification] = field(default_factory=list)
    fail: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def create_notification(  # noqa: PLR0913
        self,
        user_id: UUID,
        title: str,
        message: str,
        kind: str,
        category: str,
        action_url: str | None,
    ) -> Notification:
        if self.fail:
            raise RuntimeError("notification store unavailable")
        notification = Notification(
            id=uuid4(),
            user_id=user_id,
            title=title,
            message=message,
            kind=kind,
            category=category,
            action_url=action_url,
            is_read=False,
            created_at=_BASE_TIME + timedelta(seconds=len(self.notifications)),
        )
        with self._lock:
            self.notifications.append(notification)
        return notification

    def get_notification(self, notification_id: UUID) -> Notification | None:
        for notification in self.notifications:
            if notification.id == notification_id:
                return notification
        return None

    def list_notifications(
        self, user_id: UUID, unread_only: bool, limit: int
    ) -> list[Notification]:
        return _newest_first(
            item
            for item in self.notifications
            if item.user_id == user_id and (not unread_only or not item.is_read)
        )[:limit]

    def mark_read(self, notification_id: UUID) -> None:
        self.notifications = [
            replace(item, is_read=True) if item.id == notification_id else item
            for item in self.notifications
        ]

    def mark_all_read(self, user_id: UUID) -> int:
        updated = 0
        for index, item in enumerate(self.notifications):
            if item.user_id == user_id and not item.is_read:
                self.notifications[index] = replace(item, is_read=True)
                updated += 1
        return updated

    def delete_notification(self, notification_id: UUID) -> None:
        self.notifications = [
            item for item in self.notifications if item.id != notification_id
        ]

    def count_unread(self, user_id: UUID) -> int:
        return len(self.list_notifications(user_id, unread_only=True, limit=10_000))

    def for_user(self, user_id: UUID) -> list[Notification]:
        return [item for item in self.notifications if item.user_id == user_id]


@dataclass
class FakeMealPlanClient(MealPlanClient):
    """Fake meal-plan client returning a fixed payload."""

    payload: dict[str, object] = field(default_factory=sample_plan_payload)
    prompts: list[str] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        return self.payload


@dataclass
class InMemoryMealPlanRepository(MealPlanRepository):
    """In-memory meal-plan history for tests."""

    plans: dict[UUID, SavedMealPlan] = field(default_factory=dict)
    _sequence: count = field(default_factory=count)

    def save_plan(
        self, user_id: UUID, plan: WeeklyMealPlan, notes: str | None
    ) -> SavedMealPlan:
        saved = SavedMealPlan(
            id=uuid4(),
            user_id=user_id,
            plan=plan,
            notes=notes,
            created_at=_BASE_TIME + timedelta(seconds=next(self._sequence)),
        )
        self.plans[saved.id] = saved
        return saved

    def get_plan(self, plan_id: UUID) -> SavedMealPlan | None:
        return self.plans.get(plan_id)

    def list_plans(self, user_id: UUID, limit: int) -> list[SavedMealPlan]:
        return _newest_first(
            saved for saved in self.plans.values() if saved.user_id == user_id
        )[:limit]

    def update_rating(
        self, plan_id: UUID, rating: int, feedback: str | None
    ) -> SavedMealPlan | None:
        saved = self.plans.get(plan_id)
        if saved is None:
            return None
        updated = replace(saved, rating=rating, feedback=feedback)
        self.plans[plan_id] = updated
        return updated

    def delete_plan(self, plan_id: UUID) -> None:
        self.plans.pop(plan_id, None)


def _newest_first(records):  # type: ignore[no-untyped-def]
    return sorted(records, key=lambda record: record.created_at, reverse=True)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
        openai_api_key="openai-key",
    )


@pytest.fixture
def notification_repository() -> InMemoryNotificationRepository:
    return InMemoryNotificationRepository()


@pytest.fixture
def notification_service(
    notification_repository: InMemoryNotificationRepository,
) -> NotificationService:
    return NotificationService(notification_repository)


@pytest.fixture
def restaurant_repository() -> InMemoryRestaurantRepository:
    return InMemoryRestaurantRepository()


@pytest.fixture
def order_repository() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def negotiation_service(
    order_repository: InMemoryOrderRepository,
    restaurant_repository: InMemoryRestaurantRepository,
    notification_service: NotificationService,
) -> NegotiationService:
    return NegotiationService(
        orders=order_repository,
        restaurants=restaurant_repository,
        notifications=notification_service,
    )


@pytest.fixture
def shopping_repository() -> InMemoryShoppingRequestRepository:
    return InMemoryShoppingRequestRepository()


@pytest.fixture
def partner_directory() -> InMemoryPartnerDirectory:
    return InMemoryPartnerDirectory(partner_ids=[uuid4(), uuid4()])


@pytest.fixture
def assignment_service(
    shopping_repository: InMemoryShoppingRequestRepository,
    partner_directory: InMemoryPartnerDirectory,
    notification_service: NotificationService,
) -> AssignmentService:
    return AssignmentService(
        requests=shopping_repository,
        partners=partner_directory,
        notifications=notification_service,
    )


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def profile_service(profile_repository: InMemoryProfileRepository) -> ProfileService:
    return ProfileService(profile_repository)


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def meal_plan_client() -> FakeMealPlanClient:
    return FakeMealPlanClient()


@pytest.fixture
def meal_plan_repository() -> InMemoryMealPlanRepository:
    return InMemoryMealPlanRepository()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    profile_service: ProfileService,
    catalog_repository: InMemoryCatalogRepository,
    notification_service: NotificationService,
    negotiation_service: NegotiationService,
    assignment_service: AssignmentService,
    meal_plan_client: FakeMealPlanClient,
    meal_plan_repository: InMemoryMealPlanRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        profile_service=profile_service,
        catalog_service=CatalogService(
            catalog=catalog_repository, profile_service=profile_service
        ),
        notification_service=notification_service,
        negotiation_service=negotiation_service,
        assignment_service=assignment_service,
        meal_plan_service=MealPlanService(
            client=meal_plan_client,
            plans=meal_plan_repository,
            model=settings.openai_model,
            reasoning_effort=settings.openai_reasoning_effort,
            store=settings.openai_store,
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def package_log(caplog: pytest.LogCaptureFixture) -> Iterator[pytest.LogCaptureFixture]:
    """Capture package logs even after configure_logging stops propagation."""
    logger = logging.getLogger("diet_marketplace")
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.INFO, logger="diet_marketplace")
    yield caplog
    logger.removeHandler(caplog.handler)
