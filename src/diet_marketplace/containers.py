"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from diet_marketplace.adapters.openai_meal_plan_client import OpenAIMealPlanClient
from diet_marketplace.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
    SupabaseRestaurantRepository,
)
from diet_marketplace.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from diet_marketplace.adapters.supabase_notification_repository import (
    SupabaseNotificationRepository,
)
from diet_marketplace.adapters.supabase_order_repository import (
    SupabaseOrderRepository,
)
from diet_marketplace.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from diet_marketplace.adapters.supabase_shopping_request_repository import (
    SupabaseShoppingRequestRepository,
)
from diet_marketplace.adapters.supabase_user_repository import (
    SupabaseDeliveryPartnerDirectory,
)
from diet_marketplace.config import Settings
from diet_marketplace.services.assignment import AssignmentService
from diet_marketplace.services.catalog import CatalogService
from diet_marketplace.services.meal_plans import MealPlanService
from diet_marketplace.services.negotiation import NegotiationService
from diet_marketplace.services.notifications import NotificationService
from diet_marketplace.services.profiles import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    catalog_service: CatalogService
    notification_service: NotificationService
    negotiation_service: NegotiationService
    assignment_service: AssignmentService
    meal_plan_service: MealPlanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    notification_service = NotificationService(
        SupabaseNotificationRepository(supabase_client)
    )
    profile_service = ProfileService(SupabaseProfileRepository(supabase_client))
    catalog_service = CatalogService(
        catalog=SupabaseCatalogRepository(supabase_client),
        profile_service=profile_service,
    )
    negotiation_service = NegotiationService(
        orders=SupabaseOrderRepository(supabase_client),
        restaurants=SupabaseRestaurantRepository(supabase_client),
        notifications=notification_service,
    )
    assignment_service = AssignmentService(
        requests=SupabaseShoppingRequestRepository(supabase_client),
        partners=SupabaseDeliveryPartnerDirectory(supabase_client),
        notifications=notification_service,
        delivery_fee=resolved_settings.shopping_delivery_fee,
    )
    openai_client = OpenAIMealPlanClient.create(resolved_settings.openai_api_key)
    meal_plan_service = MealPlanService(
        client=openai_client,
        plans=SupabaseMealPlanRepository(supabase_client),
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=profile_service,
        catalog_service=catalog_service,
        notification_service=notification_service,
        negotiation_service=negotiation_service,
        assignment_service=assignment_service,
        meal_plan_service=meal_plan_service,
        close_resources=close_resources,
    )
