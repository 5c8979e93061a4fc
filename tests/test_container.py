"""Tests for container wiring."""

import asyncio

from diet_marketplace.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.assignment_service is not None
    assert container.assignment_service.delivery_fee == settings.shopping_delivery_fee
    assert container.catalog_service.profile_service is container.profile_service
    asyncio.run(container.close_resources())
