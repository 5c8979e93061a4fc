"""Supabase-backed lookup of delivery partners."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_marketplace.services.assignment import DeliveryPartnerDirectory

DELIVERY_PARTNER_ROLE = "delivery-partner"


@dataclass
class SupabaseDeliveryPartnerDirectory(DeliveryPartnerDirectory):
    """Reads active delivery partners from the users table."""

    client: Client

    def list_active_partner_ids(self) -> list[UUID]:
        """Return ids of active delivery partners."""
        response = (
            self.client.table("users")
            .select("id")
            .contains("roles", [DELIVERY_PARTNER_ROLE])
            .eq("is_active", True)
            .execute()
        )
        return [UUID(str(row["id"])) for row in response.data or []]
