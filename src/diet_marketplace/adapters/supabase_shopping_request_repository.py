"""Supabase repository for shopping-list delivery requests."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_marketplace.adapters.supabase_rows import (
    parse_datetime,
    parse_float,
    parse_optional_float,
    parse_strings,
    parse_uuid,
    to_column,
    to_columns,
)
from diet_marketplace.domain.shopping import (
    PENDING,
    DeliveryAddress,
    ShoppingRequest,
)
from diet_marketplace.services.assignment import ShoppingRequestRepository


@dataclass
class SupabaseShoppingRequestRepository(ShoppingRequestRepository):
    """Supabase implementation for shopping requests."""

    client: Client

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
        """Insert a pending request and return it."""
        payload = {
            "customer_id": str(customer_id),
            "items": list(items),
            "delivery_address": _address_payload(delivery_address),
            "delivery_fee": delivery_fee,
            "estimated_cost": estimated_cost,
            "notes": notes,
            "meal_plan_id": str(meal_plan_id) if meal_plan_id else None,
            "status": PENDING,
            "payment_status": "pending",
        }
        response = self.client.table("shopping_requests").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create shopping request")
        return _parse_request(response.data[0])

    def get_request(self, request_id: UUID) -> ShoppingRequest | None:
        """Return a request by id, if present."""
        response = (
            self.client.table("shopping_requests")
            .select("*")
            .eq("id", str(request_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_request(response.data[0])

    def update_where(
        self,
        request_id: UUID,
        expected: dict[str, object],
        changes: dict[str, object],
    ) -> ShoppingRequest | None:
        """Apply changes in one UPDATE guarded by the expected columns."""
        query = (
            self.client.table("shopping_requests")
            .update(to_columns(changes))
            .eq("id", str(request_id))
        )
        for column, value in expected.items():
            if value is None:
                query = query.is_(column, "null")
            else:
                query = query.eq(column, to_column(value))
        response = query.execute()
        if not response.data:
            return None
        return _parse_request(response.data[0])

    def list_available(self, limit: int) -> list[ShoppingRequest]:
        """Return pending, unassigned requests, newest first."""
        response = (
            self.client.table("shopping_requests")
            .select("*")
            .eq("status", PENDING)
            .is_("delivery_partner_id", "null")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_request(row) for row in response.data or []]

    def list_by_status(self, status: str, limit: int) -> list[ShoppingRequest]:
        """Return requests in one status, newest first."""
        response = (
            self.client.table("shopping_requests")
            .select("*")
            .eq("status", status)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_request(row) for row in response.data or []]

    def list_for_customer(
        self, customer_id: UUID, statuses: list[str] | None
    ) -> list[ShoppingRequest]:
        """Return a customer's requests, newest first."""
        return self._list_by("customer_id", customer_id, statuses)

    def list_for_partner(
        self, partner_id: UUID, statuses: list[str] | None
    ) -> list[ShoppingRequest]:
        """Return requests assigned to a partner, newest first."""
        return self._list_by("delivery_partner_id", partner_id, statuses)

    def _list_by(
        self, column: str, user_id: UUID, statuses: list[str] | None
    ) -> list[ShoppingRequest]:
        query = (
            self.client.table("shopping_requests")
            .select("*")
            .eq(column, str(user_id))
        )
        if statuses:
            query = query.in_("status", statuses)
        response = query.order("created_at", desc=True).execute()
        return [_parse_request(row) for row in response.data or []]


def _address_payload(address: DeliveryAddress) -> dict[str, str]:
    return {
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "zipCode": address.zip_code,
        "country": address.country,
    }


def _parse_address(raw: object) -> DeliveryAddress:
    address = raw if isinstance(raw, dict) else {}
    return DeliveryAddress(
        street=str(address.get("street") or ""),
        city=str(address.get("city") or ""),
        state=str(address.get("state") or ""),
        zip_code=str(address.get("zipCode") or ""),
        country=str(address.get("country") or "USA"),
    )


def _parse_request(row: dict[str, object]) -> ShoppingRequest:
    return ShoppingRequest(
        id=UUID(str(row["id"])),
        customer_id=UUID(str(row["customer_id"])),
        items=parse_strings(row.get("items")),
        delivery_address=_parse_address(row.get("delivery_address")),
        delivery_fee=parse_float(row.get("delivery_fee")),
        status=str(row.get("status") or PENDING),
        delivery_partner_id=parse_uuid(row.get("delivery_partner_id")),
        estimated_cost=parse_float(row.get("estimated_cost")),
        final_cost=parse_optional_float(row.get("final_cost")),
        payment_status=str(row.get("payment_status") or "pending"),
        dispute_reason=row.get("dispute_reason"),
        notes=row.get("notes"),
        meal_plan_id=parse_uuid(row.get("meal_plan_id")),
        created_at=parse_datetime(row.get("created_at")),
        accepted_at=parse_datetime(row.get("accepted_at")),
        delivered_at=parse_datetime(row.get("delivered_at")),
        confirmed_at=parse_datetime(row.get("confirmed_at")),
        disputed_at=parse_datetime(row.get("disputed_at")),
        cancelled_at=parse_datetime(row.get("cancelled_at")),
    )
