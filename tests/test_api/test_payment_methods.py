"""Tests for the manager payment-method endpoints."""

from decimal import Decimal

import pytest_asyncio

from zamora.models.order import Order
from zamora.models.payment_method import PaymentMethod

URL = "/api/mobile/manager/payment-methods"


@pytest_asyncio.fixture
async def methods(db_session, restaurant) -> dict[str, PaymentMethod]:
    cash = PaymentMethod(property_id=restaurant.id, name="Cash")
    momo = PaymentMethod(property_id=restaurant.id, name="Mobile Money")
    db_session.add_all([cash, momo])
    await db_session.flush()
    return {"cash": cash, "momo": momo}


async def _paid_order(db_session, prop, method, total) -> Order:
    order = Order(
        property_id=prop.id,
        order_type="food",
        status="pos_completed",
        payment_status="paid",
        payment_method=method,
        total_amount=Decimal(str(total)),
        items=[],
    )
    db_session.add(order)
    await db_session.flush()
    return order


class TestPaymentMethods:
    async def test_create_and_list(self, client, restaurant, methods, owner_headers) -> None:
        response = await client.post(
            URL, json={"propertyId": str(restaurant.id), "name": " Card "}, headers=owner_headers
        )
        assert response.status_code == 201
        assert response.json()["name"] == "Card"
        assert response.json()["is_active"] is True

        listing = await client.get(URL, params={"propertyId": str(restaurant.id)}, headers=owner_headers)
        assert [m["name"] for m in listing.json()] == ["Card", "Cash", "Mobile Money"]

    async def test_name_required(self, client, restaurant, owner_headers) -> None:
        response = await client.post(URL, json={"propertyId": str(restaurant.id), "name": ""}, headers=owner_headers)
        assert response.status_code == 400

    async def test_duplicate_name(self, client, restaurant, methods, owner_headers) -> None:
        response = await client.post(
            URL, json={"propertyId": str(restaurant.id), "name": "Cash"}, headers=owner_headers
        )
        assert response.status_code == 409

    async def test_deactivate(self, client, methods, owner_headers) -> None:
        response = await client.put(f"{URL}/{methods['cash'].id}", json={"is_active": False}, headers=owner_headers)
        assert response.status_code == 200
        assert methods["cash"].is_active is False
        assert methods["cash"].name == "Cash"

    async def test_rename_onto_existing_name(self, client, methods, owner_headers) -> None:
        response = await client.put(
            f"{URL}/{methods['cash'].id}", json={"name": "Mobile Money"}, headers=owner_headers
        )
        assert response.status_code == 409

    async def test_delete_with_wrong_property(self, client, hotel, methods, owner_headers) -> None:
        response = await client.delete(
            f"{URL}/{methods['cash'].id}", params={"propertyId": str(hotel.id)}, headers=owner_headers
        )
        assert response.status_code == 404

    async def test_delete(self, client, methods, owner_headers, db_session) -> None:
        method_id = methods["momo"].id
        response = await client.delete(f"{URL}/{method_id}", headers=owner_headers)
        assert response.status_code == 200
        assert await db_session.get(PaymentMethod, method_id) is None

    async def test_cashier_cannot_manage(self, client, restaurant, make_staff, auth_for) -> None:
        cashier = await make_staff("cashier", restaurant)
        response = await client.get(URL, params={"propertyId": str(restaurant.id)}, headers=auth_for(cashier))
        assert response.status_code == 403


class TestPaymentStats:
    async def test_breakdown(self, client, restaurant, methods, db_session, owner_headers) -> None:
        await _paid_order(db_session, restaurant, "mobile_money", "100.00")
        await _paid_order(db_session, restaurant, "MOBILE MONEY", "40.00")
        await _paid_order(db_session, restaurant, "Cash", "25.00")
        await _paid_order(db_session, restaurant, None, "999.00")

        response = await client.get(f"{URL}/stats", params={"propertyId": str(restaurant.id)}, headers=owner_headers)

        assert response.status_code == 200
        data = response.json()
        assert set(data["period"]) == {"start", "end"}
        assert [(b["method"], b["count"], Decimal(b["total_revenue"])) for b in data["breakdown"]] == [
            ("Mobile Money", 2, Decimal("140.00")),
            ("Cash", 1, Decimal("25.00")),
        ]

    async def test_other_property_orders_excluded(self, client, restaurant, hotel, methods, db_session, owner_headers):
        await _paid_order(db_session, hotel, "Cash", "500.00")

        response = await client.get(f"{URL}/stats", params={"propertyId": str(restaurant.id)}, headers=owner_headers)

        assert [b["count"] for b in response.json()["breakdown"]] == [0, 0]
