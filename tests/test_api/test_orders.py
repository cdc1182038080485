"""Tests for guest/waiter ordering, the kitchen and bar queues, and POS close-out."""

from decimal import Decimal

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import func, select

from zamora.models.order import Order
from zamora.models.room import Room

FOOD_CART = [
    {"id": 11, "name": "Nshima with Chicken", "price": 50, "quantity": 2},
    {"id": 12, "name": "Chips", "basePrice": 30, "quantity": 1, "selectedOptions": ["Large"]},
]
BAR_CART = [
    {"id": 21, "name": "Mosi Lager", "price": 50, "quantity": 2},
    {"id": 22, "name": "Coke", "price": 30, "quantity": 1},
]


@pytest_asyncio.fixture
async def table(db_session, restaurant) -> Room:
    """Table 4 of the restaurant; tables are rooms."""
    t = Room(property_id=restaurant.id, room_number="4", status="available")
    db_session.add(t)
    await db_session.flush()
    return t


async def _place(client: AsyncClient, restaurant, *, food=None, bar=None, form=None, headers=None) -> dict:
    response = await client.post(
        "/api/orders",
        json={
            "propertyId": str(restaurant.id),
            "foodCart": food or [],
            "barCart": bar or [],
            "formData": form if form is not None else {"tableNumber": "4", "name": "Guest"},
        },
        headers=headers or {},
    )
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# POST /api/orders, POST /api/bar-orders
# ---------------------------------------------------------------------------


class TestPlaceOrders:
    async def test_food_and_bar_become_two_orders(self, client, restaurant) -> None:
        data = await _place(client, restaurant, food=FOOD_CART, bar=BAR_CART)

        assert data["success"] is True
        assert len(data["orderIds"]) == 2
        food, bar = data["orders"]

        assert food["order_type"] == "food"
        assert Decimal(food["subtotal"]) == Decimal("130.00")
        assert Decimal(food["service_charge"]) == Decimal("0.00")
        assert Decimal(food["total_amount"]) == Decimal("130.00")

        assert bar["order_type"] == "bar"
        assert Decimal(bar["service_charge"]) == Decimal("13.00")
        assert Decimal(bar["total_amount"]) == Decimal("143.00")

    async def test_items_are_snapshotted(self, client, restaurant) -> None:
        data = await _place(client, restaurant, food=FOOD_CART)
        items = {item["item_name"]: item for item in data["orders"][0]["items"]}

        chips = items["Chips"]
        assert chips["menu_item_id"] == "12"
        assert Decimal(chips["unit_price"]) == Decimal("30.00")
        assert chips["options"] == ["Large"]
        assert Decimal(items["Nshima with Chicken"]["total_price"]) == Decimal("100.00")

    async def test_location_and_status(self, client, restaurant) -> None:
        data = await _place(client, restaurant, bar=BAR_CART, form={"roomNumber": "12"})
        order = data["orders"][0]
        assert order["guest_room_number"] == "12"
        assert order["status"] == "pending"
        assert order["payment_status"] == "unpaid"

    async def test_walk_in_location(self, client, restaurant) -> None:
        data = await _place(client, restaurant, bar=BAR_CART, form={})
        assert data["orders"][0]["guest_room_number"] == "Walk-in / Unknown"

    async def test_wrapped_body(self, client, restaurant) -> None:
        response = await client.post(
            "/api/orders",
            json={"order": {"propertyId": str(restaurant.id), "barCart": BAR_CART}},
        )
        assert response.status_code == 201

    async def test_admin_notified_per_order(self, client, restaurant, notifier) -> None:
        data = await _place(client, restaurant, food=FOOD_CART, bar=BAR_CART)
        bar_id = data["orderIds"][1]

        assert len(notifier.sms) == 2
        message, phone = notifier.sms[1]
        assert message == f"New Bar Order #{bar_id[:8]} from Table 4. Total: K143.00"
        assert phone == "+260970000001"

        assert [p[0] for p in notifier.pushes] == [restaurant.id, restaurant.id]
        assert notifier.pushes[0][1]["title"] == "New Food Order"

    async def test_empty_cart_rejected(self, client, restaurant, notifier, db_session) -> None:
        response = await client.post("/api/orders", json={"propertyId": str(restaurant.id), "foodCart": []})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Cart is empty"
        assert "hint" in body["details"]
        assert notifier.sms == []
        assert (await db_session.execute(select(func.count(Order.id)))).scalar_one() == 0

    async def test_line_without_price_rejected(self, client, restaurant) -> None:
        response = await client.post(
            "/api/orders",
            json={"propertyId": str(restaurant.id), "barCart": [{"name": "Mystery", "quantity": 1}]},
        )
        assert response.status_code == 400

    async def test_unknown_property(self, client) -> None:
        response = await client.post(
            "/api/orders",
            json={"propertyId": "00000000-0000-0000-0000-000000000000", "barCart": BAR_CART},
        )
        assert response.status_code == 404

    async def test_signed_in_waiter_is_recorded(self, client, restaurant, make_staff, auth_for) -> None:
        waiter = await make_staff("waiter", restaurant, first_name="Mary", last_name="Banda")
        data = await _place(
            client, restaurant, food=FOOD_CART, form={"tableNumber": 4, "notes": "No onions"}, headers=auth_for(waiter)
        )
        order = data["orders"][0]
        assert order["waiter_name"] == "Mary Banda"
        assert order["notes"] == "No onions\n(Waiter: Mary Banda)"
        assert order["table_number"] == "4"

    async def test_waiter_name_from_form_wins(self, client, restaurant, make_staff, auth_for) -> None:
        waiter = await make_staff("waiter", restaurant, first_name="Mary", last_name="Banda")
        data = await _place(
            client, restaurant, bar=BAR_CART, form={"waiterName": "Joe"}, headers=auth_for(waiter)
        )
        assert data["orders"][0]["waiter_name"] == "Joe"

    async def test_signed_in_guest_is_not_a_waiter(self, client, restaurant, auth_headers) -> None:
        data = await _place(client, restaurant, bar=BAR_CART, headers=auth_headers)
        assert data["orders"][0]["waiter_name"] is None


class TestBarOrders:
    async def test_bar_order(self, client, restaurant, notifier) -> None:
        response = await client.post(
            "/api/bar-orders",
            json={"propertyId": str(restaurant.id), "barCart": BAR_CART, "formData": {"tableNumber": "9"}},
        )
        assert response.status_code == 201
        order_id = response.json()["orderId"]
        assert notifier.sms[0][0] == f"New Bar Order #{order_id[:8]} from Table 9. Total: K143.00"

    async def test_empty_bar_cart(self, client, restaurant) -> None:
        response = await client.post("/api/bar-orders", json={"propertyId": str(restaurant.id), "barCart": []})
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# Staff views
# ---------------------------------------------------------------------------


class TestStaffViews:
    async def test_list_requires_login(self, client) -> None:
        response = await client.get("/api/orders")
        assert response.status_code == 401

    async def test_list_for_property(self, client, restaurant, make_staff, auth_for) -> None:
        await _place(client, restaurant, food=FOOD_CART, bar=BAR_CART)
        cashier = await make_staff("cashier", restaurant)

        response = await client.get(
            "/api/orders", params={"propertyId": str(restaurant.id)}, headers=auth_for(cashier)
        )
        assert response.status_code == 200
        assert response.json()["count"] == 2

    async def test_list_scoped_to_own_properties(self, client, restaurant, hotel, make_staff, auth_for) -> None:
        await _place(client, restaurant, bar=BAR_CART)
        await _place(client, hotel, bar=BAR_CART)
        chef = await make_staff("chef", hotel)

        response = await client.get("/api/orders", headers=auth_for(chef))
        orders = response.json()["orders"]
        assert [o["property_id"] for o in orders] == [str(hotel.id)]

    async def test_other_property_forbidden(self, client, restaurant, hotel, make_staff, auth_for) -> None:
        chef = await make_staff("chef", hotel)
        response = await client.get(
            "/api/orders", params={"propertyId": str(restaurant.id)}, headers=auth_for(chef)
        )
        assert response.status_code == 403

    async def test_housekeeping_cannot_read_orders(self, client, restaurant, make_staff, auth_for) -> None:
        housekeeper = await make_staff("housekeeping", restaurant)
        response = await client.get(
            "/api/orders", params={"propertyId": str(restaurant.id)}, headers=auth_for(housekeeper)
        )
        assert response.status_code == 403

    async def test_get_single_order(self, client, restaurant, owner_headers) -> None:
        data = await _place(client, restaurant, bar=BAR_CART)
        response = await client.get(f"/api/orders/{data['orderIds'][0]}", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["order_type"] == "bar"

    async def test_queues_split_by_kitchen(self, client, restaurant, make_staff, auth_for) -> None:
        await _place(client, restaurant, food=FOOD_CART, bar=BAR_CART)
        chef = await make_staff("chef", restaurant)
        bartender = await make_staff("bartender", restaurant)

        chef_view = await client.get(f"/api/mobile/chef/orders/{restaurant.id}", headers=auth_for(chef))
        bar_view = await client.get(f"/api/mobile/bartender/orders/{restaurant.id}", headers=auth_for(bartender))

        assert [o["order_type"] for o in chef_view.json()["orders"]] == ["food"]
        assert [o["order_type"] for o in bar_view.json()["orders"]] == ["bar"]

    async def test_queue_excludes_finished_orders(self, client, restaurant, make_staff, auth_for) -> None:
        data = await _place(client, restaurant, food=FOOD_CART)
        chef = await make_staff("chef", restaurant)
        headers = auth_for(chef)
        order_id = data["orderIds"][0]

        for status in ("preparing", "ready", "delivered"):
            response = await client.post(f"/api/mobile/orders/{order_id}/status", json={"status": status}, headers=headers)
            assert response.status_code == 200

        queue = await client.get(f"/api/mobile/chef/orders/{restaurant.id}", headers=headers)
        assert queue.json()["count"] == 0


# ---------------------------------------------------------------------------
# Status changes and POS
# ---------------------------------------------------------------------------


class TestOrderStatus:
    async def _status(self, client, headers, order_id, status):
        return await client.post(f"/api/mobile/orders/{order_id}/status", json={"status": status}, headers=headers)

    async def test_preparing_occupies_table(self, client, restaurant, table, owner_headers) -> None:
        data = await _place(client, restaurant, food=FOOD_CART)

        response = await self._status(client, owner_headers, data["orderIds"][0], "preparing")

        assert response.status_code == 200
        assert response.json()["status"] == "preparing"
        assert table.status == "occupied"

    async def test_cancel_frees_table(self, client, restaurant, table, owner_headers) -> None:
        data = await _place(client, restaurant, food=FOOD_CART)
        await self._status(client, owner_headers, data["orderIds"][0], "preparing")

        await self._status(client, owner_headers, data["orderIds"][0], "cancelled")
        assert table.status == "available"

    async def test_cancel_keeps_table_with_other_open_order(self, client, restaurant, table, owner_headers) -> None:
        data = await _place(client, restaurant, food=FOOD_CART, bar=BAR_CART)
        food_id, bar_id = data["orderIds"]
        await self._status(client, owner_headers, food_id, "preparing")

        await self._status(client, owner_headers, bar_id, "cancelled")
        assert table.status == "occupied"

    async def test_cancelled_order_cannot_restart(self, client, restaurant, owner_headers) -> None:
        data = await _place(client, restaurant, food=FOOD_CART)
        order_id = data["orderIds"][0]
        await self._status(client, owner_headers, order_id, "cancelled")

        response = await self._status(client, owner_headers, order_id, "preparing")
        assert response.status_code == 409
        assert response.json()["details"] == {"from": "cancelled", "to": "preparing"}

    async def test_same_status_is_noop(self, client, restaurant, owner_headers) -> None:
        data = await _place(client, restaurant, food=FOOD_CART)
        response = await self._status(client, owner_headers, data["orderIds"][0], "pending")
        assert response.status_code == 200
        assert response.json()["status"] == "pending"

    async def test_pos_completed_not_settable_here(self, client, restaurant, owner_headers) -> None:
        data = await _place(client, restaurant, food=FOOD_CART)
        response = await self._status(client, owner_headers, data["orderIds"][0], "pos_completed")
        assert response.status_code == 400

    async def test_cashier_cannot_change_kitchen_status(self, client, restaurant, make_staff, auth_for) -> None:
        data = await _place(client, restaurant, food=FOOD_CART)
        cashier = await make_staff("cashier", restaurant)
        response = await self._status(client, auth_for(cashier), data["orderIds"][0], "preparing")
        assert response.status_code == 403

    async def test_missing_order(self, client, owner_headers) -> None:
        response = await self._status(client, owner_headers, "00000000-0000-0000-0000-000000000000", "ready")
        assert response.status_code == 404


class TestPosComplete:
    async def test_cashier_closes_out(self, client, restaurant, table, make_staff, auth_for) -> None:
        data = await _place(client, restaurant, bar=BAR_CART)
        cashier = await make_staff("cashier", restaurant)

        response = await client.post(
            f"/api/mobile/cashier/orders/{data['orderIds'][0]}/pos",
            json={"paymentMethod": "mobile_money"},
            headers=auth_for(cashier),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "pos_completed"
        assert body["payment_status"] == "paid"
        assert body["payment_method"] == "mobile_money"
        assert table.status == "dirty"

    async def test_cancelled_order_cannot_be_paid(self, client, restaurant, owner_headers) -> None:
        data = await _place(client, restaurant, bar=BAR_CART)
        order_id = data["orderIds"][0]
        await client.post(f"/api/mobile/orders/{order_id}/status", json={"status": "cancelled"}, headers=owner_headers)

        response = await client.post(f"/api/mobile/cashier/orders/{order_id}/pos", json={}, headers=owner_headers)
        assert response.status_code == 409

    async def test_waiter_cannot_close_out(self, client, restaurant, make_staff, auth_for) -> None:
        data = await _place(client, restaurant, bar=BAR_CART)
        waiter = await make_staff("waiter", restaurant)
        response = await client.post(
            f"/api/mobile/cashier/orders/{data['orderIds'][0]}/pos", json={}, headers=auth_for(waiter)
        )
        assert response.status_code == 403


# ---------------------------------------------------------------------------
# Cashier queue and history
# ---------------------------------------------------------------------------


class TestCashierViews:
    async def _legacy_order(self, db_session, restaurant, status="delivered") -> Order:
        """An order that only carries its location and waiter inside free text."""
        order = Order(
            property_id=restaurant.id,
            order_type="food",
            status=status,
            guest_room_number="table 9 ",
            notes="No onions\n(Waiter: Joe Banda)",
            items=[],
        )
        db_session.add(order)
        await db_session.flush()
        return order

    async def test_queue_fills_table_and_waiter(self, client, restaurant, db_session, make_staff, auth_for) -> None:
        await self._legacy_order(db_session, restaurant)
        cashier = await make_staff("cashier", restaurant)

        response = await client.get(f"/api/mobile/cashier/orders/{restaurant.id}", headers=auth_for(cashier))

        assert response.status_code == 200
        order = response.json()["orders"][0]
        assert order["table_number"] == "9"
        assert order["waiter_name"] == "Joe Banda"

    async def test_queue_includes_food_and_bar(self, client, restaurant, owner_headers) -> None:
        await _place(client, restaurant, food=FOOD_CART, bar=BAR_CART, form={"tableNumber": "4", "waiterName": "Mary"})

        response = await client.get(f"/api/mobile/cashier/orders/{restaurant.id}", headers=owner_headers)

        data = response.json()
        assert data["count"] == 2
        assert {o["order_type"] for o in data["orders"]} == {"food", "bar"}
        assert {o["table_number"] for o in data["orders"]} == {"4"}
        assert {o["waiter_name"] for o in data["orders"]} == {"Mary"}

    async def test_queue_filters(self, client, restaurant, db_session, owner_headers) -> None:
        await _place(client, restaurant, food=FOOD_CART, bar=BAR_CART)
        await self._legacy_order(db_session, restaurant, status="ready")

        by_status = await client.get(
            f"/api/mobile/cashier/orders/{restaurant.id}",
            params={"status": "ready, delivered"},
            headers=owner_headers,
        )
        by_type = await client.get(
            f"/api/mobile/cashier/orders/{restaurant.id}", params={"type": "bar"}, headers=owner_headers
        )

        assert [o["status"] for o in by_status.json()["orders"]] == ["ready"]
        assert [o["order_type"] for o in by_type.json()["orders"]] == ["bar"]

    async def test_history_defaults_to_closed_orders(self, client, restaurant, db_session, owner_headers) -> None:
        data = await _place(client, restaurant, food=FOOD_CART, bar=BAR_CART)
        food_id, bar_id = data["orderIds"]
        await client.post(f"/api/mobile/cashier/orders/{bar_id}/pos", json={}, headers=owner_headers)
        await client.post(f"/api/mobile/orders/{food_id}/status", json={"status": "cancelled"}, headers=owner_headers)
        await _place(client, restaurant, food=FOOD_CART)

        response = await client.get(f"/api/mobile/cashier/history/{restaurant.id}", headers=owner_headers)

        assert response.status_code == 200
        statuses = sorted(o["status"] for o in response.json()["orders"])
        assert statuses == ["cancelled", "pos_completed"]

    async def test_waiter_cannot_see_till(self, client, restaurant, make_staff, auth_for) -> None:
        waiter = await make_staff("waiter", restaurant)
        response = await client.get(f"/api/mobile/cashier/history/{restaurant.id}", headers=auth_for(waiter))
        assert response.status_code == 403

    async def test_cashier_of_another_property(self, client, restaurant, hotel, make_staff, auth_for) -> None:
        cashier = await make_staff("cashier", hotel)
        response = await client.get(f"/api/mobile/cashier/orders/{restaurant.id}", headers=auth_for(cashier))
        assert response.status_code == 403
