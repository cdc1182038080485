"""Order routes: guest/waiter carts, kitchen and bar queues, status and POS."""

import logging
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_notifier, get_optional_user, get_property_or_404
from zamora.auth.policy import STAFF_ROLES, Action, Caller, authorize
from zamora.errors import ValidationError
from zamora.models.order import Order
from zamora.models.property import Property
from zamora.models.user import User
from zamora.notifications.notifier import Notifier, render
from zamora.schemas.order import (
    BarOrderRequest,
    BarOrderResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    PlaceOrderRequest,
    PlaceOrderResponse,
    PosCompleteRequest,
)
from zamora.services import orders as order_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["orders"])


def _announce(background_tasks: BackgroundTasks, notifier: Notifier, prop: Property, order: Order) -> None:
    """Queue the admin SMS and staff push for a new order."""
    is_bar = order.order_type == "bar"
    message = render(
        "bar_order" if is_bar else "food_order",
        short_id=str(order.id)[:8],
        location=order.guest_room_number or "N/A",
        total=order.total_amount,
    )
    payload = {
        "title": "New Bar Order" if is_bar else "New Food Order",
        "body": message,
        "url": f"/dashboard/orders?propertyId={prop.id}",
    }
    background_tasks.add_task(notifier.announce, prop.id, message, prop.admin_notification_phone, payload)


def _waiter_name(user: User | None) -> str | None:
    if user is None or user.role not in STAFF_ROLES:
        return None
    return user.display_name


# ---------------------------------------------------------------------------
# Placing orders (guests and waiters)
# ---------------------------------------------------------------------------


@router.post("/orders", response_model=PlaceOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_orders(
    body: PlaceOrderRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
    notifier: Notifier = Depends(get_notifier),
) -> PlaceOrderResponse:
    """Turn a food cart and/or bar cart into one order per kitchen.

    Both orders are written in the request transaction: either every order
    in the request is stored or none is.
    """
    if not body.food_cart and not body.bar_cart:
        raise ValidationError(
            "Cart is empty",
            details={"hint": "Request must contain foodCart or barCart arrays with items."},
        )

    prop = await get_property_or_404(db, body.property_id)
    waiter = _waiter_name(user)

    placed: list[Order] = []
    for order_type, cart in (("food", body.food_cart), ("bar", body.bar_cart)):
        if not cart:
            continue
        order = await order_service.place_order(
            db,
            property_id=prop.id,
            order_type=order_type,
            cart=cart,
            form=body.form_data,
            waiter_name=waiter,
            created_by=user.id if user else None,
        )
        placed.append(order)

    for order in placed:
        _announce(background_tasks, notifier, prop, order)

    return PlaceOrderResponse(
        order_ids=[order.id for order in placed],
        orders=[OrderResponse.model_validate(order) for order in placed],
    )


@router.post("/bar-orders", response_model=BarOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_bar_order(
    body: BarOrderRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
    notifier: Notifier = Depends(get_notifier),
) -> BarOrderResponse:
    """Guest bar order with the 10% service charge."""
    if not body.bar_cart:
        raise ValidationError("Cart is empty")

    prop = await get_property_or_404(db, body.property_id)
    order = await order_service.place_order(
        db,
        property_id=prop.id,
        order_type="bar",
        cart=body.bar_cart,
        form=body.form_data,
        waiter_name=_waiter_name(user),
        created_by=user.id if user else None,
    )
    _announce(background_tasks, notifier, prop, order)
    return BarOrderResponse(order_id=order.id)


# ---------------------------------------------------------------------------
# Staff views
# ---------------------------------------------------------------------------


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    property_id: uuid.UUID | None = Query(None, alias="propertyId"),
    waiter_name: str | None = Query(None, alias="waiterName"),
    status_filter: str | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> OrderListResponse:
    """Latest 50 orders (food and bar), newest first."""
    authorize(caller, Action.ORDERS_READ, property_id)

    scope = None
    if property_id is None and not caller.is_admin:
        scope = caller.property_ids | caller.owned_property_ids

    orders = await order_service.list_orders(
        db,
        property_id=property_id,
        property_ids=scope,
        waiter_name=waiter_name,
        status=status_filter,
    )
    return OrderListResponse(orders=[OrderResponse.model_validate(o) for o in orders], count=len(orders))


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> OrderResponse:
    order = await order_service.get_order(db, order_id)
    authorize(caller, Action.ORDERS_READ, order.property_id)
    return OrderResponse.model_validate(order)


async def _queue(db: AsyncSession, caller: Caller, property_id: uuid.UUID, order_type: str) -> OrderListResponse:
    authorize(caller, Action.ORDERS_READ, property_id)
    orders = await order_service.active_queue(db, property_id, order_type)
    return OrderListResponse(orders=[OrderResponse.model_validate(o) for o in orders], count=len(orders))


@router.get("/mobile/chef/orders/{property_id}", response_model=OrderListResponse)
async def chef_queue(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> OrderListResponse:
    """Food orders the kitchen still has to work on, oldest first."""
    return await _queue(db, caller, property_id, "food")


@router.get("/mobile/bartender/orders/{property_id}", response_model=OrderListResponse)
async def bartender_queue(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> OrderListResponse:
    """Bar orders still open, oldest first."""
    return await _queue(db, caller, property_id, "bar")


# ---------------------------------------------------------------------------
# Status changes
# ---------------------------------------------------------------------------


@router.post("/mobile/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: uuid.UUID,
    body: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> OrderResponse:
    order = await order_service.get_order(db, order_id)
    authorize(caller, Action.ORDERS_UPDATE_STATUS, order.property_id)
    order = await order_service.update_order_status(db, order, body.status)
    return OrderResponse.model_validate(order)


@router.post("/mobile/cashier/orders/{order_id}/pos", response_model=OrderResponse)
async def complete_order_at_pos(
    order_id: uuid.UUID,
    body: PosCompleteRequest,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> OrderResponse:
    """Close out a paid order at the till."""
    order = await order_service.get_order(db, order_id)
    authorize(caller, Action.ORDERS_COMPLETE, order.property_id)
    order = await order_service.complete_at_pos(db, order, body.payment_method)
    return OrderResponse.model_validate(order)


# ---------------------------------------------------------------------------
# Cashier
# ---------------------------------------------------------------------------


def _cashier_view(order: Order) -> OrderResponse:
    response = OrderResponse.model_validate(order)
    response.table_number = order_service.table_label(order)
    response.waiter_name = order_service.waiter_label(order)
    return response


@router.get("/mobile/cashier/orders/{property_id}", response_model=OrderListResponse)
async def cashier_orders(
    property_id: uuid.UUID,
    status_filter: str | None = Query(None, alias="status"),
    order_type: str | None = Query(None, alias="type", pattern="^(food|bar)$"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> OrderListResponse:
    """The till's view: latest 100 orders, newest first.

    ``status`` takes a comma-separated list, e.g. ``ready,delivered``.
    """
    authorize(caller, Action.CASHIER_READ, property_id)
    orders = await order_service.list_orders(
        db,
        property_id=property_id,
        statuses=order_service.parse_statuses(status_filter),
        order_type=order_type,
        limit=order_service.CASHIER_QUEUE_LIMIT,
    )
    return OrderListResponse(orders=[_cashier_view(o) for o in orders], count=len(orders))


@router.get("/mobile/cashier/history/{property_id}", response_model=OrderListResponse)
async def cashier_history(
    property_id: uuid.UUID,
    status_filter: str | None = Query(None, alias="status"),
    limit: int = Query(order_service.RECENT_ORDERS_LIMIT, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> OrderListResponse:
    """Closed-out and cancelled orders, food and bar together."""
    authorize(caller, Action.CASHIER_READ, property_id)
    orders = await order_service.list_orders(
        db,
        property_id=property_id,
        statuses=order_service.parse_statuses(status_filter, order_service.CASHIER_HISTORY_STATUSES),
        limit=limit,
    )
    return OrderListResponse(orders=[_cashier_view(o) for o in orders], count=len(orders))
