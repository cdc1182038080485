"""Order placement, totals and the order status workflow.

Food and bar tickets share one table and one workflow; only the service
charge rate differs (``settings.bar_service_charge_rate`` and
``settings.food_service_charge_rate``).
"""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.config import settings
from zamora.errors import NotFoundError, ValidationError
from zamora.models.order import Order, OrderItem
from zamora.models.room import Room
from zamora.schemas.order import CartItem, OrderForm
from zamora.services.status import (
    ACTIVE_ORDER_STATUSES,
    ORDER_TRANSITIONS,
    OrderStatus,
    RoomStatus,
    ensure_transition,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ORDER_TYPES = ("food", "bar")
UNKNOWN_LOCATION = "Walk-in / Unknown"
RECENT_ORDERS_LIMIT = 50
CASHIER_QUEUE_LIMIT = 100
CASHIER_HISTORY_STATUSES = (OrderStatus.POS_COMPLETED, OrderStatus.CANCELLED)

_WAITER_TAG = re.compile(r"\(Waiter: (.*?)\)")


class PricedLine(Protocol):
    unit_price: Decimal
    quantity: int


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    service_charge: Decimal
    grand_total: Decimal


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def service_charge_rate(order_type: str) -> Decimal:
    if order_type == "bar":
        return settings.bar_service_charge_rate
    return settings.food_service_charge_rate


def compute_totals(lines: Iterable[PricedLine], rate: Decimal) -> OrderTotals:
    """Subtotal, service charge and grand total of a cart, rounded to cents.

    ``rate`` is a fraction: ``Decimal("0.10")`` adds a 10% service charge.
    """
    subtotal = sum((Decimal(line.unit_price) * line.quantity for line in lines), Decimal("0"))
    service_charge = subtotal * Decimal(rate)
    return OrderTotals(
        subtotal=_cents(subtotal),
        service_charge=_cents(service_charge),
        grand_total=_cents(subtotal + service_charge),
    )


def order_location(form: OrderForm) -> str:
    if form.table_number:
        return f"Table {form.table_number}"
    return form.room_number or UNKNOWN_LOCATION


def notes_with_waiter(notes: str | None, waiter_name: str | None) -> str | None:
    """Append ``(Waiter: NAME)`` to the notes once."""
    if not waiter_name:
        return notes
    tag = f"(Waiter: {waiter_name})"
    if notes and tag in notes:
        return notes
    return f"{notes}\n{tag}" if notes else tag


def table_label(order: Order) -> str | None:
    """Table number, falling back to the location written at order time."""
    if order.table_number:
        return order.table_number
    location = order.guest_room_number or ""
    if location.lower().startswith("table "):
        return location[len("table ") :].strip()
    return location or None


def waiter_label(order: Order) -> str | None:
    """Waiter name, falling back to the ``(Waiter: NAME)`` tag in the notes."""
    if order.waiter_name:
        return order.waiter_name
    match = _WAITER_TAG.search(order.notes or "")
    return match.group(1) if match else None


def parse_statuses(raw: str | None, default: Sequence[str] = ()) -> list[str]:
    """Split a comma-separated status filter, dropping blanks."""
    if not raw:
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


def _snapshot(line: CartItem) -> OrderItem:
    unit_price = _cents(Decimal(line.unit_price))
    return OrderItem(
        menu_item_id=line.id,
        quantity=line.quantity,
        unit_price=unit_price,
        total_price=_cents(unit_price * line.quantity),
        item_name=line.name,
        item_description=line.description,
        item_ingredients=line.ingredients,
        item_image_url=line.image_url,
        weight=line.weight,
        category=line.category,
        options=list(line.selected_options),
        notes=", ".join(line.selected_options) or None,
    )


async def place_order(
    db: AsyncSession,
    *,
    property_id: uuid.UUID,
    order_type: str,
    cart: Sequence[CartItem],
    form: OrderForm,
    waiter_name: str | None = None,
    created_by: uuid.UUID | None = None,
) -> Order:
    """Persist one order header with a snapshot of every cart line.

    Header and items are flushed together inside the caller's transaction.
    """
    if order_type not in ORDER_TYPES:
        raise ValidationError(f"Unknown order type '{order_type}'")
    if not cart:
        raise ValidationError("Cart is empty")

    totals = compute_totals(cart, service_charge_rate(order_type))
    waiter = form.waiter_name or waiter_name or None

    order = Order(
        property_id=property_id,
        order_type=order_type,
        status=OrderStatus.PENDING,
        subtotal=totals.subtotal,
        service_charge=totals.service_charge,
        total_amount=totals.grand_total,
        payment_method=form.payment_method,
        payment_status="unpaid",
        guest_name=form.name,
        guest_phone=form.phone,
        guest_room_number=order_location(form),
        table_number=form.table_number,
        waiter_name=waiter,
        notes=notes_with_waiter(form.notes, waiter),
        created_by=created_by,
        items=[_snapshot(line) for line in cart],
    )
    db.add(order)
    await db.flush()

    logger.info(
        "Placed %s order %s for property %s (%d items, total %s)",
        order_type,
        order.id,
        property_id,
        len(cart),
        totals.grand_total,
    )
    return order


async def get_order(db: AsyncSession, order_id: uuid.UUID) -> Order:
    order = await db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


async def list_orders(
    db: AsyncSession,
    *,
    property_id: uuid.UUID | None = None,
    property_ids: Iterable[uuid.UUID] | None = None,
    waiter_name: str | None = None,
    status: str | None = None,
    statuses: Sequence[str] | None = None,
    order_type: str | None = None,
    limit: int = RECENT_ORDERS_LIMIT,
) -> list[Order]:
    """Newest orders first, food and bar together unless ``order_type`` is given."""
    query = select(Order)
    if property_id is not None:
        query = query.where(Order.property_id == property_id)
    elif property_ids is not None:
        query = query.where(Order.property_id.in_(list(property_ids)))
    if waiter_name:
        query = query.where(Order.waiter_name == waiter_name)
    if status:
        query = query.where(Order.status == status)
    if statuses:
        query = query.where(Order.status.in_(list(statuses)))
    if order_type:
        query = query.where(Order.order_type == order_type)
    query = query.order_by(Order.created_at.desc()).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def active_queue(db: AsyncSession, property_id: uuid.UUID, order_type: str) -> list[Order]:
    """Kitchen or bar queue: orders still being worked on, oldest first."""
    result = await db.execute(
        select(Order)
        .where(
            Order.property_id == property_id,
            Order.order_type == order_type,
            Order.status.in_(list(ACTIVE_ORDER_STATUSES)),
        )
        .order_by(Order.created_at.asc())
    )
    return list(result.scalars().all())


async def _table_for(db: AsyncSession, order: Order) -> Room | None:
    if not order.table_number:
        return None
    result = await db.execute(
        select(Room).where(Room.property_id == order.property_id, Room.room_number == order.table_number)
    )
    return result.scalar_one_or_none()


async def _table_has_other_open_orders(db: AsyncSession, order: Order) -> bool:
    result = await db.execute(
        select(Order.id)
        .where(
            Order.property_id == order.property_id,
            Order.table_number == order.table_number,
            Order.id != order.id,
            Order.status.in_(list(ACTIVE_ORDER_STATUSES)),
            Order.payment_status == "unpaid",
        )
        .limit(1)
    )
    return result.first() is not None


async def update_order_status(db: AsyncSession, order: Order, target: str) -> Order:
    """Move an order through the kitchen/bar workflow.

    Active statuses mark the order's table ``occupied``. Cancelling frees the
    table only when nothing else is still open on it.
    """
    if not ensure_transition(ORDER_TRANSITIONS, order.status, target, entity="order"):
        return order

    previous = order.status
    order.status = target

    table = await _table_for(db, order)
    if table is not None:
        if target in ACTIVE_ORDER_STATUSES:
            table.status = RoomStatus.OCCUPIED
        elif target == OrderStatus.CANCELLED and not await _table_has_other_open_orders(db, order):
            table.status = RoomStatus.AVAILABLE

    await db.flush()
    logger.info("Order %s: %s -> %s", order.id, previous, target)
    return order


async def complete_at_pos(db: AsyncSession, order: Order, payment_method: str | None = None) -> Order:
    """Cashier close-out: mark paid and send the table to housekeeping."""
    if not ensure_transition(ORDER_TRANSITIONS, order.status, OrderStatus.POS_COMPLETED, entity="order"):
        return order

    order.status = OrderStatus.POS_COMPLETED
    order.payment_status = "paid"
    if payment_method:
        order.payment_method = payment_method

    table = await _table_for(db, order)
    if table is not None:
        table.status = RoomStatus.DIRTY

    await db.flush()
    logger.info("Order %s completed at POS (%s)", order.id, order.payment_method)
    return order
