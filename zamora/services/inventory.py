"""Stock levels: low-stock triage, the stock movement ledger and snapshots."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.database import utcnow
from zamora.errors import NotFoundError, ValidationError
from zamora.models.inventory import InventoryItem, InventoryTransaction, StockSnapshot
from zamora.models.menu import MenuItem

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
RECENT_TRANSACTIONS_LIMIT = 20


class Urgency(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


URGENCY_RANK = {Urgency.CRITICAL: 0, Urgency.HIGH: 1, Urgency.MEDIUM: 2}


@dataclass(frozen=True)
class LowStockEntry:
    item: Any
    quantity: Decimal
    min_quantity: Decimal
    shortage: Decimal
    urgency: Urgency


def _as_decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def is_low_stock(item: Any) -> bool:
    return _as_decimal(item.quantity) <= _as_decimal(item.min_quantity)


def classify(quantity: Decimal, min_quantity: Decimal) -> Urgency:
    if quantity == 0:
        return Urgency.CRITICAL
    if quantity <= min_quantity / 2:
        return Urgency.HIGH
    return Urgency.MEDIUM


def triage_low_stock(items: Iterable[Any]) -> list[LowStockEntry]:
    """Items at or below their minimum, most urgent first.

    Anything with ``quantity`` and ``min_quantity`` attributes works; missing
    values count as zero. Ties keep their input order.
    """
    entries = []
    for item in items:
        quantity = _as_decimal(item.quantity)
        min_quantity = _as_decimal(item.min_quantity)
        if quantity > min_quantity:
            continue
        entries.append(
            LowStockEntry(
                item=item,
                quantity=quantity,
                min_quantity=min_quantity,
                shortage=min_quantity - quantity,
                urgency=classify(quantity, min_quantity),
            )
        )
    entries.sort(key=lambda entry: (URGENCY_RANK[entry.urgency], -entry.shortage))
    return entries


def alert_message(count: int) -> str:
    if count == 0:
        return "All stock levels are healthy"
    return f"{count} item(s) need restocking"


def inventory_value(items: Iterable[InventoryItem]) -> Decimal:
    return sum(
        (_as_decimal(item.quantity) * _as_decimal(item.cost_per_unit) for item in items),
        ZERO,
    ).quantize(Decimal("0.01"))


async def list_items(
    db: AsyncSession,
    property_id: uuid.UUID,
    *,
    category: str | None = None,
    search: str | None = None,
) -> list[InventoryItem]:
    query = select(InventoryItem).where(InventoryItem.property_id == property_id)
    if category:
        query = query.where(InventoryItem.category == category)
    if search:
        query = query.where(InventoryItem.name.ilike(f"%{search}%"))
    result = await db.execute(query.order_by(InventoryItem.name))
    return list(result.scalars().all())


async def get_item(db: AsyncSession, item_id: uuid.UUID, *, for_update: bool = False) -> InventoryItem:
    query = select(InventoryItem).where(InventoryItem.id == item_id)
    if for_update:
        # Re-read under the lock even when the row is already in the session
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError("Inventory item not found")
    return item


async def recent_transactions(
    db: AsyncSession,
    *,
    item_id: uuid.UUID | None = None,
    property_id: uuid.UUID | None = None,
    limit: int = RECENT_TRANSACTIONS_LIMIT,
) -> list[InventoryTransaction]:
    query = select(InventoryTransaction)
    if item_id is not None:
        query = query.where(InventoryTransaction.item_id == item_id)
    if property_id is not None:
        query = query.join(InventoryItem, InventoryTransaction.item_id == InventoryItem.id).where(
            InventoryItem.property_id == property_id
        )
    query = query.order_by(InventoryTransaction.created_at.desc()).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


def apply_movement(current: Decimal, movement_type: str, quantity: Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(new_quantity, signed_delta)`` for a stock movement.

    ``in`` adds; ``out`` and ``waste`` subtract, never below zero;
    ``adjustment`` sets the counted quantity.
    """
    if movement_type == "in":
        new_quantity = current + quantity
    elif movement_type in ("out", "waste"):
        new_quantity = max(current - quantity, ZERO)
    elif movement_type == "adjustment":
        new_quantity = quantity
    else:
        raise ValidationError(f"Unknown transaction type '{movement_type}'")
    return new_quantity, new_quantity - current


async def record_movement(
    db: AsyncSession,
    item: InventoryItem,
    *,
    movement_type: str,
    quantity: Decimal,
    reason: str | None = None,
    cost_at_time: Decimal | None = None,
    performed_by: uuid.UUID | None = None,
) -> InventoryTransaction:
    """Apply a movement to ``item`` and write its ledger row in the same flush."""
    current = _as_decimal(item.quantity)
    new_quantity, delta = apply_movement(current, movement_type, _as_decimal(quantity))

    item.quantity = new_quantity
    transaction = InventoryTransaction(
        item_id=item.id,
        type=movement_type,
        quantity=delta,
        reason=reason,
        cost_at_time=cost_at_time if cost_at_time is not None else item.cost_per_unit,
        performed_by=performed_by,
    )
    db.add(transaction)
    await db.flush()

    logger.info("Stock %s on %s (%s): %s -> %s", movement_type, item.name, item.id, current, new_quantity)
    if is_low_stock(item):
        logger.warning("Item %s (%s) is at or below its minimum: %s", item.name, item.id, new_quantity)
    return transaction


# ---------------------------------------------------------------------------
# Stock snapshots
# ---------------------------------------------------------------------------

SNAPSHOT_TYPES = ("daily", "weekly", "monthly")
SNAPSHOT_LIST_LIMIT = 30


@dataclass(frozen=True)
class SnapshotContents:
    lines: list[dict[str, Any]]
    total_value: Decimal


def snapshot_lines(inventory_items: Iterable[Any], bar_items: Iterable[Any] = ()) -> SnapshotContents:
    """Freeze stock lines into JSON-safe dicts and total their value.

    Inventory items count ``quantity * cost_per_unit``; stock-tracked bar
    items count ``stock_quantity * cost_price``. Numbers are stored as strings.
    """
    lines: list[dict[str, Any]] = []
    total = ZERO
    for item in inventory_items:
        quantity = _as_decimal(item.quantity)
        cost = _as_decimal(item.cost_per_unit)
        total += quantity * cost
        lines.append(
            {
                "item_id": str(item.id),
                "name": item.name,
                "quantity": str(quantity),
                "unit": item.unit,
                "cost_per_unit": str(cost),
                "type": "inventory",
            }
        )
    for item in bar_items:
        quantity = _as_decimal(item.stock_quantity)
        cost = _as_decimal(item.cost_price)
        total += quantity * cost
        lines.append(
            {
                "item_id": str(item.id),
                "name": item.name,
                "quantity": str(quantity),
                "unit": "unit",
                "cost_per_unit": str(cost),
                "type": "bar",
            }
        )
    return SnapshotContents(lines=lines, total_value=total.quantize(Decimal("0.01")))


async def take_snapshot(
    db: AsyncSession,
    property_id: uuid.UUID,
    snapshot_type: str,
    *,
    notes: str | None = None,
    created_by: uuid.UUID | None = None,
    on_date: date | None = None,
) -> StockSnapshot:
    """Record today's stock for ``property_id``.

    A second snapshot of the same type on the same day replaces the first.
    """
    if snapshot_type not in SNAPSHOT_TYPES:
        raise ValidationError(f"Invalid snapshot type. Use: {', '.join(SNAPSHOT_TYPES)}")

    snapshot_date = on_date or utcnow().date()
    inventory_items = await list_items(db, property_id)
    result = await db.execute(
        select(MenuItem)
        .where(
            MenuItem.property_id == property_id,
            MenuItem.menu_type == "bar",
            MenuItem.track_stock.is_(True),
        )
        .order_by(MenuItem.name)
    )
    contents = snapshot_lines(inventory_items, result.scalars().all())

    result = await db.execute(
        select(StockSnapshot).where(
            StockSnapshot.property_id == property_id,
            StockSnapshot.snapshot_type == snapshot_type,
            StockSnapshot.snapshot_date == snapshot_date,
        )
    )
    snapshot = result.scalar_one_or_none()
    if snapshot is None:
        snapshot = StockSnapshot(property_id=property_id, snapshot_type=snapshot_type, snapshot_date=snapshot_date)
        db.add(snapshot)

    snapshot.items = contents.lines
    snapshot.total_value = contents.total_value
    snapshot.notes = notes or f"{snapshot_type.capitalize()} opening stock"
    snapshot.created_by = created_by
    await db.flush()

    logger.info(
        "%s snapshot %s for property %s: %d lines worth %s",
        snapshot_type.capitalize(),
        snapshot.id,
        property_id,
        len(contents.lines),
        contents.total_value,
    )
    return snapshot


async def list_snapshots(
    db: AsyncSession,
    property_id: uuid.UUID,
    *,
    snapshot_type: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = SNAPSHOT_LIST_LIMIT,
) -> list[StockSnapshot]:
    query = select(StockSnapshot).where(StockSnapshot.property_id == property_id)
    if snapshot_type:
        query = query.where(StockSnapshot.snapshot_type == snapshot_type)
    if start_date:
        query = query.where(StockSnapshot.snapshot_date >= start_date)
    if end_date:
        query = query.where(StockSnapshot.snapshot_date <= end_date)
    query = query.order_by(StockSnapshot.snapshot_date.desc(), StockSnapshot.created_at.desc()).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())
