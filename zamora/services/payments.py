"""Payment methods and the revenue-by-method breakdown."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.database import utcnow
from zamora.errors import ConflictError, NotFoundError
from zamora.models.order import Order
from zamora.models.payment_method import PaymentMethod

logger = logging.getLogger(__name__)

DEFAULT_STATS_DAYS = 30


@dataclass
class MethodTotals:
    method: str
    count: int = 0
    total_revenue: Decimal = Decimal("0")


def normalize_method(name: str) -> str:
    """``"Mobile_Money "`` and ``"mobile money"`` are the same method."""
    return name.lower().replace("_", " ").strip()


def payment_breakdown(defined: Iterable[str], orders: Iterable[Any]) -> list[MethodTotals]:
    """Order count and revenue per payment method, highest revenue first.

    Methods recorded on orders are matched to the property's defined names
    after :func:`normalize_method`; unmatched names are reported as written.
    Every defined method appears, even with no orders. Orders without a
    payment method are ignored.
    """
    totals: dict[str, MethodTotals] = {}
    by_normalized: dict[str, str] = {}
    for name in defined:
        totals[name] = MethodTotals(method=name)
        by_normalized[normalize_method(name)] = name

    for order in orders:
        raw = order.payment_method
        if not raw:
            continue
        method = by_normalized.get(normalize_method(raw), raw)
        entry = totals.setdefault(method, MethodTotals(method=method))
        entry.count += 1
        entry.total_revenue += Decimal(order.total_amount or 0)

    for entry in totals.values():
        entry.total_revenue = entry.total_revenue.quantize(Decimal("0.01"))
    return sorted(totals.values(), key=lambda entry: entry.total_revenue, reverse=True)


def stats_period(
    start_date: date | None,
    end_date: date | None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Window for the breakdown: the last 30 days unless given, end day inclusive."""
    now = now or utcnow()
    if start_date is not None:
        start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    else:
        start = now - timedelta(days=DEFAULT_STATS_DAYS)
    if end_date is not None:
        end = datetime.combine(end_date, time.max, tzinfo=timezone.utc)
    else:
        end = now
    return start, end


async def list_methods(db: AsyncSession, property_id: uuid.UUID) -> list[PaymentMethod]:
    result = await db.execute(
        select(PaymentMethod).where(PaymentMethod.property_id == property_id).order_by(PaymentMethod.name)
    )
    return list(result.scalars().all())


async def get_method(db: AsyncSession, method_id: uuid.UUID) -> PaymentMethod:
    method = await db.get(PaymentMethod, method_id)
    if method is None:
        raise NotFoundError("Payment method not found")
    return method


async def ensure_name_free(
    db: AsyncSession,
    property_id: uuid.UUID,
    name: str,
    exclude_id: uuid.UUID | None = None,
) -> None:
    query = select(PaymentMethod.id).where(PaymentMethod.property_id == property_id, PaymentMethod.name == name)
    if exclude_id is not None:
        query = query.where(PaymentMethod.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise ConflictError(f"Payment method '{name}' already exists", code="DUPLICATE_PAYMENT_METHOD")


async def payment_stats(
    db: AsyncSession,
    property_id: uuid.UUID,
    start: datetime,
    end: datetime,
) -> list[MethodTotals]:
    methods = await list_methods(db, property_id)
    result = await db.execute(
        select(Order).where(
            Order.property_id == property_id,
            Order.created_at >= start,
            Order.created_at <= end,
            Order.payment_method.is_not(None),
        )
    )
    orders = result.scalars().all()
    breakdown = payment_breakdown([m.name for m in methods], orders)
    logger.info("Payment breakdown for %s: %d orders over %d methods", property_id, len(orders), len(breakdown))
    return breakdown
