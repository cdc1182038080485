"""Owner dashboard numbers: today's orders and room occupancy."""

import uuid
from datetime import datetime, time, timezone
from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db
from zamora.auth.policy import Action, Caller, authorize
from zamora.models.order import Order
from zamora.models.property import Property
from zamora.models.room import Room
from zamora.schemas.stats import OwnerStatsResponse, RoomOccupancy
from zamora.services.status import OrderStatus, RoomStatus

router = APIRouter(prefix="/api/mobile/owner", tags=["stats"])


@router.get("/stats", response_model=OwnerStatsResponse)
async def owner_stats(
    property_id: uuid.UUID | None = Query(None, alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> OwnerStatsResponse:
    """Totals across the caller's properties, or one property with ``propertyId``."""
    authorize(caller, Action.STATS_READ, property_id)

    if property_id is not None:
        scope = [property_id]
    elif caller.is_admin:
        result = await db.execute(select(Property.id))
        scope = list(result.scalars().all())
    else:
        scope = list(caller.owned_property_ids | caller.property_ids)

    start_of_day = datetime.combine(datetime.now(timezone.utc).date(), time.min, tzinfo=timezone.utc)
    orders_result = await db.execute(
        select(Order.status, Order.total_amount).where(
            Order.property_id.in_(scope),
            Order.created_at >= start_of_day,
        )
    )
    todays = orders_result.all()

    revenue = sum(
        (Decimal(str(total or 0)) for order_status, total in todays if order_status != OrderStatus.CANCELLED),
        Decimal("0"),
    )
    pending = sum(1 for order_status, _ in todays if order_status in (OrderStatus.PENDING, OrderStatus.PREPARING))

    rooms_result = await db.execute(
        select(Room.status, func.count(Room.id)).where(Room.property_id.in_(scope)).group_by(Room.status)
    )
    by_status = {room_status: count for room_status, count in rooms_result.all()}
    total_rooms = sum(by_status.values())
    occupied = by_status.get(RoomStatus.OCCUPIED, 0)

    return OwnerStatsResponse(
        property_count=len(scope),
        total_orders_today=len(todays),
        pending_orders=pending,
        revenue_today=revenue.quantize(Decimal("0.01")),
        rooms=RoomOccupancy(
            total=total_rooms,
            occupied=occupied,
            available=by_status.get(RoomStatus.AVAILABLE, 0) + by_status.get(RoomStatus.CLEAN, 0),
            dirty=by_status.get(RoomStatus.DIRTY, 0),
            maintenance=by_status.get(RoomStatus.MAINTENANCE, 0),
            occupancy_rate=round(occupied / total_rooms * 100, 1) if total_rooms else 0.0,
        ),
    )
