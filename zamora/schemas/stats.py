"""Schemas for the owner dashboard."""

from decimal import Decimal

from pydantic import BaseModel


class RoomOccupancy(BaseModel):
    total: int
    occupied: int
    available: int
    dirty: int
    maintenance: int
    occupancy_rate: float


class OwnerStatsResponse(BaseModel):
    success: bool = True
    property_count: int
    total_orders_today: int
    pending_orders: int
    revenue_today: Decimal
    rooms: RoomOccupancy
