"""Room, table and room type lookups shared by the hotel and restaurant screens."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.errors import ConflictError, NotFoundError
from zamora.models.room import Room, RoomType


async def ensure_room_number_free(
    db: AsyncSession,
    property_id: uuid.UUID,
    room_number: str,
    exclude_id: uuid.UUID | None = None,
) -> None:
    query = select(Room.id).where(Room.property_id == property_id, Room.room_number == room_number)
    if exclude_id is not None:
        query = query.where(Room.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise ConflictError(f"Room {room_number} already exists", code="DUPLICATE_ROOM")


async def get_room_type(
    db: AsyncSession,
    room_type_id: uuid.UUID,
    property_id: uuid.UUID | None = None,
    *,
    label: str = "Room type",
) -> RoomType:
    """Load a room type; one from another property counts as missing."""
    room_type = await db.get(RoomType, room_type_id)
    if room_type is None or (property_id is not None and room_type.property_id != property_id):
        raise NotFoundError(f"{label} not found")
    return room_type


async def get_room(db: AsyncSession, room_id: uuid.UUID, *, label: str = "Room") -> Room:
    room = await db.get(Room, room_id)
    if room is None:
        raise NotFoundError(f"{label} not found")
    return room


async def rooms_using_type(db: AsyncSession, room_type_id: uuid.UUID) -> int:
    result = await db.execute(select(func.count(Room.id)).where(Room.room_type_id == room_type_id))
    return result.scalar_one()
