"""Room and room type routes (restaurant tables are rooms too)."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_property_or_404
from zamora.auth.policy import Action, Caller, authorize
from zamora.models.room import Room, RoomType
from zamora.schemas.room import RoomCreate, RoomResponse, RoomTypeCreate, RoomTypeResponse, RoomUpdate
from zamora.services import rooms as room_service

router = APIRouter(prefix="/api/desktop/hotel", tags=["rooms"])


async def _ensure_room_type(db: AsyncSession, property_id: uuid.UUID, room_type_id: uuid.UUID | None) -> None:
    if room_type_id is not None:
        await room_service.get_room_type(db, room_type_id, property_id)


# ---------------------------------------------------------------------------
# Room types
# ---------------------------------------------------------------------------


@router.post("/room-types", response_model=RoomTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_room_type(
    body: RoomTypeCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> RoomTypeResponse:
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.ROOMS_MANAGE, body.property_id)

    room_type = RoomType(**body.model_dump())
    db.add(room_type)
    await db.flush()
    return RoomTypeResponse.model_validate(room_type)


@router.get("/room-types", response_model=list[RoomTypeResponse])
async def list_room_types(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> list[RoomTypeResponse]:
    authorize(caller, Action.ROOMS_READ, property_id)
    result = await db.execute(select(RoomType).where(RoomType.property_id == property_id).order_by(RoomType.name))
    return [RoomTypeResponse.model_validate(rt) for rt in result.scalars().all()]


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


@router.post("/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    body: RoomCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> RoomResponse:
    """Add a room. Room numbers are unique within a property."""
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.ROOMS_MANAGE, body.property_id)
    await _ensure_room_type(db, body.property_id, body.room_type_id)
    await room_service.ensure_room_number_free(db, body.property_id, body.room_number)

    room = Room(**body.model_dump())
    db.add(room)
    await db.flush()
    return RoomResponse.model_validate(room)


@router.get("/rooms", response_model=list[RoomResponse])
async def list_rooms(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    status_filter: str | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> list[RoomResponse]:
    authorize(caller, Action.ROOMS_READ, property_id)
    query = select(Room).where(Room.property_id == property_id)
    if status_filter:
        query = query.where(Room.status == status_filter)
    result = await db.execute(query.order_by(Room.room_number))
    return [RoomResponse.model_validate(room) for room in result.scalars().all()]


@router.patch("/rooms/{room_id}", response_model=RoomResponse)
async def update_room(
    room_id: uuid.UUID,
    body: RoomUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> RoomResponse:
    """Housekeeping marks rooms clean/dirty; managers renumber or retype."""
    room = await room_service.get_room(db, room_id)
    authorize(caller, Action.ROOMS_MANAGE, room.property_id)

    updates = body.model_dump(exclude_unset=True)
    if updates.get("room_number") and updates["room_number"] != room.room_number:
        await room_service.ensure_room_number_free(db, room.property_id, updates["room_number"], exclude_id=room.id)
    if "room_type_id" in updates:
        await _ensure_room_type(db, room.property_id, updates["room_type_id"])

    for field, value in updates.items():
        if value is not None or field in ("room_type_id", "notes"):
            setattr(room, field, value)

    await db.flush()
    return RoomResponse.model_validate(room)
