"""Manager routes for restaurant tables and table types.

Tables are rooms and table types are room types; these routes are the
restaurant-facing view of the same rows.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_property_or_404
from zamora.auth.policy import Action, Caller, authorize
from zamora.errors import ConflictError, NotFoundError
from zamora.models.room import Room, RoomType
from zamora.schemas.room import (
    RoomTypeResponse,
    RoomTypeUpdate,
    TableCreate,
    TableResponse,
    TableTypeCreate,
    TableUpdate,
)
from zamora.services import rooms as room_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mobile/manager", tags=["tables"])


def _table_response(table: Room, room_type: RoomType | None) -> TableResponse:
    response = TableResponse.model_validate(table)
    response.room_type_name = room_type.name if room_type else None
    return response


async def _get_table(db: AsyncSession, table_id: uuid.UUID, property_id: uuid.UUID | None) -> Room:
    table = await room_service.get_room(db, table_id, label="Table")
    if property_id is not None and table.property_id != property_id:
        raise NotFoundError("Table not found")
    return table


async def _type_of(db: AsyncSession, table: Room) -> RoomType | None:
    if table.room_type_id is None:
        return None
    return await db.get(RoomType, table.room_type_id)


# ---------------------------------------------------------------------------
# Table types
# ---------------------------------------------------------------------------


@router.get("/table-types", response_model=list[RoomTypeResponse])
async def list_table_types(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> list[RoomTypeResponse]:
    authorize(caller, Action.TABLES_MANAGE, property_id)
    result = await db.execute(select(RoomType).where(RoomType.property_id == property_id).order_by(RoomType.name))
    return [RoomTypeResponse.model_validate(rt) for rt in result.scalars().all()]


@router.post("/table-types", response_model=RoomTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_table_type(
    body: TableTypeCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> RoomTypeResponse:
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.TABLES_MANAGE, body.property_id)

    table_type = RoomType(**body.model_dump())
    db.add(table_type)
    await db.flush()
    return RoomTypeResponse.model_validate(table_type)


@router.put("/table-types/{type_id}", response_model=RoomTypeResponse)
async def update_table_type(
    type_id: uuid.UUID,
    body: RoomTypeUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> RoomTypeResponse:
    table_type = await room_service.get_room_type(db, type_id, label="Table type")
    authorize(caller, Action.TABLES_MANAGE, table_type.property_id)

    for field, value in body.model_dump(exclude_unset=True).items():
        if value is not None or field in ("description", "category", "image_url"):
            setattr(table_type, field, value)
    await db.flush()
    return RoomTypeResponse.model_validate(table_type)


@router.delete("/table-types/{type_id}")
async def delete_table_type(
    type_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> dict:
    """Remove a table type that no table uses any more."""
    table_type = await room_service.get_room_type(db, type_id, label="Table type")
    authorize(caller, Action.TABLES_MANAGE, table_type.property_id)

    in_use = await room_service.rooms_using_type(db, table_type.id)
    if in_use:
        raise ConflictError(f"{in_use} table(s) still use this type", code="TABLE_TYPE_IN_USE")
    await db.delete(table_type)
    await db.flush()
    return {"success": True}


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


@router.get("/tables", response_model=list[TableResponse])
async def list_tables(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> list[TableResponse]:
    """Every table of the property with its type name, by number."""
    authorize(caller, Action.TABLES_MANAGE, property_id)
    result = await db.execute(
        select(Room, RoomType)
        .outerjoin(RoomType, Room.room_type_id == RoomType.id)
        .where(Room.property_id == property_id)
        .order_by(Room.room_number)
    )
    return [_table_response(table, table_type) for table, table_type in result.all()]


@router.post("/tables", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
async def create_table(
    body: TableCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> TableResponse:
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.TABLES_MANAGE, body.property_id)
    table_type = await room_service.get_room_type(db, body.room_type_id, body.property_id, label="Table type")
    await room_service.ensure_room_number_free(db, body.property_id, body.room_number)

    table = Room(**body.model_dump())
    db.add(table)
    await db.flush()
    logger.info("Added table %s to property %s", table.room_number, table.property_id)
    return _table_response(table, table_type)


@router.get("/tables/{table_id}", response_model=TableResponse)
async def get_table(
    table_id: uuid.UUID,
    property_id: uuid.UUID | None = Query(None, alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> TableResponse:
    table = await _get_table(db, table_id, property_id)
    authorize(caller, Action.TABLES_MANAGE, table.property_id)
    return _table_response(table, await _type_of(db, table))


@router.put("/tables/{table_id}", response_model=TableResponse)
async def update_table(
    table_id: uuid.UUID,
    body: TableUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> TableResponse:
    table = await _get_table(db, table_id, body.property_id)
    authorize(caller, Action.TABLES_MANAGE, table.property_id)

    updates = body.model_dump(exclude_unset=True, exclude={"property_id"})
    if updates.get("room_number") and updates["room_number"] != table.room_number:
        await room_service.ensure_room_number_free(db, table.property_id, updates["room_number"], exclude_id=table.id)
    if updates.get("room_type_id") is not None:
        await room_service.get_room_type(db, updates["room_type_id"], table.property_id, label="Table type")

    for field, value in updates.items():
        if value is not None or field == "notes":
            setattr(table, field, value)
    await db.flush()
    return _table_response(table, await _type_of(db, table))


@router.delete("/tables/{table_id}")
async def delete_table(
    table_id: uuid.UUID,
    property_id: uuid.UUID | None = Query(None, alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> dict:
    table = await _get_table(db, table_id, property_id)
    authorize(caller, Action.TABLES_MANAGE, table.property_id)
    await db.delete(table)
    await db.flush()
    logger.info("Removed table %s from property %s", table.room_number, table.property_id)
    return {"success": True}
