"""Front-desk booking routes for hotels and lodges.

A booking picks the first free room of the requested type, matches or
creates the guest, and opens the folio, all in one transaction.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_property_or_404
from zamora.auth.policy import Action, Caller, authorize
from zamora.errors import NotFoundError
from zamora.models.booking import Booking
from zamora.models.room import RoomType
from zamora.schemas.booking import (
    BookingCreate,
    BookingCreatedResponse,
    BookingListResponse,
    BookingResponse,
    BookingUpdate,
)
from zamora.services import bookings as booking_service
from zamora.services.folios import get_or_create_folio
from zamora.services.status import BookingStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/desktop/hotel", tags=["bookings"])


@router.post(
    "/bookings",
    response_model=BookingCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> BookingCreatedResponse:
    prop = await get_property_or_404(db, body.property_id)
    authorize(caller, Action.BOOKINGS_MANAGE, prop.id)
    booking_service.ensure_bookable(prop)

    room_type = await db.get(RoomType, body.room_type_id)
    if room_type is None or room_type.property_id != prop.id:
        raise NotFoundError("Room type not found")

    room = await booking_service.find_free_room(
        db, prop.id, room_type.id, body.check_in_date, body.check_out_date
    )
    guest = await booking_service.find_or_create_guest(db, prop.id, body.guest)

    total_price = body.total_price
    if total_price is None:
        nights = (body.check_out_date - body.check_in_date).days
        total_price = room_type.base_price * nights

    booking = Booking(
        property_id=prop.id,
        room_id=room.id,
        guest_id=guest.id,
        check_in_date=body.check_in_date,
        check_out_date=body.check_out_date,
        status=BookingStatus.CONFIRMED,
        total_price=total_price,
        notes=body.notes,
        created_by=caller.id,
    )
    db.add(booking)
    await db.flush()

    folio = await get_or_create_folio(db, booking)
    logger.info("Booked room %s for guest %s (booking %s)", room.room_number, guest.id, booking.id)

    return BookingCreatedResponse(
        **BookingResponse.model_validate(booking).model_dump(),
        folio_id=folio.id,
        room_number=room.room_number,
    )


@router.get("/bookings", response_model=BookingListResponse, summary="List bookings of a property")
async def list_bookings(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    status_filter: str | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> BookingListResponse:
    authorize(caller, Action.BOOKINGS_MANAGE, property_id)

    query = select(Booking).where(Booking.property_id == property_id)
    if status_filter:
        query = query.where(Booking.status == status_filter)
    result = await db.execute(query.order_by(Booking.check_in_date.desc()))
    bookings = list(result.scalars().all())

    return BookingListResponse(
        items=[BookingResponse.model_validate(b) for b in bookings],
        total=len(bookings),
    )


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> BookingResponse:
    booking = await booking_service.get_booking(db, booking_id)
    authorize(caller, Action.BOOKINGS_MANAGE, booking.property_id)
    return BookingResponse.model_validate(booking)


@router.patch("/bookings/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: uuid.UUID,
    body: BookingUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> BookingResponse:
    """Update notes and/or move the booking along check-in / check-out.

    Status changes also update the booked room in the same transaction.
    """
    booking = await booking_service.get_booking(db, booking_id)
    authorize(caller, Action.BOOKINGS_MANAGE, booking.property_id)

    updates = body.model_dump(exclude_unset=True)
    if "notes" in updates:
        booking.notes = updates["notes"]
    if updates.get("status"):
        await booking_service.change_booking_status(db, booking, updates["status"])

    await db.flush()
    return BookingResponse.model_validate(booking)
