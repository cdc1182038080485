"""Front-desk bookings: room assignment, guest matching and status side effects."""

import logging
import uuid
from datetime import date

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.errors import ConflictError, NotFoundError, ValidationError
from zamora.models.booking import Booking
from zamora.models.guest import Guest
from zamora.models.property import Property
from zamora.models.room import Room
from zamora.schemas.booking import BookingGuest
from zamora.services.status import BOOKING_TRANSITIONS, BookingStatus, RoomStatus, ensure_transition

logger = logging.getLogger(__name__)

BOOKABLE_PROPERTY_TYPES = frozenset({"hotel", "lodge"})

# Room status written when a booking enters one of these statuses
ROOM_STATUS_ON_BOOKING: dict[str, str] = {
    BookingStatus.CHECKED_IN: RoomStatus.OCCUPIED,
    BookingStatus.CHECKED_OUT: RoomStatus.DIRTY,
    BookingStatus.CANCELLED: RoomStatus.AVAILABLE,
}


def room_status_for(booking_status: str) -> str | None:
    """Room status implied by a booking status, or ``None`` for no change."""
    return ROOM_STATUS_ON_BOOKING.get(booking_status)


def ensure_bookable(prop: Property) -> None:
    if prop.property_type not in BOOKABLE_PROPERTY_TYPES:
        raise ValidationError(
            "Bookings are only available for hotels and lodges",
            code="INVALID_PROPERTY_TYPE",
        )


async def find_free_room(
    db: AsyncSession,
    property_id: uuid.UUID,
    room_type_id: uuid.UUID,
    check_in: date,
    check_out: date,
) -> Room:
    """First room of the type with no overlapping, non-cancelled booking.

    Raises:
        NotFoundError: The property has no rooms of this type.
        ConflictError: Every room of the type is taken for these dates.
    """
    rooms_result = await db.execute(
        select(Room)
        .where(Room.property_id == property_id, Room.room_type_id == room_type_id)
        .order_by(Room.room_number)
    )
    rooms = list(rooms_result.scalars().all())
    if not rooms:
        raise NotFoundError("No rooms found for this room type")

    taken_result = await db.execute(
        select(Booking.room_id).where(
            Booking.room_id.in_([room.id for room in rooms]),
            Booking.status != BookingStatus.CANCELLED,
            Booking.status != BookingStatus.CHECKED_OUT,
            Booking.check_in_date < check_out,
            Booking.check_out_date > check_in,
        )
    )
    taken = set(taken_result.scalars().all())

    for room in rooms:
        if room.id not in taken and room.status != RoomStatus.MAINTENANCE:
            return room
    raise ConflictError("No rooms available for the selected dates", code="NO_AVAILABILITY")


async def find_or_create_guest(db: AsyncSession, property_id: uuid.UUID, details: BookingGuest) -> Guest:
    """Match a guest within the property by email or phone, else create one."""
    if not details.email and not details.phone:
        raise ValidationError("Guest email or phone is required")

    matchers = []
    if details.email:
        matchers.append(Guest.email == details.email)
    if details.phone:
        matchers.append(Guest.phone == details.phone)

    result = await db.execute(
        select(Guest).where(Guest.property_id == property_id, or_(*matchers)).limit(1)
    )
    guest = result.scalar_one_or_none()
    if guest is not None:
        return guest

    guest = Guest(
        property_id=property_id,
        first_name=details.first_name,
        last_name=details.last_name,
        email=details.email,
        phone=details.phone,
    )
    db.add(guest)
    await db.flush()
    logger.info("Created guest %s for property %s", guest.id, property_id)
    return guest


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


async def change_booking_status(db: AsyncSession, booking: Booking, target: str) -> Booking:
    """Apply a booking status change and its single room status write.

    Both writes are flushed together and commit with the request.
    """
    if not ensure_transition(BOOKING_TRANSITIONS, booking.status, target, entity="booking"):
        return booking

    previous = booking.status
    booking.status = target

    room_status = room_status_for(target)
    if room_status is not None and booking.room_id is not None:
        room = await db.get(Room, booking.room_id)
        if room is not None:
            room.status = room_status
            logger.info("Room %s -> %s (booking %s %s)", room.room_number, room_status, booking.id, target)

    await db.flush()
    logger.info("Booking %s: %s -> %s", booking.id, previous, target)
    return booking
