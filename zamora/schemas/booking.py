"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingGuest(BaseModel):
    """Guest details sent with a booking; matched by email or phone."""

    first_name: str = Field("", max_length=100)
    last_name: str = Field("", max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)


class BookingCreate(BaseModel):
    """Schema for creating a new booking."""

    property_id: uuid.UUID
    room_type_id: uuid.UUID
    check_in_date: date
    check_out_date: date
    guest: BookingGuest
    total_price: Decimal | None = Field(None, ge=0)
    notes: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreate":
        """Validate that check_out_date is strictly after check_in_date."""
        if self.check_out_date <= self.check_in_date:
            raise ValueError("check_out_date must be after check_in_date")
        return self


class BookingUpdate(BaseModel):
    """Schema for partially updating a booking. All fields optional."""

    status: str | None = Field(
        None,
        pattern="^(pending|confirmed|checked_in|checked_out|cancelled)$",
    )
    notes: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """Standard booking response returned from CRUD operations."""

    id: uuid.UUID
    property_id: uuid.UUID
    room_id: uuid.UUID | None = None
    guest_id: uuid.UUID | None = None
    check_in_date: date
    check_out_date: date
    status: str
    total_price: Decimal | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingCreatedResponse(BookingResponse):
    """Booking plus the identifiers the front desk needs next."""

    folio_id: uuid.UUID
    room_number: str


class BookingListResponse(BaseModel):
    """List of bookings."""

    items: list[BookingResponse]
    total: int
