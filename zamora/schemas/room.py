"""Schemas for rooms, room types and the restaurant tables built on them."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

ROOM_STATUS_PATTERN = "^(available|clean|dirty|occupied|maintenance)$"


class RoomTypeCreate(BaseModel):
    property_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    base_price: Decimal = Field(Decimal("0"), ge=0)
    capacity: int = Field(2, ge=1)
    category: str | None = Field(None, max_length=50)
    image_url: str | None = Field(None, max_length=1024)


class RoomTypeResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    name: str
    description: str | None = None
    base_price: Decimal
    capacity: int
    category: str | None = None
    image_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class RoomCreate(BaseModel):
    property_id: uuid.UUID
    room_number: str = Field(..., min_length=1, max_length=50)
    room_type_id: uuid.UUID | None = None
    status: str = Field("available", pattern=ROOM_STATUS_PATTERN)
    notes: str | None = None


class RoomUpdate(BaseModel):
    room_number: str | None = Field(None, min_length=1, max_length=50)
    room_type_id: uuid.UUID | None = None
    status: str | None = Field(None, pattern=ROOM_STATUS_PATTERN)
    notes: str | None = None


class RoomResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    room_type_id: uuid.UUID | None = None
    room_number: str
    status: str
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Restaurant tables
# ---------------------------------------------------------------------------


class RoomTypeUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    base_price: Decimal | None = Field(None, ge=0)
    capacity: int | None = Field(None, ge=1)
    category: str | None = Field(None, max_length=50)
    image_url: str | None = Field(None, max_length=1024)


class TableCreate(BaseModel):
    """A table needs a number and a table type."""

    model_config = ConfigDict(populate_by_name=True)

    property_id: uuid.UUID = Field(..., validation_alias=AliasChoices("propertyId", "property_id"))
    room_number: str = Field(..., min_length=1, max_length=50)
    room_type_id: uuid.UUID
    status: str = Field("available", pattern=ROOM_STATUS_PATTERN)
    notes: str | None = None


class TableUpdate(RoomUpdate):
    model_config = ConfigDict(populate_by_name=True)

    property_id: uuid.UUID | None = Field(None, validation_alias=AliasChoices("propertyId", "property_id"))


class TableResponse(RoomResponse):
    room_type_name: str | None = None


class TableTypeCreate(RoomTypeCreate):
    model_config = ConfigDict(populate_by_name=True)

    property_id: uuid.UUID = Field(..., validation_alias=AliasChoices("propertyId", "property_id"))
    category: str | None = Field("table", max_length=50)
