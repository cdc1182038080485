"""Schemas for guest service requests."""

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class ServiceRequestCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_id: uuid.UUID = Field(..., validation_alias=AliasChoices("propertyId", "property_id"))
    type: str = Field("call_waiter", max_length=50)
    table_number: str | None = Field(
        None, max_length=50, validation_alias=AliasChoices("tableNumber", "table_number")
    )
    room_number: str | None = Field(None, max_length=50, validation_alias=AliasChoices("roomNumber", "room_number"))
    notes: str | None = None

    @model_validator(mode="after")
    def _require_location(self) -> "ServiceRequestCreate":
        if not self.table_number and not self.room_number:
            raise ValueError("A table number or room number is required")
        return self


class ServiceRequestResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    type: str
    status: str
    table_number: str | None = None
    room_number: str | None = None
    notes: str | None = None
    resolved_by: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ServiceRequestListResponse(BaseModel):
    success: bool = True
    requests: list[ServiceRequestResponse]
    count: int
