"""Pydantic v2 request/response schemas for property and staff endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

PROPERTY_TYPE_PATTERN = "^(hotel|lodge|restaurant|bar)$"
STAFF_ROLE_PATTERN = "^(manager|receptionist|cashier|chef|bartender|waiter|housekeeping|staff)$"

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for creating a new property."""

    name: str = Field(..., min_length=1, max_length=255)
    property_type: str = Field(..., pattern=PROPERTY_TYPE_PATTERN)
    description: str | None = None
    location: str | None = Field(None, max_length=255)
    contact_phone: str | None = Field(None, max_length=50)
    admin_notification_phone: str | None = Field(None, max_length=50)


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    property_type: str | None = Field(None, pattern=PROPERTY_TYPE_PATTERN)
    description: str | None = None
    location: str | None = Field(None, max_length=255)
    contact_phone: str | None = Field(None, max_length=50)
    admin_notification_phone: str | None = Field(None, max_length=50)
    status: str | None = Field(None, pattern="^(active|suspended)$")


class StaffAdd(BaseModel):
    """Attach an existing account to a property."""

    property_id: uuid.UUID
    email: EmailStr
    role: str = Field(..., pattern=STAFF_ROLE_PATTERN)


class StaffRoleUpdate(BaseModel):
    role: str = Field(..., pattern=STAFF_ROLE_PATTERN)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertyResponse(BaseModel):
    """Property information returned from the API."""

    id: uuid.UUID
    created_by: uuid.UUID | None = None
    name: str
    slug: str
    property_type: str
    description: str | None = None
    location: str | None = None
    contact_phone: str | None = None
    admin_notification_phone: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyListResponse(BaseModel):
    """List of properties."""

    items: list[PropertyResponse]
    total: int


class StaffMemberResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    user_id: uuid.UUID
    role: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime


class StaffListResponse(BaseModel):
    items: list[StaffMemberResponse]
    total: int
