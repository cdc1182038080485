"""Schemas for the platform admin console."""

from pydantic import BaseModel, Field

from zamora.schemas.auth import UserResponse

ROLE_PATTERN = (
    "^(super_admin|admin|owner|manager|receptionist|cashier|chef|bartender|waiter|housekeeping|staff|user)$"
)


class UserRoleUpdate(BaseModel):
    role: str = Field(..., pattern=ROLE_PATTERN)


class UserListResponse(BaseModel):
    items: list[UserResponse]
    total: int
