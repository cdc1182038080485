"""Platform admin console: every user and property, across tenants."""

import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_db, require_admin
from zamora.auth.policy import Caller, Role
from zamora.errors import AuthorizationError, NotFoundError, ValidationError
from zamora.models.property import Property
from zamora.models.user import User
from zamora.schemas.admin import UserListResponse, UserRoleUpdate
from zamora.schemas.auth import MessageResponse, UserResponse
from zamora.schemas.property import PropertyListResponse, PropertyResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


async def _get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("/users", response_model=UserListResponse)
async def list_users(
    role: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    admin: Caller = Depends(require_admin),
) -> UserListResponse:
    query = select(User)
    if role:
        query = query.where(User.role == role)
    result = await db.execute(query.order_by(User.created_at.desc()))
    users = list(result.scalars().all())
    return UserListResponse(items=[UserResponse.model_validate(u) for u in users], total=len(users))


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def change_user_role(
    user_id: uuid.UUID,
    body: UserRoleUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Caller = Depends(require_admin),
) -> UserResponse:
    """Only a ``super_admin`` may grant or revoke admin roles."""
    user = await _get_user(db, user_id)
    touches_admin = body.role in (Role.ADMIN, Role.SUPER_ADMIN) or user.role in (Role.ADMIN, Role.SUPER_ADMIN)
    if touches_admin and admin.role != Role.SUPER_ADMIN:
        raise AuthorizationError("Forbidden: only a super admin can change admin roles")

    logger.info("Admin %s changed role of %s: %s -> %s", admin.id, user.id, user.role, body.role)
    user.role = body.role
    await db.flush()
    return UserResponse.model_validate(user)


@router.post("/users/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    admin: Caller = Depends(require_admin),
) -> UserResponse:
    user = await _get_user(db, user_id)
    if user.id == admin.id:
        raise ValidationError("You cannot deactivate your own account")
    user.is_active = False
    await db.flush()
    logger.info("Admin %s deactivated user %s", admin.id, user.id)
    return UserResponse.model_validate(user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    admin: Caller = Depends(require_admin),
) -> MessageResponse:
    user = await _get_user(db, user_id)
    if user.id == admin.id:
        raise ValidationError("You cannot delete your own account")
    await db.delete(user)
    await db.flush()
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return MessageResponse(message="User deleted")


@router.get("/properties", response_model=PropertyListResponse)
async def list_all_properties(
    db: AsyncSession = Depends(get_db),
    admin: Caller = Depends(require_admin),
) -> PropertyListResponse:
    result = await db.execute(select(Property).order_by(Property.created_at.desc()))
    properties = list(result.scalars().all())
    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in properties],
        total=len(properties),
    )
