"""Manager staff routes: who works at a property and in which role."""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_property_or_404
from zamora.auth.policy import Action, Caller, Role, authorize
from zamora.errors import ConflictError, NotFoundError
from zamora.models.property import PropertyStaff
from zamora.models.user import User
from zamora.schemas.auth import MessageResponse
from zamora.schemas.property import StaffAdd, StaffListResponse, StaffMemberResponse, StaffRoleUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mobile/manager/staff", tags=["staff"])


def _member(membership: PropertyStaff, user: User) -> StaffMemberResponse:
    return StaffMemberResponse(
        id=membership.id,
        property_id=membership.property_id,
        user_id=user.id,
        role=membership.role,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        created_at=membership.created_at,
    )


async def _get_membership(db: AsyncSession, staff_id: uuid.UUID) -> tuple[PropertyStaff, User]:
    result = await db.execute(
        select(PropertyStaff, User).join(User, PropertyStaff.user_id == User.id).where(PropertyStaff.id == staff_id)
    )
    row = result.first()
    if row is None:
        raise NotFoundError("Staff member not found")
    return row[0], row[1]


@router.get("", response_model=StaffListResponse)
async def list_staff(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> StaffListResponse:
    authorize(caller, Action.STAFF_MANAGE, property_id)
    result = await db.execute(
        select(PropertyStaff, User)
        .join(User, PropertyStaff.user_id == User.id)
        .where(PropertyStaff.property_id == property_id)
        .order_by(User.first_name, User.last_name)
    )
    members = [_member(membership, user) for membership, user in result.all()]
    return StaffListResponse(items=members, total=len(members))


@router.post("", response_model=StaffMemberResponse, status_code=status.HTTP_201_CREATED)
async def add_staff(
    body: StaffAdd,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> StaffMemberResponse:
    """Attach an existing account to the property and set its role."""
    prop = await get_property_or_404(db, body.property_id)
    authorize(caller, Action.STAFF_MANAGE, prop.id)

    result = await db.execute(select(User).where(func.lower(User.email) == body.email.lower()))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("No account found for this email")

    existing = await db.execute(
        select(PropertyStaff.id).where(PropertyStaff.property_id == prop.id, PropertyStaff.user_id == user.id)
    )
    if existing.first() is not None:
        raise ConflictError("User is already a staff member of this property")

    membership = PropertyStaff(property_id=prop.id, user_id=user.id, role=body.role)
    db.add(membership)
    if user.role not in (Role.ADMIN, Role.SUPER_ADMIN, Role.OWNER):
        user.role = body.role
        user.property_id = prop.id
    await db.flush()

    logger.info("Added %s to property %s as %s", user.id, prop.id, body.role)
    return _member(membership, user)


@router.patch("/{staff_id}", response_model=StaffMemberResponse)
async def change_staff_role(
    staff_id: uuid.UUID,
    body: StaffRoleUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> StaffMemberResponse:
    membership, user = await _get_membership(db, staff_id)
    authorize(caller, Action.STAFF_MANAGE, membership.property_id)

    membership.role = body.role
    if user.property_id == membership.property_id and user.role not in (Role.ADMIN, Role.SUPER_ADMIN, Role.OWNER):
        user.role = body.role
    await db.flush()
    return _member(membership, user)


@router.delete("/{staff_id}", response_model=MessageResponse)
async def remove_staff(
    staff_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> MessageResponse:
    membership, user = await _get_membership(db, staff_id)
    authorize(caller, Action.STAFF_MANAGE, membership.property_id)

    if user.property_id == membership.property_id:
        user.property_id = None
        if user.role not in (Role.ADMIN, Role.SUPER_ADMIN, Role.OWNER):
            user.role = Role.USER
    await db.delete(membership)
    await db.flush()

    logger.info("Removed %s from property %s", user.id, membership.property_id)
    return MessageResponse(message="Staff member removed")
