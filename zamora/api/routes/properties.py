"""Properties CRUD API routes. Creators become the property's owner."""

import logging
import re
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_property_or_404
from zamora.auth.policy import Action, Caller, Role, authorize
from zamora.models.property import Property
from zamora.schemas.auth import MessageResponse
from zamora.schemas.property import (
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/properties", tags=["properties"])


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "property"


async def _unique_slug(db: AsyncSession, name: str) -> str:
    base = slugify(name)
    result = await db.execute(
        select(Property.slug).where(or_(Property.slug == base, Property.slug.like(f"{base}-%")))
    )
    taken = set(result.scalars().all())
    if base not in taken:
        return base
    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> PropertyResponse:
    """Create a property owned by the caller; a plain ``user`` becomes ``owner``."""
    prop = Property(
        created_by=caller.id,
        slug=await _unique_slug(db, body.name),
        **body.model_dump(),
    )
    db.add(prop)

    if caller.user.role == Role.USER:
        caller.user.role = Role.OWNER
    await db.flush()

    logger.info("Property %s (%s) created by %s", prop.id, prop.slug, caller.id)
    return PropertyResponse.model_validate(prop)


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="List properties the caller owns or works at",
)
async def list_properties(
    property_type: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> PropertyListResponse:
    query = select(Property)
    if not caller.is_admin:
        query = query.where(Property.id.in_(list(caller.property_ids | caller.owned_property_ids)))
    if property_type:
        query = query.where(Property.property_type == property_type)

    result = await db.execute(query.order_by(Property.name))
    properties = list(result.scalars().all())
    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in properties],
        total=len(properties),
    )


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> PropertyResponse:
    prop = await get_property_or_404(db, property_id)
    authorize(caller, Action.PROPERTY_READ, prop.id)
    return PropertyResponse.model_validate(prop)


@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> PropertyResponse:
    prop = await get_property_or_404(db, property_id)
    authorize(caller, Action.PROPERTY_MANAGE, prop.id)

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(prop, field, value)
    await db.flush()
    return PropertyResponse.model_validate(prop)


@router.delete("/{property_id}", response_model=MessageResponse)
async def delete_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> MessageResponse:
    prop = await get_property_or_404(db, property_id)
    authorize(caller, Action.PROPERTY_MANAGE, prop.id)

    await db.delete(prop)
    await db.flush()
    logger.info("Property %s deleted by %s", property_id, caller.id)
    return MessageResponse(message="Property deleted")
