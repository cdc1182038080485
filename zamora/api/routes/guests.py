"""Guest directory routes, scoped to one property."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_property_or_404
from zamora.auth.policy import Action, Caller, authorize
from zamora.models.guest import Guest
from zamora.schemas.guest import GuestCreate, GuestListResponse, GuestResponse

router = APIRouter(prefix="/api/desktop/hotel", tags=["guests"])


@router.get("/guests", response_model=GuestListResponse)
async def list_guests(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    search: str | None = Query(None, description="Match name, email or phone"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> GuestListResponse:
    authorize(caller, Action.BOOKINGS_MANAGE, property_id)

    query = select(Guest).where(Guest.property_id == property_id)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Guest.first_name.ilike(pattern),
                Guest.last_name.ilike(pattern),
                Guest.email.ilike(pattern),
                Guest.phone.ilike(pattern),
            )
        )
    result = await db.execute(query.order_by(Guest.last_name, Guest.first_name))
    guests = list(result.scalars().all())
    return GuestListResponse(items=[GuestResponse.model_validate(g) for g in guests], total=len(guests))


@router.post("/guests", response_model=GuestResponse, status_code=status.HTTP_201_CREATED)
async def create_guest(
    body: GuestCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> GuestResponse:
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.BOOKINGS_MANAGE, body.property_id)

    guest = Guest(**body.model_dump())
    db.add(guest)
    await db.flush()
    return GuestResponse.model_validate(guest)
