"""Folio routes: view a booking's bill, post charges, close and settle."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db
from zamora.auth.policy import Action, Caller, authorize
from zamora.schemas.folio import ChargeCreate, FolioItemResponse, FolioResponse, FolioSettle
from zamora.services import folios as folio_service
from zamora.services.bookings import get_booking

router = APIRouter(prefix="/api/desktop/hotel", tags=["folios"])


@router.get("/bookings/{booking_id}/folio", response_model=FolioResponse)
async def get_booking_folio(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> FolioResponse:
    """The booking's folio, opened on first access."""
    booking = await get_booking(db, booking_id)
    authorize(caller, Action.FOLIOS_READ, booking.property_id)
    folio = await folio_service.get_or_create_folio(db, booking)
    return FolioResponse.model_validate(folio)


@router.post(
    "/folios/{folio_id}/charges",
    response_model=FolioItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_folio_charge(
    folio_id: uuid.UUID,
    body: ChargeCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> FolioItemResponse:
    folio = await folio_service.get_folio(db, folio_id)
    authorize(caller, Action.FOLIOS_CHARGE, folio.property_id)
    item = await folio_service.add_charge(
        db,
        folio.id,
        body.description,
        body.amount,
        quantity=body.quantity,
        tax_category=body.tax_category,
    )
    return FolioItemResponse.model_validate(item)


@router.post("/folios/{folio_id}/close", response_model=FolioResponse)
async def close_folio(
    folio_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> FolioResponse:
    folio = await folio_service.get_folio(db, folio_id)
    authorize(caller, Action.FOLIOS_SETTLE, folio.property_id)
    folio = await folio_service.close_folio(db, folio)
    return FolioResponse.model_validate(folio)


@router.post("/folios/{folio_id}/settle", response_model=FolioResponse)
async def settle_folio(
    folio_id: uuid.UUID,
    body: FolioSettle,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> FolioResponse:
    """Record the payment method and mark the folio paid."""
    folio = await folio_service.get_folio(db, folio_id)
    authorize(caller, Action.FOLIOS_SETTLE, folio.property_id)
    folio = await folio_service.settle_folio(db, folio, body.payment_method, body.invoice_number)
    return FolioResponse.model_validate(folio)
