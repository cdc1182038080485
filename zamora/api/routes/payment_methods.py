"""Manager routes for the payment methods a property accepts."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_property_or_404
from zamora.auth.policy import Action, Caller, authorize
from zamora.errors import NotFoundError, ValidationError
from zamora.models.payment_method import PaymentMethod
from zamora.schemas.payment import (
    MethodBreakdown,
    PaymentMethodCreate,
    PaymentMethodResponse,
    PaymentMethodUpdate,
    PaymentStatsResponse,
    StatsPeriod,
)
from zamora.services import payments as payment_service

router = APIRouter(prefix="/api/mobile/manager/payment-methods", tags=["payment-methods"])


async def _get_method(db: AsyncSession, method_id: uuid.UUID, property_id: uuid.UUID | None) -> PaymentMethod:
    method = await payment_service.get_method(db, method_id)
    if property_id is not None and method.property_id != property_id:
        raise NotFoundError("Payment method not found")
    return method


@router.get("", response_model=list[PaymentMethodResponse])
async def list_payment_methods(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> list[PaymentMethodResponse]:
    authorize(caller, Action.PAYMENTS_MANAGE, property_id)
    methods = await payment_service.list_methods(db, property_id)
    return [PaymentMethodResponse.model_validate(m) for m in methods]


@router.post("", response_model=PaymentMethodResponse, status_code=status.HTTP_201_CREATED)
async def create_payment_method(
    body: PaymentMethodCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> PaymentMethodResponse:
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.PAYMENTS_MANAGE, body.property_id)
    name = body.name.strip()
    if not name:
        raise ValidationError("Name is required")
    await payment_service.ensure_name_free(db, body.property_id, name)

    method = PaymentMethod(property_id=body.property_id, name=name, is_active=True)
    db.add(method)
    await db.flush()
    return PaymentMethodResponse.model_validate(method)


@router.get("/stats", response_model=PaymentStatsResponse)
async def payment_method_stats(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> PaymentStatsResponse:
    """Orders and revenue per payment method; the last 30 days by default."""
    authorize(caller, Action.PAYMENTS_MANAGE, property_id)
    start, end = payment_service.stats_period(start_date, end_date)
    breakdown = await payment_service.payment_stats(db, property_id, start, end)
    return PaymentStatsResponse(
        period=StatsPeriod(start=start, end=end),
        breakdown=[MethodBreakdown.model_validate(entry) for entry in breakdown],
    )


@router.put("/{method_id}", response_model=PaymentMethodResponse)
async def update_payment_method(
    method_id: uuid.UUID,
    body: PaymentMethodUpdate,
    property_id: uuid.UUID | None = Query(None, alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> PaymentMethodResponse:
    """Rename or (de)activate a method."""
    method = await _get_method(db, method_id, property_id)
    authorize(caller, Action.PAYMENTS_MANAGE, method.property_id)

    name = (body.name or "").strip()
    if name and name != method.name:
        await payment_service.ensure_name_free(db, method.property_id, name, exclude_id=method.id)
        method.name = name
    if body.is_active is not None:
        method.is_active = body.is_active
    await db.flush()
    return PaymentMethodResponse.model_validate(method)


@router.delete("/{method_id}")
async def delete_payment_method(
    method_id: uuid.UUID,
    property_id: uuid.UUID | None = Query(None, alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> dict:
    """Remove a method. Orders keep the method name they were paid with."""
    method = await _get_method(db, method_id, property_id)
    authorize(caller, Action.PAYMENTS_MANAGE, method.property_id)
    await db.delete(method)
    await db.flush()
    return {"success": True}
