"""Schemas for guest folios and their charges."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ChargeCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    tax_category: str | None = Field(None, max_length=10)


class FolioSettle(BaseModel):
    payment_method: str = Field(..., min_length=1, max_length=50)
    invoice_number: str | None = Field(None, max_length=100)


class FolioItemResponse(BaseModel):
    id: uuid.UUID
    description: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    tax_category: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FolioResponse(BaseModel):
    id: uuid.UUID
    booking_id: uuid.UUID
    property_id: uuid.UUID
    status: str
    total_amount: Decimal
    payment_method: str | None = None
    invoice_number: str | None = None
    items: list[FolioItemResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
