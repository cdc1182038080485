"""Schemas for payment methods and the revenue-by-method report."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PaymentMethodCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_id: uuid.UUID = Field(..., validation_alias=AliasChoices("propertyId", "property_id"))
    name: str = Field(..., min_length=1, max_length=100)


class PaymentMethodUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, min_length=1, max_length=100)
    is_active: bool | None = Field(None, validation_alias=AliasChoices("is_active", "isActive"))


class PaymentMethodResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MethodBreakdown(BaseModel):
    method: str
    count: int
    total_revenue: Decimal

    model_config = ConfigDict(from_attributes=True)


class StatsPeriod(BaseModel):
    start: datetime
    end: datetime


class PaymentStatsResponse(BaseModel):
    period: StatsPeriod
    breakdown: list[MethodBreakdown]
