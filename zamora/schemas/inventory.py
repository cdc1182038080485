"""Schemas for stock items, stock movements, snapshots and the low-stock report."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class InventoryItemCreate(BaseModel):
    property_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    sku: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)
    unit: str = Field("unit", max_length=30)
    quantity: Decimal = Field(Decimal("0"), ge=0)
    min_quantity: Decimal = Field(Decimal("0"), ge=0)
    cost_per_unit: Decimal | None = Field(None, ge=0)
    location: str | None = Field(None, max_length=100)
    supplier_name: str | None = Field(None, max_length=255)


class InventoryItemUpdate(BaseModel):
    """Partial update. Quantity changes go through stock transactions."""

    name: str | None = Field(None, min_length=1, max_length=255)
    sku: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)
    unit: str | None = Field(None, max_length=30)
    min_quantity: Decimal | None = Field(None, ge=0)
    cost_per_unit: Decimal | None = Field(None, ge=0)
    location: str | None = Field(None, max_length=100)
    supplier_name: str | None = Field(None, max_length=255)


class InventoryItemResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    name: str
    sku: str | None = None
    category: str | None = None
    unit: str
    quantity: Decimal
    min_quantity: Decimal
    cost_per_unit: Decimal | None = None
    location: str | None = None
    supplier_name: str | None = None
    is_low_stock: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StockSummary(BaseModel):
    total_items: int
    low_stock_count: int
    total_inventory_value: Decimal


class StockListResponse(BaseModel):
    success: bool = True
    items: list[InventoryItemResponse]
    summary: StockSummary


class StockTransactionCreate(BaseModel):
    item_id: uuid.UUID
    type: str = Field(..., pattern="^(in|out|adjustment|waste)$")
    quantity: Decimal = Field(..., ge=0)
    reason: str | None = None
    cost_at_time: Decimal | None = Field(None, ge=0)

    @model_validator(mode="after")
    def _positive_movement(self) -> "StockTransactionCreate":
        # An adjustment may set stock to zero; a movement must move something
        if self.type != "adjustment" and self.quantity <= 0:
            raise ValueError("quantity must be greater than 0")
        return self


class StockTransactionResponse(BaseModel):
    id: uuid.UUID
    item_id: uuid.UUID
    type: str
    quantity: Decimal
    reason: str | None = None
    cost_at_time: Decimal | None = None
    performed_by: uuid.UUID | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StockItemDetailResponse(BaseModel):
    success: bool = True
    item: InventoryItemResponse
    transactions: list[StockTransactionResponse]


class StockMovementResponse(BaseModel):
    success: bool = True
    item: InventoryItemResponse
    transaction: StockTransactionResponse


class StockTransactionListResponse(BaseModel):
    success: bool = True
    transactions: list[StockTransactionResponse]
    count: int


class LowStockItemResponse(BaseModel):
    id: uuid.UUID
    name: str
    category: str | None = None
    unit: str
    quantity: Decimal
    min_quantity: Decimal
    shortage: Decimal
    urgency: str
    supplier_name: str | None = None


class LowStockResponse(BaseModel):
    success: bool = True
    count: int
    items: list[LowStockItemResponse]
    alert_message: str


class SnapshotCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_id: uuid.UUID = Field(..., validation_alias=AliasChoices("propertyId", "property_id"))
    snapshot_type: str = Field(
        "daily",
        pattern="^(daily|weekly|monthly)$",
        validation_alias=AliasChoices("snapshotType", "snapshot_type"),
    )
    notes: str | None = None


class SnapshotCreatedResponse(BaseModel):
    success: bool = True
    snapshot_id: uuid.UUID
    message: str
    snapshot_date: date


class SnapshotSummary(BaseModel):
    id: uuid.UUID
    snapshot_type: str
    snapshot_date: date
    total_value: Decimal
    item_count: int
    notes: str | None = None
    created_at: datetime


class SnapshotListResponse(BaseModel):
    success: bool = True
    snapshots: list[SnapshotSummary]
