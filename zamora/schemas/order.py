"""Schemas for guest/waiter carts and the orders built from them.

Carts come from the mobile and web clients in camelCase; both camelCase and
snake_case keys are accepted.
"""

import json
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CartItem(BaseModel):
    """One cart line as the client holds it."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str = Field("Unknown Item", validation_alias=AliasChoices("name", "item_name", "title"))
    price: Decimal | None = Field(None, ge=0)
    base_price: Decimal | None = Field(None, ge=0, validation_alias=AliasChoices("base_price", "basePrice"))
    quantity: int = Field(..., ge=1)
    description: str | None = None
    image_url: str | None = Field(None, validation_alias=AliasChoices("image_url", "imageUrl"))
    ingredients: str | None = None
    weight: str | None = None
    category: str | None = None
    selected_options: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("selectedOptions", "selected_options", "options"),
    )

    @field_validator("id", "weight", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @model_validator(mode="after")
    def _require_price(self) -> "CartItem":
        if self.price is None and self.base_price is None:
            raise ValueError("Each cart item needs a price or base_price")
        return self

    @property
    def unit_price(self) -> Decimal:
        return self.price if self.price is not None else self.base_price


class OrderForm(BaseModel):
    """Guest/waiter details captured with the cart."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    phone: str | None = None
    room_number: str | None = Field(None, validation_alias=AliasChoices("roomNumber", "room_number", "room"))
    table_number: str | None = Field(
        None,
        validation_alias=AliasChoices("tableNumber", "table_number", "table", "tableNo"),
    )
    waiter_name: str | None = Field(None, validation_alias=AliasChoices("waiterName", "waiter_name", "waiter"))
    payment_method: str | None = Field(None, validation_alias=AliasChoices("paymentMethod", "payment_method"))
    notes: str | None = None

    @field_validator("room_number", "table_number", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value or None
        return str(value)


def _parse_form(value: Any) -> Any:
    # Some clients send formData as a JSON string
    if value is None:
        return {}
    if isinstance(value, str):
        try:
            return json.loads(value) or {}
        except json.JSONDecodeError:
            return {}
    return value


class PlaceOrderRequest(BaseModel):
    """Body of ``POST /api/orders``; may be wrapped as ``{"order": {...}}``."""

    model_config = ConfigDict(populate_by_name=True)

    property_id: uuid.UUID = Field(..., validation_alias=AliasChoices("propertyId", "property_id"))
    food_cart: list[CartItem] = Field(default_factory=list, validation_alias=AliasChoices("foodCart", "food_cart"))
    bar_cart: list[CartItem] = Field(default_factory=list, validation_alias=AliasChoices("barCart", "bar_cart"))
    form_data: OrderForm = Field(default_factory=OrderForm, validation_alias=AliasChoices("formData", "form_data"))

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("order"), dict):
            data = data["order"]
        return data

    @field_validator("food_cart", "bar_cart", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return value or []

    @field_validator("form_data", mode="before")
    @classmethod
    def _form(cls, value: Any) -> Any:
        return _parse_form(value)


class BarOrderRequest(BaseModel):
    """Body of ``POST /api/bar-orders``."""

    model_config = ConfigDict(populate_by_name=True)

    property_id: uuid.UUID = Field(..., validation_alias=AliasChoices("propertyId", "property_id"))
    bar_cart: list[CartItem] = Field(default_factory=list, validation_alias=AliasChoices("barCart", "bar_cart"))
    form_data: OrderForm = Field(default_factory=OrderForm, validation_alias=AliasChoices("formData", "form_data"))

    @field_validator("bar_cart", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return value or []

    @field_validator("form_data", mode="before")
    @classmethod
    def _form(cls, value: Any) -> Any:
        return _parse_form(value)


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., pattern="^(pending|preparing|ready|delivered|cancelled)$")


class PosCompleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payment_method: str | None = Field(None, validation_alias=AliasChoices("paymentMethod", "payment_method"))


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class OrderItemResponse(BaseModel):
    id: uuid.UUID
    menu_item_id: str | None = None
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    item_name: str
    item_description: str | None = None
    item_ingredients: str | None = None
    item_image_url: str | None = None
    weight: str | None = None
    category: str | None = None
    options: list = []
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    order_type: str
    status: str
    subtotal: Decimal
    service_charge: Decimal
    total_amount: Decimal
    payment_method: str | None = None
    payment_status: str
    guest_name: str | None = None
    guest_phone: str | None = None
    guest_room_number: str | None = None
    table_number: str | None = None
    waiter_name: str | None = None
    notes: str | None = None
    items: list[OrderItemResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PlaceOrderResponse(BaseModel):
    success: bool = True
    order_ids: list[uuid.UUID] = Field(serialization_alias="orderIds")
    orders: list[OrderResponse]


class BarOrderResponse(BaseModel):
    success: bool = True
    order_id: uuid.UUID = Field(serialization_alias="orderId")


class OrderListResponse(BaseModel):
    success: bool = True
    orders: list[OrderResponse]
    count: int
