"""Schemas for the menu catalogue and the guest-facing menu page."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

MENU_TYPE_PATTERN = "^(food|bar)$"


class MenuItemCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_id: uuid.UUID = Field(..., validation_alias=AliasChoices("propertyId", "property_id"))
    menu_type: str = Field(
        "food",
        pattern=MENU_TYPE_PATTERN,
        validation_alias=AliasChoices("type", "menuType", "menu_type"),
    )
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    price: Decimal = Field(..., ge=0)
    original_price: Decimal | None = Field(None, ge=0)
    discount_badge: str | None = Field(None, max_length=50)
    image_url: str | None = Field(None, max_length=1024)
    is_available: bool = True
    ingredients: str | None = None
    dietary_info: str | None = None
    weight: str | None = Field(None, max_length=50)
    track_stock: bool = False
    stock_quantity: Decimal = Field(Decimal("0"), ge=0)
    low_stock_threshold: Decimal = Field(Decimal("0"), ge=0)
    cost_price: Decimal | None = Field(None, ge=0)


class MenuItemUpdate(BaseModel):
    """Partial update; ``propertyId``/``type``, when sent, must match the item."""

    model_config = ConfigDict(populate_by_name=True)

    property_id: uuid.UUID | None = Field(None, validation_alias=AliasChoices("propertyId", "property_id"))
    menu_type: str | None = Field(
        None,
        pattern=MENU_TYPE_PATTERN,
        validation_alias=AliasChoices("type", "menuType", "menu_type"),
    )
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    price: Decimal | None = Field(None, ge=0)
    original_price: Decimal | None = Field(None, ge=0)
    discount_badge: str | None = Field(None, max_length=50)
    image_url: str | None = Field(None, max_length=1024)
    is_available: bool | None = None
    ingredients: str | None = None
    dietary_info: str | None = None
    weight: str | None = Field(None, max_length=50)
    track_stock: bool | None = None
    stock_quantity: Decimal | None = Field(None, ge=0)
    low_stock_threshold: Decimal | None = Field(None, ge=0)
    cost_price: Decimal | None = Field(None, ge=0)


class AvailabilityToggle(BaseModel):
    """Body of the owner's ``POST /api/mobile/owner/menu``."""

    model_config = ConfigDict(populate_by_name=True)

    item_id: uuid.UUID = Field(..., validation_alias=AliasChoices("itemId", "item_id"))
    menu_type: str | None = Field(
        None,
        pattern=MENU_TYPE_PATTERN,
        validation_alias=AliasChoices("type", "menuType", "menu_type"),
    )
    is_available: bool = Field(..., validation_alias=AliasChoices("isAvailable", "is_available"))


class MenuItemResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    menu_type: str
    name: str
    description: str | None = None
    category: str | None = None
    price: Decimal
    original_price: Decimal | None = None
    discount_badge: str | None = None
    image_url: str | None = None
    is_available: bool
    ingredients: str | None = None
    dietary_info: str | None = None
    weight: str | None = None
    track_stock: bool
    stock_quantity: Decimal
    low_stock_threshold: Decimal
    cost_price: Decimal | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MenuListResponse(BaseModel):
    success: bool = True
    items: list[MenuItemResponse]
    count: int


class PublicPropertyResponse(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    property_type: str
    description: str | None = None
    location: str | None = None
    contact_phone: str | None = None

    model_config = ConfigDict(from_attributes=True)


class GuestMenuResponse(BaseModel):
    """What a guest sees after scanning a table or room QR code."""

    property: PublicPropertyResponse
    menu_items: list[MenuItemResponse] = Field(serialization_alias="menuItems")
    bar_menu_items: list[MenuItemResponse] = Field(serialization_alias="barMenuItems")
    categories: list[str]
    bar_categories: list[str] = Field(serialization_alias="barCategories")
