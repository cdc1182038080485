"""Menu routes: the guest menu page plus manager and owner catalogue screens."""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_property_or_404
from zamora.auth.policy import Action, Caller, authorize
from zamora.models.menu import MenuItem
from zamora.schemas.menu import (
    AvailabilityToggle,
    GuestMenuResponse,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    MenuListResponse,
    PublicPropertyResponse,
)
from zamora.services import menu as menu_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mobile", tags=["menu"])

# Columns a partial update may not clear
_REQUIRED_FIELDS = frozenset({"name", "price", "is_available", "track_stock", "stock_quantity", "low_stock_threshold"})


def _listing(items: list[MenuItem]) -> MenuListResponse:
    return MenuListResponse(items=[MenuItemResponse.model_validate(item) for item in items], count=len(items))


# ---------------------------------------------------------------------------
# Guest menu (no login)
# ---------------------------------------------------------------------------


@router.get("/menu/{property_key}", response_model=GuestMenuResponse)
async def guest_menu(property_key: str, db: AsyncSession = Depends(get_db)) -> GuestMenuResponse:
    """Available food and drinks of a property, looked up by id or slug."""
    prop = await menu_service.resolve_property(db, property_key)
    food = await menu_service.list_menu(db, [prop.id], menu_type="food", available_only=True)
    bar = await menu_service.list_menu(db, [prop.id], menu_type="bar", available_only=True)
    return GuestMenuResponse(
        property=PublicPropertyResponse.model_validate(prop),
        menu_items=[MenuItemResponse.model_validate(item) for item in food],
        bar_menu_items=[MenuItemResponse.model_validate(item) for item in bar],
        categories=menu_service.categories(food),
        bar_categories=menu_service.categories(bar),
    )


# ---------------------------------------------------------------------------
# Manager catalogue
# ---------------------------------------------------------------------------


@router.get("/manager/menu", response_model=MenuListResponse)
async def list_menu_items(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    menu_type: str | None = Query(None, alias="type", pattern="^(food|bar)$"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> MenuListResponse:
    authorize(caller, Action.MENU_MANAGE, property_id)
    items = await menu_service.list_menu(db, [property_id], menu_type=menu_type)
    return _listing(items)


@router.post("/manager/menu", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    body: MenuItemCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> MenuItemResponse:
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.MENU_MANAGE, body.property_id)

    item = MenuItem(**body.model_dump(), created_by=caller.id)
    db.add(item)
    await db.flush()
    logger.info("Added %s menu item %s (%s) to property %s", item.menu_type, item.name, item.id, item.property_id)
    return MenuItemResponse.model_validate(item)


@router.put("/manager/menu/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: uuid.UUID,
    body: MenuItemUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> MenuItemResponse:
    """Partial update. Orders already placed keep their own copy of the item."""
    item = await menu_service.get_menu_item(db, item_id, property_id=body.property_id, menu_type=body.menu_type)
    authorize(caller, Action.MENU_MANAGE, item.property_id)

    updates = body.model_dump(exclude_unset=True, exclude={"property_id", "menu_type"})
    for field, value in updates.items():
        if value is not None or field not in _REQUIRED_FIELDS:
            setattr(item, field, value)
    await db.flush()
    return MenuItemResponse.model_validate(item)


@router.delete("/manager/menu/{item_id}")
async def delete_menu_item(
    item_id: uuid.UUID,
    property_id: uuid.UUID | None = Query(None, alias="propertyId"),
    menu_type: str | None = Query(None, alias="type", pattern="^(food|bar)$"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> dict:
    item = await menu_service.get_menu_item(db, item_id, property_id=property_id, menu_type=menu_type)
    authorize(caller, Action.MENU_MANAGE, item.property_id)
    await db.delete(item)
    await db.flush()
    logger.info("Removed menu item %s from property %s", item_id, item.property_id)
    return {"success": True}


# ---------------------------------------------------------------------------
# Owner overview
# ---------------------------------------------------------------------------


@router.get("/owner/menu", response_model=MenuListResponse)
async def owner_menu(
    menu_type: str | None = Query(None, alias="type", pattern="^(food|bar)$"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> MenuListResponse:
    """Every menu item across the properties the caller owns."""
    authorize(caller, Action.MENU_MANAGE)
    items = await menu_service.list_menu(db, caller.owned_property_ids, menu_type=menu_type)
    return _listing(items)


@router.post("/owner/menu", response_model=MenuItemResponse)
async def toggle_availability(
    body: AvailabilityToggle,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> MenuItemResponse:
    """Show or hide an item on the guest menu."""
    item = await menu_service.get_menu_item(db, body.item_id, menu_type=body.menu_type)
    authorize(caller, Action.MENU_MANAGE, item.property_id)
    item.is_available = body.is_available
    await db.flush()
    logger.info("Menu item %s is now %s", item.id, "available" if item.is_available else "hidden")
    return MenuItemResponse.model_validate(item)
