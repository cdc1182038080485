"""Menu catalogue lookups shared by the guest storefront and manager screens."""

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.errors import NotFoundError
from zamora.models.menu import MenuItem
from zamora.models.property import Property

logger = logging.getLogger(__name__)

MENU_TYPES = ("food", "bar")


async def resolve_property(db: AsyncSession, key: str) -> Property:
    """Find a property by id or by slug (QR codes print either)."""
    try:
        property_id = uuid.UUID(key)
    except ValueError:
        result = await db.execute(select(Property).where(Property.slug == key))
        prop = result.scalar_one_or_none()
    else:
        prop = await db.get(Property, property_id)

    if prop is None or prop.status != "active":
        raise NotFoundError("Property not found")
    return prop


async def list_menu(
    db: AsyncSession,
    property_ids: Iterable[uuid.UUID],
    *,
    menu_type: str | None = None,
    available_only: bool = False,
) -> list[MenuItem]:
    ids = list(property_ids)
    if not ids:
        return []
    query = select(MenuItem).where(MenuItem.property_id.in_(ids))
    if menu_type:
        query = query.where(MenuItem.menu_type == menu_type)
    if available_only:
        query = query.where(MenuItem.is_available.is_(True))
    result = await db.execute(query.order_by(MenuItem.name))
    return list(result.scalars().all())


def categories(items: Iterable[MenuItem]) -> list[str]:
    """Distinct, sorted, non-empty categories of ``items``."""
    return sorted({item.category for item in items if item.category})


async def get_menu_item(
    db: AsyncSession,
    item_id: uuid.UUID,
    *,
    property_id: uuid.UUID | None = None,
    menu_type: str | None = None,
) -> MenuItem:
    """Load one entry; a property or type that does not match counts as missing."""
    item = await db.get(MenuItem, item_id)
    if item is None:
        raise NotFoundError("Menu item not found")
    if property_id is not None and item.property_id != property_id:
        raise NotFoundError("Item not found in this property")
    if menu_type is not None and item.menu_type != menu_type:
        raise NotFoundError("Item not found in this property")
    return item
