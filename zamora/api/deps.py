"""Shared API dependencies: single import point for all routers.

Re-exports database session, authentication and notification dependencies so
that router modules can import everything they need from one place::

    from zamora.api.deps import get_caller, get_db
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from zamora.auth.dependencies import (
    get_caller,
    get_current_active_user,
    get_current_user,
    get_optional_user,
    require_admin,
)
from zamora.database import get_db
from zamora.errors import NotFoundError
from zamora.models.property import Property
from zamora.notifications.notifier import get_notifier

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_optional_user",
    "get_caller",
    "require_admin",
    "get_notifier",
    "get_property_or_404",
]


async def get_property_or_404(db: AsyncSession, property_id: uuid.UUID) -> Property:
    prop = await db.get(Property, property_id)
    if prop is None:
        raise NotFoundError("Property not found")
    return prop
