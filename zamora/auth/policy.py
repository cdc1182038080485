"""Authorization policy: one allow-list shared by every route.

A request is allowed when the caller's role grants the action and, for
property-scoped actions, the caller belongs to that property. ``admin`` and
``super_admin`` skip the property check.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import StrEnum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.errors import AuthorizationError
from zamora.models.property import Property, PropertyStaff
from zamora.models.user import User

logger = logging.getLogger(__name__)


class Role(StrEnum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    OWNER = "owner"
    MANAGER = "manager"
    RECEPTIONIST = "receptionist"
    CASHIER = "cashier"
    CHEF = "chef"
    BARTENDER = "bartender"
    WAITER = "waiter"
    HOUSEKEEPING = "housekeeping"
    STAFF = "staff"
    USER = "user"


class Action(StrEnum):
    ADMIN_CONSOLE = "admin:console"
    PROPERTY_READ = "property:read"
    PROPERTY_MANAGE = "property:manage"
    STAFF_MANAGE = "staff:manage"
    ROOMS_READ = "rooms:read"
    ROOMS_MANAGE = "rooms:manage"
    TABLES_MANAGE = "tables:manage"
    MENU_MANAGE = "menu:manage"
    BOOKINGS_MANAGE = "bookings:manage"
    FOLIOS_READ = "folios:read"
    FOLIOS_CHARGE = "folios:charge"
    FOLIOS_SETTLE = "folios:settle"
    ORDERS_READ = "orders:read"
    ORDERS_UPDATE_STATUS = "orders:update_status"
    ORDERS_COMPLETE = "orders:complete"
    CASHIER_READ = "cashier:read"
    PAYMENTS_MANAGE = "payments:manage"
    STOCK_READ = "stock:read"
    STOCK_MANAGE = "stock:manage"
    STOCK_MOVE = "stock:move"
    SERVICE_REQUESTS_HANDLE = "service_requests:handle"
    NOTIFICATIONS_SEND = "notifications:send"
    NOTIFICATIONS_SUBSCRIBE = "notifications:subscribe"
    STATS_READ = "stats:read"


ADMIN_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN})
STAFF_ROLES = frozenset(Role) - {Role.USER}

_MANAGEMENT = {Role.OWNER, Role.MANAGER}
_FRONT_DESK = _MANAGEMENT | {Role.RECEPTIONIST}

ROLE_ACTIONS: dict[Action, frozenset[Role]] = {
    Action.ADMIN_CONSOLE: frozenset(),
    Action.PROPERTY_READ: frozenset(STAFF_ROLES),
    Action.PROPERTY_MANAGE: frozenset({Role.OWNER}),
    Action.STAFF_MANAGE: frozenset(_MANAGEMENT),
    Action.ROOMS_READ: frozenset(_FRONT_DESK | {Role.HOUSEKEEPING, Role.WAITER, Role.CASHIER}),
    Action.ROOMS_MANAGE: frozenset(_FRONT_DESK | {Role.HOUSEKEEPING}),
    Action.TABLES_MANAGE: frozenset(_MANAGEMENT),
    Action.MENU_MANAGE: frozenset(_MANAGEMENT),
    Action.BOOKINGS_MANAGE: frozenset(_FRONT_DESK),
    Action.FOLIOS_READ: frozenset(_FRONT_DESK | {Role.CASHIER}),
    Action.FOLIOS_CHARGE: frozenset(_FRONT_DESK | {Role.CASHIER}),
    Action.FOLIOS_SETTLE: frozenset(_MANAGEMENT | {Role.CASHIER}),
    Action.ORDERS_READ: frozenset(_MANAGEMENT | {Role.CHEF, Role.BARTENDER, Role.WAITER, Role.CASHIER}),
    Action.ORDERS_UPDATE_STATUS: frozenset(_MANAGEMENT | {Role.CHEF, Role.BARTENDER, Role.WAITER}),
    Action.ORDERS_COMPLETE: frozenset(_MANAGEMENT | {Role.CASHIER}),
    Action.CASHIER_READ: frozenset(_MANAGEMENT | {Role.CASHIER}),
    Action.PAYMENTS_MANAGE: frozenset(_MANAGEMENT),
    Action.STOCK_READ: frozenset(_MANAGEMENT | {Role.CHEF, Role.BARTENDER, Role.STAFF}),
    Action.STOCK_MANAGE: frozenset(_MANAGEMENT),
    Action.STOCK_MOVE: frozenset(_MANAGEMENT | {Role.CHEF, Role.BARTENDER, Role.STAFF}),
    Action.SERVICE_REQUESTS_HANDLE: frozenset(_FRONT_DESK | {Role.WAITER, Role.HOUSEKEEPING, Role.STAFF}),
    Action.NOTIFICATIONS_SEND: frozenset(_MANAGEMENT),
    Action.NOTIFICATIONS_SUBSCRIBE: frozenset(STAFF_ROLES),
    Action.STATS_READ: frozenset(_MANAGEMENT),
}


@dataclass(frozen=True)
class Caller:
    """The authenticated user plus the properties they belong to."""

    user: User
    role: str
    property_ids: frozenset[uuid.UUID] = field(default_factory=frozenset)
    owned_property_ids: frozenset[uuid.UUID] = field(default_factory=frozenset)

    @property
    def id(self) -> uuid.UUID:
        return self.user.id

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def belongs_to(self, property_id: uuid.UUID) -> bool:
        return property_id in self.property_ids or property_id in self.owned_property_ids


def is_allowed(caller: Caller, action: Action, property_id: uuid.UUID | None = None) -> bool:
    """Return whether ``caller`` may perform ``action`` (on ``property_id``)."""
    if caller.is_admin:
        return True
    if caller.role not in ROLE_ACTIONS.get(action, frozenset()):
        return False
    if property_id is None:
        return True
    return caller.belongs_to(property_id)


def authorize(caller: Caller, action: Action, property_id: uuid.UUID | None = None) -> None:
    """Raise ``AuthorizationError`` unless :func:`is_allowed` grants access."""
    if is_allowed(caller, action, property_id):
        return
    logger.info(
        "Denied %s for user %s (role=%s, property=%s)",
        action.value,
        caller.id,
        caller.role,
        property_id,
    )
    if caller.role not in ROLE_ACTIONS.get(action, frozenset()):
        raise AuthorizationError("Forbidden: insufficient role")
    raise AuthorizationError("Forbidden: you do not have access to this property")


async def load_caller(db: AsyncSession, user: User) -> Caller:
    """Resolve the property memberships of ``user`` into a :class:`Caller`.

    Owners get their role elevated per property: a user who created a property
    is treated as its ``owner`` even when their profile role says otherwise.
    """
    staff_result = await db.execute(select(PropertyStaff.property_id).where(PropertyStaff.user_id == user.id))
    property_ids = set(staff_result.scalars().all())
    if user.property_id is not None:
        property_ids.add(user.property_id)

    owned_result = await db.execute(select(Property.id).where(Property.created_by == user.id))
    owned_ids = frozenset(owned_result.scalars().all())

    role = user.role or Role.USER
    if owned_ids and role == Role.USER:
        role = Role.OWNER

    return Caller(
        user=user,
        role=role,
        property_ids=frozenset(property_ids),
        owned_property_ids=owned_ids,
    )
