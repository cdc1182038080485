"""Status vocabularies and their legal transitions.

Every status write in the app goes through :func:`ensure_transition`, so a
booking cannot jump from ``cancelled`` back to ``checked_in`` and a paid
order cannot be reopened.
"""

from enum import StrEnum

from zamora.errors import ConflictError


class BookingStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


class OrderStatus(StrEnum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    POS_COMPLETED = "pos_completed"


class FolioStatus(StrEnum):
    OPEN = "open"
    CLOSED = "closed"
    PAID = "paid"


class ServiceRequestStatus(StrEnum):
    PENDING = "pending"
    RESOLVED = "resolved"


class RoomStatus(StrEnum):
    AVAILABLE = "available"
    CLEAN = "clean"
    DIRTY = "dirty"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


BOOKING_TRANSITIONS: dict[str, frozenset[str]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CHECKED_IN, BookingStatus.CANCELLED}),
    BookingStatus.CHECKED_IN: frozenset({BookingStatus.CHECKED_OUT}),
    BookingStatus.CHECKED_OUT: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

ORDER_TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED, OrderStatus.POS_COMPLETED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED, OrderStatus.POS_COMPLETED}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.POS_COMPLETED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.POS_COMPLETED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.POS_COMPLETED: frozenset(),
}

FOLIO_TRANSITIONS: dict[str, frozenset[str]] = {
    FolioStatus.OPEN: frozenset({FolioStatus.CLOSED, FolioStatus.PAID}),
    FolioStatus.CLOSED: frozenset({FolioStatus.OPEN, FolioStatus.PAID}),
    FolioStatus.PAID: frozenset(),
}

SERVICE_REQUEST_TRANSITIONS: dict[str, frozenset[str]] = {
    ServiceRequestStatus.PENDING: frozenset({ServiceRequestStatus.RESOLVED}),
    ServiceRequestStatus.RESOLVED: frozenset(),
}

# Orders that still occupy their table
ACTIVE_ORDER_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY})


def can_transition(transitions: dict[str, frozenset[str]], current: str, target: str) -> bool:
    if current == target:
        return True
    return target in transitions.get(current, frozenset())


def ensure_transition(
    transitions: dict[str, frozenset[str]],
    current: str,
    target: str,
    *,
    entity: str,
) -> bool:
    """Validate ``current -> target``.

    Returns:
        ``True`` when the status actually changes, ``False`` for a no-op
        (target equals current).

    Raises:
        ConflictError: If the transition is not allowed.
    """
    if current == target:
        return False
    if target not in transitions.get(current, frozenset()):
        raise ConflictError(
            f"Cannot change {entity} status from '{current}' to '{target}'",
            code="INVALID_TRANSITION",
            details={"from": current, "to": target},
        )
    return True
