"""SQLAlchemy models for Zamora.

All models are imported here so that ``Base.metadata`` knows every table
(``create_all`` in tests and scripts relies on it). If you add a new model,
import it in this file.
"""

from zamora.models.booking import Booking
from zamora.models.folio import Folio, FolioItem
from zamora.models.guest import Guest
from zamora.models.inventory import InventoryItem, InventoryTransaction, StockSnapshot
from zamora.models.menu import MenuItem
from zamora.models.order import Order, OrderItem
from zamora.models.payment_method import PaymentMethod
from zamora.models.property import Property, PropertyStaff
from zamora.models.push_subscription import PushSubscription
from zamora.models.room import Room, RoomType
from zamora.models.service_request import ServiceRequest
from zamora.models.user import User

__all__ = [
    "Booking",
    "Folio",
    "FolioItem",
    "Guest",
    "InventoryItem",
    "InventoryTransaction",
    "MenuItem",
    "Order",
    "OrderItem",
    "PaymentMethod",
    "Property",
    "PropertyStaff",
    "PushSubscription",
    "Room",
    "RoomType",
    "ServiceRequest",
    "StockSnapshot",
    "User",
]
