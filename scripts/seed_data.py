"""Seed the database with a demo owner, a Lusaka hotel and a restaurant.

Creates rooms and room types for the hotel, restaurant tables with a table
type, a few staff accounts, guests, bookings with open folios, a food and bar
menu, payment methods, and stock items, some of them below their minimum so
the low-stock report has something to show.

Run inside Docker:
    docker compose exec backend python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select, update

from zamora.auth.passwords import hash_password
from zamora.database import async_session_factory
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
from zamora.services.bookings import room_status_for

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_PASSWORD = "demo1234"

DEMO_OWNER = {"email": "owner@zamora.demo", "first_name": "Mwila", "last_name": "Chola"}

STAFF = [
    {"email": "reception@zamora.demo", "first_name": "Natasha", "last_name": "Zulu", "role": "receptionist"},
    {"email": "chef@zamora.demo", "first_name": "Bwalya", "last_name": "Mumba", "role": "chef"},
    {"email": "bar@zamora.demo", "first_name": "Kelvin", "last_name": "Banda", "role": "bartender"},
    {"email": "waiter@zamora.demo", "first_name": "Mary", "last_name": "Phiri", "role": "waiter"},
    {"email": "cashier@zamora.demo", "first_name": "Joseph", "last_name": "Tembo", "role": "cashier"},
]

HOTEL = {
    "name": "Lusaka Grand",
    "slug": "lusaka-grand",
    "property_type": "hotel",
    "location": "Cairo Road, Lusaka",
    "contact_phone": "+260211000000",
    "admin_notification_phone": "+260970000001",
    "description": "Business hotel in central Lusaka with a restaurant and rooftop bar.",
}

RESTAURANT = {
    "name": "Zambezi Grill",
    "slug": "zambezi-grill",
    "property_type": "restaurant",
    "location": "Levy Junction, Lusaka",
    "admin_notification_phone": "+260970000002",
}

ROOM_TYPES = [
    {"name": "Standard", "base_price": Decimal("850.00"), "capacity": 2, "rooms": ["101", "102", "103", "104"]},
    {"name": "Deluxe", "base_price": Decimal("1200.00"), "capacity": 2, "rooms": ["201", "202", "203"]},
    {"name": "Executive Suite", "base_price": Decimal("2500.00"), "capacity": 4, "rooms": ["301"]},
]

TABLE_TYPE = {"name": "Dining", "capacity": 4, "category": "table"}
TABLES = ["1", "2", "3", "4", "5", "6", "7", "8"]

MENU = [
    # type, category, name, price
    ("food", "Mains", "Nshima with Chicken", "85.00"),
    ("food", "Mains", "Grilled Bream", "140.00"),
    ("food", "Mains", "T-Bone Steak", "165.00"),
    ("food", "Starters", "Samosas", "35.00"),
    ("food", "Sides", "Chips", "30.00"),
    ("bar", "Beer", "Mosi Lager", "25.00"),
    ("bar", "Beer", "Castle Lite", "28.00"),
    ("bar", "Soft Drinks", "Coke", "15.00"),
    ("bar", "Spirits", "Jameson (single)", "45.00"),
]

# Bar items counted per bottle: (stock, low-stock threshold, cost price)
BAR_STOCK = {"Mosi Lager": ("48", "24", "12.50"), "Castle Lite": ("36", "24", "14.00")}

PAYMENT_METHODS = ["Cash", "Mobile Money", "Card", "Room Charge"]

GUESTS = [
    {"first_name": "Chipo", "last_name": "Mwansa", "email": "chipo.mwansa@example.com", "phone": "+260966100200"},
    {"first_name": "David", "last_name": "Okafor", "email": "d.okafor@example.com", "phone": "+2348031234567"},
    {"first_name": "Sarah", "last_name": "Lungu", "email": None, "phone": "+260977555123"},
    {"first_name": "Thomas", "last_name": "Mulenga", "email": "tmulenga@example.com", "phone": None},
]

# (guest index, room number, check-in offset, nights, status)
BOOKINGS = [
    (0, "101", -3, 5, "checked_in"),
    (1, "201", -10, 3, "checked_out"),
    (2, "202", 4, 2, "confirmed"),
    (3, "301", 7, 4, "pending"),
    (1, "102", -6, 2, "cancelled"),
]

STOCK = [
    # name, category, unit, quantity, min_quantity, cost_per_unit
    ("Mosi Lager", "beverages", "crate", "0", "10", "180.00"),
    ("Castle Lite", "beverages", "crate", "12", "8", "195.00"),
    ("Mealie Meal", "dry goods", "bag", "4", "10", "145.00"),
    ("Cooking Oil", "dry goods", "litre", "9", "10", "42.00"),
    ("Chicken", "meat", "kg", "25", "15", "68.00"),
    ("Kapenta", "fish", "kg", "3", "5", "120.00"),
    ("Tomatoes", "produce", "kg", "18", "10", "15.00"),
]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def _reset(session) -> None:
    """Remove a previous seed run (properties by slug, users by email)."""
    emails = [DEMO_OWNER["email"], *(s["email"] for s in STAFF)]
    await session.execute(update(User).where(User.email.in_(emails)).values(property_id=None))

    result = await session.execute(select(Property.id).where(Property.slug.in_([HOTEL["slug"], RESTAURANT["slug"]])))
    property_ids = list(result.scalars().all())
    if property_ids:
        print("⚠️  Demo properties already exist. Deleting and re-seeding...")
        folio_ids = select(Folio.id).where(Folio.property_id.in_(property_ids))
        order_ids = select(Order.id).where(Order.property_id.in_(property_ids))
        item_ids = select(InventoryItem.id).where(InventoryItem.property_id.in_(property_ids))
        await session.execute(delete(FolioItem).where(FolioItem.folio_id.in_(folio_ids)))
        await session.execute(delete(OrderItem).where(OrderItem.order_id.in_(order_ids)))
        await session.execute(delete(InventoryTransaction).where(InventoryTransaction.item_id.in_(item_ids)))
        for model in (
            Folio,
            Booking,
            Guest,
            Room,
            RoomType,
            Order,
            MenuItem,
            PaymentMethod,
            StockSnapshot,
            InventoryItem,
            ServiceRequest,
            PushSubscription,
            PropertyStaff,
        ):
            await session.execute(delete(model).where(model.property_id.in_(property_ids)))
        await session.execute(delete(Property).where(Property.id.in_(property_ids)))

    await session.execute(delete(User).where(User.email.in_(emails)))
    await session.flush()


async def seed() -> None:
    """Populate the database with demo data. Safe to run repeatedly."""
    async with async_session_factory() as session:
        await _reset(session)

        # ------------------------------------------------------------------
        # 1. Owner and properties
        # ------------------------------------------------------------------
        owner = User(hashed_password=hash_password(DEMO_PASSWORD), role="owner", **DEMO_OWNER)
        session.add(owner)
        await session.flush()

        hotel = Property(created_by=owner.id, **HOTEL)
        restaurant = Property(created_by=owner.id, **RESTAURANT)
        session.add_all([hotel, restaurant])
        await session.flush()
        print(f"✅ Created owner {owner.email} with properties {hotel.name!r} and {restaurant.name!r}")

        # ------------------------------------------------------------------
        # 2. Staff
        # ------------------------------------------------------------------
        for data in STAFF:
            workplace = restaurant if data["role"] in ("chef", "bartender", "waiter") else hotel
            member = User(
                email=data["email"],
                first_name=data["first_name"],
                last_name=data["last_name"],
                role=data["role"],
                property_id=workplace.id,
                hashed_password=hash_password(DEMO_PASSWORD),
            )
            session.add(member)
            await session.flush()
            session.add(PropertyStaff(property_id=workplace.id, user_id=member.id, role=data["role"]))
            print(f"   👤 {member.display_name} ({data['role']} at {workplace.name})")
        await session.flush()

        # ------------------------------------------------------------------
        # 3. Rooms and tables
        # ------------------------------------------------------------------
        rooms: dict[str, Room] = {}
        for type_data in ROOM_TYPES:
            numbers = type_data["rooms"]
            room_type = RoomType(
                property_id=hotel.id,
                name=type_data["name"],
                base_price=type_data["base_price"],
                capacity=type_data["capacity"],
            )
            session.add(room_type)
            await session.flush()
            for number in numbers:
                room = Room(property_id=hotel.id, room_type_id=room_type.id, room_number=number, status="available")
                session.add(room)
                rooms[number] = room
        table_type = RoomType(property_id=restaurant.id, **TABLE_TYPE)
        session.add(table_type)
        await session.flush()
        for number in TABLES:
            session.add(
                Room(property_id=restaurant.id, room_type_id=table_type.id, room_number=number, status="available")
            )
        await session.flush()
        print(f"✅ Created {len(rooms)} rooms and {len(TABLES)} tables")

        # ------------------------------------------------------------------
        # 4. Guests, bookings and folios
        # ------------------------------------------------------------------
        guests = [Guest(property_id=hotel.id, **data) for data in GUESTS]
        session.add_all(guests)
        await session.flush()

        today = date.today()
        for guest_index, room_number, offset, nights, status in BOOKINGS:
            room = rooms[room_number]
            room_type = await session.get(RoomType, room.room_type_id)
            check_in = today + timedelta(days=offset)
            booking = Booking(
                property_id=hotel.id,
                room_id=room.id,
                guest_id=guests[guest_index].id,
                check_in_date=check_in,
                check_out_date=check_in + timedelta(days=nights),
                status=status,
                total_price=room_type.base_price * nights,
                created_by=owner.id,
            )
            session.add(booking)
            await session.flush()

            folio_status = "paid" if status == "checked_out" else "open"
            session.add(Folio(booking_id=booking.id, property_id=hotel.id, status=folio_status))

            room_status = room_status_for(status)
            if room_status is not None:
                room.status = room_status
        await session.flush()
        print(f"✅ Created {len(guests)} guests and {len(BOOKINGS)} bookings")

        # ------------------------------------------------------------------
        # 5. Stock
        # ------------------------------------------------------------------
        for name, category, unit, quantity, min_quantity, cost in STOCK:
            session.add(
                InventoryItem(
                    property_id=restaurant.id,
                    name=name,
                    category=category,
                    unit=unit,
                    quantity=Decimal(quantity),
                    min_quantity=Decimal(min_quantity),
                    cost_per_unit=Decimal(cost),
                )
            )
        await session.flush()
        print(f"✅ Created {len(STOCK)} stock items")

        # ------------------------------------------------------------------
        # 6. Menu and payment methods
        # ------------------------------------------------------------------
        for menu_type, category, name, price in MENU:
            item = MenuItem(
                property_id=restaurant.id,
                menu_type=menu_type,
                category=category,
                name=name,
                price=Decimal(price),
                created_by=owner.id,
            )
            if name in BAR_STOCK:
                stock, threshold, cost = BAR_STOCK[name]
                item.track_stock = True
                item.stock_quantity = Decimal(stock)
                item.low_stock_threshold = Decimal(threshold)
                item.cost_price = Decimal(cost)
            session.add(item)
        session.add_all(PaymentMethod(property_id=restaurant.id, name=name) for name in PAYMENT_METHODS)
        await session.commit()
        print(f"✅ Created {len(MENU)} menu items and {len(PAYMENT_METHODS)} payment methods")

        print()
        print("=" * 60)
        print("📊 Seed Summary")
        print("=" * 60)
        print(f"   Owner:      {DEMO_OWNER['email']} / {DEMO_PASSWORD}")
        print(f"   Staff:      {len(STAFF)} (same password)")
        print(f"   Rooms:      {len(rooms)}  Tables: {len(TABLES)}")
        print(f"   Bookings:   {len(BOOKINGS)}")
        print(f"   Stock:      {len(STOCK)} items")
        print(f"   Menu:       {len(MENU)} items  Payment methods: {len(PAYMENT_METHODS)}")
        print(f"   Guest menu: /api/mobile/menu/{RESTAURANT['slug']}")
        print("=" * 60)
        print("🎉 Done! You can now log in at /api/auth/login")


if __name__ == "__main__":
    asyncio.run(seed())
