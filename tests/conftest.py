"""Shared test configuration and fixtures.

Every test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
with all tables created, and one session that both the fixtures and the app
use, so rows flushed by a fixture are visible to the request under test.
Outbound notifications are replaced by a recording fake.
"""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from zamora.auth.jwt import create_token_pair
from zamora.auth.passwords import hash_password
from zamora.database import Base, get_db
from zamora.main import app
from zamora.models.property import Property, PropertyStaff
from zamora.models.room import Room, RoomType
from zamora.models.user import User
from zamora.notifications.notifier import get_notifier
from zamora.notifications.sms import SmsResult

TEST_PASSWORD = "testpass123"


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class RecordingNotifier:
    """Stands in for ``Notifier``; remembers what would have been sent."""

    def __init__(self) -> None:
        self.sms: list[tuple[str, str | None]] = []
        self.pushes: list[tuple[uuid.UUID, dict]] = []

    async def notify_admin(self, message: str, phone: str | None = None) -> SmsResult:
        self.sms.append((message, phone))
        return SmsResult(success=True, sid="SM-test")

    async def push_to_property(self, property_id: uuid.UUID, payload: dict) -> int:
        self.pushes.append((property_id, payload))
        return 1

    async def announce(self, property_id: uuid.UUID, message: str, phone: str | None, payload: dict) -> None:
        await self.notify_admin(message, phone)
        await self.push_to_property(property_id, payload)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session = AsyncSession(bind=test_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, notifier: RecordingNotifier) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the test DB session and fake notifier."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users and auth headers
# ---------------------------------------------------------------------------


def headers_for(user: User) -> dict[str, str]:
    tokens = create_token_pair(str(user.id), user.role)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory: ``await make_user(role="waiter", property_id=...)``."""

    async def _make(
        role: str = "user",
        *,
        property_id: uuid.UUID | None = None,
        first_name: str = "Test",
        last_name: str = "User",
        email: str | None = None,
        is_active: bool = True,
    ) -> User:
        user = User(
            email=email or f"{role}-{uuid.uuid4().hex[:8]}@test.com",
            hashed_password=hash_password(TEST_PASSWORD),
            first_name=first_name,
            last_name=last_name,
            role=role,
            property_id=property_id,
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _make


@pytest.fixture
def make_staff(db_session: AsyncSession, make_user) -> Callable[..., Awaitable[User]]:
    """Factory: a user with ``role`` attached to ``prop`` through property_staff."""

    async def _make(role: str, prop: Property, **kwargs) -> User:
        user = await make_user(role, property_id=prop.id, **kwargs)
        db_session.add(PropertyStaff(property_id=prop.id, user_id=user.id, role=role))
        await db_session.flush()
        return user

    return _make


@pytest_asyncio.fixture
async def test_user(make_user) -> User:
    return await make_user("user")


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict[str, str]:
    return headers_for(test_user)


@pytest_asyncio.fixture
async def owner(make_user) -> User:
    return await make_user("owner", first_name="Olivia", last_name="Owner")


@pytest_asyncio.fixture
async def owner_headers(owner: User) -> dict[str, str]:
    return headers_for(owner)


@pytest_asyncio.fixture
async def admin_user(make_user) -> User:
    return await make_user("admin", first_name="Ada", last_name="Admin")


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict[str, str]:
    return headers_for(admin_user)


# ---------------------------------------------------------------------------
# Properties, rooms
# ---------------------------------------------------------------------------


async def _make_property(db: AsyncSession, owner: User, name: str, property_type: str) -> Property:
    prop = Property(
        created_by=owner.id,
        name=name,
        slug=f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}",
        property_type=property_type,
        admin_notification_phone="+260970000001",
    )
    db.add(prop)
    await db.flush()
    return prop


@pytest_asyncio.fixture
async def hotel(db_session: AsyncSession, owner: User) -> Property:
    return await _make_property(db_session, owner, "Lusaka Grand", "hotel")


@pytest_asyncio.fixture
async def restaurant(db_session: AsyncSession, owner: User) -> Property:
    return await _make_property(db_session, owner, "Zambezi Grill", "restaurant")


@pytest_asyncio.fixture
async def room_type(db_session: AsyncSession, hotel: Property) -> RoomType:
    rt = RoomType(property_id=hotel.id, name="Deluxe", base_price=Decimal("100.00"), capacity=2)
    db_session.add(rt)
    await db_session.flush()
    return rt


@pytest_asyncio.fixture
async def room(db_session: AsyncSession, hotel: Property, room_type: RoomType) -> Room:
    r = Room(property_id=hotel.id, room_type_id=room_type.id, room_number="101", status="available")
    db_session.add(r)
    await db_session.flush()
    return r


@pytest.fixture
def auth_for() -> Callable[[User], dict[str, str]]:
    """``auth_for(user)`` returns bearer headers for any fixture-made user."""
    return headers_for
