"""Room and room type models.

Restaurant tables are stored as rooms too: a table type is a room type and
the table's ``room_number`` is the number printed on its QR code.
"""

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from zamora.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class RoomType(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "room_types"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    capacity: Mapped[int] = mapped_column(Integer, default=2)
    category: Mapped[str | None] = mapped_column(String(50), default=None)  # room, table
    image_url: Mapped[str | None] = mapped_column(String(1024), default=None)


class Room(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "rooms"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_type_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("room_types.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    room_number: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(50), default="clean")  # available, clean, dirty, occupied, maintenance
    notes: Mapped[str | None] = mapped_column(Text, default=None)

    __table_args__ = (UniqueConstraint("property_id", "room_number", name="uq_rooms_property_number"),)

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, number={self.room_number!r}, status={self.status!r})>"
