"""Menu catalogue: the dishes and drinks a property sells."""

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from zamora.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class MenuItem(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A catalogue entry. ``menu_type`` is ``food`` (kitchen) or ``bar``.

    Orders copy what they need from here into their own line items, so
    editing or deleting an entry never changes an order already placed.
    """

    __tablename__ = "menu_items"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    menu_type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # food, bar
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str | None] = mapped_column(String(100), index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    original_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    discount_badge: Mapped[str | None] = mapped_column(String(50))
    image_url: Mapped[str | None] = mapped_column(String(1024))
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    ingredients: Mapped[str | None] = mapped_column(Text)
    dietary_info: Mapped[str | None] = mapped_column(Text)
    weight: Mapped[str | None] = mapped_column(String(50))

    # Bar items can be counted directly instead of through inventory items
    track_stock: Mapped[bool] = mapped_column(Boolean, default=False)
    stock_quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("0"))
    low_stock_threshold: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("0"))
    cost_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    created_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<MenuItem(id={self.id}, type={self.menu_type}, name={self.name!r}, price={self.price})>"
