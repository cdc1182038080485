"""Food and bar orders with their line-item snapshots."""

import uuid
from decimal import Decimal

from sqlalchemy import JSON, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from zamora.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Order(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """An order placed from a guest or waiter cart.

    ``order_type`` separates kitchen (``food``) from bar (``bar``) tickets.
    """

    __tablename__ = "orders"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order_type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # food, bar
    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, preparing, ready, delivered, cancelled, pos_completed
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"))
    service_charge: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"))
    payment_method: Mapped[str | None] = mapped_column(String(50))
    payment_status: Mapped[str] = mapped_column(String(20), default="unpaid")  # unpaid, paid
    guest_name: Mapped[str | None] = mapped_column(String(255))
    guest_phone: Mapped[str | None] = mapped_column(String(50))
    guest_room_number: Mapped[str | None] = mapped_column(String(100))
    table_number: Mapped[str | None] = mapped_column(String(50))
    waiter_name: Mapped[str | None] = mapped_column(String(255))
    notes: Mapped[str | None] = mapped_column(Text)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("ix_orders_property_table", "property_id", "table_number"),)

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, type={self.order_type}, status={self.status}, total={self.total_amount})>"


class OrderItem(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Immutable snapshot of a cart line as it was when the order was placed."""

    __tablename__ = "order_items"

    order_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    menu_item_id: Mapped[str | None] = mapped_column(String(64))
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    item_description: Mapped[str | None] = mapped_column(Text)
    item_ingredients: Mapped[str | None] = mapped_column(Text)
    item_image_url: Mapped[str | None] = mapped_column(String(1024))
    weight: Mapped[str | None] = mapped_column(String(50))
    category: Mapped[str | None] = mapped_column(String(100))
    options: Mapped[list] = mapped_column(JSON, default=list)
    notes: Mapped[str | None] = mapped_column(Text)

    order: Mapped[Order] = relationship(back_populates="items")
