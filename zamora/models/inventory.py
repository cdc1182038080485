"""Inventory items, the stock movement ledger and stock snapshots."""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import JSON, Date, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from zamora.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class InventoryItem(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A stocked ingredient or product. "Low stock" is derived, never stored."""

    __tablename__ = "inventory_items"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sku: Mapped[str | None] = mapped_column(String(100))
    category: Mapped[str | None] = mapped_column(String(100), index=True)
    unit: Mapped[str] = mapped_column(String(30), default="unit")
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("0"))
    min_quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("0"))
    cost_per_unit: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    location: Mapped[str | None] = mapped_column(String(100))
    supplier_name: Mapped[str | None] = mapped_column(String(255))


class InventoryTransaction(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """One stock movement. ``quantity`` is the signed change applied."""

    __tablename__ = "inventory_transactions"

    item_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("inventory_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # in, out, adjustment, waste
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text)
    cost_at_time: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    performed_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )


class StockSnapshot(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Stock on hand at a point in time (start of a day, week or month).

    ``items`` is a frozen copy of every stock line with its quantity and
    unit cost as strings, so later movements never change a snapshot.
    """

    __tablename__ = "stock_snapshots"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    snapshot_type: Mapped[str] = mapped_column(String(10), nullable=False)  # daily, weekly, monthly
    snapshot_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    total_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    items: Mapped[list] = mapped_column(JSON, default=list)
    notes: Mapped[str | None] = mapped_column(Text)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint("property_id", "snapshot_type", "snapshot_date", name="uq_stock_snapshots_day"),
    )
