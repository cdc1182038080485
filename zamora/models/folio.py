"""Folio models: a guest's running bill for a stay and its line items."""

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from zamora.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Folio(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "folios"

    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), default="open")  # open, closed, paid
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"))
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    invoice_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    items: Mapped[list["FolioItem"]] = relationship(
        back_populates="folio",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="FolioItem.created_at",
    )

    def __repr__(self) -> str:
        return f"<Folio(id={self.id}, booking_id={self.booking_id}, status={self.status}, total={self.total_amount})>"


class FolioItem(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "folio_items"

    folio_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("folios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tax_category: Mapped[str] = mapped_column(String(10), default="A")

    folio: Mapped[Folio] = relationship(back_populates="items")
