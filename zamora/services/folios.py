"""Guest folio: the running bill attached to a booking."""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.config import settings
from zamora.errors import ConflictError, NotFoundError
from zamora.models.booking import Booking
from zamora.models.folio import Folio, FolioItem
from zamora.services.status import FOLIO_TRANSITIONS, FolioStatus, ensure_transition

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


async def get_folio(db: AsyncSession, folio_id: uuid.UUID, *, for_update: bool = False) -> Folio:
    query = select(Folio).where(Folio.id == folio_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    folio = result.scalar_one_or_none()
    if folio is None:
        raise NotFoundError("Folio not found")
    return folio


async def get_or_create_folio(db: AsyncSession, booking: Booking) -> Folio:
    """Return the booking's folio, opening an empty one on first use."""
    result = await db.execute(select(Folio).where(Folio.booking_id == booking.id))
    folio = result.scalar_one_or_none()
    if folio is not None:
        return folio

    folio = Folio(
        booking_id=booking.id,
        property_id=booking.property_id,
        status=FolioStatus.OPEN,
        total_amount=Decimal("0.00"),
        items=[],
    )
    db.add(folio)
    await db.flush()
    logger.info("Opened folio %s for booking %s", folio.id, booking.id)
    return folio


async def recompute_total(db: AsyncSession, folio: Folio) -> Decimal:
    """Set ``folio.total_amount`` to the sum of its items as stored."""
    result = await db.execute(
        select(func.coalesce(func.sum(FolioItem.total_price), 0)).where(FolioItem.folio_id == folio.id)
    )
    folio.total_amount = Decimal(str(result.scalar_one())).quantize(CENTS)
    return folio.total_amount


async def add_charge(
    db: AsyncSession,
    folio_id: uuid.UUID,
    description: str,
    amount: Decimal,
    quantity: int = 1,
    tax_category: str | None = None,
) -> FolioItem:
    """Post a charge and recompute the folio total from all of its items.

    The folio row is locked for the rest of the transaction so concurrent
    charges serialize instead of overwriting each other's total.

    Raises:
        NotFoundError: If the folio does not exist.
        ConflictError: If the folio is no longer open.
    """
    folio = await get_folio(db, folio_id, for_update=True)
    if folio.status != FolioStatus.OPEN:
        raise ConflictError(f"Folio is {folio.status}; charges can only be added to an open folio")

    unit_price = Decimal(amount).quantize(CENTS)
    item = FolioItem(
        folio_id=folio.id,
        description=description,
        quantity=quantity,
        unit_price=unit_price,
        total_price=(unit_price * quantity).quantize(CENTS),
        tax_category=tax_category or settings.folio_default_tax_category,
    )
    db.add(item)
    folio.items.append(item)
    await db.flush()

    total = await recompute_total(db, folio)
    await db.flush()
    logger.info("Charged %s x%d to folio %s (%s); total now %s", unit_price, quantity, folio.id, description, total)
    return item


async def close_folio(db: AsyncSession, folio: Folio) -> Folio:
    if ensure_transition(FOLIO_TRANSITIONS, folio.status, FolioStatus.CLOSED, entity="folio"):
        folio.status = FolioStatus.CLOSED
        await db.flush()
        logger.info("Closed folio %s", folio.id)
    return folio


async def settle_folio(
    db: AsyncSession,
    folio: Folio,
    payment_method: str,
    invoice_number: str | None = None,
) -> Folio:
    """Record payment and mark the folio ``paid`` (terminal)."""
    ensure_transition(FOLIO_TRANSITIONS, folio.status, FolioStatus.PAID, entity="folio")
    if folio.status == FolioStatus.PAID:
        return folio

    folio.status = FolioStatus.PAID
    folio.payment_method = payment_method
    if invoice_number:
        folio.invoice_number = invoice_number
    await db.flush()
    logger.info("Settled folio %s via %s (total %s)", folio.id, payment_method, folio.total_amount)
    return folio
