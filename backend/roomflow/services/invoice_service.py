"""Invoice generation, reversal and ledger queries for reservations."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.db.locking import lock_row
from roomflow.models import Guest, Invoice, Owner, Property, Reservation
from roomflow.services import audit_service
from roomflow.services.errors import (
    AlreadyInvoicedError,
    NoInvoiceError,
    NotLastInSeriesError,
    OwnerNotFoundError,
    ReservationChangedError,
    ReservationNotFoundError,
)
from roomflow.services.invoice_numbering import (
    allocate_invoice_number,
    lock_owner,
    max_reservation_sequence,
    parse_invoice_sequence,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GeneratedInvoice:
    """Outcome of invoicing one reservation."""

    reservation_id: int
    invoice_number: str
    invoice_date: date | None


@dataclass(slots=True)
class ReversalResult:
    """Owner counter after the last invoice of a series was removed."""

    reservation_id: int
    deleted_invoice_number: str
    last_invoice_number: int


@dataclass(slots=True)
class InvoiceListItem:
    """Ledger row joined with its reservation, guest, property and owner."""

    id: int
    invoice_number: str
    reservation_id: int
    created_at: datetime
    invoice_date: date | None
    start_date: date
    end_date: date
    price: Decimal
    payment_method: str
    guest_name: str | None
    guest_surname: str | None
    guest_dni: str | None
    property_id: int
    property_name: str
    owner_id: int
    owner_name: str
    owner_tax_id: str | None


async def resolve_owner_id(session: AsyncSession, reservation_id: int) -> int:
    """Return the owner id of the property a reservation belongs to."""

    row = (
        await session.execute(
            select(Reservation.id, Property.owner_id)
            .outerjoin(Property, Reservation.property_id == Property.id)
            .where(Reservation.id == reservation_id)
        )
    ).one_or_none()
    if row is None:
        raise ReservationNotFoundError(reservation_id)
    if row.owner_id is None:
        raise OwnerNotFoundError(None)
    return row.owner_id


async def lock_reservation(
    session: AsyncSession, reservation_id: int, *, owner_id: int | None = None
) -> Reservation:
    """Lock a reservation row and check it still belongs to ``owner_id``."""

    reservation = await lock_row(session, Reservation, reservation_id)
    if reservation is None:
        raise ReservationNotFoundError(reservation_id)
    if owner_id is not None:
        current_owner = await session.scalar(
            select(Property.owner_id).where(Property.id == reservation.property_id)
        )
        if current_owner != owner_id:
            raise ReservationChangedError(
                f"Reservation {reservation_id} changed owner while being invoiced"
            )
    return reservation


async def insert_ledger_entry(
    session: AsyncSession, *, number: str, reservation_id: int
) -> bool:
    """Append a ledger row; a failure is logged and the caller carries on.

    The counter has already advanced at this point, so a lost ledger row
    only leaves a gap that the next allocation skips over.
    """

    try:
        async with session.begin_nested():
            session.add(Invoice(number=number, reservation_id=reservation_id))
    except SQLAlchemyError:
        logger.exception(
            "Ledger insert failed for invoice %s (reservation %s)",
            number,
            reservation_id,
        )
        return False
    return True


async def apply_invoice_fields(
    session: AsyncSession,
    reservation: Reservation,
    *,
    number: str,
    invoice_date: date,
) -> date | None:
    """Write the invoice number and date onto the reservation.

    When the date write fails the number is written on its own and ``None``
    is returned. Known weak point: the reservation then carries a number
    without an invoice date. A failure of the number-only write propagates.
    """

    reservation_id = reservation.id
    try:
        async with session.begin_nested():
            reservation.invoice_number = number
            reservation.invoice_date = invoice_date
    except SQLAlchemyError:
        logger.warning(
            "Storing invoice %s with date failed for reservation %s; "
            "retrying without invoice date",
            number,
            reservation_id,
            exc_info=True,
        )
        async with session.begin_nested():
            reservation.invoice_number = number
        return None
    return invoice_date


async def generate_invoice(
    session: AsyncSession,
    *,
    reservation_id: int,
    actor: str = "system",
    invoice_date: date | None = None,
) -> GeneratedInvoice:
    """Allocate the next owner number and bind it to the reservation."""

    issued_on = invoice_date or date.today()
    try:
        owner_id = await resolve_owner_id(session, reservation_id)
        await lock_owner(session, owner_id)
        reservation = await lock_reservation(
            session, reservation_id, owner_id=owner_id
        )
        if reservation.invoice_number:
            raise AlreadyInvoicedError(reservation_id, reservation.invoice_number)

        number = await allocate_invoice_number(session, owner_id)
        await insert_ledger_entry(session, number=number, reservation_id=reservation_id)
        stored_date = await apply_invoice_fields(
            session, reservation, number=number, invoice_date=issued_on
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info("Issued invoice %s for reservation %s", number, reservation_id)
    await audit_service.log_audit(
        session,
        actor=actor,
        action="invoice.generate",
        table_name="reservations",
        record_id=reservation_id,
        old_values={"invoice_number": None, "invoice_date": None},
        new_values={"invoice_number": number, "invoice_date": stored_date},
        description=f"Generated invoice {number}",
    )
    return GeneratedInvoice(
        reservation_id=reservation_id,
        invoice_number=number,
        invoice_date=stored_date,
    )


async def delete_invoice(
    session: AsyncSession,
    *,
    reservation_id: int,
    actor: str = "system",
) -> ReversalResult:
    """Undo the most recent invoice of an owner's series."""

    try:
        owner_id = await resolve_owner_id(session, reservation_id)
        owner = await lock_owner(session, owner_id)
        reservation = await lock_reservation(
            session, reservation_id, owner_id=owner_id
        )
        number = reservation.invoice_number
        if not number:
            raise NoInvoiceError(reservation_id)
        sequence = parse_invoice_sequence(number, owner_id=owner_id)
        last_sequence = await max_reservation_sequence(session, owner_id)
        if sequence != last_sequence:
            raise NotLastInSeriesError(number, last_sequence)

        old_date = reservation.invoice_date
        await session.execute(
            delete(Invoice).where(
                or_(Invoice.reservation_id == reservation_id, Invoice.number == number)
            )
        )
        reservation.invoice_number = None
        reservation.invoice_date = None
        owner.last_invoice_number = last_sequence - 1
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(
        "Reverted invoice %s of reservation %s; owner %s counter now %s",
        number,
        reservation_id,
        owner_id,
        last_sequence - 1,
    )
    await audit_service.log_audit(
        session,
        actor=actor,
        action="invoice.delete",
        table_name="reservations",
        record_id=reservation_id,
        old_values={"invoice_number": number, "invoice_date": old_date},
        new_values={"invoice_number": None, "invoice_date": None},
        description=f"Deleted last invoice {number}",
    )
    return ReversalResult(
        reservation_id=reservation_id,
        deleted_invoice_number=number,
        last_invoice_number=last_sequence - 1,
    )


async def get_invoice_for_reservation(
    session: AsyncSession, *, reservation_id: int
) -> Invoice | None:
    result = await session.execute(
        select(Invoice).where(Invoice.reservation_id == reservation_id)
    )
    return result.scalars().first()


def _invoice_listing_query() -> Select:
    return (
        select(
            Invoice.id,
            Invoice.number.label("invoice_number"),
            Invoice.reservation_id,
            Invoice.created_at,
            Reservation.invoice_date,
            Reservation.start_date,
            Reservation.end_date,
            Reservation.price,
            Reservation.payment_method,
            Guest.name.label("guest_name"),
            Guest.surname.label("guest_surname"),
            Guest.dni.label("guest_dni"),
            Property.id.label("property_id"),
            Property.name.label("property_name"),
            Owner.id.label("owner_id"),
            Owner.name.label("owner_name"),
            Owner.tax_id.label("owner_tax_id"),
        )
        .join(Reservation, Invoice.reservation_id == Reservation.id)
        .join(Property, Reservation.property_id == Property.id)
        .join(Owner, Property.owner_id == Owner.id)
        .outerjoin(Guest, Reservation.guest_id == Guest.id)
    )


async def list_invoices(
    session: AsyncSession,
    *,
    owner_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> tuple[Sequence[InvoiceListItem], int]:
    """Return ledger rows ordered by series then sequence, with the total count."""

    stmt = _invoice_listing_query()
    if owner_id is not None:
        stmt = stmt.where(Owner.id == owner_id)
    if date_from is not None:
        stmt = stmt.where(Reservation.invoice_date >= date_from)
    if date_to is not None:
        stmt = stmt.where(Reservation.invoice_date <= date_to)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Invoice.number.ilike(pattern),
                Guest.name.ilike(pattern),
                Guest.surname.ilike(pattern),
                Guest.dni.ilike(pattern),
            )
        )

    total = await session.scalar(select(func.count()).select_from(stmt.subquery()))
    rows = (
        await session.execute(
            stmt.order_by(Owner.id, func.length(Invoice.number), Invoice.number)
            .offset(offset)
            .limit(limit)
        )
    ).all()
    items = [
        InvoiceListItem(
            **{
                **row._asdict(),
                "payment_method": getattr(
                    row.payment_method, "value", row.payment_method
                ),
            }
        )
        for row in rows
    ]
    return items, int(total or 0)


async def reset_all_invoices(session: AsyncSession) -> int:
    """Clear every invoice and restart all owner series at zero.

    Runs in one transaction and returns the number of reservations cleared.
    """

    try:
        cleared = await session.execute(
            update(Reservation)
            .where(Reservation.invoice_number.is_not(None))
            .values(invoice_number=None, invoice_date=None)
            .execution_options(synchronize_session=False)
        )
        await session.execute(delete(Invoice))
        await session.execute(
            update(Owner).values(last_invoice_number=0).execution_options(
                synchronize_session=False
            )
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    logger.warning("Reset all invoices; %s reservations cleared", cleared.rowcount)
    return cleared.rowcount
