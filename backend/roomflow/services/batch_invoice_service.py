"""Batch invoicing of unbilled reservations, one transaction per owner."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from itertools import groupby
from operator import itemgetter

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.models import INVOICEABLE_PAYMENT_METHODS, Property, Reservation
from roomflow.services import audit_service
from roomflow.services.errors import (
    AlreadyInvoicedError,
    InvoicingError,
    ReservationNotEligibleError,
)
from roomflow.services.invoice_numbering import (
    format_invoice_number,
    lock_owner,
    next_sequence,
)
from roomflow.services.invoice_service import (
    apply_invoice_fields,
    insert_ledger_entry,
    lock_reservation,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchFilters:
    """Optional narrowing of the reservations to invoice.

    Dates are inclusive bounds on the reservation start date.
    """

    from_date: date | None = None
    to_date: date | None = None
    owner_id: int | None = None


@dataclass(slots=True)
class BatchError:
    """A reservation or a whole owner group that could not be invoiced."""

    error: str
    code: str
    reservation_id: int | None = None
    owner_id: int | None = None


@dataclass(slots=True)
class BatchResult:
    generated: int = 0
    invoice_numbers: list[str] = field(default_factory=list)
    errors: list[BatchError] = field(default_factory=list)


def _error_code(exc: Exception) -> str:
    return exc.code if isinstance(exc, InvoicingError) else "database_error"


def _eligible_query(filters: BatchFilters) -> Select:
    stmt = (
        select(Reservation.id, Property.owner_id)
        .join(Property, Reservation.property_id == Property.id)
        .where(
            or_(Reservation.invoice_number.is_(None), Reservation.invoice_number == ""),
            Reservation.payment_method.in_(INVOICEABLE_PAYMENT_METHODS),
        )
    )
    if filters.from_date is not None:
        stmt = stmt.where(Reservation.start_date >= filters.from_date)
    if filters.to_date is not None:
        stmt = stmt.where(Reservation.start_date <= filters.to_date)
    if filters.owner_id is not None:
        stmt = stmt.where(Property.owner_id == filters.owner_id)
    return stmt


async def pending_invoice_count(session: AsyncSession, filters: BatchFilters) -> int:
    """Number of reservations a batch run with ``filters`` would invoice."""

    stmt = select(func.count()).select_from(_eligible_query(filters).subquery())
    return int(await session.scalar(stmt) or 0)


async def _invoice_reservation(
    session: AsyncSession,
    *,
    reservation_id: int,
    owner_id: int,
    number: str,
    issued_on: date,
) -> None:
    async with session.begin_nested():
        reservation = await lock_reservation(
            session, reservation_id, owner_id=owner_id
        )
        if reservation.invoice_number:
            raise AlreadyInvoicedError(reservation_id, reservation.invoice_number)
        if reservation.payment_method not in INVOICEABLE_PAYMENT_METHODS:
            raise ReservationNotEligibleError(
                f"Reservation {reservation_id} payment method "
                f"{reservation.payment_method.value} cannot be invoiced"
            )
        await insert_ledger_entry(session, number=number, reservation_id=reservation_id)
        await apply_invoice_fields(
            session, reservation, number=number, invoice_date=issued_on
        )


async def _invoice_owner_group(
    session: AsyncSession,
    *,
    owner_id: int,
    reservation_ids: list[int],
    issued_on: date,
    result: BatchResult,
) -> list[str]:
    owner = await lock_owner(session, owner_id)
    sequence = await next_sequence(session, owner)
    issued: list[str] = []
    for reservation_id in reservation_ids:
        number = format_invoice_number(owner_id, sequence)
        try:
            await _invoice_reservation(
                session,
                reservation_id=reservation_id,
                owner_id=owner_id,
                number=number,
                issued_on=issued_on,
            )
        except (InvoicingError, SQLAlchemyError) as exc:
            logger.warning(
                "Batch invoicing skipped reservation %s: %s", reservation_id, exc
            )
            result.errors.append(
                BatchError(
                    reservation_id=reservation_id,
                    error=str(exc),
                    code=_error_code(exc),
                )
            )
            continue
        issued.append(number)
        sequence += 1

    if issued:
        owner.last_invoice_number = sequence - 1
    return issued


async def generate_batch_invoices(
    session: AsyncSession,
    filters: BatchFilters | None = None,
    *,
    actor: str = "system",
    invoice_date: date | None = None,
) -> BatchResult:
    """Invoice every eligible reservation, numbering each owner by stay start date.

    Each owner group commits on its own; a failing group is rolled back and
    reported without touching the others.
    """

    filters = filters or BatchFilters()
    issued_on = invoice_date or date.today()
    rows = (
        await session.execute(
            _eligible_query(filters).order_by(
                Property.owner_id, Reservation.start_date, Reservation.id
            )
        )
    ).all()

    result = BatchResult()
    for owner_id, group in groupby(rows, key=itemgetter(1)):
        reservation_ids = [reservation_id for reservation_id, _ in group]
        try:
            issued = await _invoice_owner_group(
                session,
                owner_id=owner_id,
                reservation_ids=reservation_ids,
                issued_on=issued_on,
                result=result,
            )
            await session.commit()
        except (InvoicingError, SQLAlchemyError) as exc:
            await session.rollback()
            logger.exception("Batch invoicing failed for owner %s", owner_id)
            result.errors.append(
                BatchError(
                    owner_id=owner_id,
                    error=str(exc),
                    code=_error_code(exc),
                )
            )
            continue

        if not issued:
            continue
        result.generated += len(issued)
        result.invoice_numbers.extend(issued)
        logger.info(
            "Batch issued %s invoices for owner %s (%s to %s)",
            len(issued),
            owner_id,
            issued[0],
            issued[-1],
        )
        await audit_service.log_audit(
            session,
            actor=actor,
            action="invoice.batch_generate",
            table_name="owners",
            record_id=owner_id,
            new_values={"invoice_numbers": issued},
            description=f"Batch generated {len(issued)} invoices",
        )
    return result
