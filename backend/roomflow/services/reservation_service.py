"""Reservation updates and deletes guarded against changes to invoiced data."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Final

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.db.locking import lock_row
from roomflow.models import Reservation
from roomflow.services import audit_service
from roomflow.services.errors import (
    DeleteBlockedError,
    ProtectedFieldViolationError,
    ReservationNotFoundError,
)

logger = logging.getLogger(__name__)

PROTECTED_FIELDS: Final = frozenset(
    {
        "price",
        "start_date",
        "end_date",
        "property_id",
        "room_id",
        "guest_id",
        "payment_method",
    }
)

# Invoice fields belong to the invoicing service and are never set from here.
_UPDATABLE_FIELDS: Final = PROTECTED_FIELDS | {"notes"}
_NOT_NULL_FIELDS: Final = frozenset(
    {"price", "start_date", "end_date", "property_id", "payment_method"}
)


async def get_reservation(
    session: AsyncSession, *, reservation_id: int
) -> Reservation | None:
    result = await session.execute(
        select(Reservation).where(Reservation.id == reservation_id)
    )
    return result.scalar_one_or_none()


def check_update(reservation: Reservation, changes: Mapping[str, Any]) -> None:
    """Reject changes to protected fields once the reservation is invoiced."""

    if not reservation.invoice_number:
        return
    violations = {
        name
        for name, value in changes.items()
        if name in PROTECTED_FIELDS and getattr(reservation, name) != value
    }
    if violations:
        raise ProtectedFieldViolationError(violations)


def check_delete(reservation: Reservation) -> None:
    if reservation.invoice_number:
        raise DeleteBlockedError(reservation.id, reservation.invoice_number)


def _validate_changes(reservation: Reservation, changes: Mapping[str, Any]) -> None:
    unknown = set(changes) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
    nulls = sorted(
        name for name in _NOT_NULL_FIELDS if name in changes and changes[name] is None
    )
    if nulls:
        raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
    start = changes.get("start_date", reservation.start_date)
    end = changes.get("end_date", reservation.end_date)
    if start >= end:
        raise ValueError("Reservation end date must be after start date")


async def update_reservation(
    session: AsyncSession,
    *,
    reservation_id: int,
    changes: Mapping[str, Any],
    actor: str = "system",
) -> Reservation:
    try:
        reservation = await lock_row(session, Reservation, reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        check_update(reservation, changes)
        _validate_changes(reservation, changes)

        old_values: dict[str, Any] = {}
        new_values: dict[str, Any] = {}
        for name, value in changes.items():
            current = getattr(reservation, name)
            if current == value:
                continue
            old_values[name] = current
            new_values[name] = value
            setattr(reservation, name, value)
        await session.commit()
    except (IntegrityError, ValueError):
        await session.rollback()
        raise

    if new_values:
        await audit_service.log_audit(
            session,
            actor=actor,
            action="reservation.update",
            table_name="reservations",
            record_id=reservation_id,
            old_values=old_values,
            new_values=new_values,
            description=f"Updated {', '.join(sorted(new_values))}",
        )
    return reservation


async def delete_reservation(
    session: AsyncSession,
    *,
    reservation_id: int,
    actor: str = "system",
) -> None:
    try:
        reservation = await lock_row(session, Reservation, reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        check_delete(reservation)
        snapshot = {
            "property_id": reservation.property_id,
            "guest_id": reservation.guest_id,
            "start_date": reservation.start_date,
            "end_date": reservation.end_date,
            "price": reservation.price,
        }
        await session.delete(reservation)
        await session.commit()
    except (IntegrityError, ValueError):
        await session.rollback()
        raise

    logger.info("Deleted reservation %s", reservation_id)
    await audit_service.log_audit(
        session,
        actor=actor,
        action="reservation.delete",
        table_name="reservations",
        record_id=reservation_id,
        old_values=snapshot,
        description="Deleted reservation",
    )
