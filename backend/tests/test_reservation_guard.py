"""Tests for the invoiced reservation mutation guard."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select

from roomflow.db.session import get_sessionmaker
from roomflow.models import AuditEvent, Owner, PaymentMethod, Property, Reservation
from roomflow.services import invoice_service, reservation_service
from roomflow.services.errors import DeleteBlockedError, ProtectedFieldViolationError

pytestmark = pytest.mark.asyncio


async def _seed_reservation(sessionmaker, *, invoiced: bool) -> int:
    async with sessionmaker() as session:
        session.add(Owner(id=4, name="Guarded Owner"))
        await session.flush()
        prop = Property(owner_id=4, name="Studio")
        session.add(prop)
        await session.flush()
        reservation = Reservation(
            property_id=prop.id,
            price=Decimal("200.00"),
            start_date=date(2024, 8, 1),
            end_date=date(2024, 8, 5),
            payment_method=PaymentMethod.TRANSFER,
        )
        session.add(reservation)
        await session.commit()
        reservation_id = reservation.id

    if invoiced:
        async with sessionmaker() as session:
            await invoice_service.generate_invoice(session, reservation_id=reservation_id)
    return reservation_id


async def test_check_update_lists_changed_protected_fields() -> None:
    reservation = Reservation(
        price=Decimal("200.00"),
        start_date=date(2024, 8, 1),
        end_date=date(2024, 8, 5),
        payment_method=PaymentMethod.CASH,
        invoice_number="FR04/001",
    )
    with pytest.raises(ProtectedFieldViolationError) as excinfo:
        reservation_service.check_update(
            reservation,
            {
                "price": Decimal("210.00"),
                "end_date": date(2024, 8, 6),
                "start_date": date(2024, 8, 1),
                "notes": "late checkout",
            },
        )
    assert excinfo.value.fields == ["end_date", "price"]

    reservation.invoice_number = None
    reservation_service.check_update(reservation, {"price": Decimal("1.00")})


async def test_invoiced_reservation_rejects_protected_changes(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    reservation_id = await _seed_reservation(sessionmaker, invoiced=True)

    async with sessionmaker() as session:
        with pytest.raises(ProtectedFieldViolationError):
            await reservation_service.update_reservation(
                session,
                reservation_id=reservation_id,
                changes={"price": Decimal("250.00"), "payment_method": PaymentMethod.CASH},
            )

    async with sessionmaker() as session:
        reservation = await session.get(Reservation, reservation_id)
        assert reservation.price == Decimal("200.00")
        assert reservation.payment_method is PaymentMethod.TRANSFER


async def test_invoiced_reservation_accepts_notes_and_unchanged_values(
    reset_database, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    reservation_id = await _seed_reservation(sessionmaker, invoiced=True)

    async with sessionmaker() as session:
        updated = await reservation_service.update_reservation(
            session,
            reservation_id=reservation_id,
            changes={"notes": "Paid at reception", "price": Decimal("200.00")},
            actor="front-desk",
        )
    assert updated.notes == "Paid at reception"
    assert updated.invoice_number == "FR04/001"

    async with sessionmaker() as session:
        event = (
            await session.execute(
                select(AuditEvent).where(AuditEvent.action == "reservation.update")
            )
        ).scalar_one()
        assert event.actor == "front-desk"
        assert event.new_values == {"notes": "Paid at reception"}


async def test_uninvoiced_reservation_is_editable(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    reservation_id = await _seed_reservation(sessionmaker, invoiced=False)

    async with sessionmaker() as session:
        updated = await reservation_service.update_reservation(
            session,
            reservation_id=reservation_id,
            changes={"price": Decimal("180.00"), "end_date": date(2024, 8, 4)},
        )
    assert updated.price == Decimal("180.00")
    assert updated.end_date == date(2024, 8, 4)


async def test_update_rejects_inverted_dates(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    reservation_id = await _seed_reservation(sessionmaker, invoiced=False)

    async with sessionmaker() as session:
        with pytest.raises(ValueError):
            await reservation_service.update_reservation(
                session,
                reservation_id=reservation_id,
                changes={"end_date": date(2024, 7, 1)},
            )


async def test_invoiced_reservation_cannot_be_deleted(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    reservation_id = await _seed_reservation(sessionmaker, invoiced=True)

    async with sessionmaker() as session:
        with pytest.raises(DeleteBlockedError):
            await reservation_service.delete_reservation(
                session, reservation_id=reservation_id
            )

    async with sessionmaker() as session:
        assert await session.get(Reservation, reservation_id) is not None


async def test_reversal_unlocks_reservation(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    reservation_id = await _seed_reservation(sessionmaker, invoiced=True)

    async with sessionmaker() as session:
        await invoice_service.delete_invoice(session, reservation_id=reservation_id)
        await reservation_service.update_reservation(
            session,
            reservation_id=reservation_id,
            changes={"price": Decimal("190.00")},
        )
        await reservation_service.delete_reservation(
            session, reservation_id=reservation_id
        )

    async with sessionmaker() as session:
        assert await session.get(Reservation, reservation_id) is None


async def test_update_rejects_null_required_fields(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    reservation_id = await _seed_reservation(sessionmaker, invoiced=False)

    async with sessionmaker() as session:
        with pytest.raises(ValueError, match="start_date"):
            await reservation_service.update_reservation(
                session,
                reservation_id=reservation_id,
                changes={"start_date": None},
            )

    async with sessionmaker() as session:
        reservation = await session.get(Reservation, reservation_id)
        assert reservation.start_date == date(2024, 8, 1)
