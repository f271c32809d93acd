"""Test fixtures for the RoomFlow backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import date, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from roomflow.core.config import get_settings
from roomflow.db.base import Base
from roomflow.db.session import dispose_engine, get_sessionmaker
from roomflow.main import app
from roomflow.models import Guest, Owner, PaymentMethod, Property, Reservation, Room


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(reset_database: AsyncIterator[None], db_url: str) -> AsyncIterator[dict[str, object]]:
    """Yield an async client with one owner, one property and three paid stays."""
    sessionmaker = get_sessionmaker(db_url)

    async with sessionmaker() as session:
        owner = Owner(id=7, name="Marta Vidal", tax_id="12345678Z")
        session.add(owner)
        await session.flush()

        prop = Property(owner_id=owner.id, name="Casa Azul", city="Valencia")
        session.add(prop)
        await session.flush()

        room = Room(property_id=prop.id, name="Room 1")
        guest = Guest(name="Lucia", surname="Ferrer", dni="87654321X")
        session.add_all([room, guest])
        await session.flush()

        reservations = [
            Reservation(
                property_id=prop.id,
                room_id=room.id,
                guest_id=guest.id,
                price=Decimal("120.00"),
                start_date=start,
                end_date=start + timedelta(days=3),
                payment_method=PaymentMethod.CASH,
            )
            for start in (date(2024, 3, 1), date(2024, 1, 15), date(2024, 2, 10))
        ]
        pending = Reservation(
            property_id=prop.id,
            room_id=room.id,
            guest_id=guest.id,
            price=Decimal("80.00"),
            start_date=date(2024, 4, 1),
            end_date=date(2024, 4, 3),
            payment_method=PaymentMethod.PENDING,
        )
        session.add_all([*reservations, pending])
        await session.commit()

        context: dict[str, object] = {
            "owner_id": owner.id,
            "property_id": prop.id,
            "room_id": room.id,
            "guest_id": guest.id,
            "reservation_ids": [reservation.id for reservation in reservations],
            "pending_reservation_id": pending.id,
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context
