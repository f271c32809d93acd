"""Reservation models."""
from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomflow.db.base import Base
from roomflow.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from roomflow.models.guest import Guest
    from roomflow.models.invoice import Invoice
    from roomflow.models.property import Property, Room


class PaymentMethod(str, enum.Enum):
    """How the guest settles the stay."""

    PENDING = "pending"
    CASH = "cash"
    TRANSFER = "transfer"


INVOICEABLE_PAYMENT_METHODS = frozenset({PaymentMethod.CASH, PaymentMethod.TRANSFER})


class Reservation(TimestampMixin, Base):
    """A guest stay in a room of a property."""

    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(primary_key=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    room_id: Mapped[int | None] = mapped_column(
        ForeignKey("rooms.id", ondelete="SET NULL")
    )
    guest_id: Mapped[int | None] = mapped_column(
        ForeignKey("guests.id", ondelete="SET NULL")
    )
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(
            PaymentMethod,
            name="paymentmethod",
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=PaymentMethod.PENDING,
    )
    notes: Mapped[str | None] = mapped_column(String(2048))
    invoice_number: Mapped[str | None] = mapped_column(String(20), unique=True)
    invoice_date: Mapped[date | None] = mapped_column(Date)

    property: Mapped["Property"] = relationship("Property")
    room: Mapped["Room | None"] = relationship("Room")
    guest: Mapped["Guest | None"] = relationship("Guest")
    invoice: Mapped["Invoice | None"] = relationship(
        "Invoice", back_populates="reservation", uselist=False, passive_deletes=True
    )
