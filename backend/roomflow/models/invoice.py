"""Invoice ledger model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomflow.db.base import Base
from roomflow.models.mixins import CreatedAtMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from roomflow.models.reservation import Reservation


class Invoice(CreatedAtMixin, Base):
    """Issued invoice number bound to a reservation.

    Rows are append-only: the only delete is the reversal of the last
    invoice of a series.
    """

    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(primary_key=True)
    number: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    reservation_id: Mapped[int] = mapped_column(
        ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True
    )

    reservation: Mapped["Reservation"] = relationship(
        "Reservation", back_populates="invoice"
    )
