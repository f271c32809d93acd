"""Property owner model holding the invoice sequence counter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomflow.db.base import Base
from roomflow.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from roomflow.models.property import Property


class Owner(TimestampMixin, Base):
    """Landlord whose properties are invoiced under one series.

    ``last_invoice_number`` is the last sequence allocated for the owner's
    series and is only written while the row is locked.
    """

    __tablename__ = "owners"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    tax_id: Mapped[str | None] = mapped_column(String(32))
    tax_address: Mapped[str | None] = mapped_column(String(255))
    last_invoice_number: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    properties: Mapped[list["Property"]] = relationship(
        "Property", back_populates="owner"
    )
