"""Rental property and room models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomflow.db.base import Base
from roomflow.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from roomflow.models.owner import Owner


class Property(TimestampMixin, Base):
    """A building or flat rented out on behalf of an owner."""

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("owners.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255))
    city: Mapped[str | None] = mapped_column(String(120))

    owner: Mapped["Owner"] = relationship("Owner", back_populates="properties")
    rooms: Mapped[list["Room"]] = relationship(
        "Room", back_populates="property", cascade="all, delete-orphan"
    )


class Room(TimestampMixin, Base):
    """Bookable room inside a property."""

    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(primary_key=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    property: Mapped[Property] = relationship("Property", back_populates="rooms")
