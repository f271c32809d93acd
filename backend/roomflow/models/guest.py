"""Guest model."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from roomflow.db.base import Base
from roomflow.models.mixins import TimestampMixin


class Guest(TimestampMixin, Base):
    """Person staying under a reservation."""

    __tablename__ = "guests"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    surname: Mapped[str | None] = mapped_column(String(120))
    dni: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(String(255))
