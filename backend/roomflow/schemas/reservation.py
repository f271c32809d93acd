"""Pydantic schemas for reservations."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roomflow.models.reservation import PaymentMethod


class ReservationUpdate(BaseModel):
    """Mutable reservation fields; invoice fields are not accepted here."""

    price: Decimal | None = Field(default=None, ge=Decimal("0"))
    start_date: date | None = None
    end_date: date | None = None
    property_id: int | None = None
    room_id: int | None = None
    guest_id: int | None = None
    payment_method: PaymentMethod | None = None
    notes: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator(
        "price", "start_date", "end_date", "property_id", "payment_method"
    )
    @classmethod
    def _reject_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class ReservationRead(BaseModel):
    """Serialized reservation representation."""

    id: int
    property_id: int
    room_id: int | None = None
    guest_id: int | None = None
    price: Decimal
    start_date: date
    end_date: date
    payment_method: PaymentMethod
    notes: str | None = None
    invoice_number: str | None = None
    invoice_date: date | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
