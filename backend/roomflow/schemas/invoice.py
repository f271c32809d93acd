"""Invoice schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class InvoiceGenerateRequest(BaseModel):
    """Request payload to invoice a single reservation."""

    reservation_id: int
    invoice_date: date | None = None


class GeneratedInvoiceRead(BaseModel):
    """Invoice number bound to a reservation."""

    reservation_id: int
    invoice_number: str
    invoice_date: date | None = None

    model_config = ConfigDict(from_attributes=True)


class BatchInvoiceRequest(BaseModel):
    """Filters narrowing a batch run; all optional."""

    from_date: date | None = None
    to_date: date | None = None
    owner_id: int | None = None

    @model_validator(mode="after")
    def _check_range(self) -> "BatchInvoiceRequest":
        if self.from_date and self.to_date and self.from_date > self.to_date:
            raise ValueError("from_date must not be after to_date")
        return self


class BatchErrorRead(BaseModel):
    """A reservation (or owner group) left uninvoiced by a batch run."""

    reservation_id: int | None = None
    owner_id: int | None = None
    error: str
    code: str

    model_config = ConfigDict(from_attributes=True)


class BatchInvoiceResult(BaseModel):
    """Partial-success report of a batch run."""

    generated: int
    invoice_numbers: list[str] = Field(default_factory=list)
    errors: list[BatchErrorRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class PendingInvoiceCount(BaseModel):
    count: int


class InvoiceReversalRead(BaseModel):
    """Owner counter after deleting the last invoice."""

    reservation_id: int
    deleted_invoice_number: str
    last_invoice_number: int

    model_config = ConfigDict(from_attributes=True)


class InvoiceLedgerRead(BaseModel):
    """Ledger entry."""

    id: int
    number: str
    reservation_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InvoiceListItemRead(BaseModel):
    """Ledger row with reservation, guest, property and owner context."""

    id: int
    invoice_number: str
    reservation_id: int
    created_at: datetime
    invoice_date: date | None = None
    start_date: date
    end_date: date
    price: Decimal
    payment_method: str
    guest_name: str | None = None
    guest_surname: str | None = None
    guest_dni: str | None = None
    property_id: int
    property_name: str
    owner_id: int
    owner_name: str
    owner_tax_id: str | None = None

    model_config = ConfigDict(from_attributes=True)


class InvoiceListResponse(BaseModel):
    """Paginated invoice listing payload."""

    items: list[InvoiceListItemRead]
    total: int
    limit: int
    offset: int
