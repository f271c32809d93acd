"""Owner schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class InvoiceCounterRead(BaseModel):
    """State of an owner's invoice series."""

    owner_id: int
    series: str
    last_invoice_number: int
    ledger_max: int
    next_invoice_number: str

    model_config = ConfigDict(from_attributes=True)
