"""Pydantic schemas for the invoicing API."""

from roomflow.schemas.invoice import (
    BatchErrorRead,
    BatchInvoiceRequest,
    BatchInvoiceResult,
    GeneratedInvoiceRead,
    InvoiceGenerateRequest,
    InvoiceLedgerRead,
    InvoiceListItemRead,
    InvoiceListResponse,
    InvoiceReversalRead,
    PendingInvoiceCount,
)
from roomflow.schemas.owner import InvoiceCounterRead
from roomflow.schemas.reservation import ReservationRead, ReservationUpdate

__all__ = [
    "BatchErrorRead",
    "BatchInvoiceRequest",
    "BatchInvoiceResult",
    "GeneratedInvoiceRead",
    "InvoiceCounterRead",
    "InvoiceGenerateRequest",
    "InvoiceLedgerRead",
    "InvoiceListItemRead",
    "InvoiceListResponse",
    "InvoiceReversalRead",
    "PendingInvoiceCount",
    "ReservationRead",
    "ReservationUpdate",
]
