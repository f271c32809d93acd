"""ORM models package export."""

from roomflow.models.audit_event import AuditEvent
from roomflow.models.guest import Guest
from roomflow.models.invoice import Invoice
from roomflow.models.owner import Owner
from roomflow.models.property import Property, Room
from roomflow.models.reservation import (
    INVOICEABLE_PAYMENT_METHODS,
    PaymentMethod,
    Reservation,
)

__all__ = [
    "AuditEvent",
    "Guest",
    "INVOICEABLE_PAYMENT_METHODS",
    "Invoice",
    "Owner",
    "PaymentMethod",
    "Property",
    "Reservation",
    "Room",
]
