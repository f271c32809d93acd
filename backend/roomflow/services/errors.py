"""Domain errors raised by the invoicing services."""

from __future__ import annotations

from collections.abc import Iterable


class InvoicingError(ValueError):
    """Base class for invoicing failures; ``code`` is stable for API clients."""

    code = "invoicing_error"


class ReservationNotFoundError(InvoicingError):
    code = "not_found"

    def __init__(self, reservation_id: int) -> None:
        super().__init__(f"Reservation {reservation_id} not found")
        self.reservation_id = reservation_id


class OwnerNotFoundError(InvoicingError):
    code = "not_found"

    def __init__(self, owner_id: int | None) -> None:
        super().__init__(f"Owner {owner_id} not found")
        self.owner_id = owner_id


class AlreadyInvoicedError(InvoicingError):
    code = "already_invoiced"

    def __init__(self, reservation_id: int, invoice_number: str) -> None:
        super().__init__(
            f"Reservation {reservation_id} already has invoice {invoice_number}"
        )
        self.reservation_id = reservation_id
        self.invoice_number = invoice_number


class ReservationNotEligibleError(InvoicingError):
    """Reservation payment method does not allow invoicing."""

    code = "not_eligible"


class ReservationChangedError(InvoicingError):
    """Reservation moved to another owner while waiting for the owner lock."""

    code = "reservation_changed"


class ProtectedFieldViolationError(InvoicingError):
    code = "protected_fields"

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = sorted(fields)
        super().__init__(
            "Invoiced reservation fields cannot change: " + ", ".join(self.fields)
        )


class DeleteBlockedError(InvoicingError):
    code = "delete_blocked"

    def __init__(self, reservation_id: int, invoice_number: str) -> None:
        super().__init__(
            f"Reservation {reservation_id} is invoiced ({invoice_number}) "
            "and cannot be deleted"
        )
        self.reservation_id = reservation_id


class NoInvoiceError(InvoicingError):
    code = "no_invoice"

    def __init__(self, reservation_id: int) -> None:
        super().__init__(f"Reservation {reservation_id} has no invoice")
        self.reservation_id = reservation_id


class InvalidInvoiceNumberError(InvoicingError):
    code = "invalid_number"

    def __init__(self, number: str | None) -> None:
        super().__init__(f"Malformed invoice number: {number!r}")
        self.number = number


class NotLastInSeriesError(InvoicingError):
    code = "not_last_in_series"

    def __init__(self, invoice_number: str, last_sequence: int) -> None:
        super().__init__(
            f"Only the last invoice of the series can be deleted; "
            f"{invoice_number} is not sequence {last_sequence}"
        )
        self.invoice_number = invoice_number
        self.last_sequence = last_sequence
