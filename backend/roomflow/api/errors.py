"""Translate service errors into HTTP responses."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from roomflow.services.errors import (
    InvalidInvoiceNumberError,
    InvoicingError,
    OwnerNotFoundError,
    ProtectedFieldViolationError,
    ReservationNotFoundError,
)


def _status_for(exc: InvoicingError) -> int:
    if isinstance(exc, (ReservationNotFoundError, OwnerNotFoundError)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InvalidInvoiceNumberError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_409_CONFLICT


def to_http_exception(exc: ValueError) -> HTTPException:
    """Map a service ``ValueError`` to an ``HTTPException``.

    Invoicing errors keep their ``code``; any other ``ValueError`` is a 400.
    """
    if not isinstance(exc, InvoicingError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc), "code": "invalid_request"},
        )
    detail: dict[str, Any] = {"message": str(exc), "code": exc.code}
    if isinstance(exc, ProtectedFieldViolationError):
        detail["fields"] = exc.fields
    return HTTPException(status_code=_status_for(exc), detail=detail)
