"""Invoice API endpoints."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.api import deps
from roomflow.api.errors import to_http_exception
from roomflow.schemas.invoice import (
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
from roomflow.services import batch_invoice_service, invoice_service
from roomflow.services.batch_invoice_service import BatchFilters

router = APIRouter(prefix="/invoices")


@router.get("", response_model=InvoiceListResponse, summary="List invoices")
async def list_invoices(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner_id: int | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    search: str | None = Query(default=None, alias="q"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> InvoiceListResponse:
    items, total = await invoice_service.list_invoices(
        session,
        owner_id=owner_id,
        date_from=date_from,
        date_to=date_to,
        search=search.strip() if search else None,
        limit=limit,
        offset=offset,
    )
    return InvoiceListResponse(
        items=[InvoiceListItemRead.model_validate(item) for item in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/generate",
    response_model=GeneratedInvoiceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Invoice a reservation",
)
async def generate_invoice(
    payload: InvoiceGenerateRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    actor: Annotated[str, Depends(deps.get_actor)],
) -> GeneratedInvoiceRead:
    try:
        generated = await invoice_service.generate_invoice(
            session,
            reservation_id=payload.reservation_id,
            actor=actor,
            invoice_date=payload.invoice_date,
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return GeneratedInvoiceRead.model_validate(generated)


@router.post(
    "/batch",
    response_model=BatchInvoiceResult,
    summary="Invoice every pending reservation",
)
async def generate_batch_invoices(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    actor: Annotated[str, Depends(deps.get_actor)],
    payload: BatchInvoiceRequest | None = None,
) -> BatchInvoiceResult:
    payload = payload or BatchInvoiceRequest()
    result = await batch_invoice_service.generate_batch_invoices(
        session,
        BatchFilters(
            from_date=payload.from_date,
            to_date=payload.to_date,
            owner_id=payload.owner_id,
        ),
        actor=actor,
    )
    return BatchInvoiceResult.model_validate(result)


@router.get(
    "/pending-count",
    response_model=PendingInvoiceCount,
    summary="Count reservations awaiting an invoice",
)
async def pending_invoice_count(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    owner_id: int | None = Query(default=None),
) -> PendingInvoiceCount:
    count = await batch_invoice_service.pending_invoice_count(
        session,
        BatchFilters(from_date=from_date, to_date=to_date, owner_id=owner_id),
    )
    return PendingInvoiceCount(count=count)


@router.get(
    "/by-reservation/{reservation_id}",
    response_model=InvoiceLedgerRead,
    summary="Ledger entry of a reservation",
)
async def get_invoice_for_reservation(
    reservation_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> InvoiceLedgerRead:
    invoice = await invoice_service.get_invoice_for_reservation(
        session, reservation_id=reservation_id
    )
    if invoice is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Invoice not found", "code": "not_found"},
        )
    return InvoiceLedgerRead.model_validate(invoice)


@router.delete(
    "/by-reservation/{reservation_id}",
    response_model=InvoiceReversalRead,
    summary="Delete the last invoice of an owner series",
)
async def delete_invoice(
    reservation_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    actor: Annotated[str, Depends(deps.get_actor)],
) -> InvoiceReversalRead:
    try:
        reversal = await invoice_service.delete_invoice(
            session, reservation_id=reservation_id, actor=actor
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return InvoiceReversalRead.model_validate(reversal)
