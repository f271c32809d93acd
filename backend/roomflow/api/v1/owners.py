"""Owner API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.api import deps
from roomflow.api.errors import to_http_exception
from roomflow.schemas.owner import InvoiceCounterRead
from roomflow.services import owner_service

router = APIRouter(prefix="/owners")


@router.get(
    "/{owner_id}/invoice-counter",
    response_model=InvoiceCounterRead,
    summary="Inspect an owner's invoice series",
)
async def get_invoice_counter(
    owner_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> InvoiceCounterRead:
    try:
        counter = await owner_service.get_invoice_counter(session, owner_id=owner_id)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return InvoiceCounterRead.model_validate(counter)
