"""Owner invoice counter inspection."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.models import Owner
from roomflow.services.errors import OwnerNotFoundError
from roomflow.services.invoice_numbering import (
    format_invoice_number,
    max_ledger_sequence,
    series_for_owner,
)


@dataclass(slots=True)
class InvoiceCounter:
    """Snapshot of an owner's series; ``next_invoice_number`` is not reserved."""

    owner_id: int
    series: str
    last_invoice_number: int
    ledger_max: int
    next_invoice_number: str


async def get_invoice_counter(session: AsyncSession, *, owner_id: int) -> InvoiceCounter:
    owner = await session.get(Owner, owner_id)
    if owner is None:
        raise OwnerNotFoundError(owner_id)
    ledger_max = await max_ledger_sequence(session, owner_id)
    last = owner.last_invoice_number or 0
    return InvoiceCounter(
        owner_id=owner_id,
        series=series_for_owner(owner_id),
        last_invoice_number=last,
        ledger_max=ledger_max,
        next_invoice_number=format_invoice_number(
            owner_id, max(last, ledger_max) + 1
        ),
    )
