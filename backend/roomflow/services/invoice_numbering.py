"""Per-owner invoice series: formatting, parsing and sequence allocation.

Numbers look like ``FR07/014``: the series is ``FR`` plus the zero padded
owner id, the sequence is padded to three digits. The owner row is the only
serialization point; every allocation goes through :func:`lock_owner`.
"""

from __future__ import annotations

import re
from typing import Final

from sqlalchemy import Integer, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.db.locking import lock_row
from roomflow.models import Invoice, Owner, Reservation
from roomflow.services.errors import InvalidInvoiceNumberError, OwnerNotFoundError

SERIES_PREFIX: Final = "FR"
_NUMBER_PATTERN: Final = re.compile(rf"^{SERIES_PREFIX}(\d{{2,}})/(\d+)$")


def series_for_owner(owner_id: int) -> str:
    return f"{SERIES_PREFIX}{owner_id:02d}"


def format_invoice_number(owner_id: int, sequence: int) -> str:
    return f"{series_for_owner(owner_id)}/{sequence:03d}"


def parse_invoice_sequence(number: str | None, *, owner_id: int | None = None) -> int:
    """Return the sequence part of an invoice number.

    With ``owner_id`` the number must also belong to that owner's series.
    """

    match = _NUMBER_PATTERN.match(number or "")
    if match is None:
        raise InvalidInvoiceNumberError(number)
    if owner_id is not None and match.group(1) != f"{owner_id:02d}":
        raise InvalidInvoiceNumberError(number)
    return int(match.group(2))


async def lock_owner(session: AsyncSession, owner_id: int) -> Owner:
    """Lock the owner row for the rest of the transaction and return it."""

    owner = await lock_row(session, Owner, owner_id)
    if owner is None:
        raise OwnerNotFoundError(owner_id)
    return owner


async def _max_sequence(session: AsyncSession, column, owner_id: int) -> int:
    series = series_for_owner(owner_id)
    prefix = f"{series}/"
    # The cast only ever sees well formed numbers.
    stmt = select(
        func.max(cast(func.substr(column, len(prefix) + 1), Integer))
    ).where(column.like(f"{prefix}%"), column.regexp_match(rf"^{series}/[0-9]+$"))
    return (await session.scalar(stmt)) or 0


async def max_reservation_sequence(session: AsyncSession, owner_id: int) -> int:
    """Highest sequence carried by the owner's invoiced reservations."""

    return await _max_sequence(session, Reservation.invoice_number, owner_id)


async def max_ledger_sequence(session: AsyncSession, owner_id: int) -> int:
    """Highest sequence seen in the ledger or on reservations for the series."""

    ledger_max = await _max_sequence(session, Invoice.number, owner_id)
    reservation_max = await max_reservation_sequence(session, owner_id)
    return max(ledger_max, reservation_max)


async def next_sequence(session: AsyncSession, owner: Owner) -> int:
    """Next sequence for ``owner``, reconciling the counter with the ledger.

    Taking the larger of both signals means a counter that fell behind the
    ledger can never hand out a number twice; the cost is an occasional
    skipped number when the counter ran ahead.
    """

    current_last = owner.last_invoice_number or 0
    ledger_max = await max_ledger_sequence(session, owner.id)
    return max(current_last + 1, ledger_max + 1)


async def allocate_invoice_number(session: AsyncSession, owner_id: int) -> str:
    """Consume the next number of the owner's series inside the caller's transaction."""

    owner = await lock_owner(session, owner_id)
    sequence = await next_sequence(session, owner)
    owner.last_invoice_number = sequence
    await session.flush()
    return format_invoice_number(owner_id, sequence)
