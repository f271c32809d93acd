"""Exclusive row locks held until the surrounding transaction ends."""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy import inspect, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


def _is_sqlite(session: AsyncSession) -> bool:
    return session.get_bind().dialect.name == "sqlite"


async def lock_row(
    session: AsyncSession, model: type[ModelT], ident: int
) -> ModelT | None:
    """Load a row with ``SELECT ... FOR UPDATE`` and return the fresh instance.

    The row is always re-read from the database, never served from the
    identity map, so callers see values committed by whoever held the lock
    before them. Returns ``None`` when the row does not exist.

    SQLite has no row locks and ignores ``FOR UPDATE``; there a no-op
    ``UPDATE`` of the primary key is issued first, which takes the database
    write lock and gives the same serialization.
    """

    pk = inspect(model).primary_key[0]
    if _is_sqlite(session):
        await session.execute(
            update(model)
            .where(pk == ident)
            .values({pk.key: pk})
            .execution_options(synchronize_session=False)
        )
    result = await session.execute(
        select(model)
        .where(pk == ident)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
